"""Binance REST API integration for daily kline data."""

import json
from typing import Any

import requests

from infra.app_logging import app_logger
from infra.configuration import KlineReportSettings


class KlineFetchError(Exception):
    """Exception raised when the klines endpoint cannot be reached or read."""


class KlineDecodeError(Exception):
    """Exception raised when the klines response is not a JSON array of arrays."""


def build_klines_request(
    settings: KlineReportSettings,
) -> tuple[str, dict[str, Any], dict[str, str]]:
    """Return the URL, query parameters and headers for the klines request."""
    params = {
        "symbol": settings.currency_pair,
        "interval": settings.interval,
        "limit": settings.limit,
    }
    headers = {"accept": "application/json"}
    return settings.base_url, params, headers


def fetch_binance_klines(settings: KlineReportSettings) -> str:
    """Fetch one page of klines for the configured currency pair.

    Args:
        settings: Kline report settings with pair, endpoint and timeout

    Returns:
        The raw response body as text

    Raises:
        KlineFetchError: On network failure, non-2xx status or unreadable body

    """
    url, params, headers = build_klines_request(settings)
    app_logger.info(
        "Fetching %s klines for %s (limit %d)",
        settings.interval,
        settings.currency_pair,
        settings.limit,
    )

    try:
        response = requests.get(url, params=params, headers=headers, timeout=settings.timeout)
        response.raise_for_status()
        body = response.text
    except requests.HTTPError as e:
        msg = f"Binance klines request for {settings.currency_pair} failed: {e!s}"
        raise KlineFetchError(msg) from e
    except (requests.RequestException, OSError, ValueError) as e:
        msg = f"Error fetching klines for {settings.currency_pair}: {e!s}"
        raise KlineFetchError(msg) from e

    app_logger.debug("Raw klines response: %s", body)
    return body


def decode_klines(body: str | bytes) -> list[list[Any]]:
    """Decode a klines response body into a list of raw rows.

    Raises:
        KlineDecodeError: If the body is not a JSON array of arrays

    """
    try:
        rows = json.loads(body)
    except (ValueError, TypeError) as e:
        msg = f"Klines response is not valid JSON: {e!s}"
        raise KlineDecodeError(msg) from e

    if not isinstance(rows, list):
        msg = f"Expected a JSON array of klines, got {type(rows).__name__}"
        raise KlineDecodeError(msg)

    for index, row in enumerate(rows):
        if not isinstance(row, list):
            msg = f"Kline at index {index} is not an array: {row!r}"
            raise KlineDecodeError(msg)

    return rows
