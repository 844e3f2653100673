"""Conversion of raw Binance kline rows into typed candles.

A Binance kline row is a JSON array::

    [open_time, "open", "high", "low", "close", "volume", close_time, ...]

Only the first seven fields are used. Price fields are decimal strings, the
volume is read as an integer and the times are epoch milliseconds.

Parsing is lenient by default: a field that cannot be converted is set to zero
and the row is still returned. Binance reports fractional volumes
(e.g. ``"1234.50000000"``), which are not integer literals, so the volume of a
real response is zero under this policy.
"""

import math
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from infra.app_logging import app_logger
from shared_code.common_price import Candle


KLINE_FIELD_COUNT = 7

FIELD_NAMES = ("open_time", "open", "high", "low", "close", "volume", "close_time")


class KlineParseError(Exception):
    """Exception raised when a kline row cannot be converted into a candle."""


INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def _check_int64(value: int) -> int:
    if not INT64_MIN <= value <= INT64_MAX:
        msg = f"{value} is outside the 64-bit integer range"
        raise ValueError(msg)
    return value


def _check_decimal_text(value: Any) -> Any:
    # Binance sends plain literals; separators and padding are rejected
    if isinstance(value, str) and ("_" in value or value != value.strip()):
        msg = f"malformed numeric string {value!r}"
        raise ValueError(msg)
    return value


def _to_timestamp(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        msg = f"expected a numeric timestamp, got {value!r}"
        raise ValueError(msg)
    if isinstance(value, float) and not math.isfinite(value):
        msg = f"timestamp is not finite: {value!r}"
        raise ValueError(msg)
    return _check_int64(int(value))


def _to_price(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        msg = f"expected a decimal string, got {value!r}"
        raise ValueError(msg)
    return float(_check_decimal_text(value))


def _to_volume(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        msg = f"expected an integer string, got {value!r}"
        raise ValueError(msg)
    return _check_int64(int(_check_decimal_text(value)))


FIELD_CONVERTERS: tuple[Callable[[Any], Any], ...] = (
    _to_timestamp,
    _to_price,
    _to_price,
    _to_price,
    _to_price,
    _to_volume,
    _to_timestamp,
)

ZERO_VALUES = (0, 0.0, 0.0, 0.0, 0.0, 0, 0)


def parse_kline(row: Sequence[Any], *, lenient: bool = True, index: int = 0) -> Candle:
    """Convert one raw kline row into a Candle.

    Args:
        row: Raw kline fields as decoded from JSON
        lenient: Replace unparseable fields with zero instead of raising
        index: Position of the row in the response, used in messages

    Raises:
        KlineParseError: If the row is too short, or a field is invalid and
            lenient parsing is disabled

    """
    if len(row) < KLINE_FIELD_COUNT:
        msg = f"Kline at index {index} has {len(row)} fields, expected at least {KLINE_FIELD_COUNT}"
        raise KlineParseError(msg)

    values = []
    for name, converter, zero, raw in zip(
        FIELD_NAMES, FIELD_CONVERTERS, ZERO_VALUES, row[:KLINE_FIELD_COUNT], strict=True
    ):
        try:
            values.append(converter(raw))
        except (ValueError, TypeError, OverflowError) as e:
            if not lenient:
                msg = f"Invalid {name} in kline at index {index}: {e!s}"
                raise KlineParseError(msg) from e
            app_logger.debug("Kline %d: %s=%r is not parseable, using %r", index, name, raw, zero)
            values.append(zero)

    return Candle(*values)


def parse_klines(rows: Iterable[Sequence[Any]], *, lenient: bool = True) -> list[Candle]:
    """Convert raw kline rows into candles, keeping the response order."""
    candles = [parse_kline(row, lenient=lenient, index=i) for i, row in enumerate(rows)]
    app_logger.info("Parsed %d candles", len(candles))
    return candles
