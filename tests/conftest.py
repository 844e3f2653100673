"""Pytest configuration for tests.

Provides Binance-shaped kline rows and candles shared across test modules.
"""

import json

import pytest

from infra.configuration import KlineReportSettings
from shared_code.common_price import Candle


DAY_MS = 86_400_000
START_MS = 1_700_006_400_000


def make_kline_row(index, open_price, high, low, close, volume="1000"):
    """Build one raw kline row the way Binance returns it."""
    open_time = START_MS + index * DAY_MS
    return [
        open_time,
        open_price,
        high,
        low,
        close,
        volume,
        open_time + DAY_MS - 1,
        "12345.6789",
        42,
        "500.0",
        "6000.0",
        "0",
    ]


@pytest.fixture
def raw_klines():
    """Three daily klines: one bullish, one bearish, one doji."""
    return [
        make_kline_row(0, "100.00000000", "112.00000000", "99.00000000", "110.00000000"),
        make_kline_row(1, "100.00000000", "101.00000000", "88.00000000", "90.00000000"),
        make_kline_row(2, "100.00000000", "105.00000000", "95.00000000", "100.00000000"),
    ]


@pytest.fixture
def raw_klines_body(raw_klines):
    """JSON body of the three sample klines."""
    return json.dumps(raw_klines)


@pytest.fixture
def sample_candles():
    """Candles with opens [100, 100, 100] and closes [110, 90, 100]."""
    return [
        Candle(
            open_time=START_MS + i * DAY_MS,
            open=100.0,
            high=max(100.0, close) + 1,
            low=min(100.0, close) - 1,
            close=close,
            volume=1000,
            close_time=START_MS + (i + 1) * DAY_MS - 1,
        )
        for i, close in enumerate([110.0, 90.0, 100.0])
    ]


@pytest.fixture
def settings(tmp_path):
    """Default settings writing the report into a temporary directory."""
    return KlineReportSettings(report_path=tmp_path / "report.yaml", timeout=5.0)


@pytest.fixture
def kline_row():
    """Factory building raw kline rows for a given day index."""
    return make_kline_row
