"""Per-candle classification and return calculation."""

import math
from collections.abc import Iterable

from infra.app_logging import app_logger
from shared_code.common_price import Candle, CandleStats, CandleType


def classify_candle(open_price: float, close_price: float) -> CandleType:
    """Classify a candle as BULL, BEAR or DOJI from its open and close."""
    change = close_price - open_price
    if change > 0:
        return CandleType.BULL
    if change < 0:
        return CandleType.BEAR
    return CandleType.DOJI


def calculate_return_percentage(candle: Candle) -> float:
    """Return the fractional price change of a candle, (close - open) / open.

    A zero open follows IEEE division: +/-inf for a non-zero change and nan
    when close is zero too.
    """
    change = candle.close - candle.open
    if candle.open == 0:
        app_logger.warning(
            "Candle opened at %s has a zero open price, return is not finite",
            candle.open_time,
        )
        if change == 0 or math.isnan(change):
            return math.nan
        return math.copysign(math.inf, change)
    return change / candle.open


def calculate_candle_stats(candles: Iterable[Candle]) -> list[CandleStats]:
    """Derive type and return percentage for every candle, keeping order."""
    return [
        CandleStats(
            candle=candle,
            candle_type=classify_candle(candle.open, candle.close),
            return_percentage=calculate_return_percentage(candle),
        )
        for candle in candles
    ]
