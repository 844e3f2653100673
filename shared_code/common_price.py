"""Common data structures for kline candles and their derived statistics."""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum


class CandleType(Enum):
    """Direction of a candle body."""

    BULL = "BULL"
    BEAR = "BEAR"
    DOJI = "DOJI"


@dataclass
class Candle:
    """Represents a single kline as returned by Binance, with typed fields."""

    open_time: int
    open: float
    high: float
    low: float
    close: float
    volume: int
    close_time: int

    @property
    def open_datetime(self) -> datetime:
        """Return the open time (epoch milliseconds) as a UTC datetime."""
        return datetime.fromtimestamp(self.open_time / 1000, tz=UTC)

    @property
    def close_datetime(self) -> datetime:
        """Return the close time (epoch milliseconds) as a UTC datetime."""
        return datetime.fromtimestamp(self.close_time / 1000, tz=UTC)


@dataclass
class CandleStats:
    """A candle together with its type and return percentage."""

    candle: Candle
    candle_type: CandleType
    return_percentage: float
