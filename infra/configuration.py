"""Configuration management and environment variable handling.

Environment Variables:
    CURRENCY_PAIR: Binance trading pair to analyse (default: SHIBUSDT).
    BINANCE_KLINES_URL: Klines endpoint (default: https://api.binance.com/api/v3/klines).
    BINANCE_TIMEOUT: HTTP timeout in seconds for the klines request (default: 30).
    REPORT_PATH: Destination of the YAML report (default: report.yaml).
    LENIENT_PARSE: Treat unparseable kline fields as zero instead of failing
                   (default: true).
    LOG_LEVEL: Logging level for the application logger (default: INFO).
"""

import math
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


# Load environment variables from .env file
load_dotenv()

DEFAULT_CURRENCY_PAIR = "SHIBUSDT"
DEFAULT_KLINES_URL = "https://api.binance.com/api/v3/klines"
DEFAULT_TIMEOUT = 30.0
DEFAULT_REPORT_PATH = "report.yaml"

# Fixed request shape: one page of daily candles
KLINE_INTERVAL = "1d"
KLINE_LIMIT = 1000

# One-tailed ~99.8% z-score used for parametric value at risk
VALUE_AT_RISK_MULTIPLIER = 2.88


@dataclass(frozen=True)
class KlineReportSettings:
    """Typed representation of the kline report configuration values."""

    currency_pair: str = DEFAULT_CURRENCY_PAIR
    base_url: str = DEFAULT_KLINES_URL
    interval: str = KLINE_INTERVAL
    limit: int = KLINE_LIMIT
    timeout: float = DEFAULT_TIMEOUT
    report_path: Path = Path(DEFAULT_REPORT_PATH)
    lenient_parse: bool = True
    var_multiplier: float = VALUE_AT_RISK_MULTIPLIER


def is_lenient_parse_enabled() -> bool:
    """Check if lenient kline parsing is enabled.

    Returns True by default, can be disabled via LENIENT_PARSE environment
    variable.
    """
    enabled = os.getenv("LENIENT_PARSE", "true").lower()
    return enabled in ("true", "1", "yes", "on")


def get_kline_report_settings() -> KlineReportSettings:
    """Get kline report configuration with sensible defaults."""
    currency_pair = os.getenv("CURRENCY_PAIR", DEFAULT_CURRENCY_PAIR).strip().upper()
    base_url = os.getenv("BINANCE_KLINES_URL", DEFAULT_KLINES_URL).strip()
    timeout_value = os.getenv("BINANCE_TIMEOUT", str(DEFAULT_TIMEOUT)).strip()
    report_path = os.getenv("REPORT_PATH", DEFAULT_REPORT_PATH).strip()

    try:
        timeout = float(timeout_value)
    except ValueError:
        timeout = DEFAULT_TIMEOUT

    # requests rejects zero, negative and non-finite timeouts
    if not math.isfinite(timeout) or timeout <= 0:
        timeout = DEFAULT_TIMEOUT

    return KlineReportSettings(
        currency_pair=currency_pair or DEFAULT_CURRENCY_PAIR,
        base_url=base_url or DEFAULT_KLINES_URL,
        timeout=timeout,
        report_path=Path(report_path or DEFAULT_REPORT_PATH),
        lenient_parse=is_lenient_parse_enabled(),
    )
