"""Local runner for the kline risk report.

Usage:
    python local_runner.py            # Report for the configured pair (CURRENCY_PAIR)
    python local_runner.py BTCUSDT    # Report for BTCUSDT
"""

import dataclasses
import sys

from dotenv import load_dotenv

from infra.app_logging import app_logger
from infra.configuration import get_kline_report_settings
from reports.kline_report import ReportWriteError, run_kline_report
from shared_code.binance import KlineDecodeError, KlineFetchError
from technical_analysis.candle_parser import KlineParseError


# Load environment variables
load_dotenv()


def main(argv: list[str] | None = None) -> None:
    """Run the kline report, exiting with status 1 on any fatal error."""
    args = sys.argv[1:] if argv is None else argv

    max_args = 1
    if len(args) > max_args:
        app_logger.error(
            "Too many arguments: %s\n"
            "Usage:\n"
            "  python local_runner.py [PAIR]\n"
            "\n"
            "Examples:\n"
            "  python local_runner.py          # Run report for the configured pair\n"
            "  python local_runner.py BTCUSDT  # Run report for BTCUSDT",
            " ".join(args),
        )
        sys.exit(1)

    settings = get_kline_report_settings()
    if args and args[0].strip():
        settings = dataclasses.replace(settings, currency_pair=args[0].strip().upper())

    try:
        run_kline_report(settings)
    except (KlineFetchError, KlineDecodeError, KlineParseError, ReportWriteError) as e:
        app_logger.error("Kline report for %s failed: %s", settings.currency_pair, e)
        sys.exit(1)


if __name__ == "__main__":
    main()
