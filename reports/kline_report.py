"""Kline risk report: fetch daily candles, aggregate returns and render the results."""

import logging
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path

import yaml
from prettytable import PrettyTable

from infra.app_logging import app_logger
from infra.configuration import KlineReportSettings
from shared_code.binance import decode_klines, fetch_binance_klines
from shared_code.common_price import CandleStats
from shared_code.number_format import format_percentage, format_to_6digits_without_trailing_zeros
from technical_analysis.candle_parser import parse_klines
from technical_analysis.candle_stats import calculate_candle_stats
from technical_analysis.stats_aggregator import AnalysisReport, Stats, calculate_report


REPORT_FILE_MODE = 0o644

# Field names used in the YAML document
NAME_FIELD = "name"
STD_FIELD = "std"
MEAN_FIELD = "mean"
VALUE_AT_RISK_FIELD = "value-at-risk"


class ReportWriteError(Exception):
    """Exception raised when the YAML report cannot be written."""


def stats_to_document(stats: Mapping[str, Stats]) -> dict[str, dict]:
    """Convert the stats mapping into the structure written to the YAML report."""
    return {
        key: {
            NAME_FIELD: item.name,
            STD_FIELD: float(item.std),
            MEAN_FIELD: float(item.mean),
            VALUE_AT_RISK_FIELD: float(item.value_at_risk),
        }
        for key, item in stats.items()
    }


def write_yaml_report(stats: Mapping[str, Stats], path: str | Path = "report.yaml") -> Path:
    """Serialize the stats mapping to YAML, overwriting any existing file.

    Raises:
        ReportWriteError: If the file cannot be written

    """
    path = Path(path)
    data = yaml.safe_dump(stats_to_document(stats), sort_keys=False, allow_unicode=True)
    app_logger.debug("YAML report:\n%s", data)

    # Write next to the target, then swap it in
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        ) as tmp_file:
            tmp_path = tmp_file.name
            tmp_file.write(data)
        os.chmod(tmp_path, REPORT_FILE_MODE)
        os.replace(tmp_path, path)
        tmp_path = None
    except OSError as e:
        msg = f"Failed to write report to {path}: {e!s}"
        raise ReportWriteError(msg) from e
    finally:
        if tmp_path:
            try:
                Path(tmp_path).unlink()
            except OSError:
                app_logger.debug("Failed to remove temp file: %s", tmp_path)

    app_logger.info("Report written to %s", path)
    return path


def load_yaml_report(path: str | Path) -> dict[str, Stats]:
    """Read a YAML report back into a stats mapping."""
    with open(path, encoding="utf-8") as f:
        document = yaml.safe_load(f) or {}

    return {
        key: Stats(
            name=fields[NAME_FIELD],
            std=fields[STD_FIELD],
            mean=fields[MEAN_FIELD],
            value_at_risk=fields[VALUE_AT_RISK_FIELD],
        )
        for key, fields in document.items()
    }


def build_stats_table(stats: Mapping[str, Stats]) -> PrettyTable:
    """Build the console table, one row per metric with values shown as percentages."""
    table = PrettyTable()
    table.field_names = ["KPI Name", "Standard Deviation", "Mean", "Value At Risk"]
    table.align = "r"
    table.align["KPI Name"] = "l"

    for item in stats.values():
        table.add_row(
            [
                item.name,
                format_percentage(item.std),
                format_percentage(item.mean),
                format_percentage(item.value_at_risk),
            ],
        )

    return table


def build_candle_table(candle_stats: list[CandleStats]) -> PrettyTable:
    """Build a table of the parsed candles with their type and return."""
    table = PrettyTable()
    table.field_names = ["Open Time", "Open", "High", "Low", "Close", "Type", "Return %"]
    table.align = "r"

    for item in candle_stats:
        candle = item.candle
        table.add_row(
            [
                candle.open_datetime.strftime("%Y-%m-%d"),
                format_to_6digits_without_trailing_zeros(candle.open),
                format_to_6digits_without_trailing_zeros(candle.high),
                format_to_6digits_without_trailing_zeros(candle.low),
                format_to_6digits_without_trailing_zeros(candle.close),
                item.candle_type.value,
                format_percentage(item.return_percentage),
            ],
        )

    return table


def run_kline_report(settings: KlineReportSettings) -> AnalysisReport:
    """Run the whole pipeline: fetch, parse, aggregate, persist and display.

    The YAML report is written only after every earlier step succeeded.
    """
    body = fetch_binance_klines(settings)
    rows = decode_klines(body)
    candles = parse_klines(rows, lenient=settings.lenient_parse)

    candle_stats = calculate_candle_stats(candles)
    if app_logger.isEnabledFor(logging.DEBUG):
        app_logger.debug("Parsed candles:\n%s", build_candle_table(candle_stats))

    report = calculate_report(
        candle_stats,
        currency_pair=settings.currency_pair,
        var_multiplier=settings.var_multiplier,
    )

    write_yaml_report(report.stats, settings.report_path)

    print(f"{report.currency_pair} daily return statistics ({len(candle_stats)} candles)")
    print(build_stats_table(report.stats))

    return report
