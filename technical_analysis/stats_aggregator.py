"""Aggregation of per-candle values into named descriptive statistics."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

import pandas as pd

from infra.app_logging import app_logger
from infra.configuration import VALUE_AT_RISK_MULTIPLIER
from shared_code.common_price import CandleStats


@dataclass
class Stats:
    """Descriptive statistics of one tracked metric."""

    name: str
    std: float
    mean: float
    value_at_risk: float


@dataclass(frozen=True)
class MetricDefinition:
    """A metric to aggregate: report key, display name and per-candle value."""

    key: str
    name: str
    extractor: Callable[[CandleStats], float]


@dataclass
class AnalysisReport:
    """Aggregated statistics for one currency pair.

    Only ``stats`` is written to the YAML report; ``candle_stats`` is kept for
    console output.
    """

    currency_pair: str
    candle_stats: list[CandleStats] = field(default_factory=list)
    stats: dict[str, Stats] = field(default_factory=dict)


def absolute_return_percentage(candle_stats: CandleStats) -> float:
    """Return the unsigned return of a candle."""
    return abs(candle_stats.return_percentage)


# The sign of the return is discarded, so "mean" is the mean absolute return
RETURN_PERCENTAGE_METRIC = MetricDefinition(
    key="return_percentage",
    name="Return Percentage",
    extractor=absolute_return_percentage,
)

DEFAULT_METRICS: tuple[MetricDefinition, ...] = (RETURN_PERCENTAGE_METRIC,)


def calculate_stats(
    name: str,
    values: Sequence[float],
    var_multiplier: float = VALUE_AT_RISK_MULTIPLIER,
) -> Stats:
    """Compute population standard deviation, mean and value at risk.

    An empty sequence yields all-zero statistics.
    """
    if len(values) == 0:
        app_logger.warning("No values to aggregate for %s, reporting zero statistics", name)
        return Stats(name=name, std=0.0, mean=0.0, value_at_risk=0.0)

    series = pd.Series(values, dtype="float64")
    std = float(series.std(ddof=0, skipna=False))
    mean = float(series.mean(skipna=False))

    return Stats(name=name, std=std, mean=mean, value_at_risk=var_multiplier * std)


def calculate_report(
    candle_stats: list[CandleStats],
    currency_pair: str,
    metrics: Sequence[MetricDefinition] = DEFAULT_METRICS,
    var_multiplier: float = VALUE_AT_RISK_MULTIPLIER,
) -> AnalysisReport:
    """Aggregate every metric over the candle statistics.

    The resulting ``stats`` mapping keeps the order of ``metrics``.
    """
    stats = {}
    for metric in metrics:
        if metric.key in stats:
            msg = f"Duplicate metric key: {metric.key}"
            raise ValueError(msg)
        values = [metric.extractor(item) for item in candle_stats]
        stats[metric.key] = calculate_stats(metric.name, values, var_multiplier)

    return AnalysisReport(
        currency_pair=currency_pair,
        candle_stats=candle_stats,
        stats=stats,
    )
