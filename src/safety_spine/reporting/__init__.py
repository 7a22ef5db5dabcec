"""Inspection statistics, report windows and report renderers."""

from safety_spine.reporting.statistics import (
    AggregateResult,
    ItemFailure,
    StatisticsSummary,
    collect_inspections,
    compute_statistics,
    pass_rate,
    percentage,
)
from safety_spine.reporting.window import DateWindow, report_window, today_in

__all__ = [
    "AggregateResult",
    "DateWindow",
    "ItemFailure",
    "StatisticsSummary",
    "collect_inspections",
    "compute_statistics",
    "pass_rate",
    "percentage",
    "report_window",
    "today_in",
]
