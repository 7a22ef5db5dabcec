"""
Inspection statistics - the pure reduction behind every report.

``compute_statistics`` scans an already-filtered list of submissions and
produces a ``StatisticsSummary``. It performs no I/O; ``collect_inspections``
is the thin wrapper that queries the store, sorts newest-first and reduces.

Rules:
    - Every checklist entry valued ``Fail`` counts toward ``total_failures``,
      including keys outside the fixed item vocabulary.
    - Only known keys increment ``failures_by_item``.
    - A submission with at least one failure counts once toward
      ``inspections_with_failures`` and once toward its location and asset.
    - ``safe_to_operate`` counts the literal values ``Yes`` and ``No``; any
      other value, or a missing field, is ignored.
    - Asset counts are ordered by count descending, ties in first-seen order.

Example:
    >>> summary = compute_statistics(submissions)
    >>> summary.pass_rate
    33
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from safety_spine.reporting.inspection import (
    ASSET_FIELD,
    INSPECTION_ITEMS,
    SAFE_TO_OPERATE_FIELD,
    UNKNOWN,
)
from safety_spine.reporting.window import DateWindow
from safety_spine.submissions.models import (
    INSPECTION_FORM_TYPE,
    ChecklistResult,
    Submission,
)
from safety_spine.submissions.store import SubmissionStore


def percentage(count: int, total: int) -> int:
    """``round(count / total * 100)`` with halves rounded up; 0 when total is 0."""
    if total <= 0:
        return 0
    return int(math.floor(count / total * 100 + 0.5))


@dataclass
class ItemFailure:
    """Failure count for one checklist item."""

    label: str
    count: int = 0


@dataclass
class SafeToOperateTally:
    yes: int = 0
    no: int = 0


@dataclass
class StatisticsSummary:
    """Aggregate over one report window. Never persisted."""

    total_inspections: int = 0
    inspections_with_failures: int = 0
    total_failures: int = 0
    failures_by_item: dict[str, ItemFailure] = field(
        default_factory=lambda: {k: ItemFailure(label=v) for k, v in INSPECTION_ITEMS.items()}
    )
    failures_by_location: dict[str, int] = field(default_factory=dict)
    failures_by_asset: list[tuple[str, int]] = field(default_factory=list)
    safe_to_operate: SafeToOperateTally = field(default_factory=SafeToOperateTally)

    @property
    def pass_rate(self) -> int:
        return pass_rate(self)

    def items_by_failures(self) -> list[tuple[str, ItemFailure]]:
        """Items with at least one failure, most failures first."""
        failing = [(k, v) for k, v in self.failures_by_item.items() if v.count > 0]
        return sorted(failing, key=lambda kv: kv[1].count, reverse=True)

    def to_dict(self) -> dict:
        return {
            "total_inspections": self.total_inspections,
            "inspections_with_failures": self.inspections_with_failures,
            "total_failures": self.total_failures,
            "pass_rate": self.pass_rate,
            "failures_by_item": {
                k: {"label": v.label, "count": v.count} for k, v in self.failures_by_item.items()
            },
            "failures_by_location": dict(self.failures_by_location),
            "failures_by_asset": [list(pair) for pair in self.failures_by_asset],
            "safe_to_operate": {"yes": self.safe_to_operate.yes, "no": self.safe_to_operate.no},
        }


def pass_rate(summary: StatisticsSummary) -> int:
    """Percent of inspections without failures; 0 when there are none."""
    total = summary.total_inspections
    if total <= 0:
        return 0
    return int(math.floor((1 - summary.inspections_with_failures / total) * 100 + 0.5))


def compute_statistics(submissions: list[Submission]) -> StatisticsSummary:
    """Reduce submissions to a ``StatisticsSummary``."""
    summary = StatisticsSummary(total_inspections=len(submissions))
    by_asset: dict[str, int] = {}

    for submission in submissions:
        failed = 0
        for key, value in submission.checklist.items():
            if value != ChecklistResult.FAIL.value:
                continue
            failed += 1
            summary.total_failures += 1
            if key in summary.failures_by_item:
                summary.failures_by_item[key].count += 1

        if failed:
            summary.inspections_with_failures += 1
            location = submission.location or UNKNOWN
            summary.failures_by_location[location] = summary.failures_by_location.get(location, 0) + 1
            asset = str(submission.get(ASSET_FIELD) or UNKNOWN)
            by_asset[asset] = by_asset.get(asset, 0) + 1

        verdict = submission.get(SAFE_TO_OPERATE_FIELD)
        if verdict == "Yes":
            summary.safe_to_operate.yes += 1
        elif verdict == "No":
            summary.safe_to_operate.no += 1

    # dict preserves first-seen order and sorted() is stable
    summary.failures_by_asset = sorted(by_asset.items(), key=lambda kv: kv[1], reverse=True)
    return summary


@dataclass
class AggregateResult:
    """Submissions in the window (newest first) and their statistics."""

    submissions: list[Submission]
    statistics: StatisticsSummary
    window: DateWindow
    location_filter: str | None = None


def sort_newest_first(submissions: list[Submission]) -> list[Submission]:
    return sorted(submissions, key=lambda s: s.submitted_at_utc, reverse=True)


def collect_inspections(
    store: SubmissionStore,
    window: DateWindow,
    location_filter: str | None = None,
) -> AggregateResult:
    """Query inspections for the window and reduce them."""
    rows = store.find(
        INSPECTION_FORM_TYPE,
        location=location_filter,
        date_start=window.start,
        date_end=window.end,
    )
    ordered = sort_newest_first(rows)
    return AggregateResult(
        submissions=ordered,
        statistics=compute_statistics(ordered),
        window=window,
        location_filter=location_filter,
    )
