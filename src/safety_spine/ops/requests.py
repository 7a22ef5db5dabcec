"""
Typed request objects for operations.

Each dataclass is the *input* of one operation function. ``None`` on an
update request means "not provided".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

# ------------------------------------------------------------------ #
# Schedule operations
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class CreateScheduleRequest:
    """Request for :func:`safety_spine.ops.schedules.create_schedule`."""

    name: str = ""
    frequency: str = ""
    time: str = ""
    recipients: list[str] = field(default_factory=list)
    format: str = "both"
    day_of_week: int | None = None
    day_of_month: int | None = None
    location_filter: str | None = None
    is_active: bool = True


@dataclass(frozen=True, slots=True)
class UpdateScheduleRequest:
    """Request for :func:`safety_spine.ops.schedules.update_schedule`.

    Only non-``None`` fields are applied. Set ``clear_location_filter`` to
    drop an existing terminal filter.
    """

    schedule_id: str = ""
    name: str | None = None
    frequency: str | None = None
    time: str | None = None
    recipients: list[str] | None = None
    format: str | None = None
    day_of_week: int | None = None
    day_of_month: int | None = None
    location_filter: str | None = None
    clear_location_filter: bool = False
    is_active: bool | None = None


@dataclass(frozen=True, slots=True)
class GetScheduleRequest:
    schedule_id: str = ""


@dataclass(frozen=True, slots=True)
class DeleteScheduleRequest:
    schedule_id: str = ""


@dataclass(frozen=True, slots=True)
class RunScheduleRequest:
    """Request for :func:`safety_spine.ops.schedules.run_schedule_now`."""

    schedule_id: str = ""


@dataclass(frozen=True, slots=True)
class ListScheduleRunsRequest:
    schedule_id: str = ""
    limit: int = 50


# ------------------------------------------------------------------ #
# Submission operations
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class RecordSubmissionRequest:
    """Request for :func:`safety_spine.ops.submissions.record_submission`."""

    form_type: str = ""
    payload: dict[str, Any] = field(default_factory=dict)
    location: str | None = None
    submitted_by: str | None = None
    submitted_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class ListSubmissionsRequest:
    form_type: str | None = None
    limit: int = 50
    offset: int = 0


# ------------------------------------------------------------------ #
# Report operations
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class RenderReportRequest:
    """Request for :func:`safety_spine.ops.reports.render_report`."""

    start: date | None = None
    end: date | None = None
    location_filter: str | None = None
    format: str = "both"
