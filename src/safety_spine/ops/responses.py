"""
Typed response objects for operations.

Responses carry only domain data: no HTTP status codes, no CLI formatting.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class ScheduleDetail:
    """Full schedule representation plus its live trigger state."""

    id: str = ""
    name: str = ""
    frequency: str = ""
    day_of_week: int | None = None
    day_of_month: int | None = None
    time: str = ""
    location_filter: str | None = None
    recipients: list[str] = field(default_factory=list)
    format: str = "both"
    is_active: bool = True
    last_run_at: str | None = None
    last_run_status: str | None = None
    created_at: str = ""
    updated_at: str = ""
    cron: str | None = None
    next_run_at: str | None = None
    registered: bool = False


@dataclass(frozen=True, slots=True)
class RunNowResult:
    """Outcome of a manual run."""

    schedule_id: str
    last_run_at: str
    last_run_status: str
    run_id: str | None = None
    failed_step: str | None = None
    error: str | None = None
    attachments: list[str] = field(default_factory=list)
    window_start: str | None = None
    window_end: str | None = None


@dataclass(frozen=True, slots=True)
class ScheduleRunSummary:
    """One row of run history."""

    id: str
    schedule_id: str
    schedule_name: str
    trigger: str
    started_at: str
    completed_at: str | None = None
    status: str = "running"
    failed_step: str | None = None
    error: str | None = None
    window_start: str | None = None
    window_end: str | None = None
    attachments: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class SubmissionSummary:
    id: str
    form_type: str
    location: str | None
    submitted_by: str | None
    submitted_at: str
    payload: dict[str, Any] = field(default_factory=dict)
