"""
Domain schemas: schedules, runs and submissions as served over HTTP.

Request bodies mirror the ops request dataclasses; response schemas mirror
the ops response dataclasses field for field.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

# ── Schedules ────────────────────────────────────────────────────────────


class ScheduleSchema(BaseModel):
    """A report schedule with its live trigger state."""

    id: str = Field(description="Schedule id (SCH-XXXXXXXX)")
    name: str
    frequency: str = Field(description="daily | weekly | monthly")
    day_of_week: int | None = Field(default=None, description="0 (Sunday) to 6; weekly only")
    day_of_month: int | None = Field(default=None, description="1 to 28; monthly only")
    time: str = Field(description="HH:MM in the reference timezone")
    location_filter: str | None = Field(default=None, description="Terminal code, or all")
    recipients: list[str] = Field(default_factory=list)
    format: str = Field(default="both", description="document | workbook | both")
    is_active: bool = True
    last_run_at: str | None = None
    last_run_status: str | None = Field(default=None, description="success | failed")
    created_at: str = ""
    updated_at: str = ""
    cron: str | None = Field(default=None, description="Equivalent 5-field cron expression")
    next_run_at: str | None = None
    registered: bool = Field(default=False, description="True if a trigger is live")


class CreateScheduleBody(BaseModel):
    name: str = ""
    frequency: str = ""
    time: str = ""
    recipients: list[str] = Field(default_factory=list)
    format: str = "both"
    day_of_week: int | None = None
    day_of_month: int | None = None
    location_filter: str | None = None
    is_active: bool = True


class UpdateScheduleBody(BaseModel):
    """Partial update; omitted or null fields keep their stored value."""

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


class RunNowSchema(BaseModel):
    """Outcome of a manual run."""

    schedule_id: str
    last_run_at: str
    last_run_status: str
    run_id: str | None = None
    failed_step: str | None = None
    error: str | None = None
    attachments: list[str] = Field(default_factory=list)
    window_start: str | None = None
    window_end: str | None = None


class ScheduleRunSchema(BaseModel):
    """One run-history row."""

    id: str
    schedule_id: str
    schedule_name: str
    trigger: str
    started_at: str
    completed_at: str | None = None
    status: str
    failed_step: str | None = None
    error: str | None = None
    window_start: str | None = None
    window_end: str | None = None
    attachments: list[str] = Field(default_factory=list)


# ── Submissions ──────────────────────────────────────────────────────────


class SubmissionSchema(BaseModel):
    id: str
    form_type: str
    location: str | None = None
    submitted_by: str | None = None
    submitted_at: str
    payload: dict[str, Any] = Field(default_factory=dict)


class RecordSubmissionBody(BaseModel):
    form_type: str
    payload: dict[str, Any] = Field(default_factory=dict)
    location: str | None = Field(default=None, description="Terminal code")
    submitted_by: str | None = None
    submitted_at: datetime | None = Field(
        default=None, description="Defaults to the time of intake"
    )
