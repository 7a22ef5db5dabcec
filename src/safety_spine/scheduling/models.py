"""Report schedule models (``report_schedules``, ``report_schedule_runs``).

Schedules describe a recurring forklift inspection report: how often it
runs, at what wall-clock time in the reference timezone, which terminal it
covers, who receives it and in which format.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class RunStatus(str, Enum):
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"


class RunTrigger(str, Enum):
    SCHEDULE = "schedule"
    MANUAL = "manual"


# ---------------------------------------------------------------------------
# report_schedules
# ---------------------------------------------------------------------------


@dataclass
class Schedule:
    """Schedule definition row (``report_schedules``)."""

    id: str = ""
    name: str = ""
    frequency: str = Frequency.DAILY.value
    day_of_week: int | None = None  # 0 = Sunday
    day_of_month: int | None = None  # 1-28
    time: str = "08:00"  # HH:MM, reference timezone
    location_filter: str | None = None
    recipients: list[str] = field(default_factory=list)
    format: str = "both"  # document, workbook, both
    is_active: bool = True
    last_run_at: str | None = None
    last_run_status: str | None = None
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "frequency": self.frequency,
            "day_of_week": self.day_of_week,
            "day_of_month": self.day_of_month,
            "time": self.time,
            "location_filter": self.location_filter,
            "recipients": list(self.recipients),
            "format": self.format,
            "is_active": self.is_active,
            "last_run_at": self.last_run_at,
            "last_run_status": self.last_run_status,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


# ---------------------------------------------------------------------------
# report_schedule_runs
# ---------------------------------------------------------------------------


@dataclass
class ScheduleRun:
    """Execution history row (``report_schedule_runs``)."""

    id: str = ""
    schedule_id: str = ""
    schedule_name: str = ""
    trigger: str = RunTrigger.SCHEDULE.value
    started_at: str = ""
    completed_at: str | None = None
    status: str = RunStatus.RUNNING.value
    failed_step: str | None = None
    error: str | None = None
    window_start: str | None = None
    window_end: str | None = None
    attachments: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "schedule_id": self.schedule_id,
            "schedule_name": self.schedule_name,
            "trigger": self.trigger,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
            "status": self.status,
            "failed_step": self.failed_step,
            "error": self.error,
            "window_start": self.window_start,
            "window_end": self.window_end,
            "attachments": list(self.attachments),
        }


# ---------------------------------------------------------------------------
# Create/Update DTOs
# ---------------------------------------------------------------------------


@dataclass
class ScheduleCreate:
    """DTO for creating a schedule."""

    name: str
    frequency: str
    time: str
    recipients: list[str]
    format: str = "both"
    day_of_week: int | None = None
    day_of_month: int | None = None
    location_filter: str | None = None
    is_active: bool = True


@dataclass
class ScheduleUpdate:
    """DTO for a partial update. ``None`` means "leave unchanged".

    ``location_filter`` cannot be cleared by passing ``None``; set
    ``clear_location_filter`` instead.
    """

    name: str | None = None
    frequency: str | None = None
    day_of_week: int | None = None
    day_of_month: int | None = None
    time: str | None = None
    location_filter: str | None = None
    clear_location_filter: bool = False
    recipients: list[str] | None = None
    format: str | None = None
    is_active: bool | None = None

    def is_empty(self) -> bool:
        return not self.clear_location_filter and all(
            getattr(self, name) is None
            for name in (
                "name",
                "frequency",
                "day_of_week",
                "day_of_month",
                "time",
                "location_filter",
                "recipients",
                "format",
                "is_active",
            )
        )
