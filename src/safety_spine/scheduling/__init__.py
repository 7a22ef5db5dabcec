"""Report scheduling.

Manifesto:
    Each active report schedule owns one cron trigger. A trigger firing, or
    a manual run, executes the report pipeline under a per-schedule guard
    and records the outcome on the schedule and in run history.

Components:
    - ScheduleRepository: schedule CRUD and run history
    - validate_schedule: create/update validation rules
    - schedule_to_cron / build_trigger: recurrence translation
    - APSchedulerBackend: APScheduler ``BackgroundScheduler`` wrapper
    - ReportPipeline: window → query → render → deliver
    - ReportScheduler: trigger map, execution guard, run recording

Example:
    >>> from safety_spine.scheduling import create_scheduler
    >>> scheduler = create_scheduler(conn, settings)
    >>> scheduler.start()
    >>> outcome = scheduler.run_now("SCH-1A2B3C4D")
    >>> scheduler.stop()
"""

from safety_spine.scheduling.backend import APSchedulerBackend
from safety_spine.scheduling.factory import create_delivery, create_scheduler
from safety_spine.scheduling.models import (
    Frequency,
    RunStatus,
    RunTrigger,
    Schedule,
    ScheduleCreate,
    ScheduleRun,
    ScheduleUpdate,
)
from safety_spine.scheduling.pipeline import PipelineProgress, PipelineStep, ReportPipeline
from safety_spine.scheduling.recurrence import build_trigger, next_fire_time, schedule_to_cron
from safety_spine.scheduling.repository import ScheduleRepository
from safety_spine.scheduling.service import (
    ExecutionGuard,
    ReportScheduler,
    RunOutcome,
    SchedulerHealth,
    SchedulerStats,
)
from safety_spine.scheduling.validation import validate_schedule

__all__ = [
    "APSchedulerBackend",
    "ExecutionGuard",
    "Frequency",
    "PipelineProgress",
    "PipelineStep",
    "ReportPipeline",
    "ReportScheduler",
    "RunOutcome",
    "RunStatus",
    "RunTrigger",
    "Schedule",
    "ScheduleCreate",
    "ScheduleRepository",
    "ScheduleRun",
    "ScheduleUpdate",
    "SchedulerHealth",
    "SchedulerStats",
    "build_trigger",
    "create_delivery",
    "create_scheduler",
    "next_fire_time",
    "schedule_to_cron",
    "validate_schedule",
]
