"""Report scheduler - trigger registry and run orchestration.

Manifesto:
    The ReportScheduler is the one object that knows which schedules have a
    live trigger and which schedules are running. It is created explicitly
    and passed to whoever needs it; there is no module-level instance.

┌──────────────────────────────────────────────────────────────────────────┐
│  ReportScheduler                                                         │
│                                                                          │
│   ┌────────────────┐  ┌────────────────┐  ┌────────────────┐             │
│   │ Backend        │  │ Repository     │  │ Pipeline       │             │
│   │ (APScheduler)  │  │ (schedules)    │  │ (report run)   │             │
│   └───────┬────────┘  └───────┬────────┘  └───────┬────────┘             │
│           │                   │                   │                      │
│           ▼                   ▼                   ▼                      │
│   register / unregister   execute(id):                                   │
│   (trigger map, RLock)    1. guard.acquire(id) or ScheduleBusyError      │
│                           2. reload schedule                             │
│                           3. pipeline.run()                              │
│                           4. record last_run_* and run history           │
│                           5. guard.release(id)   (always)                │
│                                                                          │
│   Trigger firings go through _fire(), which logs and swallows errors.   │
└──────────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

from safety_spine.core.errors import (
    ReportExecutionError,
    ScheduleBusyError,
    ScheduleNotFoundError,
)
from safety_spine.core.timestamps import to_iso8601, utc_now
from safety_spine.scheduling.backend import APSchedulerBackend
from safety_spine.scheduling.models import RunStatus, RunTrigger, Schedule
from safety_spine.scheduling.pipeline import PipelineProgress, PipelineStep, ReportPipeline
from safety_spine.scheduling.recurrence import build_trigger, schedule_to_cron
from safety_spine.scheduling.repository import ScheduleRepository

logger = logging.getLogger(__name__)


@dataclass
class SchedulerStats:
    """Counters for the scheduler service."""

    runs_started: int = 0
    runs_succeeded: int = 0
    runs_failed: int = 0
    runs_rejected: int = 0
    last_run_at: datetime | None = None
    last_error: str | None = None


@dataclass
class SchedulerHealth:
    """Health status for the scheduler service."""

    healthy: bool
    backend: dict
    schedules_active: int = 0
    triggers_registered: int = 0
    runs_in_flight: int = 0
    stats: SchedulerStats = field(default_factory=SchedulerStats)

    def to_dict(self) -> dict[str, Any]:
        return {
            "healthy": self.healthy,
            "backend": self.backend,
            "schedules_active": self.schedules_active,
            "triggers_registered": self.triggers_registered,
            "runs_in_flight": self.runs_in_flight,
            "stats": {
                "runs_started": self.stats.runs_started,
                "runs_succeeded": self.stats.runs_succeeded,
                "runs_failed": self.stats.runs_failed,
                "runs_rejected": self.stats.runs_rejected,
                "last_run_at": self.stats.last_run_at.isoformat()
                if self.stats.last_run_at
                else None,
                "last_error": self.stats.last_error,
            },
        }


@dataclass(frozen=True)
class TriggerHandle:
    """A live trigger: backend job id plus the cron rule it was built from."""

    job_id: str
    cron: str
    registered_at: datetime


@dataclass
class RunOutcome:
    """Result of one execution, returned to manual callers."""

    schedule_id: str
    last_run_at: str
    last_run_status: str
    run_id: str | None = None
    failed_step: str | None = None
    error: str | None = None
    attachments: list[str] = field(default_factory=list)
    window_start: str | None = None
    window_end: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.last_run_status == RunStatus.SUCCESS.value

    def to_dict(self) -> dict[str, Any]:
        return {
            "schedule_id": self.schedule_id,
            "last_run_at": self.last_run_at,
            "last_run_status": self.last_run_status,
            "run_id": self.run_id,
            "failed_step": self.failed_step,
            "error": self.error,
            "attachments": list(self.attachments),
            "window_start": self.window_start,
            "window_end": self.window_end,
        }


class ExecutionGuard:
    """At most one in-flight run per schedule id. Non-blocking."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._running: set[str] = set()

    def acquire(self, schedule_id: str) -> bool:
        with self._lock:
            if schedule_id in self._running:
                return False
            self._running.add(schedule_id)
            return True

    def release(self, schedule_id: str) -> None:
        with self._lock:
            self._running.discard(schedule_id)

    def is_running(self, schedule_id: str) -> bool:
        with self._lock:
            return schedule_id in self._running

    def running(self) -> list[str]:
        with self._lock:
            return sorted(self._running)


class ReportScheduler:
    """Owns the trigger map and runs scheduled reports.

    Example:
        >>> scheduler = ReportScheduler(
        ...     repository=ScheduleRepository(conn),
        ...     pipeline=ReportPipeline(store, delivery, tz),
        ...     backend=APSchedulerBackend(tz),
        ...     timezone=tz,
        ... )
        >>> scheduler.start()          # registers every active schedule
        >>> scheduler.run_now("SCH-1A2B3C4D").last_run_status
        'success'
        >>> scheduler.stop()
    """

    def __init__(
        self,
        repository: ScheduleRepository,
        pipeline: ReportPipeline,
        backend: APSchedulerBackend,
        timezone: ZoneInfo,
    ) -> None:
        self.repository = repository
        self.pipeline = pipeline
        self.backend = backend
        self.timezone = timezone

        self._triggers: dict[str, TriggerHandle] = {}
        self._map_lock = threading.RLock()
        self._guard = ExecutionGuard()
        self._stats = SchedulerStats()
        self._running = False
        self._loaded = False

    # === Lifecycle ===

    def start(self) -> None:
        """Start the backend and register every active schedule once."""
        if self._running:
            logger.warning("ReportScheduler already running")
            return

        self.backend.start()
        self._running = True
        if not self._loaded:
            active = self.repository.list_active()
            for schedule in active:
                self.register(schedule)
            self._loaded = True
            logger.info(f"ReportScheduler started with {len(active)} active schedule(s)")
        else:
            logger.info("ReportScheduler restarted")

    def stop(self, wait: bool = True) -> None:
        """Stop firing triggers; waits for in-flight runs by default."""
        if not self._running:
            return
        logger.info("Stopping ReportScheduler...")
        self.backend.stop(wait=wait)
        self._running = False
        logger.info("ReportScheduler stopped")

    @property
    def is_running(self) -> bool:
        return self._running

    # === Trigger map ===

    def register(self, schedule: Schedule) -> bool:
        """Install the trigger for *schedule*, replacing any existing one.

        An inactive schedule only clears a stale trigger.

        Returns:
            True if a trigger is now live for the schedule
        """
        with self._map_lock:
            self._remove_trigger(schedule.id)
            if not schedule.is_active:
                logger.debug(f"Schedule {schedule.id} inactive; no trigger registered")
                return False

            trigger = build_trigger(schedule, self.timezone)
            self.backend.add_job(schedule.id, self._fire, trigger, name=schedule.name)
            self._triggers[schedule.id] = TriggerHandle(
                job_id=schedule.id,
                cron=schedule_to_cron(schedule),
                registered_at=utc_now(),
            )
            logger.info(
                f"Registered schedule {schedule.id} ({schedule.name}) "
                f"with cron '{self._triggers[schedule.id].cron}'"
            )
            return True

    def unregister(self, schedule_id: str) -> bool:
        """Remove the trigger if present. In-flight runs continue.

        Returns:
            True if a trigger was removed
        """
        with self._map_lock:
            removed = self._remove_trigger(schedule_id)
        if removed:
            logger.info(f"Unregistered schedule {schedule_id}")
        return removed

    def sync(self, schedule_id: str) -> bool:
        """Bring the trigger for *schedule_id* in line with its stored record.

        The record is re-read under the trigger map lock, so concurrent
        writers always leave the trigger matching the last committed write.

        Returns:
            True if a trigger is now live for the schedule
        """
        with self._map_lock:
            schedule = self.repository.get(schedule_id)
            if schedule is None or not schedule.is_active:
                if self._remove_trigger(schedule_id):
                    logger.info(f"Unregistered schedule {schedule_id}")
                return False
            handle = self._triggers.get(schedule_id)
            if handle is not None and handle.cron == schedule_to_cron(schedule):
                return True
            return self.register(schedule)

    def _remove_trigger(self, schedule_id: str) -> bool:
        handle = self._triggers.pop(schedule_id, None)
        if handle is None:
            return False
        self.backend.remove_job(handle.job_id)
        return True

    def is_registered(self, schedule_id: str) -> bool:
        with self._map_lock:
            return schedule_id in self._triggers

    def registered_ids(self) -> list[str]:
        with self._map_lock:
            return sorted(self._triggers)

    def trigger_for(self, schedule_id: str) -> TriggerHandle | None:
        with self._map_lock:
            return self._triggers.get(schedule_id)

    def next_run_time(self, schedule_id: str) -> datetime | None:
        """Next firing according to the backend, if registered."""
        with self._map_lock:
            handle = self._triggers.get(schedule_id)
        if handle is None:
            return None
        return self.backend.next_run_time(handle.job_id)

    def is_executing(self, schedule_id: str) -> bool:
        return self._guard.is_running(schedule_id)

    # === Execution ===

    def execute(
        self,
        schedule_id: str,
        trigger: RunTrigger = RunTrigger.SCHEDULE,
    ) -> RunOutcome:
        """Run the report for *schedule_id* and record the outcome.

        Raises:
            ScheduleNotFoundError: Unknown id.
            ScheduleBusyError: A run for the id is already in flight.
            ReportExecutionError: The run failed (after being recorded), or
                could not be recorded (``step == "record"``).
        """
        outcome, error = self._run(schedule_id, trigger)
        if error is not None:
            raise error
        return outcome

    def run_now(self, schedule_id: str) -> RunOutcome:
        """Manual run; returns once the run has finished.

        A failed run is reported through the outcome rather than raised.

        Raises:
            ScheduleNotFoundError: Unknown id.
            ScheduleBusyError: A run for the id is already in flight.
            ReportExecutionError: The outcome could not be recorded.
        """
        outcome, _ = self._run(schedule_id, RunTrigger.MANUAL)
        return outcome

    def _run(
        self,
        schedule_id: str,
        trigger: RunTrigger,
    ) -> tuple[RunOutcome, ReportExecutionError | None]:
        if not self._guard.acquire(schedule_id):
            self._stats.runs_rejected += 1
            logger.warning(f"Schedule {schedule_id} already running; {trigger.value} run rejected")
            raise ScheduleBusyError(schedule_id)

        try:
            schedule = self.repository.get(schedule_id)
            if schedule is None:
                raise ScheduleNotFoundError(schedule_id)

            self._stats.runs_started += 1
            logger.info(f"Executing schedule {schedule_id} ({schedule.name}) [{trigger.value}]")

            try:
                run_id = self.repository.start_run(schedule, trigger)
            except Exception as e:
                raise self._record_failure(schedule_id, e) from e

            progress = PipelineProgress()
            error: ReportExecutionError | None = None
            try:
                self.pipeline.run(schedule, progress)
            except ReportExecutionError as e:
                error = e
            except Exception as e:
                step = (progress.step or PipelineStep.WINDOW).value
                error = ReportExecutionError(
                    f"Step '{step}' failed for schedule {schedule_id}: {e}",
                    step=step,
                    schedule_id=schedule_id,
                    cause=e,
                )

            status = RunStatus.FAILED if error else RunStatus.SUCCESS
            finished_at = utc_now()
            try:
                self.repository.record_run(schedule_id, status, finished_at)
                self.repository.finish_run(
                    run_id,
                    status,
                    failed_step=error.step if error else None,
                    error=str(error) if error else None,
                    window=progress.window,
                    attachments=progress.attachment_names,
                    completed_at=finished_at,
                )
            except Exception as e:
                raise self._record_failure(schedule_id, e) from e

            self._stats.last_run_at = finished_at
            if error:
                self._stats.runs_failed += 1
                self._stats.last_error = str(error)
                logger.error(f"Schedule {schedule_id} failed at step '{error.step}': {error}")
            else:
                self._stats.runs_succeeded += 1
                logger.info(f"Schedule {schedule.name} executed with status: {status.value}")

            outcome = RunOutcome(
                schedule_id=schedule_id,
                last_run_at=to_iso8601(finished_at),
                last_run_status=status.value,
                run_id=run_id,
                failed_step=error.step if error else None,
                error=str(error) if error else None,
                attachments=progress.attachment_names,
                window_start=progress.window.start.isoformat() if progress.window else None,
                window_end=progress.window.end.isoformat() if progress.window else None,
            )
            return outcome, error
        finally:
            self._guard.release(schedule_id)

    def _record_failure(self, schedule_id: str, cause: Exception) -> ReportExecutionError:
        self._stats.runs_failed += 1
        self._stats.last_error = str(cause)
        return ReportExecutionError(
            f"Could not record run of schedule {schedule_id}: {cause}",
            step=PipelineStep.RECORD.value,
            schedule_id=schedule_id,
            cause=cause,
        )

    def _fire(self, schedule_id: str) -> None:
        """Trigger entry point. Never raises."""
        try:
            if not self.sync(schedule_id):
                logger.warning(f"Schedule {schedule_id} missing or inactive; dropping trigger")
                return
            self.execute(schedule_id, RunTrigger.SCHEDULE)
        except ScheduleBusyError:
            logger.warning(f"Skipped firing of {schedule_id}: previous run still in flight")
        except Exception as e:
            logger.exception(f"Scheduled run of {schedule_id} failed: {e}")

    # === Health & Stats ===

    def health(self) -> SchedulerHealth:
        backend_health = self.backend.health()
        return SchedulerHealth(
            healthy=self._running and backend_health.get("healthy", False),
            backend=backend_health,
            schedules_active=self.repository.count_active(),
            triggers_registered=len(self.registered_ids()),
            runs_in_flight=len(self._guard.running()),
            stats=self._stats,
        )

    def get_stats(self) -> SchedulerStats:
        return self._stats
