"""APScheduler-based trigger backend.

Wraps APScheduler 3.x ``BackgroundScheduler``: one cron job per active
report schedule, keyed by schedule id. Jobs run on the scheduler's thread
pool, so different schedules fire concurrently. ``max_instances=1`` and
``coalesce=True`` keep a slow run from stacking missed firings.

Example::

    >>> backend = APSchedulerBackend(ZoneInfo("America/Chicago"))
    >>> backend.start()
    >>> backend.add_job("SCH-1A2B3C4D", fire, trigger)
    >>> backend.stop()
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.base import BaseTrigger

logger = logging.getLogger(__name__)


class APSchedulerBackend:
    """Owns the ``BackgroundScheduler`` and its jobs."""

    name: str = "apscheduler"

    def __init__(
        self,
        timezone: ZoneInfo,
        *,
        max_workers: int = 10,
        misfire_grace_seconds: int = 300,
    ) -> None:
        self._scheduler = BackgroundScheduler(
            timezone=timezone,
            executors={"default": {"type": "threadpool", "max_workers": max_workers}},
            job_defaults={
                "max_instances": 1,
                "coalesce": True,
                "misfire_grace_time": misfire_grace_seconds,
            },
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        if not self._scheduler.running:
            self._scheduler.start()
            logger.info("APSchedulerBackend started")

    def stop(self, wait: bool = True) -> None:
        """Stop the scheduler; waits for in-flight jobs by default."""
        if self._scheduler.running:
            self._scheduler.shutdown(wait=wait)
            logger.info("APSchedulerBackend stopped")

    @property
    def running(self) -> bool:
        return self._scheduler.running

    # ------------------------------------------------------------------
    # Jobs
    # ------------------------------------------------------------------

    def add_job(
        self,
        job_id: str,
        func: Callable[..., Any],
        trigger: BaseTrigger,
        *,
        name: str | None = None,
    ) -> None:
        """Install or replace the job for *job_id*."""
        self._scheduler.add_job(
            func,
            trigger,
            args=(job_id,),
            id=job_id,
            name=name or job_id,
            replace_existing=True,
        )

    def remove_job(self, job_id: str) -> bool:
        """Remove the job; ``False`` if there was none."""
        try:
            self._scheduler.remove_job(job_id)
        except JobLookupError:
            return False
        return True

    def has_job(self, job_id: str) -> bool:
        return self._scheduler.get_job(job_id) is not None

    def job_ids(self) -> list[str]:
        return [job.id for job in self._scheduler.get_jobs()]

    def next_run_time(self, job_id: str) -> datetime | None:
        job = self._scheduler.get_job(job_id)
        if job is None:
            return None
        return getattr(job, "next_run_time", None)

    def health(self) -> dict[str, Any]:
        """Backend health: running flag and job count."""
        return {
            "healthy": self.running,
            "backend": self.name,
            "scheduled_jobs": len(self._scheduler.get_jobs()),
        }
