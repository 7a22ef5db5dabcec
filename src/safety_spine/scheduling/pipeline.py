"""Report pipeline: window → query → render → deliver.

One call of :meth:`ReportPipeline.run` produces and sends one scheduled
report. Every step failure is raised as :class:`ReportExecutionError` naming
the step, so the run history can say where a run broke. A wall-clock
deadline is checked before each step; transports carry their own socket
timeouts for the send itself.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from zoneinfo import ZoneInfo

from safety_spine.core.errors import (
    DeliveryError,
    ExecutionTimeoutError,
    ReportExecutionError,
)
from safety_spine.core.timestamps import utc_now
from safety_spine.delivery import Attachment, DeliveryResult, EmailDelivery
from safety_spine.delivery.content import report_body, report_subject
from safety_spine.reporting.renderers import ReportFormat, ReportInput, render_reports
from safety_spine.reporting.statistics import AggregateResult, collect_inspections
from safety_spine.reporting.window import DateWindow, report_window, today_in
from safety_spine.scheduling.models import Schedule
from safety_spine.submissions.store import SubmissionStore

logger = logging.getLogger(__name__)


class PipelineStep(str, Enum):
    WINDOW = "window"
    QUERY = "query"
    RENDER = "render"
    DELIVER = "deliver"
    RECORD = "record"


@dataclass
class PipelineProgress:
    """What a run has produced so far. Filled in step by step."""

    step: PipelineStep | None = None
    window: DateWindow | None = None
    aggregate: AggregateResult | None = None
    attachments: list[Attachment] = field(default_factory=list)
    delivery: DeliveryResult | None = None

    @property
    def attachment_names(self) -> list[str]:
        return [a.filename for a in self.attachments]


class Deadline:
    """Wall-clock budget for one run."""

    def __init__(self, seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.seconds = seconds
        self._clock = clock
        self._expires = clock() + seconds

    @property
    def expired(self) -> bool:
        return self._clock() >= self._expires

    def check(self, step: PipelineStep, schedule_id: str) -> None:
        if self.expired:
            raise ExecutionTimeoutError(
                f"Run of {schedule_id} exceeded {self.seconds:g}s before step '{step.value}'"
            )


class ReportPipeline:
    """Builds and sends the report for one schedule.

    Example:
        >>> pipeline = ReportPipeline(store, delivery, ZoneInfo("America/Chicago"))
        >>> progress = pipeline.run(schedule)
        >>> progress.attachment_names
        ['Forklift_Inspection_Report_2026-10-12_to_2026-10-19.pdf', ...]
    """

    def __init__(
        self,
        store: SubmissionStore,
        delivery: EmailDelivery,
        timezone: ZoneInfo,
        *,
        timeout_seconds: float = 300.0,
        now: Callable[[], datetime] = utc_now,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.store = store
        self.delivery = delivery
        self.timezone = timezone
        self.timeout_seconds = timeout_seconds
        self._now = now
        self._clock = clock

    def run(self, schedule: Schedule, progress: PipelineProgress | None = None) -> PipelineProgress:
        """Execute every step for *schedule*.

        Raises:
            ReportExecutionError: On the first failing step.
        """
        progress = progress if progress is not None else PipelineProgress()
        deadline = Deadline(self.timeout_seconds, self._clock)
        now = self._now()

        with self._step(PipelineStep.WINDOW, schedule, progress, deadline):
            progress.window = report_window(schedule.frequency, today_in(self.timezone, now))

        with self._step(PipelineStep.QUERY, schedule, progress, deadline):
            progress.aggregate = collect_inspections(
                self.store, progress.window, schedule.location_filter
            )

        report = ReportInput(
            submissions=progress.aggregate.submissions,
            statistics=progress.aggregate.statistics,
            window=progress.window,
            generated_at=now.astimezone(self.timezone),
            location_filter=schedule.location_filter,
        )

        with self._step(PipelineStep.RENDER, schedule, progress, deadline):
            rendered = render_reports(ReportFormat(schedule.format), report)
            progress.attachments = [
                Attachment(r.filename, r.mime_type, r.content) for r in rendered
            ]

        with self._step(PipelineStep.DELIVER, schedule, progress, deadline):
            if not schedule.recipients:
                raise DeliveryError(f"No recipients configured for schedule {schedule.id}")
            result = self.delivery.deliver(
                list(schedule.recipients),
                report_subject(schedule.name),
                report_body(schedule.name, report, len(progress.attachments)),
                progress.attachments,
            )
            progress.delivery = result
            if not result.success:
                raise result.error or DeliveryError("Delivery failed")

        logger.info(
            f"Report for {schedule.id} ({schedule.name}) delivered: "
            f"{progress.window.label}, {len(progress.attachments)} attachment(s)"
        )
        return progress

    @contextmanager
    def _step(
        self,
        step: PipelineStep,
        schedule: Schedule,
        progress: PipelineProgress,
        deadline: Deadline,
    ) -> Iterator[None]:
        progress.step = step
        try:
            deadline.check(step, schedule.id)
            yield
        except ReportExecutionError:
            raise
        except Exception as e:
            raise ReportExecutionError(
                f"Step '{step.value}' failed for schedule {schedule.id}: {e}",
                step=step.value,
                schedule_id=schedule.id,
                cause=e,
            ) from e
