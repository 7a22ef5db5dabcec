"""Wire a ReportScheduler from settings and a connection."""

from __future__ import annotations

from safety_spine.core.protocols import Connection
from safety_spine.core.settings import SafetySpineSettings
from safety_spine.delivery import EmailDelivery, EmailTransport, create_transport
from safety_spine.scheduling.backend import APSchedulerBackend
from safety_spine.scheduling.pipeline import ReportPipeline
from safety_spine.scheduling.repository import ScheduleRepository
from safety_spine.scheduling.service import ReportScheduler
from safety_spine.submissions.store import SubmissionStore


def create_delivery(
    settings: SafetySpineSettings,
    transport: EmailTransport | None = None,
) -> EmailDelivery:
    return EmailDelivery(
        transport or create_transport(settings),
        sender=settings.email_from,
        override=settings.email_override,
    )


def create_scheduler(
    conn: Connection,
    settings: SafetySpineSettings,
    *,
    transport: EmailTransport | None = None,
    backend: APSchedulerBackend | None = None,
) -> ReportScheduler:
    """Scheduler using the configured transport, timezone and timeout."""
    tz = settings.tz
    pipeline = ReportPipeline(
        SubmissionStore(conn, tz),
        create_delivery(settings, transport),
        tz,
        timeout_seconds=settings.execution_timeout_seconds,
    )
    return ReportScheduler(
        repository=ScheduleRepository(conn),
        pipeline=pipeline,
        backend=backend or APSchedulerBackend(tz),
        timezone=tz,
    )
