"""
Shared pytest fixtures and configuration for safety-spine tests.

This module provides:
- An in-memory SQLite connection with the schema applied
- Stores, repository, delivery, pipeline and a started scheduler
- Operation contexts with and without a scheduler
- A factory for stored forklift inspections

Fakes and fixed clock values live in ``_support.fakes``.

Usage:
    Fixtures are auto-discovered by pytest; request them by name.

    def test_something(scheduler, add_inspection):
        ...
"""

import sys
from datetime import datetime, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

# Ensure safety_spine package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from _support.fakes import FIXED_NOW, REFERENCE_TZ, SENDER, RecordingTransport, inspection_payload
from safety_spine.core.schema import init_schema
from safety_spine.core.settings import SafetySpineSettings
from safety_spine.core.sqlite_conn import SqliteConnection
from safety_spine.delivery import EmailDelivery
from safety_spine.ops.context import OperationContext
from safety_spine.scheduling.backend import APSchedulerBackend
from safety_spine.scheduling.pipeline import ReportPipeline
from safety_spine.scheduling.repository import ScheduleRepository
from safety_spine.scheduling.service import ReportScheduler
from safety_spine.submissions.models import INSPECTION_FORM_TYPE, SubmissionCreate
from safety_spine.submissions.store import SubmissionStore


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)

        if "integration" in str(test_path):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration", "slow"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Core fixtures
# =============================================================================


@pytest.fixture()
def tz() -> ZoneInfo:
    return REFERENCE_TZ


@pytest.fixture()
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture()
def settings() -> SafetySpineSettings:
    """Settings isolated from the environment and any ``.env`` file."""
    return SafetySpineSettings(
        _env_file=None,
        database_path=":memory:",
        reference_timezone="America/Chicago",
        email_transport="log",
        email_from=SENDER,
    )


@pytest.fixture()
def conn():
    """In-memory SQLite connection with the schema applied."""
    connection = SqliteConnection(":memory:")
    init_schema(connection)
    yield connection
    connection.close()


@pytest.fixture()
def store(conn, tz) -> SubmissionStore:
    return SubmissionStore(conn, tz)


@pytest.fixture()
def repo(conn) -> ScheduleRepository:
    return ScheduleRepository(conn)


# =============================================================================
# Delivery / pipeline / scheduler
# =============================================================================


@pytest.fixture()
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture()
def delivery(transport) -> EmailDelivery:
    return EmailDelivery(transport, sender=SENDER)


@pytest.fixture()
def pipeline(store, delivery, tz) -> ReportPipeline:
    return ReportPipeline(store, delivery, tz, now=lambda: FIXED_NOW)


@pytest.fixture()
def backend(tz):
    backend = APSchedulerBackend(tz)
    yield backend
    backend.stop(wait=False)


@pytest.fixture()
def scheduler(repo, pipeline, backend, tz):
    """Started scheduler; triggers are real APScheduler jobs."""
    service = ReportScheduler(repository=repo, pipeline=pipeline, backend=backend, timezone=tz)
    service.start()
    yield service
    service.stop(wait=False)


# =============================================================================
# Operation contexts
# =============================================================================


@pytest.fixture()
def ctx(conn, settings) -> OperationContext:
    """Context without a scheduler: registry writes only."""
    return OperationContext(conn=conn, settings=settings, caller="test")


@pytest.fixture()
def sched_ctx(conn, settings, scheduler) -> OperationContext:
    """Context with a live scheduler."""
    return OperationContext(conn=conn, scheduler=scheduler, settings=settings, caller="test")


# =============================================================================
# Data factories
# =============================================================================


@pytest.fixture()
def add_inspection(store):
    """Factory: store one forklift inspection submission."""

    def _add(
        checklist: dict[str, str],
        *,
        location: str | None = "Dallas",
        asset: str = "FL-01",
        safe: str | None = "Yes",
        submitted_at: datetime | None = None,
    ):
        return store.add(
            SubmissionCreate(
                form_type=INSPECTION_FORM_TYPE,
                payload=inspection_payload(checklist, asset=asset, safe=safe),
                location=location,
                submitted_by="operator@example.com",
                submitted_at=submitted_at or FIXED_NOW - timedelta(hours=1),
            )
        )

    return _add
