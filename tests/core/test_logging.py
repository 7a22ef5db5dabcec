"""Tests for safety_spine.core.logging context helpers."""

from unittest.mock import patch

import structlog

from safety_spine.core.logging import LogContext, bind_context, clear_context, unbind_context
from safety_spine.ops.requests import RunScheduleRequest
from safety_spine.ops.schedules import run_schedule_now


def _context() -> dict:
    return structlog.contextvars.get_contextvars()


class TestContextManagement:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_bind_and_unbind(self):
        bind_context(request_id="req-1", caller="api")
        unbind_context("request_id")
        assert _context() == {"caller": "api"}

    def test_clear_context(self):
        bind_context(request_id="req-1")
        clear_context()
        assert _context() == {}

    def test_log_context_is_scoped(self):
        bind_context(request_id="req-1")

        with LogContext(schedule_id="SCH-0A1B2C3D", caller="cli"):
            assert _context() == {
                "request_id": "req-1",
                "schedule_id": "SCH-0A1B2C3D",
                "caller": "cli",
            }

        assert _context() == {"request_id": "req-1"}

    def test_run_now_binds_schedule_id_for_the_run(self, sched_ctx):
        seen = {}

        def fake_run_now(schedule_id):
            seen.update(_context())
            raise RuntimeError("stop")

        with patch.object(sched_ctx.scheduler, "run_now", side_effect=fake_run_now):
            result = run_schedule_now(sched_ctx, RunScheduleRequest(schedule_id="SCH-0A1B2C3D"))

        assert result.error.code == "INTERNAL"
        assert seen == {"schedule_id": "SCH-0A1B2C3D", "caller": "test"}
        assert _context() == {}
