"""Tests for safety_spine.core.errors."""

from __future__ import annotations

from safety_spine.core.errors import (
    DeliveryError,
    ErrorCategory,
    ReportExecutionError,
    ScheduleBusyError,
    ScheduleValidationError,
    is_retryable,
)


class TestErrors:
    def test_delivery_is_retryable(self):
        err = DeliveryError("relay down")
        assert err.category == ErrorCategory.DELIVERY
        assert is_retryable(err)

    def test_validation_carries_field(self):
        err = ScheduleValidationError("bad", field="time", value="25:00")
        d = err.to_dict()
        assert d["field"] == "time"
        assert not err.retryable

    def test_execution_error_inherits_retry_hint(self):
        err = ReportExecutionError("boom", step="deliver", cause=DeliveryError("x"))
        assert err.step == "deliver"
        assert err.retryable
        assert err.to_dict()["context"]["step"] == "deliver"

    def test_busy_context(self):
        err = ScheduleBusyError("SCH-1")
        assert err.context.schedule_id == "SCH-1"

    def test_with_context(self):
        err = DeliveryError("x").with_context(schedule_id="SCH-2", attempt=3)
        assert err.context.schedule_id == "SCH-2"
        assert err.context.metadata["attempt"] == 3

    def test_plain_exception_not_retryable(self):
        assert not is_retryable(RuntimeError("x"))
