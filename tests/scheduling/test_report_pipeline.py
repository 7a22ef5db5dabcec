"""Tests for safety_spine.scheduling.pipeline."""

from __future__ import annotations

from email import message_from_bytes
from itertools import count
from unittest.mock import patch

import pytest

from _support.fakes import FIXED_NOW, SENDER, FailingTransport, schedule_spec
from safety_spine.core.errors import DeliveryError, ExecutionTimeoutError, ReportExecutionError
from safety_spine.delivery import EmailDelivery
from safety_spine.scheduling.pipeline import Deadline, PipelineProgress, PipelineStep, ReportPipeline


class TestPipelineRun:
    def test_delivers_both_attachments(self, repo, pipeline, transport, add_inspection):
        add_inspection({"brakes": "Fail"})
        add_inspection({"brakes": "Pass"})
        schedule = repo.create(schedule_spec(name="Morning Safety"))

        progress = pipeline.run(schedule)

        assert progress.window.label == "2026-10-18 to 2026-10-19"
        assert progress.aggregate.statistics.total_inspections == 2
        assert progress.attachment_names == [
            "Forklift_Inspection_Report_2026-10-18_to_2026-10-19.pdf",
            "Forklift_Inspection_Report_2026-10-18_to_2026-10-19.xlsx",
        ]
        assert progress.delivery.success
        msg = message_from_bytes(transport.sent[0]["raw"])
        assert msg["Subject"] == "[Scheduled Report] Forklift Inspection Report - Morning Safety"

    def test_single_format(self, repo, pipeline):
        schedule = repo.create(schedule_spec(format="workbook"))
        progress = pipeline.run(schedule)
        assert [n.rsplit(".", 1)[1] for n in progress.attachment_names] == ["xlsx"]

    def test_location_filter_applies(self, repo, pipeline, add_inspection):
        add_inspection({"brakes": "Fail"}, location="Dallas")
        add_inspection({"brakes": "Fail"}, location="Houston")
        schedule = repo.create(schedule_spec(location_filter="Houston"))

        progress = pipeline.run(schedule)

        assert progress.aggregate.statistics.total_inspections == 1
        assert progress.aggregate.statistics.failures_by_location == {"Houston": 1}

    def test_empty_window_still_sends(self, repo, pipeline, transport):
        schedule = repo.create(schedule_spec())
        progress = pipeline.run(schedule)
        assert progress.aggregate.statistics.total_inspections == 0
        assert len(transport.sent) == 1


class TestPipelineFailures:
    def test_delivery_failure_names_step(self, repo, store, tz):
        pipeline = ReportPipeline(store, EmailDelivery(FailingTransport(), SENDER), tz, now=lambda: FIXED_NOW)
        schedule = repo.create(schedule_spec())
        progress = PipelineProgress()

        with pytest.raises(ReportExecutionError) as exc_info:
            pipeline.run(schedule, progress)

        assert exc_info.value.step == "deliver"
        assert isinstance(exc_info.value.cause, DeliveryError)
        assert len(progress.attachments) == 2

    def test_render_failure_names_step(self, repo, pipeline, transport):
        schedule = repo.create(schedule_spec())
        with patch("safety_spine.scheduling.pipeline.render_reports", side_effect=RuntimeError("boom")):
            with pytest.raises(ReportExecutionError) as exc_info:
                pipeline.run(schedule)
        assert exc_info.value.step == "render"
        assert transport.sent == []

    def test_query_failure_names_step(self, repo, pipeline):
        schedule = repo.create(schedule_spec())
        with patch("safety_spine.scheduling.pipeline.collect_inspections", side_effect=RuntimeError("db")):
            with pytest.raises(ReportExecutionError) as exc_info:
                pipeline.run(schedule)
        assert exc_info.value.step == "query"

    def test_deadline_stops_before_next_step(self, repo, store, delivery, tz, transport):
        ticks = count(0, 10)
        pipeline = ReportPipeline(
            store, delivery, tz, timeout_seconds=25, now=lambda: FIXED_NOW, clock=lambda: next(ticks)
        )
        schedule = repo.create(schedule_spec())

        with pytest.raises(ReportExecutionError) as exc_info:
            pipeline.run(schedule)

        assert isinstance(exc_info.value.cause, ExecutionTimeoutError)
        assert exc_info.value.step in {s.value for s in PipelineStep}
        assert transport.sent == []


class TestDeadline:
    def test_expiry(self):
        now = [0.0]
        deadline = Deadline(5, clock=lambda: now[0])
        deadline.check(PipelineStep.QUERY, "SCH-1")
        now[0] = 5.0
        with pytest.raises(ExecutionTimeoutError):
            deadline.check(PipelineStep.RENDER, "SCH-1")
