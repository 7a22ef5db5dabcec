"""Tests for safety_spine.delivery.content."""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from safety_spine.delivery.content import report_body, report_subject
from safety_spine.reporting.renderers import ReportInput
from safety_spine.reporting.statistics import compute_statistics
from safety_spine.reporting.window import DateWindow
from safety_spine.submissions.models import Submission


def _report(submissions, location=None) -> ReportInput:
    return ReportInput(
        submissions=submissions,
        statistics=compute_statistics(submissions),
        window=DateWindow(date(2026, 10, 12), date(2026, 10, 19)),
        generated_at=datetime(2026, 10, 19, 9, 0, tzinfo=ZoneInfo("America/Chicago")),
        location_filter=location,
    )


class TestContent:
    def test_subject(self):
        assert report_subject("Dallas weekly") == (
            "[Scheduled Report] Forklift Inspection Report - Dallas weekly"
        )

    def test_body_with_data(self):
        subs = [
            Submission(payload={"inspection": {"brakes": "Fail"}, "safeToOperate": "No"}),
            Submission(payload={"inspection": {"brakes": "Pass"}, "safeToOperate": "Yes"}),
        ]
        body = report_body("Dallas weekly", _report(subs, "Dallas"), attachment_count=2)

        assert "Report Period: 2026-10-12 to 2026-10-19" in body
        assert "Terminal: Dallas" in body
        assert "Total Inspections: 2" in body
        assert "Pass Rate: 50%" in body
        assert "- Yes: 1" in body
        assert "See attached report(s) for full details." in body
        assert "Logistics Safety Management System" in body

    def test_body_without_data(self):
        body = report_body("Nightly", _report([]), attachment_count=2)
        assert "Terminal: All Terminals" in body
        assert "No inspection data found for this period." in body
