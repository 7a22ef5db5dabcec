"""Tests for safety_spine.ops.submissions and safety_spine.ops.reports."""

from __future__ import annotations

from datetime import UTC, date, datetime

from safety_spine.ops.reports import render_report
from safety_spine.ops.requests import ListSubmissionsRequest, RecordSubmissionRequest, RenderReportRequest
from safety_spine.ops.submissions import list_submissions, record_submission


def _record(ctx, **overrides):
    fields = {
        "form_type": "forklift-inspection",
        "payload": {"inspection": {"brakes": "Fail"}, "forkliftId": "FL-3", "safeToOperate": "No"},
        "location": "Dallas",
        "submitted_by": "J. Rivera",
        "submitted_at": datetime(2026, 10, 19, 13, 0, tzinfo=UTC),
    }
    fields.update(overrides)
    return record_submission(ctx, RecordSubmissionRequest(**fields))


class TestRecordSubmission:
    def test_record(self, ctx):
        result = _record(ctx)
        assert result.success
        assert result.data.location == "Dallas"
        assert result.data.payload["forkliftId"] == "FL-3"

    def test_form_type_required(self, ctx):
        assert _record(ctx, form_type="").error.code == "VALIDATION_FAILED"

    def test_payload_must_be_mapping(self, ctx):
        assert _record(ctx, payload=["x"]).error.code == "VALIDATION_FAILED"


class TestListSubmissions:
    def test_paging(self, ctx):
        for _ in range(3):
            _record(ctx)
        _record(ctx, form_type="incident")

        page = list_submissions(ctx, ListSubmissionsRequest(form_type="forklift-inspection", limit=2))

        assert page.success
        assert page.total == 3
        assert len(page.data) == 2
        assert page.has_more

    def test_defaults(self, ctx):
        assert list_submissions(ctx).total == 0


class TestRenderReport:
    def test_renders_both_formats(self, ctx):
        _record(ctx)
        result = render_report(ctx, RenderReportRequest(start=date(2026, 10, 19), end=date(2026, 10, 19)))

        assert result.success
        assert [r.filename for r in result.data] == [
            "Forklift_Inspection_Report_2026-10-19_to_2026-10-19.pdf",
            "Forklift_Inspection_Report_2026-10-19_to_2026-10-19.xlsx",
        ]

    def test_rejects_reversed_range(self, ctx):
        result = render_report(ctx, RenderReportRequest(start=date(2026, 10, 20), end=date(2026, 10, 19)))
        assert result.error.code == "VALIDATION_FAILED"

    def test_rejects_unknown_format(self, ctx):
        result = render_report(
            ctx, RenderReportRequest(start=date(2026, 10, 19), end=date(2026, 10, 19), format="csv")
        )
        assert result.error.details["field"] == "format"
