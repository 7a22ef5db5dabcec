"""
Ad-hoc report operations.

Renders the forklift inspection report for an explicit date range without
emailing it; used by ``safety-spine report render``.
"""

from __future__ import annotations

from safety_spine.core.logging import get_logger
from safety_spine.core.timestamps import utc_now
from safety_spine.ops.context import OperationContext
from safety_spine.ops.requests import RenderReportRequest
from safety_spine.ops.result import VALIDATION_FAILED, OperationResult, start_timer
from safety_spine.reporting.renderers import ReportFormat, ReportInput, RenderedReport, render_reports
from safety_spine.reporting.statistics import collect_inspections
from safety_spine.reporting.window import DateWindow
from safety_spine.submissions.store import SubmissionStore

logger = get_logger(__name__)


def render_report(
    ctx: OperationContext,
    request: RenderReportRequest,
) -> OperationResult[list[RenderedReport]]:
    """Render the requested formats for ``[start, end]``."""
    timer = start_timer()

    try:
        fmt = ReportFormat(request.format)
    except ValueError:
        return OperationResult.fail(
            VALIDATION_FAILED,
            f"format must be one of {[f.value for f in ReportFormat]}",
            details={"field": "format"},
            elapsed_ms=timer.elapsed_ms,
        )
    if request.start is None or request.end is None:
        return OperationResult.fail(
            VALIDATION_FAILED,
            "start and end are required",
            details={"field": "start" if request.start is None else "end"},
            elapsed_ms=timer.elapsed_ms,
        )
    if request.start > request.end:
        return OperationResult.fail(
            VALIDATION_FAILED,
            f"start {request.start} is after end {request.end}",
            details={"field": "start"},
            elapsed_ms=timer.elapsed_ms,
        )

    tz = ctx.settings.tz
    location = request.location_filter or None
    window = DateWindow(request.start, request.end)
    try:
        aggregate = collect_inspections(SubmissionStore(ctx.conn, tz), window, location)
        rendered = render_reports(
            fmt,
            ReportInput(
                submissions=aggregate.submissions,
                statistics=aggregate.statistics,
                window=window,
                generated_at=utc_now().astimezone(tz),
                location_filter=location,
            ),
        )
    except Exception as exc:
        logger.exception("op_failed", op="render_report", error=str(exc))
        return OperationResult.from_exception(exc, elapsed_ms=timer.elapsed_ms)

    logger.info("report_rendered", window=window.label, files=[r.filename for r in rendered])
    return OperationResult.ok(rendered, elapsed_ms=timer.elapsed_ms)
