"""Report renderers.

Both renderers are pure functions of a ``ReportInput`` and return a
``RenderedReport``. The only wall-clock value either embeds is
``ReportInput.generated_at``, shown in a labelled "Generated at" region, so
identical input yields byte-identical output.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from safety_spine.reporting.statistics import StatisticsSummary
from safety_spine.reporting.window import DateWindow
from safety_spine.submissions.models import Submission

REPORT_NAME = "Forklift_Inspection_Report"
REPORT_TITLE = "Forklift Inspection Report"
SYSTEM_NAME = "Logistics Safety Management System"


class ReportFormat(str, Enum):
    """Attachment formats a schedule can request."""

    DOCUMENT = "document"
    WORKBOOK = "workbook"
    BOTH = "both"

    def outputs(self) -> list[ReportFormat]:
        """Concrete formats to render, document first."""
        if self is ReportFormat.BOTH:
            return [ReportFormat.DOCUMENT, ReportFormat.WORKBOOK]
        return [self]


@dataclass(frozen=True)
class ReportInput:
    """Everything a renderer needs."""

    submissions: list[Submission]
    statistics: StatisticsSummary
    window: DateWindow
    generated_at: datetime
    location_filter: str | None = None
    report_name: str = REPORT_NAME

    @property
    def location_label(self) -> str:
        return self.location_filter or "All Terminals"

    @property
    def generated_label(self) -> str:
        return self.generated_at.strftime("%Y-%m-%d %H:%M %Z").strip()


@dataclass(frozen=True)
class RenderedReport:
    """One rendered attachment."""

    filename: str
    mime_type: str
    content: bytes


def attachment_filename(report_name: str, window: DateWindow, extension: str) -> str:
    """``<ReportName>_<start>_to_<end>.<ext>`` with ISO calendar dates."""
    return f"{report_name}_{window.start.isoformat()}_to_{window.end.isoformat()}.{extension}"


def get_renderer(fmt: ReportFormat) -> Callable[[ReportInput], RenderedReport]:
    """Renderer function for a concrete format."""
    if fmt is ReportFormat.DOCUMENT:
        from safety_spine.reporting.renderers.document import render_document

        return render_document
    if fmt is ReportFormat.WORKBOOK:
        from safety_spine.reporting.renderers.workbook import render_workbook

        return render_workbook
    raise ValueError(f"No single renderer for format: {fmt.value}")


def render_reports(fmt: ReportFormat, report: ReportInput) -> list[RenderedReport]:
    """Render every output *fmt* asks for."""
    return [get_renderer(output)(report) for output in fmt.outputs()]


__all__ = [
    "REPORT_NAME",
    "REPORT_TITLE",
    "SYSTEM_NAME",
    "ReportFormat",
    "ReportInput",
    "RenderedReport",
    "attachment_filename",
    "get_renderer",
    "render_reports",
]
