"""XLSX inspection report built with openpyxl.

Sheets:
    Summary           Metric / Value rows
    Failures by Item  item label, failure count, failure rate (``N%``)
    All Submissions   one row per inspection, newest first, with the
                      checklist flattened to passed / failed / N/A label lists

openpyxl stamps the document properties and every zip member with the
current time. Both are pinned to ``generated_at`` so identical input gives
identical bytes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from io import BytesIO
from zipfile import ZIP_DEFLATED, ZipFile, ZipInfo

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet
from openpyxl.writer.excel import ExcelWriter

from safety_spine.core.errors import RenderError
from safety_spine.reporting.inspection import (
    ASSET_FIELD,
    DATE_FIELD,
    DEFECTS_FIELD,
    HOUR_METER_FIELD,
    OPERATOR_FIELD,
    SAFE_TO_OPERATE_FIELD,
    SHIFT_FIELD,
    item_label,
)
from safety_spine.reporting.renderers import (
    SYSTEM_NAME,
    RenderedReport,
    ReportInput,
    attachment_filename,
)
from safety_spine.reporting.statistics import percentage
from safety_spine.submissions.models import ChecklistResult, Submission

MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

HEADER_FILL = PatternFill(start_color="1E3A5F", end_color="1E3A5F", fill_type="solid")
HEADER_FONT = Font(bold=True, color="FFFFFF")


@dataclass(frozen=True)
class ColumnDef:
    header: str
    width: int


SUMMARY_COLUMNS = [ColumnDef("Metric", 30), ColumnDef("Value", 20)]
ITEM_COLUMNS = [
    ColumnDef("Inspection Item", 40),
    ColumnDef("Failure Count", 15),
    ColumnDef("Failure Rate", 15),
]
SUBMISSION_COLUMNS = [
    ColumnDef("Date", 12),
    ColumnDef("Terminal", 12),
    ColumnDef("Forklift ID", 12),
    ColumnDef("Operator", 20),
    ColumnDef("Shift", 10),
    ColumnDef("Hour Meter", 12),
    ColumnDef("Safe to Operate", 15),
    ColumnDef("Passed Items", 50),
    ColumnDef("Failed Items", 50),
    ColumnDef("N/A Items", 30),
    ColumnDef("Defects Found", 40),
]


def _write_header(ws: Worksheet, columns: list[ColumnDef]) -> None:
    for index, column in enumerate(columns, start=1):
        cell = ws.cell(row=1, column=index, value=column.header)
        cell.fill = HEADER_FILL
        cell.font = HEADER_FONT
        cell.alignment = Alignment(horizontal="center")
        ws.column_dimensions[get_column_letter(index)].width = column.width
    ws.freeze_panes = "A2"


def _summary_sheet(ws: Worksheet, report: ReportInput) -> None:
    stats = report.statistics
    ws.title = "Summary"
    _write_header(ws, SUMMARY_COLUMNS)
    rows = [
        ("Report Period", report.window.label),
        ("Terminal", report.location_label),
        (None, None),
        ("Total Inspections", stats.total_inspections),
        ("Inspections with Failures", stats.inspections_with_failures),
        ("Total Failed Items", stats.total_failures),
        ("Pass Rate", f"{stats.pass_rate}%"),
        ("Safe to Operate - Yes", stats.safe_to_operate.yes),
        ("Safe to Operate - No", stats.safe_to_operate.no),
        (None, None),
        ("Generated at", report.generated_label),
    ]
    for row in rows:
        ws.append(row)


def _items_sheet(ws: Worksheet, report: ReportInput) -> None:
    stats = report.statistics
    _write_header(ws, ITEM_COLUMNS)
    items = sorted(stats.failures_by_item.values(), key=lambda item: item.count, reverse=True)
    for item in items:
        rate = percentage(item.count, stats.total_inspections)
        ws.append((item.label, item.count, f"{rate}%"))


def _labels(submission: Submission, result: ChecklistResult) -> str:
    labels = [item_label(k) for k, v in submission.checklist.items() if v == result.value]
    return ", ".join(labels) if labels else "None"


def _submission_row(submission: Submission) -> tuple:
    return (
        submission.get(DATE_FIELD) or submission.submitted_at[:10],
        submission.location or "",
        submission.get(ASSET_FIELD, ""),
        submission.get(OPERATOR_FIELD, ""),
        submission.get(SHIFT_FIELD, ""),
        submission.get(HOUR_METER_FIELD, ""),
        submission.get(SAFE_TO_OPERATE_FIELD, ""),
        _labels(submission, ChecklistResult.PASS),
        _labels(submission, ChecklistResult.FAIL),
        _labels(submission, ChecklistResult.NA),
        submission.get(DEFECTS_FIELD, ""),
    )


def _cell(value):
    if value is None:
        return ""
    return value if isinstance(value, int | float | str) else str(value)


def _submissions_sheet(ws: Worksheet, report: ReportInput) -> None:
    _write_header(ws, SUBMISSION_COLUMNS)
    for submission in report.submissions:
        ws.append(tuple(_cell(value) for value in _submission_row(submission)))


def _pin_archive_times(raw: bytes, stamp: datetime) -> bytes:
    """Rewrite zip members with a fixed modification time."""
    date_time = stamp.timetuple()[:6]
    out = BytesIO()
    with ZipFile(BytesIO(raw)) as source, ZipFile(out, "w", ZIP_DEFLATED) as target:
        for info in source.infolist():
            pinned = ZipInfo(info.filename, date_time=date_time)
            pinned.compress_type = ZIP_DEFLATED
            pinned.external_attr = info.external_attr
            target.writestr(pinned, source.read(info.filename))
    return out.getvalue()


def build_workbook(report: ReportInput) -> Workbook:
    """Populate the three report sheets."""
    wb = Workbook()
    _summary_sheet(wb.active, report)
    _items_sheet(wb.create_sheet("Failures by Item"), report)
    _submissions_sheet(wb.create_sheet("All Submissions"), report)
    return wb


def render_workbook(report: ReportInput) -> RenderedReport:
    """Render the XLSX report."""
    stamp = report.generated_at.astimezone(UTC).replace(tzinfo=None, microsecond=0)
    try:
        wb = build_workbook(report)
        wb.properties.creator = SYSTEM_NAME
        wb.properties.created = stamp
        wb.properties.modified = stamp

        buffer = BytesIO()
        # ExcelWriter directly: Workbook.save() overwrites ``modified`` with now
        archive = ZipFile(buffer, "w", ZIP_DEFLATED, allowZip64=True)
        ExcelWriter(wb, archive).save()
        content = _pin_archive_times(buffer.getvalue(), stamp)
    except Exception as e:
        raise RenderError(f"Workbook rendering failed: {e}", cause=e) from e

    return RenderedReport(
        filename=attachment_filename(report.report_name, report.window, "xlsx"),
        mime_type=MIME_TYPE,
        content=content,
    )
