"""PDF inspection report built with reportlab platypus.

Layout, top to bottom:

    title / period and terminal subtitle
    four summary tiles (total, with failures, failed items, pass rate)
    Safe to Operate Status
    Failures by Inspection Item      (horizontal bars, most failures first)
    Failures by Terminal
    Forklifts with Failures          (top 10)

Pages are US Letter with 50pt margins. Flowables that do not fit in the
remaining frame move to a new page; the footer (system name, generated-at,
page number) is drawn in the bottom margin of every page.
"""

from __future__ import annotations

from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_LEFT
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import (
    Flowable,
    KeepTogether,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from safety_spine.core.errors import RenderError
from safety_spine.reporting.renderers import (
    REPORT_TITLE,
    SYSTEM_NAME,
    RenderedReport,
    ReportInput,
    attachment_filename,
)

PAGE_WIDTH, PAGE_HEIGHT = letter
MARGIN = 50
CONTENT_WIDTH = PAGE_WIDTH - 2 * MARGIN
BAR_OFFSET = 220
BAR_MAX_WIDTH = 200
TOP_ASSETS = 10

NAVY = colors.HexColor("#1E3A5F")
FAIL_RED = colors.HexColor("#DC2626")
PASS_GREEN = colors.HexColor("#16A34A")
TILE_FILL = colors.HexColor("#F1F5F9")
MUTED = colors.HexColor("#64748B")

MIME_TYPE = "application/pdf"


def _styles() -> dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()
    return {
        "title": ParagraphStyle(
            "ReportTitle", parent=base["Title"], fontSize=20, leading=24,
            alignment=TA_LEFT, textColor=NAVY, spaceAfter=4,
        ),
        "subtitle": ParagraphStyle(
            "ReportSubtitle", parent=base["Normal"], fontSize=11, leading=14,
            textColor=MUTED, spaceAfter=14,
        ),
        "section": ParagraphStyle(
            "SectionHeader", parent=base["Heading2"], fontSize=13, leading=16,
            textColor=NAVY, spaceBefore=14, spaceAfter=6,
        ),
        "body": ParagraphStyle(
            "Body", parent=base["Normal"], fontSize=10, leading=14,
        ),
    }


class FailureBar(Flowable):
    """Item label and a bar scaled to the item's share of all inspections."""

    def __init__(self, label: str, count: int, total: int, height: float = 18) -> None:
        super().__init__()
        self.label = label
        self.count = count
        self.total = total
        self.width = CONTENT_WIDTH
        self.height = height

    def wrap(self, availWidth, availHeight):  # noqa: N803
        return self.width, self.height

    def draw(self) -> None:
        c = self.canv
        bar_width = self.count / self.total * BAR_MAX_WIDTH if self.total else 0
        c.setFont("Helvetica", 9)
        c.setFillColor(colors.black)
        c.drawString(0, 5, self.label)
        c.setFillColor(FAIL_RED)
        c.rect(BAR_OFFSET, 3, max(bar_width, 1), 10, stroke=0, fill=1)
        c.setFillColor(colors.black)
        c.drawString(BAR_OFFSET + bar_width + 6, 5, str(self.count))


def _summary_tiles(report: ReportInput) -> Table:
    stats = report.statistics
    labels = ["Total Inspections", "With Failures", "Total Failed Items", "Pass Rate"]
    values = [
        str(stats.total_inspections),
        str(stats.inspections_with_failures),
        str(stats.total_failures),
        f"{stats.pass_rate}%",
    ]
    table = Table([values, labels], colWidths=[CONTENT_WIDTH / 4] * 4, rowHeights=[34, 20])
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, -1), TILE_FILL),
        ("LINEAFTER", (0, 0), (-2, -1), 6, colors.white),
        ("ALIGN", (0, 0), (-1, -1), "CENTER"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("FONT", (0, 0), (-1, 0), "Helvetica-Bold", 18),
        ("FONT", (0, 1), (-1, 1), "Helvetica", 8),
        ("TEXTCOLOR", (0, 0), (0, 0), NAVY),
        ("TEXTCOLOR", (1, 0), (2, 0), FAIL_RED),
        ("TEXTCOLOR", (3, 0), (3, 0), PASS_GREEN),
        ("TEXTCOLOR", (0, 1), (-1, 1), MUTED),
    ]))
    return table


def _footer(report: ReportInput):
    def draw(canvas, doc) -> None:
        canvas.saveState()
        canvas.setFont("Helvetica", 8)
        canvas.setFillColor(MUTED)
        canvas.drawCentredString(PAGE_WIDTH / 2, MARGIN - 20, SYSTEM_NAME)
        canvas.drawString(MARGIN, MARGIN - 32, f"Generated at: {report.generated_label}")
        canvas.drawRightString(PAGE_WIDTH - MARGIN, MARGIN - 32, f"Page {doc.page}")
        canvas.restoreState()

    return draw


def build_story(report: ReportInput) -> list[Flowable]:
    """Flowables for the report body, in page order."""
    styles = _styles()
    stats = report.statistics
    if report.location_filter:
        subtitle = f"{report.window.label} | Terminal: {report.location_filter}"
    else:
        subtitle = f"{report.window.label} | All Terminals"

    story: list[Flowable] = [
        Paragraph(escape(REPORT_TITLE), styles["title"]),
        Paragraph(escape(subtitle), styles["subtitle"]),
        _summary_tiles(report),
    ]

    if stats.total_inspections == 0:
        story.append(Spacer(1, 18))
        story.append(Paragraph("No inspection data found for this period.", styles["body"]))
        return story

    story.append(KeepTogether([
        Paragraph("Safe to Operate Status", styles["section"]),
        Paragraph(
            f"Yes: {stats.safe_to_operate.yes} &nbsp;&nbsp;&nbsp; No: {stats.safe_to_operate.no}",
            styles["body"],
        ),
    ]))

    story.append(Paragraph("Failures by Inspection Item", styles["section"]))
    failing_items = stats.items_by_failures()
    if not failing_items:
        story.append(Paragraph("No failed items recorded.", styles["body"]))
    for _key, item in failing_items:
        story.append(FailureBar(item.label, item.count, stats.total_inspections))

    if stats.failures_by_location:
        story.append(Paragraph("Failures by Terminal", styles["section"]))
        by_location = sorted(stats.failures_by_location.items(), key=lambda kv: kv[1], reverse=True)
        for location, count in by_location:
            story.append(Paragraph(
                escape(f"{location}: {count} failed inspection(s)"), styles["body"]
            ))

    if stats.failures_by_asset:
        story.append(Paragraph("Forklifts with Failures", styles["section"]))
        for asset, count in stats.failures_by_asset[:TOP_ASSETS]:
            story.append(Paragraph(
                escape(f"Forklift #{asset}: {count} failed inspection(s)"), styles["body"]
            ))

    return story


def render_document(report: ReportInput) -> RenderedReport:
    """Render the PDF report."""
    buffer = BytesIO()
    try:
        doc = SimpleDocTemplate(
            buffer,
            pagesize=letter,
            leftMargin=MARGIN,
            rightMargin=MARGIN,
            topMargin=MARGIN,
            bottomMargin=MARGIN,
            title=REPORT_TITLE,
            author=SYSTEM_NAME,
            invariant=1,
        )
        footer = _footer(report)
        doc.build(build_story(report), onFirstPage=footer, onLaterPages=footer)
    except Exception as e:
        raise RenderError(f"PDF rendering failed: {e}", cause=e) from e

    return RenderedReport(
        filename=attachment_filename(report.report_name, report.window, "pdf"),
        mime_type=MIME_TYPE,
        content=buffer.getvalue(),
    )
