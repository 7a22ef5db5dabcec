"""Subject and plain-text body of scheduled report emails."""

from __future__ import annotations

from safety_spine.reporting.renderers import REPORT_TITLE, SYSTEM_NAME, ReportInput

SUBJECT_PREFIX = "[Scheduled Report]"


def report_subject(schedule_name: str) -> str:
    return f"{SUBJECT_PREFIX} {REPORT_TITLE} - {schedule_name}"


def report_body(schedule_name: str, report: ReportInput, attachment_count: int) -> str:
    """Text body: header block, SUMMARY block, closing line."""
    stats = report.statistics
    if attachment_count and stats.total_inspections:
        closing = "See attached report(s) for full details."
    else:
        closing = "No inspection data found for this period."

    lines = [
        f"SCHEDULED {REPORT_TITLE.upper()}",
        "=" * 37,
        "",
        f"Report Name: {schedule_name}",
        f"Report Period: {report.window.label}",
        f"Terminal: {report.location_label}",
        f"Generated: {report.generated_label}",
        "",
        "SUMMARY",
        "-------",
        f"Total Inspections: {stats.total_inspections}",
        f"Inspections with Failures: {stats.inspections_with_failures}",
        f"Total Failed Items: {stats.total_failures}",
        f"Pass Rate: {stats.pass_rate}%",
        "",
        "Safe to Operate:",
        f"- Yes: {stats.safe_to_operate.yes}",
        f"- No: {stats.safe_to_operate.no}",
        "",
        closing,
        "",
        "---",
        f"This is an automated report from the {SYSTEM_NAME}.",
    ]
    return "\n".join(lines) + "\n"
