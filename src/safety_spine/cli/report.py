"""
CLI: ``safety-spine report``: render a report for a date range to disk.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import typer

from safety_spine.cli.utils import console, make_context, output_result

app = typer.Typer(no_args_is_help=True)


@app.command("render")
def render(
    start: datetime = typer.Option(..., "--start", formats=["%Y-%m-%d"], help="First day (inclusive)"),
    end: datetime = typer.Option(..., "--end", formats=["%Y-%m-%d"], help="Last day (inclusive)"),
    location: str | None = typer.Option(None, "--location", "-l", help="Terminal filter"),
    report_format: str = typer.Option("both", "--format", help="document | workbook | both"),
    out_dir: Path = typer.Option(Path("."), "--out-dir", "-o", file_okay=False, help="Output directory"),
    database: str | None = typer.Option(None, "--database", "-d"),
) -> None:
    """Render the forklift inspection report without emailing it."""
    from safety_spine.ops.reports import render_report
    from safety_spine.ops.requests import RenderReportRequest

    ctx, _ = make_context(database)
    result = render_report(
        ctx,
        RenderReportRequest(
            start=start.date(),
            end=end.date(),
            location_filter=location,
            format=report_format,
        ),
    )
    if not result.success:
        output_result(result)
        return

    out_dir.mkdir(parents=True, exist_ok=True)
    for rendered in result.data:
        path = out_dir / rendered.filename
        path.write_bytes(rendered.content)
        console.print(f"[green]Wrote[/green] {path} ({len(rendered.content)} bytes)")
