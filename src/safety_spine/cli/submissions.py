"""
CLI: ``safety-spine submissions``: record and list form submissions.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

import typer

from safety_spine.cli.utils import err_console, make_context, output_paged, output_result

app = typer.Typer(no_args_is_help=True)

_COLUMNS = ["id", "form_type", "location", "submitted_by", "submitted_at"]


def _load_payload(payload: str | None, payload_file: Path | None) -> dict:
    raw = payload_file.read_text(encoding="utf-8") if payload_file else (payload or "{}")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        err_console.print(f"[bold red]Error[/bold red]: payload is not valid JSON: {e}")
        raise typer.Exit(code=1) from e
    if not isinstance(data, dict):
        err_console.print("[bold red]Error[/bold red]: payload must be a JSON object")
        raise typer.Exit(code=1)
    return data


@app.command("add")
def add_submission(
    form_type: str = typer.Argument(..., help="Form type, e.g. forklift_inspection"),
    payload: str | None = typer.Option(None, "--payload", help="Form answers as a JSON object"),
    payload_file: Path | None = typer.Option(
        None, "--payload-file", exists=True, dir_okay=False, help="Read the JSON payload from a file"
    ),
    location: str | None = typer.Option(None, "--location", "-l", help="Terminal"),
    submitted_by: str | None = typer.Option(None, "--by", help="Submitter"),
    submitted_at: datetime | None = typer.Option(None, "--at", help="Submission time (default: now)"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Record a form submission."""
    from safety_spine.ops.requests import RecordSubmissionRequest
    from safety_spine.ops.submissions import record_submission

    data = _load_payload(payload, payload_file)
    ctx, _ = make_context(database)
    request = RecordSubmissionRequest(
        form_type=form_type,
        payload=data,
        location=location,
        submitted_by=submitted_by,
        submitted_at=submitted_at,
    )
    result = record_submission(ctx, request)
    output_result(result, as_json=json_out, title="Submission recorded")


@app.command("list")
def list_submissions(
    form_type: str | None = typer.Option(None, "--form-type", "-t"),
    limit: int = typer.Option(50, "--limit", "-n"),
    offset: int = typer.Option(0, "--offset"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List submissions, newest first."""
    from safety_spine.ops.requests import ListSubmissionsRequest
    from safety_spine.ops.submissions import list_submissions as _list

    ctx, _ = make_context(database)
    result = _list(ctx, ListSubmissionsRequest(form_type=form_type, limit=limit, offset=offset))
    output_paged(result, as_json=json_out, title="Submissions", columns=_COLUMNS)
