"""
CLI: ``safety-spine schedule``: report schedule CRUD and manual runs.
"""

from __future__ import annotations

import typer

from safety_spine.cli.utils import make_context, output_paged, output_result

app = typer.Typer(no_args_is_help=True)

_LIST_COLUMNS = ["id", "name", "frequency", "time", "location_filter", "is_active", "next_run_at", "last_run_status"]
_RUN_COLUMNS = ["id", "trigger", "started_at", "status", "failed_step", "window_start", "window_end"]


@app.command("list")
def list_schedules(
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List all report schedules."""
    from safety_spine.ops.schedules import list_schedules as _list

    ctx, _ = make_context(database)
    result = _list(ctx)
    output_paged(result, as_json=json_out, title="Schedules", columns=_LIST_COLUMNS)


@app.command("show")
def show_schedule(
    schedule_id: str = typer.Argument(..., help="Schedule ID"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Show schedule details."""
    from safety_spine.ops.requests import GetScheduleRequest
    from safety_spine.ops.schedules import get_schedule as _get

    ctx, _ = make_context(database)
    result = _get(ctx, GetScheduleRequest(schedule_id=schedule_id))
    output_result(result, as_json=json_out, title=f"Schedule: {schedule_id}")


@app.command("create")
def create_schedule(
    name: str = typer.Argument(..., help="Schedule name"),
    frequency: str = typer.Option(..., "--frequency", "-f", help="daily | weekly | monthly"),
    time: str = typer.Option(..., "--time", "-t", help="Wall-clock HH:MM"),
    recipients: list[str] = typer.Option(..., "--recipient", "-r", help="Recipient email (repeatable)"),
    report_format: str = typer.Option("both", "--format", help="document | workbook | both"),
    day_of_week: int | None = typer.Option(None, "--day-of-week", help="0=Sunday .. 6=Saturday"),
    day_of_month: int | None = typer.Option(None, "--day-of-month", help="1..28"),
    location: str | None = typer.Option(None, "--location", "-l", help="Terminal filter"),
    active: bool = typer.Option(True, "--active/--inactive"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Create a new report schedule."""
    from safety_spine.ops.requests import CreateScheduleRequest
    from safety_spine.ops.schedules import create_schedule as _create

    ctx, _ = make_context(database)
    request = CreateScheduleRequest(
        name=name,
        frequency=frequency,
        time=time,
        recipients=list(recipients),
        format=report_format,
        day_of_week=day_of_week,
        day_of_month=day_of_month,
        location_filter=location,
        is_active=active,
    )
    result = _create(ctx, request)
    output_result(result, as_json=json_out, title="Schedule created")


@app.command("update")
def update_schedule(
    schedule_id: str = typer.Argument(..., help="Schedule ID"),
    name: str | None = typer.Option(None, "--name"),
    frequency: str | None = typer.Option(None, "--frequency", "-f"),
    time: str | None = typer.Option(None, "--time", "-t"),
    recipients: list[str] | None = typer.Option(None, "--recipient", "-r", help="Replaces all recipients"),
    report_format: str | None = typer.Option(None, "--format"),
    day_of_week: int | None = typer.Option(None, "--day-of-week"),
    day_of_month: int | None = typer.Option(None, "--day-of-month"),
    location: str | None = typer.Option(None, "--location", "-l"),
    clear_location: bool = typer.Option(False, "--clear-location", help="Report on all terminals"),
    active: bool | None = typer.Option(None, "--active/--inactive"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Update fields of an existing schedule."""
    from safety_spine.ops.requests import UpdateScheduleRequest
    from safety_spine.ops.schedules import update_schedule as _update

    ctx, _ = make_context(database)
    request = UpdateScheduleRequest(
        schedule_id=schedule_id,
        name=name,
        frequency=frequency,
        time=time,
        recipients=list(recipients) if recipients else None,
        format=report_format,
        day_of_week=day_of_week,
        day_of_month=day_of_month,
        location_filter=location,
        clear_location_filter=clear_location,
        is_active=active,
    )
    result = _update(ctx, request)
    output_result(result, as_json=json_out, title="Schedule updated")


@app.command("delete")
def delete_schedule(
    schedule_id: str = typer.Argument(..., help="Schedule ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    database: str | None = typer.Option(None, "--database", "-d"),
) -> None:
    """Delete a schedule."""
    from safety_spine.ops.requests import DeleteScheduleRequest
    from safety_spine.ops.schedules import delete_schedule as _delete

    if not yes:
        typer.confirm(f"Delete schedule {schedule_id}?", abort=True)
    ctx, _ = make_context(database)
    result = _delete(ctx, DeleteScheduleRequest(schedule_id=schedule_id))
    output_result(result, title=f"Schedule {schedule_id} deleted")


@app.command("run")
def run_schedule(
    schedule_id: str = typer.Argument(..., help="Schedule ID"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Run a schedule now and email its report."""
    from safety_spine.ops.requests import RunScheduleRequest
    from safety_spine.ops.schedules import run_schedule_now

    ctx, _ = make_context(database, with_scheduler=True)
    result = run_schedule_now(ctx, RunScheduleRequest(schedule_id=schedule_id))
    output_result(result, as_json=json_out, title=f"Run: {schedule_id}")
    if result.data is not None and result.data.last_run_status != "success":
        raise typer.Exit(code=1)


@app.command("runs")
def list_runs(
    schedule_id: str = typer.Argument(..., help="Schedule ID"),
    limit: int = typer.Option(20, "--limit", "-n"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Show run history for a schedule, newest first."""
    from safety_spine.ops.requests import ListScheduleRunsRequest
    from safety_spine.ops.schedules import list_schedule_runs

    ctx, _ = make_context(database)
    result = list_schedule_runs(ctx, ListScheduleRunsRequest(schedule_id=schedule_id, limit=limit))
    output_paged(result, as_json=json_out, title=f"Runs: {schedule_id}", columns=_RUN_COLUMNS)
