"""
Root Typer application for the safety-spine CLI.

Sub-commands import their operations lazily so that ``--help`` stays fast.
"""

from __future__ import annotations

import typer
from typer import Typer

app = Typer(
    name="safety-spine",
    help="safety-spine: scheduled forklift inspection reports.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from safety_spine import __version__

        typer.echo(f"safety-spine {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at INFO level."),
) -> None:
    """safety-spine CLI: manage report schedules, submissions and the API server."""
    from safety_spine.core.logging import configure_logging

    configure_logging(
        level="INFO" if verbose else "WARNING", json_format=False, cache_loggers=False
    )


# ── Sub-command registration ─────────────────────────────────────────────

from safety_spine.cli.report import app as report_app  # noqa: E402
from safety_spine.cli.schedule import app as sched_app  # noqa: E402
from safety_spine.cli.serve import app as serve_app  # noqa: E402
from safety_spine.cli.submissions import app as subs_app  # noqa: E402

app.add_typer(sched_app, name="schedule", help="Report schedule management.")
app.add_typer(subs_app, name="submissions", help="Form submission intake.")
app.add_typer(report_app, name="report", help="Ad-hoc report rendering.")
app.add_typer(serve_app, name="serve", help="Start the API server.")


if __name__ == "__main__":
    app()
