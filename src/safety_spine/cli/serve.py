"""
CLI: ``safety-spine serve``: start the API server (and its scheduler).
"""

from __future__ import annotations

import typer
import uvicorn

from safety_spine.cli.utils import console

app = typer.Typer(no_args_is_help=True)


@app.command("start")
def start(
    host: str | None = typer.Option(None, "--host", "-h", help="Bind address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on changes"),
    log_level: str = typer.Option("info", "--log-level"),
) -> None:
    """Start the safety-spine REST API server.

    Runs a single worker process: the report scheduler lives in-process and
    several workers would each fire every trigger.
    """
    from safety_spine.core.logging import configure_logging
    from safety_spine.core.settings import get_settings

    settings = get_settings()
    configure_logging(level=settings.log_level)
    host = host or settings.host
    port = port or settings.port

    console.print(f"[bold green]Starting safety-spine API[/bold green] on {host}:{port}")
    uvicorn.run(
        "safety_spine.api:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        workers=1,
        log_level=log_level,
    )
