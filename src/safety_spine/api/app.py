"""
FastAPI application factory.

``create_app()`` wires middleware, routers, error handlers and the lifespan
that owns the database connection and the :class:`ReportScheduler`.

Manifesto:
    The app factory is the single composition root. The scheduler is
    started when the app starts and stopped (waiting for in-flight runs)
    when it shuts down; routers reach it only through the operation
    context.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from safety_spine import __version__
from safety_spine.api.errors import unhandled_exception_handler
from safety_spine.api.middleware import RequestIDMiddleware
from safety_spine.core.logging import get_logger
from safety_spine.core.schema import init_schema
from safety_spine.core.settings import SafetySpineSettings, get_settings
from safety_spine.core.sqlite_conn import SqliteConnection
from safety_spine.scheduling.factory import create_scheduler
from safety_spine.scheduling.service import ReportScheduler

log = get_logger("safety_spine.api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the database, start the scheduler; stop both on shutdown."""
    settings: SafetySpineSettings = app.state.settings
    log.info("safety-spine API starting", version=__version__)

    owns_conn = app.state.conn is None
    if owns_conn:
        app.state.conn = SqliteConnection(settings.database_path)
    init_schema(app.state.conn)

    if app.state.scheduler is None:
        app.state.scheduler = create_scheduler(app.state.conn, settings)
    if app.state.start_scheduler:
        app.state.scheduler.start()

    try:
        yield
    finally:
        log.info("safety-spine API shutting down")
        app.state.scheduler.stop()
        if owns_conn:
            app.state.conn.close()


def create_app(
    *,
    settings: SafetySpineSettings | None = None,
    conn: SqliteConnection | None = None,
    scheduler: ReportScheduler | None = None,
    start_scheduler: bool = True,
) -> FastAPI:
    """Build and return a fully-configured FastAPI application.

    Parameters
    ----------
    settings : SafetySpineSettings | None
        Override settings (useful for testing). Defaults to the cached
        :func:`get_settings`.
    conn, scheduler
        Pre-built collaborators; when omitted the lifespan creates them
        from *settings*.
    start_scheduler : bool
        Start trigger firing on startup. Tests that only exercise CRUD and
        manual runs can leave it off.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=__version__,
        lifespan=lifespan,
        docs_url=f"{settings.api_prefix}/docs",
        openapi_url=f"{settings.api_prefix}/openapi.json",
    )

    app.state.settings = settings
    app.state.conn = conn
    app.state.scheduler = scheduler
    app.state.start_scheduler = start_scheduler

    # ── Middleware ────────────────────────────────────────────────────
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Exception handlers ───────────────────────────────────────────
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # ── Routers ──────────────────────────────────────────────────────
    from safety_spine.api.routers import schedules, submissions

    prefix = settings.api_prefix
    app.include_router(schedules.router, prefix=prefix, tags=["schedules"])
    app.include_router(submissions.router, prefix=prefix, tags=["submissions"])

    @app.get("/health", tags=["health"])
    def health():
        """Liveness plus scheduler health."""
        scheduler_health = (
            app.state.scheduler.health().to_dict() if app.state.scheduler else None
        )
        healthy = bool(scheduler_health and scheduler_health["healthy"])
        return {
            "status": "healthy" if healthy else "degraded",
            "service": "safety-spine",
            "version": __version__,
            "scheduler": scheduler_health,
        }

    return app
