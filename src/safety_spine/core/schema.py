"""Table definitions for submissions, report schedules and run history."""

from __future__ import annotations

from safety_spine.core.protocols import Connection

SCHEMA_STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS form_submissions (
        id TEXT PRIMARY KEY,
        form_type TEXT NOT NULL,
        terminal TEXT,
        submitted_by TEXT,
        submitted_at TEXT NOT NULL,
        data TEXT NOT NULL,
        email_sent INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL DEFAULT (datetime('now'))
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_form_submissions_type_date
        ON form_submissions (form_type, submitted_at)
    """,
    """
    CREATE TABLE IF NOT EXISTS report_schedules (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        frequency TEXT NOT NULL,
        day_of_week INTEGER,
        day_of_month INTEGER,
        time TEXT NOT NULL,
        terminal TEXT,
        recipients TEXT NOT NULL,
        format TEXT NOT NULL DEFAULT 'both',
        is_active INTEGER NOT NULL DEFAULT 1,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        last_run_at TEXT,
        last_run_status TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS report_schedule_runs (
        id TEXT PRIMARY KEY,
        schedule_id TEXT NOT NULL,
        schedule_name TEXT NOT NULL,
        trigger TEXT NOT NULL,
        started_at TEXT NOT NULL,
        completed_at TEXT,
        status TEXT NOT NULL DEFAULT 'running',
        failed_step TEXT,
        error TEXT,
        window_start TEXT,
        window_end TEXT,
        attachments TEXT
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_report_schedule_runs_schedule
        ON report_schedule_runs (schedule_id, started_at)
    """,
)


def init_schema(conn: Connection) -> None:
    """Create all tables and indexes if they do not exist."""
    for statement in SCHEMA_STATEMENTS:
        conn.execute(statement)
    conn.commit()
