"""Schedule repository - CRUD and run history.

Manifesto:
    Schedule persistence is a pure data concern. Keeping it here lets the
    scheduler and the ops layer share one merge-and-validate path and lets
    tests run against an in-memory connection.

┌──────────────────────────────────────────────────────────────────────────┐
│  ScheduleRepository                                                      │
│                                                                          │
│   CRUD:                                                                  │
│   ├── create(spec) → Schedule                                            │
│   ├── get(id) → Schedule | None                                          │
│   ├── list_all() / list_active() → list[Schedule]                        │
│   ├── update(id, updates) → Schedule | None                              │
│   └── delete(id) → bool                                                  │
│                                                                          │
│   Run bookkeeping:                                                       │
│   ├── record_run(id, status, at)                                         │
│   ├── start_run(schedule, trigger, window) → run id                      │
│   ├── finish_run(run_id, status, ...)                                    │
│   └── list_runs(id, limit) → list[ScheduleRun]                           │
└──────────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

import json
import logging
import secrets
from dataclasses import replace
from datetime import datetime
from typing import Any
from uuid import uuid4

from safety_spine.core.protocols import Connection
from safety_spine.core.timestamps import to_iso8601, utc_now
from safety_spine.reporting.window import DateWindow
from safety_spine.scheduling.models import (
    RunStatus,
    RunTrigger,
    Schedule,
    ScheduleCreate,
    ScheduleRun,
    ScheduleUpdate,
)
from safety_spine.scheduling.validation import validate_schedule

logger = logging.getLogger(__name__)

SCHEDULE_ID_PREFIX = "SCH-"

_SCHEDULE_COLUMNS = [
    "id",
    "name",
    "frequency",
    "day_of_week",
    "day_of_month",
    "time",
    "terminal",
    "recipients",
    "format",
    "is_active",
    "last_run_at",
    "last_run_status",
    "created_at",
    "updated_at",
]

_RUN_COLUMNS = [
    "id",
    "schedule_id",
    "schedule_name",
    "trigger",
    "started_at",
    "completed_at",
    "status",
    "failed_step",
    "error",
    "window_start",
    "window_end",
    "attachments",
]


def new_schedule_id() -> str:
    """``SCH-`` plus 8 upper-case hex characters."""
    return SCHEDULE_ID_PREFIX + secrets.token_hex(4).upper()


class ScheduleRepository:
    """Repository for report schedules and their run history.

    Example:
        >>> repo = ScheduleRepository(conn)
        >>> schedule = repo.create(ScheduleCreate(
        ...     name="Dallas weekly",
        ...     frequency="weekly",
        ...     day_of_week=1,
        ...     time="07:30",
        ...     recipients=["safety@example.com"],
        ... ))
        >>> repo.update(schedule.id, ScheduleUpdate(name="Dallas Monday")).name
        'Dallas Monday'
    """

    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    # === CRUD Operations ===

    def create(self, spec: ScheduleCreate) -> Schedule:
        """Validate and insert a new schedule.

        Raises:
            ScheduleValidationError: If the definition is unusable.
        """
        validate_schedule(spec)

        schedule_id = new_schedule_id()
        now = to_iso8601(utc_now())
        self.conn.execute(
            f"""
            INSERT INTO report_schedules ({', '.join(_SCHEDULE_COLUMNS)})
            VALUES ({', '.join('?' * len(_SCHEDULE_COLUMNS))})
            """,
            (
                schedule_id,
                spec.name.strip(),
                spec.frequency,
                spec.day_of_week,
                spec.day_of_month,
                spec.time,
                spec.location_filter or None,
                json.dumps(list(spec.recipients)),
                spec.format,
                1 if spec.is_active else 0,
                None,
                None,
                now,
                now,
            ),
        )
        self.conn.commit()
        logger.info(f"Created schedule {schedule_id} ({spec.name})")

        return self.get(schedule_id)  # type: ignore[return-value]

    def get(self, schedule_id: str) -> Schedule | None:
        """Get schedule by ID, or ``None``."""
        cursor = self.conn.execute(
            f"SELECT {', '.join(_SCHEDULE_COLUMNS)} FROM report_schedules WHERE id = ?",
            (schedule_id,),
        )
        row = cursor.fetchone()
        if not row:
            return None
        return self._row_to_schedule(row)

    def list_all(self) -> list[Schedule]:
        """All schedules, newest first."""
        cursor = self.conn.execute(
            f"SELECT {', '.join(_SCHEDULE_COLUMNS)} FROM report_schedules "
            "ORDER BY created_at DESC, rowid DESC"
        )
        return [self._row_to_schedule(row) for row in cursor.fetchall()]

    def list_active(self) -> list[Schedule]:
        """Schedules with ``is_active`` set, newest first."""
        cursor = self.conn.execute(
            f"SELECT {', '.join(_SCHEDULE_COLUMNS)} FROM report_schedules "
            "WHERE is_active = 1 ORDER BY created_at DESC, rowid DESC"
        )
        return [self._row_to_schedule(row) for row in cursor.fetchall()]

    def count_active(self) -> int:
        cursor = self.conn.execute(
            "SELECT COUNT(*) FROM report_schedules WHERE is_active = 1"
        )
        return cursor.fetchone()[0]

    def update(self, schedule_id: str, updates: ScheduleUpdate) -> Schedule | None:
        """Merge *updates* over the stored record, validate, then write.

        Returns:
            The updated Schedule, or ``None`` if the id is unknown.

        Raises:
            ScheduleValidationError: If the merged record is unusable.
        """
        current = self.get(schedule_id)
        if current is None:
            return None
        if updates.is_empty():
            return current

        merged = self.merge(current, updates)
        validate_schedule(merged)

        now = to_iso8601(utc_now())
        self.conn.execute(
            """
            UPDATE report_schedules
            SET name = ?, frequency = ?, day_of_week = ?, day_of_month = ?,
                time = ?, terminal = ?, recipients = ?, format = ?,
                is_active = ?, updated_at = ?
            WHERE id = ?
            """,
            (
                merged.name.strip(),
                merged.frequency,
                merged.day_of_week,
                merged.day_of_month,
                merged.time,
                merged.location_filter,
                json.dumps(list(merged.recipients)),
                merged.format,
                1 if merged.is_active else 0,
                now,
                schedule_id,
            ),
        )
        self.conn.commit()
        logger.info(f"Updated schedule {schedule_id}")

        return self.get(schedule_id)

    @staticmethod
    def merge(current: Schedule, updates: ScheduleUpdate) -> Schedule:
        """Apply the provided fields of *updates* to *current*."""
        changes: dict[str, Any] = {}
        for name in (
            "name",
            "frequency",
            "day_of_week",
            "day_of_month",
            "time",
            "format",
            "is_active",
        ):
            value = getattr(updates, name)
            if value is not None:
                changes[name] = value
        if updates.recipients is not None:
            changes["recipients"] = list(updates.recipients)
        if updates.clear_location_filter:
            changes["location_filter"] = None
        elif updates.location_filter is not None:
            changes["location_filter"] = updates.location_filter or None
        return replace(current, **changes)

    def delete(self, schedule_id: str) -> bool:
        """Delete a schedule. Run history is kept.

        Returns:
            True if deleted, False if not found
        """
        cursor = self.conn.execute(
            "DELETE FROM report_schedules WHERE id = ?",
            (schedule_id,),
        )
        self.conn.commit()
        deleted = cursor.rowcount > 0
        if deleted:
            logger.info(f"Deleted schedule {schedule_id}")
        return deleted

    # === Run bookkeeping ===

    def record_run(
        self,
        schedule_id: str,
        status: RunStatus | str,
        at: datetime | None = None,
    ) -> None:
        """Write ``last_run_at`` / ``last_run_status`` on the schedule."""
        status_value = status.value if isinstance(status, RunStatus) else status
        self.conn.execute(
            "UPDATE report_schedules SET last_run_at = ?, last_run_status = ? WHERE id = ?",
            (to_iso8601(at or utc_now()), status_value, schedule_id),
        )
        self.conn.commit()

    def start_run(
        self,
        schedule: Schedule,
        trigger: RunTrigger | str = RunTrigger.SCHEDULE,
        window: DateWindow | None = None,
        started_at: datetime | None = None,
    ) -> str:
        """Open a run-history row in ``running`` state.

        Returns:
            The run id
        """
        run_id = str(uuid4())
        trigger_value = trigger.value if isinstance(trigger, RunTrigger) else trigger
        self.conn.execute(
            """
            INSERT INTO report_schedule_runs (
                id, schedule_id, schedule_name, trigger, started_at, status,
                window_start, window_end
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                run_id,
                schedule.id,
                schedule.name,
                trigger_value,
                to_iso8601(started_at or utc_now()),
                RunStatus.RUNNING.value,
                window.start.isoformat() if window else None,
                window.end.isoformat() if window else None,
            ),
        )
        self.conn.commit()
        return run_id

    def finish_run(
        self,
        run_id: str,
        status: RunStatus | str,
        *,
        failed_step: str | None = None,
        error: str | None = None,
        window: DateWindow | None = None,
        attachments: list[str] | None = None,
        completed_at: datetime | None = None,
    ) -> None:
        """Close a run-history row."""
        status_value = status.value if isinstance(status, RunStatus) else status
        self.conn.execute(
            """
            UPDATE report_schedule_runs
            SET status = ?, completed_at = ?, failed_step = ?, error = ?,
                window_start = COALESCE(?, window_start),
                window_end = COALESCE(?, window_end),
                attachments = ?
            WHERE id = ?
            """,
            (
                status_value,
                to_iso8601(completed_at or utc_now()),
                failed_step,
                error,
                window.start.isoformat() if window else None,
                window.end.isoformat() if window else None,
                json.dumps(attachments or []),
                run_id,
            ),
        )
        self.conn.commit()

    def get_run(self, run_id: str) -> ScheduleRun | None:
        cursor = self.conn.execute(
            f"SELECT {', '.join(_RUN_COLUMNS)} FROM report_schedule_runs WHERE id = ?",
            (run_id,),
        )
        row = cursor.fetchone()
        if not row:
            return None
        return self._row_to_schedule_run(row)

    def list_runs(self, schedule_id: str, limit: int = 50) -> list[ScheduleRun]:
        """Run history for a schedule, newest first."""
        cursor = self.conn.execute(
            f"""
            SELECT {', '.join(_RUN_COLUMNS)} FROM report_schedule_runs
            WHERE schedule_id = ?
            ORDER BY started_at DESC, rowid DESC
            LIMIT ?
            """,
            (schedule_id, limit),
        )
        return [self._row_to_schedule_run(row) for row in cursor.fetchall()]

    # === Private Helpers ===

    def _row_to_schedule(self, row: Any) -> Schedule:
        """Convert database row to Schedule model."""
        data = dict(zip(_SCHEDULE_COLUMNS, row, strict=False))
        return Schedule(
            id=data["id"],
            name=data["name"],
            frequency=data["frequency"],
            day_of_week=data["day_of_week"],
            day_of_month=data["day_of_month"],
            time=data["time"],
            location_filter=data["terminal"],
            recipients=_load_list(data["recipients"]),
            format=data["format"],
            is_active=bool(data["is_active"]),
            last_run_at=data["last_run_at"],
            last_run_status=data["last_run_status"],
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )

    def _row_to_schedule_run(self, row: Any) -> ScheduleRun:
        """Convert database row to ScheduleRun model."""
        data = dict(zip(_RUN_COLUMNS, row, strict=False))
        data["attachments"] = _load_list(data["attachments"])
        return ScheduleRun(**data)


def _load_list(raw: str | None) -> list[str]:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning(f"Unreadable JSON list column: {raw!r}")
        return []
    return list(value) if isinstance(value, list) else []
