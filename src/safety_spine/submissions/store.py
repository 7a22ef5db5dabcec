"""Submission store - append-only access to ``form_submissions``.

Reporting queries by form type, optional location and an inclusive range of
calendar dates. Timestamps are stored in UTC, but the range is expressed in
reference-timezone dates, so SQLite narrows the candidates by UTC date (one
day of slack on each side) and the exact calendar-date comparison is done
here after conversion to the reference timezone.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any
from uuid import uuid4
from zoneinfo import ZoneInfo

from safety_spine.core.errors import StorageError
from safety_spine.core.protocols import Connection
from safety_spine.core.timestamps import to_iso8601, utc_now
from safety_spine.submissions.models import Submission, SubmissionCreate

logger = logging.getLogger(__name__)

_COLUMNS = [
    "id",
    "form_type",
    "terminal",
    "submitted_by",
    "submitted_at",
    "data",
    "email_sent",
]
_SELECT = f"SELECT {', '.join(_COLUMNS)} FROM form_submissions"


class SubmissionStore:
    """Read and append submissions.

    Example:
        >>> store = SubmissionStore(conn, timezone=ZoneInfo("America/Chicago"))
        >>> rows = store.find(
        ...     "forklift-inspection",
        ...     location="DAL",
        ...     date_start=date(2026, 10, 12),
        ...     date_end=date(2026, 10, 19),
        ... )
    """

    def __init__(self, conn: Connection, timezone: ZoneInfo) -> None:
        self.conn = conn
        self.timezone = timezone

    def add(self, spec: SubmissionCreate) -> Submission:
        """Append a submission and return the stored record."""
        submission_id = str(uuid4())
        submitted_at = to_iso8601(spec.submitted_at or utc_now())
        try:
            self.conn.execute(
                """
                INSERT INTO form_submissions (
                    id, form_type, terminal, submitted_by, submitted_at, data
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    submission_id,
                    spec.form_type,
                    spec.location,
                    spec.submitted_by,
                    submitted_at,
                    json.dumps(spec.payload),
                ),
            )
            self.conn.commit()
        except Exception as e:
            raise StorageError(f"Failed to store submission: {e}", cause=e) from e
        return self.get(submission_id)  # type: ignore[return-value]

    def get(self, submission_id: str) -> Submission | None:
        cursor = self.conn.execute(f"{_SELECT} WHERE id = ?", (submission_id,))
        row = cursor.fetchone()
        if not row:
            return None
        return self._row_to_submission(row)

    def find(
        self,
        form_type: str,
        location: str | None = None,
        date_start: date | None = None,
        date_end: date | None = None,
    ) -> list[Submission]:
        """Submissions of *form_type* within the inclusive date range.

        Dates are compared as calendar dates in the store's timezone. The
        result order is unspecified.
        """
        clauses = ["form_type = ?"]
        params: list[Any] = [form_type]
        if location:
            clauses.append("terminal = ?")
            params.append(location)
        if date_start is not None:
            clauses.append("date(submitted_at) >= date(?, '-1 day')")
            params.append(date_start.isoformat())
        if date_end is not None:
            clauses.append("date(submitted_at) <= date(?, '+1 day')")
            params.append(date_end.isoformat())

        try:
            cursor = self.conn.execute(
                f"{_SELECT} WHERE {' AND '.join(clauses)}", tuple(params)
            )
            rows = cursor.fetchall()
        except Exception as e:
            raise StorageError(f"Submission query failed: {e}", cause=e) from e

        results = []
        for row in rows:
            submission = self._row_to_submission(row)
            local = submission.local_date(self.timezone)
            if date_start is not None and local < date_start:
                continue
            if date_end is not None and local > date_end:
                continue
            results.append(submission)

        logger.debug(
            f"find({form_type}, location={location}, {date_start}..{date_end}) "
            f"-> {len(results)} submission(s)"
        )
        return results

    def list_recent(
        self,
        *,
        form_type: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[Submission], int]:
        """Newest-first page of submissions plus the total count."""
        where = ""
        params: tuple = ()
        if form_type:
            where = " WHERE form_type = ?"
            params = (form_type,)
        total = self.conn.execute(
            f"SELECT COUNT(*) FROM form_submissions{where}", params
        ).fetchone()[0]
        cursor = self.conn.execute(
            f"{_SELECT}{where} ORDER BY submitted_at DESC LIMIT ? OFFSET ?",
            params + (limit, offset),
        )
        return [self._row_to_submission(r) for r in cursor.fetchall()], total

    def _row_to_submission(self, row: Any) -> Submission:
        data = dict(zip(_COLUMNS, row, strict=False))
        try:
            payload = json.loads(data["data"]) if data["data"] else {}
        except json.JSONDecodeError:
            logger.warning(f"Submission {data['id']} has an unreadable payload")
            payload = {}
        return Submission(
            id=data["id"],
            form_type=data["form_type"],
            location=data["terminal"],
            submitted_by=data["submitted_by"],
            submitted_at=data["submitted_at"],
            payload=payload if isinstance(payload, dict) else {},
            email_sent=bool(data["email_sent"]),
        )
