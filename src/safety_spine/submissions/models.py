"""Submission records as read by the reporting pipeline.

The intake layer owns the full per-form payload. Reporting only needs the
inspection checklist (item key → ``Pass`` / ``Fail`` / ``N/A``) and a few
scalar fields, so ``Submission`` exposes those as narrow typed views over
the opaque payload.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any
from zoneinfo import ZoneInfo

from safety_spine.core.timestamps import from_iso8601

INSPECTION_FORM_TYPE = "forklift-inspection"
CHECKLIST_FIELD = "inspection"


class ChecklistResult(str, Enum):
    """Result vocabulary for one checklist entry."""

    PASS = "Pass"
    FAIL = "Fail"
    NA = "N/A"


@dataclass
class Submission:
    """Form submission row (``form_submissions``)."""

    id: str = ""
    form_type: str = ""
    location: str | None = None
    submitted_by: str | None = None
    submitted_at: str = ""  # ISO-8601, UTC
    payload: dict[str, Any] = field(default_factory=dict)
    email_sent: bool = False

    @property
    def checklist(self) -> dict[str, str]:
        """Checklist mapping; empty when the payload carries none."""
        raw = self.payload.get(CHECKLIST_FIELD)
        if not isinstance(raw, dict):
            return {}
        return {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def get(self, name: str, default: Any = None) -> Any:
        """Read a top-level payload field."""
        return self.payload.get(name, default)

    @property
    def submitted_at_utc(self) -> datetime:
        return from_iso8601(self.submitted_at)

    def local_date(self, tz: ZoneInfo):
        """Calendar date of submission in *tz*."""
        return self.submitted_at_utc.astimezone(tz).date()


@dataclass
class SubmissionCreate:
    """DTO for recording a validated submission."""

    form_type: str
    payload: dict[str, Any]
    location: str | None = None
    submitted_by: str | None = None
    submitted_at: datetime | None = None  # defaults to now
