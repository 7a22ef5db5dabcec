"""Fake email transports, fixed clock values and data factories."""

from __future__ import annotations

import threading
from datetime import UTC, datetime
from typing import Any
from zoneinfo import ZoneInfo

from safety_spine.core.errors import DeliveryError
from safety_spine.scheduling.models import ScheduleCreate

REFERENCE_TZ = ZoneInfo("America/Chicago")

# 09:00 in Chicago on 2026-10-19
FIXED_NOW = datetime(2026, 10, 19, 14, 0, tzinfo=UTC)

SENDER = "reports@test.local"


class RecordingTransport:
    """Keeps every envelope it is given."""

    name = "recording"

    def __init__(self) -> None:
        self.sent: list[dict[str, Any]] = []
        self._lock = threading.Lock()

    def send(self, sender: str, recipients: list[str], raw_message: bytes) -> str | None:
        with self._lock:
            self.sent.append({"sender": sender, "recipients": list(recipients), "raw": raw_message})
            return f"msg-{len(self.sent)}"


class FailingTransport:
    """Every send fails the way a refused relay does."""

    name = "failing"

    def __init__(self, message: str = "relay refused connection") -> None:
        self.message = message
        self.attempts = 0

    def send(self, sender: str, recipients: list[str], raw_message: bytes) -> str | None:
        self.attempts += 1
        raise DeliveryError(self.message)


class BlockingTransport(RecordingTransport):
    """Blocks inside ``send`` until ``release`` is set."""

    name = "blocking"

    def __init__(self) -> None:
        super().__init__()
        self.entered = threading.Event()
        self.release = threading.Event()

    def send(self, sender: str, recipients: list[str], raw_message: bytes) -> str | None:
        self.entered.set()
        self.release.wait(timeout=10)
        return super().send(sender, recipients, raw_message)


def schedule_spec(**overrides: Any) -> ScheduleCreate:
    """A valid daily schedule definition with optional overrides."""
    fields: dict[str, Any] = {
        "name": "Morning Safety",
        "frequency": "daily",
        "time": "08:00",
        "recipients": ["ops@example.com"],
        "format": "both",
    }
    fields.update(overrides)
    return ScheduleCreate(**fields)


def inspection_payload(
    checklist: dict[str, str],
    *,
    asset: str = "FL-01",
    safe: str | None = "Yes",
    operator: str = "J. Rivera",
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "inspection": dict(checklist),
        "forkliftId": asset,
        "operatorName": operator,
        "shift": "Day",
        "hourMeter": "1234",
        "date": "2026-10-19",
    }
    if safe is not None:
        payload["safeToOperate"] = safe
    return payload
