"""
Request-scoped context for operations.

Every operation function receives an :class:`OperationContext` as its first
argument. Besides the connection it carries the live
:class:`~safety_spine.scheduling.service.ReportScheduler`, so schedule
writes can keep the trigger set in step with the registry.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from safety_spine.core.protocols import Connection
from safety_spine.core.settings import SafetySpineSettings, get_settings

if TYPE_CHECKING:
    from safety_spine.scheduling.service import ReportScheduler


@dataclass
class OperationContext:
    """Context passed to every operation function.

    Attributes:
        conn: Database connection satisfying the ``Connection`` protocol.
        scheduler: Scheduler whose triggers follow schedule writes. ``None``
            for callers (such as one-shot CLI commands) that only touch the
            registry.
        settings: Process settings (timezone, email, timeouts).
        request_id: Unique ID for this invocation (auto-generated).
        caller: Origin of the request: ``"api"``, ``"cli"`` or ``"sdk"``.
        metadata: Arbitrary key/value pairs forwarded to logging.
    """

    conn: Connection
    scheduler: ReportScheduler | None = None
    settings: SafetySpineSettings = field(default_factory=get_settings)
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    caller: str = "sdk"
    metadata: dict[str, Any] = field(default_factory=dict)
