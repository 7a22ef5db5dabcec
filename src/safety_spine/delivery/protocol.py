"""Delivery contracts: attachments, results and the transport protocol."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol, runtime_checkable

from safety_spine.core.timestamps import utc_now


@dataclass(frozen=True)
class Attachment:
    """Binary file carried by a report email."""

    filename: str
    mime_type: str
    content: bytes


@dataclass
class DeliveryResult:
    """Outcome of one ``deliver`` call.

    ``recipients`` are the addresses the caller asked for; ``delivered_to``
    are the addresses the transport was actually given (they differ when an
    override is configured).
    """

    transport: str
    success: bool
    recipients: list[str] = field(default_factory=list)
    delivered_to: list[str] = field(default_factory=list)
    message_id: str | None = None
    error: Exception | None = None
    delivered_at: datetime = field(default_factory=utc_now)

    @classmethod
    def ok(
        cls,
        transport: str,
        recipients: list[str],
        delivered_to: list[str],
        message_id: str | None = None,
    ) -> DeliveryResult:
        return cls(
            transport=transport,
            success=True,
            recipients=list(recipients),
            delivered_to=list(delivered_to),
            message_id=message_id,
        )

    @classmethod
    def fail(cls, transport: str, recipients: list[str], error: Exception) -> DeliveryResult:
        return cls(transport=transport, success=False, recipients=list(recipients), error=error)


@runtime_checkable
class EmailTransport(Protocol):
    """Sends an already-encoded MIME message.

    Implementations raise :class:`~safety_spine.core.errors.DeliveryError`
    on failure and return a provider message id (or ``None``) on success.
    """

    name: str

    def send(self, sender: str, recipients: list[str], raw_message: bytes) -> str | None:
        ...
