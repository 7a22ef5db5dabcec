"""Email delivery adapter.

``EmailDelivery`` is the single hand-off point between the report pipeline
and an email transport. It assembles one multipart message per call and
applies the global override policy: when ``override`` is set, the send goes
to the override address only and a warning is logged. The caller sees the
same success/failure contract either way.

Example:
    >>> delivery = EmailDelivery(LogTransport(), sender="reports@example.com")
    >>> result = delivery.deliver(["a@x.com"], "Subject", "Body", [])
    >>> result.success
    True
"""

from __future__ import annotations

import logging

from safety_spine.core.errors import DeliveryError
from safety_spine.delivery.mime import build_message
from safety_spine.delivery.protocol import Attachment, DeliveryResult, EmailTransport

logger = logging.getLogger(__name__)


class EmailDelivery:
    """Sends report emails through an :class:`EmailTransport`."""

    def __init__(
        self,
        transport: EmailTransport,
        sender: str,
        override: str | None = None,
    ) -> None:
        self.transport = transport
        self.sender = sender
        self.override = override or None

    def resolve_recipients(self, recipients: list[str]) -> list[str]:
        """Addresses the transport will actually receive."""
        if self.override:
            return [self.override]
        return list(recipients)

    def deliver(
        self,
        recipients: list[str],
        subject: str,
        body: str,
        attachments: list[Attachment],
    ) -> DeliveryResult:
        """Send one message with every attachment to every recipient.

        Never raises for transport failures; they come back as
        ``DeliveryResult.fail``.
        """
        name = self.transport.name
        if not recipients:
            return DeliveryResult.fail(name, [], DeliveryError("No recipients"))

        final = self.resolve_recipients(recipients)
        if final != list(recipients):
            logger.warning(f"[EMAIL OVERRIDE] Redirecting from {list(recipients)} to {final}")

        message = build_message(self.sender, final, subject, body, attachments)
        try:
            message_id = self.transport.send(self.sender, final, message.as_bytes())
        except DeliveryError as e:
            logger.error(f"Report email to {final} failed via {name}: {e}")
            return DeliveryResult.fail(name, recipients, e)

        logger.info(
            f"Report email sent via {name} to {', '.join(final)} "
            f"({len(attachments)} attachment(s))"
        )
        return DeliveryResult.ok(name, recipients, final, message_id=message_id)
