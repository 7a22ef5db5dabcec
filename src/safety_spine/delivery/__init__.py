"""Report email delivery: MIME assembly, override policy, transports."""

from safety_spine.delivery.adapter import EmailDelivery
from safety_spine.delivery.content import report_body, report_subject
from safety_spine.delivery.protocol import Attachment, DeliveryResult, EmailTransport
from safety_spine.delivery.transports import (
    LogTransport,
    SesTransport,
    SmtpTransport,
    create_transport,
)

__all__ = [
    "Attachment",
    "DeliveryResult",
    "EmailDelivery",
    "EmailTransport",
    "LogTransport",
    "SesTransport",
    "SmtpTransport",
    "create_transport",
    "report_body",
    "report_subject",
]
