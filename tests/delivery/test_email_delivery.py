"""Tests for safety_spine.delivery.adapter.EmailDelivery."""

from __future__ import annotations

import logging
from email import message_from_bytes

from _support.fakes import SENDER, FailingTransport, RecordingTransport
from safety_spine.core.errors import DeliveryError
from safety_spine.delivery import Attachment, EmailDelivery

PDF = Attachment("Report.pdf", "application/pdf", b"%PDF-1.4 test")
XLSX = Attachment(
    "Report.xlsx",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    b"PK\x03\x04 test",
)


class TestDeliver:
    def test_sends_to_every_recipient(self):
        transport = RecordingTransport()
        delivery = EmailDelivery(transport, sender=SENDER)

        result = delivery.deliver(["a@x.com", "b@x.com"], "Subject", "Body", [PDF, XLSX])

        assert result.success
        assert result.transport == "recording"
        assert result.message_id == "msg-1"
        assert result.delivered_to == ["a@x.com", "b@x.com"]
        assert transport.sent[0]["recipients"] == ["a@x.com", "b@x.com"]
        assert transport.sent[0]["sender"] == SENDER

    def test_message_carries_attachments(self):
        transport = RecordingTransport()
        EmailDelivery(transport, sender=SENDER).deliver(["a@x.com"], "Weekly", "Body text", [PDF, XLSX])

        msg = message_from_bytes(transport.sent[0]["raw"])
        assert msg["Subject"] == "Weekly"
        names = [part.get_filename() for part in msg.walk() if part.get_filename()]
        assert names == ["Report.pdf", "Report.xlsx"]
        pdf_part = next(p for p in msg.walk() if p.get_filename() == "Report.pdf")
        assert pdf_part.get_payload(decode=True) == PDF.content

    def test_no_recipients_fails_without_sending(self):
        transport = RecordingTransport()
        result = EmailDelivery(transport, sender=SENDER).deliver([], "S", "B", [])

        assert not result.success
        assert isinstance(result.error, DeliveryError)
        assert transport.sent == []

    def test_transport_failure_is_returned(self):
        result = EmailDelivery(FailingTransport(), sender=SENDER).deliver(["a@x.com"], "S", "B", [])

        assert not result.success
        assert isinstance(result.error, DeliveryError)
        assert result.recipients == ["a@x.com"]


class TestOverride:
    def test_routes_only_to_override_and_reports_success(self, caplog):
        transport = RecordingTransport()
        delivery = EmailDelivery(transport, sender=SENDER, override="qa@example.com")

        with caplog.at_level(logging.WARNING, logger="safety_spine.delivery.adapter"):
            result = delivery.deliver(["a@x.com", "b@x.com"], "S", "B", [PDF])

        assert result.success
        assert transport.sent[0]["recipients"] == ["qa@example.com"]
        assert result.recipients == ["a@x.com", "b@x.com"]
        assert result.delivered_to == ["qa@example.com"]
        assert "[EMAIL OVERRIDE]" in caplog.text

    def test_override_send_failure_is_failure(self):
        delivery = EmailDelivery(FailingTransport(), sender=SENDER, override="qa@example.com")
        assert not delivery.deliver(["a@x.com"], "S", "B", []).success

    def test_resolve_recipients(self):
        assert EmailDelivery(RecordingTransport(), SENDER).resolve_recipients(["a@x.com"]) == ["a@x.com"]
        assert EmailDelivery(RecordingTransport(), SENDER, override="").override is None
