"""Tests for safety_spine.delivery.transports."""

from __future__ import annotations

import logging
import smtplib
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from safety_spine.core.errors import DeliveryError, InvalidConfigError, MissingConfigError
from safety_spine.core.settings import SafetySpineSettings
from safety_spine.delivery import EmailTransport, LogTransport, SesTransport, SmtpTransport, create_transport


class TestLogTransport:
    def test_logs_envelope_without_keeping_it(self, caplog):
        transport = LogTransport()

        with caplog.at_level(logging.INFO, logger="safety_spine.delivery.transports"):
            for _ in range(3):
                assert transport.send("from@x.com", ["a@x.com"], b"raw") is None

        assert len(caplog.records) == 3
        assert "from@x.com" in caplog.records[0].getMessage()
        assert "(3 bytes)" in caplog.records[0].getMessage()
        assert vars(transport) == {}
        assert isinstance(transport, EmailTransport)


class TestSmtpTransport:
    @patch("safety_spine.delivery.transports.smtplib.SMTP")
    def test_starttls_login_send(self, mock_smtp):
        server = mock_smtp.return_value.__enter__.return_value
        server.sendmail.return_value = {}

        SmtpTransport("relay", 587, user="u", password="p", timeout=5).send("f@x.com", ["a@x.com"], b"m")

        mock_smtp.assert_called_once_with("relay", 587, timeout=5)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("u", "p")
        server.sendmail.assert_called_once_with("f@x.com", ["a@x.com"], b"m")

    @patch("safety_spine.delivery.transports.smtplib.SMTP")
    def test_smtp_error_becomes_delivery_error(self, mock_smtp):
        mock_smtp.side_effect = smtplib.SMTPConnectError(421, "busy")
        with pytest.raises(DeliveryError):
            SmtpTransport("relay").send("f@x.com", ["a@x.com"], b"m")

    @patch("safety_spine.delivery.transports.smtplib.SMTP")
    def test_socket_timeout_becomes_delivery_error(self, mock_smtp):
        mock_smtp.side_effect = TimeoutError("timed out")
        with pytest.raises(DeliveryError):
            SmtpTransport("relay").send("f@x.com", ["a@x.com"], b"m")


class TestSesTransport:
    def _transport(self, client):
        session = MagicMock()
        session.client.return_value = client
        return SesTransport("us-east-1", session=session)

    def test_returns_message_id(self):
        client = MagicMock()
        client.send_raw_email.return_value = {"MessageId": "ses-123"}
        assert self._transport(client).send("f@x.com", ["a@x.com"], b"m") == "ses-123"
        client.send_raw_email.assert_called_once_with(
            Source="f@x.com", Destinations=["a@x.com"], RawMessage={"Data": b"m"}
        )

    def test_client_error_becomes_delivery_error(self):
        client = MagicMock()
        client.send_raw_email.side_effect = ClientError(
            {"Error": {"Code": "MessageRejected", "Message": "nope"}}, "SendRawEmail"
        )
        with pytest.raises(DeliveryError):
            self._transport(client).send("f@x.com", ["a@x.com"], b"m")


class TestCreateTransport:
    def test_log(self):
        assert isinstance(create_transport(SafetySpineSettings(_env_file=None)), LogTransport)

    def test_smtp(self):
        s = SafetySpineSettings(_env_file=None, email_transport="smtp", smtp_host="relay")
        assert isinstance(create_transport(s), SmtpTransport)

    def test_smtp_without_host_rejected(self):
        s = SafetySpineSettings(_env_file=None, email_transport="smtp", smtp_host=" ")
        with pytest.raises(MissingConfigError) as exc_info:
            create_transport(s)
        assert exc_info.value.key == "smtp_host"

    def test_smtp_user_without_password_rejected(self):
        s = SafetySpineSettings(
            _env_file=None, email_transport="smtp", smtp_host="relay", smtp_user="reports"
        )
        with pytest.raises(MissingConfigError) as exc_info:
            create_transport(s)
        assert exc_info.value.key == "smtp_password"

    def test_unknown_rejected(self):
        s = SafetySpineSettings.model_construct(email_transport="pigeon")
        with pytest.raises(InvalidConfigError):
            create_transport(s)
