"""Email transports: SMTP relay, AWS SES raw send, and log-only."""

from __future__ import annotations

import logging
import smtplib
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from safety_spine.core.errors import DeliveryError, InvalidConfigError, MissingConfigError
from safety_spine.core.settings import SafetySpineSettings

logger = logging.getLogger(__name__)


class SmtpTransport:
    """SMTP relay with optional STARTTLS and login."""

    name = "smtp"

    def __init__(
        self,
        host: str,
        port: int = 587,
        *,
        user: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        timeout: float = 30.0,
    ) -> None:
        self._host = host
        self._port = port
        self._user = user
        self._password = password
        self._use_tls = use_tls
        self._timeout = timeout

    def send(self, sender: str, recipients: list[str], raw_message: bytes) -> str | None:
        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as server:
                if self._use_tls:
                    server.starttls()
                if self._user and self._password:
                    server.login(self._user, self._password)
                refused = server.sendmail(sender, recipients, raw_message)
        except (smtplib.SMTPException, OSError) as e:
            raise DeliveryError(f"SMTP send failed: {e}", cause=e) from e

        if refused:
            logger.warning(f"SMTP relay refused {sorted(refused)}")
        return None


class SesTransport:
    """AWS SES ``SendRawEmail``."""

    name = "ses"

    def __init__(
        self,
        region: str,
        session: boto3.Session | None = None,
        *,
        timeout: float = 30.0,
    ) -> None:
        self._session = session or boto3.Session()
        self._client: Any = self._session.client(
            "ses",
            region_name=region,
            config=Config(connect_timeout=timeout, read_timeout=timeout),
        )

    def send(self, sender: str, recipients: list[str], raw_message: bytes) -> str | None:
        try:
            response = self._client.send_raw_email(
                Source=sender,
                Destinations=recipients,
                RawMessage={"Data": raw_message},
            )
        except (BotoCoreError, ClientError) as e:
            raise DeliveryError(f"SES send failed: {e}", cause=e) from e
        return response.get("MessageId")


class LogTransport:
    """Logs the envelope instead of sending. Used when no relay is configured."""

    name = "log"

    def send(self, sender: str, recipients: list[str], raw_message: bytes) -> str | None:
        logger.info(
            f"Email transport not configured; skipping send from {sender} "
            f"to {recipients} ({len(raw_message)} bytes)"
        )
        return None


def create_transport(settings: SafetySpineSettings):
    """Transport selected by ``settings.email_transport``."""
    if settings.email_transport == "smtp":
        if not settings.smtp_host.strip():
            raise MissingConfigError("smtp_host")
        if settings.smtp_user and not settings.smtp_password:
            raise MissingConfigError("smtp_password", "smtp_user is set but smtp_password is not")
        return SmtpTransport(
            settings.smtp_host,
            settings.smtp_port,
            user=settings.smtp_user,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            timeout=settings.email_timeout_seconds,
        )
    if settings.email_transport == "ses":
        return SesTransport(settings.ses_region, timeout=settings.email_timeout_seconds)
    if settings.email_transport == "log":
        return LogTransport()
    raise InvalidConfigError("email_transport", settings.email_transport)
