"""Process settings for safety-spine.

Every knob is read from ``SAFETY_SPINE_*`` environment variables or a
``.env`` file through pydantic-settings. The reference timezone is the one
place schedule wall-clock times are interpreted; it is validated here once
and threaded explicitly into the scheduler and the report window.

Examples:
    >>> from safety_spine.core.settings import SafetySpineSettings
    >>> settings = SafetySpineSettings(reference_timezone="America/Chicago")
    >>> settings.tz.key
    'America/Chicago'

Fields
──────
host, port           : Bind address for ``safety-spine serve``
debug, log_level     : Observability
database_path        : SQLite file (``:memory:`` for tests)
reference_timezone   : IANA zone for schedule times and report windows
execution_timeout_seconds : Wall-clock budget for one report run
email_transport      : ``log`` | ``smtp`` | ``ses``
email_from           : Sender address on report emails
email_override       : When set, every report email goes only here
smtp_*               : SMTP relay settings
ses_region           : AWS region for the SES transport
api_prefix, api_title, cors_origins : REST surface
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SafetySpineSettings(BaseSettings):
    """Settings shared by the API, the CLI and the scheduler."""

    model_config = SettingsConfigDict(
        env_prefix="SAFETY_SPINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Network ──────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 3001

    # ── Observability ────────────────────────────────────────────
    debug: bool = False
    log_level: str = "INFO"

    # ── Storage ──────────────────────────────────────────────────
    database_path: str = Field(
        default_factory=lambda: str(Path.home() / ".safety-spine" / "forms.db"),
        description="SQLite database file",
    )

    # ── Scheduling ───────────────────────────────────────────────
    reference_timezone: str = Field(
        default="America/Chicago",
        description="IANA timezone for schedule times and report windows",
    )
    execution_timeout_seconds: float = Field(default=300.0, gt=0)

    # ── Email ────────────────────────────────────────────────────
    email_transport: str = Field(default="log", pattern="^(log|smtp|ses)$")
    email_from: str = "safety-reports@localhost"
    email_override: str | None = Field(
        default=None,
        description="Redirect every outbound report email to this address",
    )
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_password: str | None = None
    smtp_use_tls: bool = True
    email_timeout_seconds: float = 30.0
    ses_region: str = "us-east-1"

    # ── API ──────────────────────────────────────────────────────
    api_prefix: str = "/api/v1"
    api_title: str = "safety-spine API"
    cors_origins: list[str] = Field(default=["*"])

    @field_validator("reference_timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("email_override")
    @classmethod
    def _blank_override_is_none(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @property
    def tz(self) -> ZoneInfo:
        """Reference timezone as a ``ZoneInfo``."""
        return ZoneInfo(self.reference_timezone)


@lru_cache(maxsize=1)
def get_settings() -> SafetySpineSettings:
    """Cached settings, loaded once per process."""
    return SafetySpineSettings()
