"""Tests for safety_spine.core.settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from safety_spine.core.settings import SafetySpineSettings


class TestSettings:
    def test_defaults(self):
        s = SafetySpineSettings(_env_file=None)
        assert s.port == 3001
        assert s.reference_timezone == "America/Chicago"
        assert s.email_transport == "log"
        assert s.email_override is None

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("SAFETY_SPINE_EMAIL_OVERRIDE", "qa@example.com")
        monkeypatch.setenv("SAFETY_SPINE_REFERENCE_TIMEZONE", "Europe/Berlin")
        s = SafetySpineSettings(_env_file=None)
        assert s.email_override == "qa@example.com"
        assert s.tz.key == "Europe/Berlin"

    def test_blank_override_is_none(self):
        assert SafetySpineSettings(_env_file=None, email_override="  ").email_override is None

    def test_unknown_timezone_rejected(self):
        with pytest.raises(ValidationError):
            SafetySpineSettings(_env_file=None, reference_timezone="Mars/Olympus")

    def test_unknown_transport_rejected(self):
        with pytest.raises(ValidationError):
            SafetySpineSettings(_env_file=None, email_transport="pigeon")
