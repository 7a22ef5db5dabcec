"""Tests for safety_spine.reporting.window."""

from __future__ import annotations

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

import pytest

from safety_spine.reporting.window import DateWindow, months_back, report_window, today_in


class TestDateWindow:
    def test_label(self):
        assert DateWindow(date(2026, 10, 1), date(2026, 10, 7)).label == "2026-10-01 to 2026-10-07"

    def test_single_day(self):
        window = DateWindow(date(2026, 10, 1), date(2026, 10, 1))
        assert window.start == window.end

    def test_reversed_rejected(self):
        with pytest.raises(ValueError):
            DateWindow(date(2026, 10, 2), date(2026, 10, 1))


class TestReportWindow:
    def test_daily(self):
        window = report_window("daily", date(2026, 10, 19))
        assert window == DateWindow(date(2026, 10, 18), date(2026, 10, 19))

    def test_weekly(self):
        window = report_window("weekly", date(2026, 10, 19))
        assert window == DateWindow(date(2026, 10, 12), date(2026, 10, 19))

    def test_monthly(self):
        window = report_window("monthly", date(2026, 10, 19))
        assert window == DateWindow(date(2026, 9, 19), date(2026, 10, 19))

    def test_monthly_clamps_to_shorter_month(self):
        assert report_window("monthly", date(2026, 3, 31)).start == date(2026, 2, 28)

    def test_monthly_crosses_year(self):
        assert report_window("monthly", date(2026, 1, 15)).start == date(2025, 12, 15)

    def test_unknown_frequency(self):
        with pytest.raises(ValueError):
            report_window("hourly", date(2026, 10, 19))


class TestHelpers:
    def test_months_back_leap_year(self):
        assert months_back(date(2028, 3, 30)) == date(2028, 2, 29)

    def test_today_in_reference_timezone(self):
        # 03:00 UTC is still the previous evening in Chicago
        now = datetime(2026, 10, 20, 3, 0, tzinfo=UTC)
        assert today_in(ZoneInfo("America/Chicago"), now) == date(2026, 10, 19)
        assert today_in(ZoneInfo("UTC"), now) == date(2026, 10, 20)
