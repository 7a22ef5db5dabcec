"""Tests for safety_spine.scheduling.validation."""

from __future__ import annotations

import pytest

from _support.fakes import schedule_spec
from safety_spine.core.errors import ScheduleValidationError
from safety_spine.scheduling.validation import parse_time, validate_schedule


def _rejected_field(**overrides) -> str:
    with pytest.raises(ScheduleValidationError) as exc_info:
        validate_schedule(schedule_spec(**overrides))
    return exc_info.value.field


class TestParseTime:
    @pytest.mark.parametrize("value,expected", [("00:00", (0, 0)), ("08:05", (8, 5)), ("23:59", (23, 59))])
    def test_valid(self, value, expected):
        assert parse_time(value) == expected

    @pytest.mark.parametrize("value", ["24:00", "8:00", "08:60", "0800", "", "08:00:00"])
    def test_invalid(self, value):
        with pytest.raises(ScheduleValidationError):
            parse_time(value)


class TestValidateSchedule:
    def test_valid_daily(self):
        validate_schedule(schedule_spec())

    def test_valid_weekly_and_monthly(self):
        validate_schedule(schedule_spec(frequency="weekly", day_of_week=0))
        validate_schedule(schedule_spec(frequency="weekly", day_of_week=6))
        validate_schedule(schedule_spec(frequency="monthly", day_of_month=1))
        validate_schedule(schedule_spec(frequency="monthly", day_of_month=28))

    def test_monthly_day_30_rejected(self):
        assert _rejected_field(frequency="monthly", day_of_month=30) == "day_of_month"

    def test_monthly_requires_day(self):
        assert _rejected_field(frequency="monthly", day_of_month=None) == "day_of_month"
        assert _rejected_field(frequency="monthly", day_of_month=0) == "day_of_month"

    def test_weekly_range(self):
        assert _rejected_field(frequency="weekly", day_of_week=7) == "day_of_week"
        assert _rejected_field(frequency="weekly", day_of_week=None) == "day_of_week"
        assert _rejected_field(frequency="weekly", day_of_week=True) == "day_of_week"

    @pytest.mark.parametrize(
        "overrides,field",
        [
            ({"name": "  "}, "name"),
            ({"frequency": "hourly"}, "frequency"),
            ({"frequency": ""}, "frequency"),
            ({"time": "25:00"}, "time"),
            ({"format": "csv"}, "format"),
            ({"recipients": []}, "recipients"),
            ({"recipients": ["not-an-email"]}, "recipients"),
        ],
    )
    def test_rejections_name_the_field(self, overrides, field):
        assert _rejected_field(**overrides) == field
