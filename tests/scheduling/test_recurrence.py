"""Tests for safety_spine.scheduling.recurrence."""

from __future__ import annotations

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

import pytest
from apscheduler.triggers.cron import CronTrigger

from safety_spine.scheduling.models import Schedule
from safety_spine.scheduling.recurrence import build_trigger, next_fire_time, schedule_to_cron

TZ = ZoneInfo("America/Chicago")


class TestScheduleToCron:
    def test_daily(self):
        assert schedule_to_cron(Schedule(frequency="daily", time="08:00")) == "0 8 * * *"

    def test_weekly(self):
        assert schedule_to_cron(Schedule(frequency="weekly", day_of_week=1, time="07:30")) == "30 7 * * 1"

    def test_monthly(self):
        assert schedule_to_cron(Schedule(frequency="monthly", day_of_month=15, time="06:45")) == "45 6 15 * *"

    def test_unknown(self):
        with pytest.raises(ValueError):
            schedule_to_cron(Schedule(frequency="hourly"))


class TestBuildTrigger:
    def test_daily_fires_in_reference_timezone(self):
        trigger = build_trigger(Schedule(frequency="daily", time="08:00"), TZ)
        assert isinstance(trigger, CronTrigger)

        fire = trigger.get_next_fire_time(None, datetime(2026, 10, 19, 0, 0, tzinfo=TZ))
        assert (fire.hour, fire.minute) == (8, 0)
        assert fire.utcoffset() == TZ.utcoffset(datetime(2026, 10, 19, 8, 0))

    def test_weekly_sunday_is_zero(self):
        trigger = build_trigger(Schedule(frequency="weekly", day_of_week=0, time="09:00"), TZ)
        # 2026-10-19 is a Monday
        fire = trigger.get_next_fire_time(None, datetime(2026, 10, 19, 0, 0, tzinfo=TZ))
        assert fire.date().isoformat() == "2026-10-25"
        assert fire.strftime("%A") == "Sunday"

    def test_monthly(self):
        trigger = build_trigger(Schedule(frequency="monthly", day_of_month=5, time="06:00"), TZ)
        fire = trigger.get_next_fire_time(None, datetime(2026, 10, 19, 0, 0, tzinfo=TZ))
        assert fire.date().isoformat() == "2026-11-05"

    def test_trigger_matches_cron_preview(self):
        schedule = Schedule(frequency="weekly", day_of_week=3, time="17:15")
        after = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)
        trigger_fire = build_trigger(schedule, TZ).get_next_fire_time(None, after.astimezone(TZ))
        assert trigger_fire == next_fire_time(schedule, TZ, after=after)


class TestNextFireTime:
    def test_daily_next_morning(self):
        after = datetime(2026, 10, 19, 14, 0, tzinfo=UTC)  # 09:00 Chicago
        fire = next_fire_time(Schedule(frequency="daily", time="08:00"), TZ, after=after)
        assert fire.isoformat().startswith("2026-10-20T08:00")
