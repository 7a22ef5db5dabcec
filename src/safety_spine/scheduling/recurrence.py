"""Recurrence translation: schedule → cron expression → trigger.

Weekdays follow cron numbering (0 = Sunday). APScheduler 3.x numbers
weekdays from Monday, so triggers are built with weekday names.

Example:
    >>> schedule = Schedule(frequency="weekly", day_of_week=1, time="07:30")
    >>> schedule_to_cron(schedule)
    '30 7 * * 1'
"""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

from apscheduler.triggers.cron import CronTrigger
from croniter import croniter

from safety_spine.core.timestamps import utc_now
from safety_spine.scheduling.models import Frequency, Schedule
from safety_spine.scheduling.validation import parse_time

DAY_NAMES = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")


def schedule_to_cron(schedule: Schedule) -> str:
    """Standard 5-field cron expression for *schedule*."""
    hour, minute = parse_time(schedule.time)
    if schedule.frequency == Frequency.DAILY.value:
        return f"{minute} {hour} * * *"
    if schedule.frequency == Frequency.WEEKLY.value:
        return f"{minute} {hour} * * {schedule.day_of_week}"
    if schedule.frequency == Frequency.MONTHLY.value:
        return f"{minute} {hour} {schedule.day_of_month} * *"
    raise ValueError(f"Unknown frequency: {schedule.frequency}")


def build_trigger(schedule: Schedule, timezone: ZoneInfo) -> CronTrigger:
    """APScheduler ``CronTrigger`` firing in *timezone*."""
    hour, minute = parse_time(schedule.time)
    fields: dict[str, object] = {"hour": hour, "minute": minute, "second": 0}
    if schedule.frequency == Frequency.WEEKLY.value:
        fields["day_of_week"] = DAY_NAMES[schedule.day_of_week]
    elif schedule.frequency == Frequency.MONTHLY.value:
        fields["day"] = schedule.day_of_month
    elif schedule.frequency != Frequency.DAILY.value:
        raise ValueError(f"Unknown frequency: {schedule.frequency}")
    return CronTrigger(timezone=timezone, **fields)


def next_fire_time(
    schedule: Schedule,
    timezone: ZoneInfo,
    after: datetime | None = None,
) -> datetime:
    """Next wall-clock fire time in *timezone* (for display)."""
    start = (after or utc_now()).astimezone(timezone)
    return croniter(schedule_to_cron(schedule), start).get_next(datetime)
