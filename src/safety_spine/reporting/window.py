"""Report windows: the inclusive date range a schedule's report covers."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from safety_spine.core.timestamps import utc_now


@dataclass(frozen=True)
class DateWindow:
    """Inclusive ``[start, end]`` range of calendar dates."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"Window start {self.start} is after end {self.end}")

    @property
    def label(self) -> str:
        return f"{self.start.isoformat()} to {self.end.isoformat()}"


def today_in(tz: ZoneInfo, now: datetime | None = None) -> date:
    """Current calendar date in the reference timezone."""
    return (now or utc_now()).astimezone(tz).date()


def months_back(day: date, months: int = 1) -> date:
    """Same day *months* earlier, clamped to the end of a shorter month."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def report_window(frequency: str, today: date) -> DateWindow:
    """Window ending *today* for a schedule frequency.

    daily looks back 1 day, weekly 7 days, monthly one calendar month.
    """
    if frequency == "daily":
        start = today - timedelta(days=1)
    elif frequency == "weekly":
        start = today - timedelta(days=7)
    elif frequency == "monthly":
        start = months_back(today, 1)
    else:
        raise ValueError(f"Unknown frequency: {frequency}")
    return DateWindow(start=start, end=today)
