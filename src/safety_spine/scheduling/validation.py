"""Schedule validation.

Runs on create and on the merged record at update. Every rule raises
:class:`ScheduleValidationError` naming the offending field; nothing is
coerced.
"""

from __future__ import annotations

import re

from safety_spine.core.errors import ScheduleValidationError
from safety_spine.reporting.renderers import ReportFormat
from safety_spine.scheduling.models import Frequency, Schedule, ScheduleCreate

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
MAX_DAY_OF_MONTH = 28

_FREQUENCIES = {f.value for f in Frequency}
_FORMATS = {f.value for f in ReportFormat}


def _reject(field: str, value: object, message: str) -> None:
    raise ScheduleValidationError(message, field=field, value=value)


def parse_time(value: str) -> tuple[int, int]:
    """``HH:MM`` → ``(hour, minute)``."""
    match = TIME_PATTERN.match(value or "")
    if not match:
        _reject("time", value, f"Time must be HH:MM (24-hour), got {value!r}")
    return int(match.group(1)), int(match.group(2))


def validate_schedule(schedule: Schedule | ScheduleCreate) -> None:
    """Reject an unusable schedule definition."""
    if not schedule.name or not schedule.name.strip():
        _reject("name", schedule.name, "Name is required")

    if not schedule.frequency:
        _reject("frequency", schedule.frequency, "Frequency is required")
    if schedule.frequency not in _FREQUENCIES:
        _reject(
            "frequency",
            schedule.frequency,
            f"Frequency must be one of {sorted(_FREQUENCIES)}",
        )

    if not schedule.time:
        _reject("time", schedule.time, "Time is required")
    parse_time(schedule.time)

    if not schedule.format:
        _reject("format", schedule.format, "Format is required")
    if schedule.format not in _FORMATS:
        _reject("format", schedule.format, f"Format must be one of {sorted(_FORMATS)}")

    recipients = schedule.recipients
    if not isinstance(recipients, list) or not recipients:
        _reject("recipients", recipients, "At least one recipient is required")
    for address in recipients:
        if not isinstance(address, str) or "@" not in address:
            _reject("recipients", address, f"Invalid email address: {address!r}")

    if schedule.frequency == Frequency.WEEKLY.value:
        dow = schedule.day_of_week
        if isinstance(dow, bool) or not isinstance(dow, int) or not 0 <= dow <= 6:
            _reject(
                "day_of_week",
                dow,
                "Weekly schedules need day_of_week between 0 (Sunday) and 6",
            )

    if schedule.frequency == Frequency.MONTHLY.value:
        dom = schedule.day_of_month
        if isinstance(dom, bool) or not isinstance(dom, int) or not 1 <= dom <= MAX_DAY_OF_MONTH:
            _reject(
                "day_of_month",
                dom,
                f"Monthly schedules need day_of_month between 1 and {MAX_DAY_OF_MONTH}",
            )
