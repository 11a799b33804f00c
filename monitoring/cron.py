"""
============================================================================
ENDPOINT PINGER - SCHEDULE EXPRESSIONS
============================================================================
Turns the `schedule` string of the config into an APScheduler trigger.

Accepted forms
--------------
    */5 * * * *          5 fields: minute hour day month day-of-week
    30 */5 * * * *       6 fields: second, then the 5 above
    @hourly @daily ...   predefined descriptors (see ScheduleDescriptors)
    @every 1h30m         fixed interval

Day-of-week uses crontab numbering (0 or 7 = Sunday). APScheduler counts
from Monday, so the field is translated to day names before it is handed
over. `?` is accepted as a synonym for `*` in the day fields. When both
day-of-month and day-of-week are restricted, a day matching either one
fires, as in crontab.

Anything else raises SchedulingError.

License: MIT
============================================================================
"""

from typing import Optional, Set

from apscheduler.triggers.base import BaseTrigger
from apscheduler.triggers.combining import OrTrigger
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from config.constants import ScheduleDescriptors
from exceptions.base import SchedulingError
from utils.helpers import TimeHelper


_CRON_DAY_NAMES = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")


def _day_number(token: str) -> int:
    token = token.strip().lower()
    if token.isdigit():
        number = int(token)
        if number > 7:
            raise ValueError(f"day-of-week {number} out of range 0-7")
        return number
    if token in _CRON_DAY_NAMES:
        return _CRON_DAY_NAMES.index(token)
    raise ValueError(f"unknown day-of-week {token!r}")


def translate_day_of_week(field: str) -> str:
    """
    Convert a crontab day-of-week field to an APScheduler day list.

    Examples: "1-5" -> "mon,tue,wed,thu,fri"; "0,6" -> "sun,sat";
    "*/2" -> "sun,tue,thu,sat".
    """
    if field in ("*", "?"):
        return "*"

    days: Set[int] = set()
    for part in field.split(","):
        span, _, step_text = part.partition("/")
        step = int(step_text) if step_text else 1
        if step < 1:
            raise ValueError(f"invalid step in {part!r}")

        if span in ("*", "?"):
            first, last = 0, 6
        elif "-" in span:
            low, high = span.split("-", 1)
            first, last = _day_number(low), _day_number(high)
        else:
            first = _day_number(span)
            last = 6 if step_text else first

        if first > last:
            raise ValueError(f"invalid range {span!r}")

        days.update(day % 7 for day in range(first, last + 1, step))

    return ",".join(_CRON_DAY_NAMES[day] for day in sorted(days))


def _cron_trigger(fields, timezone: Optional[str]) -> BaseTrigger:
    if len(fields) == 5:
        second = "0"
        minute, hour, day, month, day_of_week = fields
    else:
        second, minute, hour, day, month, day_of_week = fields

    day = "*" if day == "?" else day
    day_of_week = translate_day_of_week(day_of_week)
    common = dict(
        second=second,
        minute=minute,
        hour=hour,
        month=month,
        timezone=timezone,
    )

    # Both day fields restricted: a day matching either one fires
    if day != "*" and day_of_week != "*":
        return OrTrigger([
            CronTrigger(day=day, **common),
            CronTrigger(day_of_week=day_of_week, **common),
        ])

    return CronTrigger(day=day, day_of_week=day_of_week, **common)


def build_trigger(expression: str, timezone: Optional[str] = None) -> BaseTrigger:
    """
    Translate a schedule expression into a trigger.

    Args:
        expression: Cron expression or descriptor
        timezone: Timezone name for cron evaluation (local time if None)

    Returns:
        CronTrigger, OrTrigger (both day fields restricted) or IntervalTrigger

    Raises:
        SchedulingError: If the expression cannot be understood
    """
    text = (expression or "").strip()
    if not text:
        raise SchedulingError("Empty schedule expression", expression=expression)

    if text.startswith(ScheduleDescriptors.EVERY_PREFIX):
        seconds = TimeHelper.parse_duration(text[len(ScheduleDescriptors.EVERY_PREFIX):])
        if seconds is None:
            raise SchedulingError(
                f"Invalid @every duration in {text!r}", expression=expression
            )
        return IntervalTrigger(seconds=seconds, timezone=timezone)

    if text.startswith("@"):
        crontab = ScheduleDescriptors.CRONTAB.get(text.lower())
        if crontab is None:
            raise SchedulingError(
                f"Unrecognized descriptor {text!r}", expression=expression
            )
        text = crontab

    fields = text.split()
    if len(fields) not in (5, 6):
        raise SchedulingError(
            f"Expected 5 or 6 fields, found {len(fields)}: {text!r}",
            expression=expression,
        )

    try:
        return _cron_trigger(fields, timezone)
    except ValueError as e:
        raise SchedulingError(
            f"Invalid schedule {text!r}: {e}", expression=expression, cause=e
        ) from e
