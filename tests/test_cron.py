"""
Tests for schedule expression translation and duration helpers.
"""

from datetime import datetime, timedelta, timezone

import pytest
from apscheduler.triggers.combining import OrTrigger
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from exceptions.base import SchedulingError
from monitoring.cron import build_trigger, translate_day_of_week
from utils.helpers import TimeHelper


def _fields(trigger: CronTrigger):
    return {field.name: str(field) for field in trigger.fields}


def _next(trigger, now: datetime) -> datetime:
    return trigger.get_next_fire_time(None, now)


# 2024-01-01 is a Monday
MONDAY = datetime(2024, 1, 1, 0, 0, 30, tzinfo=timezone.utc)


class TestCronExpressions:
    """Test cases for 5 and 6 field expressions."""

    def test_five_fields_fire_on_the_minute(self):
        trigger = build_trigger("*/5 * * * *", timezone="UTC")

        assert isinstance(trigger, CronTrigger)
        assert _fields(trigger)["second"] == "0"
        assert _fields(trigger)["minute"] == "*/5"
        assert _next(trigger, MONDAY) == datetime(2024, 1, 1, 0, 5, tzinfo=timezone.utc)

    def test_six_fields_start_with_seconds(self):
        trigger = build_trigger("30 */5 * * * *", timezone="UTC")

        assert _fields(trigger)["second"] == "30"
        assert _fields(trigger)["minute"] == "*/5"
        assert _next(trigger, MONDAY) == datetime(2024, 1, 1, 0, 0, 30, tzinfo=timezone.utc)

    def test_every_second(self):
        trigger = build_trigger("* * * * * *", timezone="UTC")

        assert _next(trigger, MONDAY) == MONDAY

    def test_crontab_day_of_week_numbering(self):
        # crontab 1 = Monday; starting on Tuesday the next match is the 8th
        trigger = build_trigger("0 9 * * 1", timezone="UTC")
        tuesday = datetime(2024, 1, 2, 12, 0, tzinfo=timezone.utc)

        assert _next(trigger, tuesday) == datetime(2024, 1, 8, 9, 0, tzinfo=timezone.utc)

    def test_sunday_as_zero_and_seven(self):
        for expression in ("0 0 * * 0", "0 0 * * 7"):
            trigger = build_trigger(expression, timezone="UTC")
            assert _next(trigger, MONDAY) == datetime(2024, 1, 7, tzinfo=timezone.utc)

    def test_question_mark_day_fields(self):
        trigger = build_trigger("0 12 ? * ?", timezone="UTC")

        assert _next(trigger, MONDAY) == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "now, expected",
        [
            # 2026-01-01 is a Thursday; Friday the 2nd matches day-of-week
            (datetime(2026, 1, 1, tzinfo=timezone.utc), datetime(2026, 1, 2, tzinfo=timezone.utc)),
            # From Saturday the 10th, Tuesday the 13th matches day-of-month
            (datetime(2026, 1, 10, tzinfo=timezone.utc), datetime(2026, 1, 13, tzinfo=timezone.utc)),
            (datetime(2026, 1, 13, 1, tzinfo=timezone.utc), datetime(2026, 1, 16, tzinfo=timezone.utc)),
        ],
    )
    def test_restricted_day_fields_match_either(self, now, expected):
        trigger = build_trigger("0 0 13 * 5", timezone="UTC")

        assert isinstance(trigger, OrTrigger)
        assert _next(trigger, now) == expected

    @pytest.mark.parametrize("expression", ["0 0 13 * *", "0 0 13 * ?", "0 0 * * 5", "0 0 ? * 5"])
    def test_single_restricted_day_field_is_one_trigger(self, expression):
        assert isinstance(build_trigger(expression, timezone="UTC"), CronTrigger)

    def test_surrounding_whitespace_is_ignored(self):
        assert isinstance(build_trigger("  */5 * * * *  ", timezone="UTC"), CronTrigger)


class TestDescriptors:
    """Test cases for @descriptors."""

    @pytest.mark.parametrize(
        "descriptor, expected",
        [
            ("@hourly", datetime(2024, 1, 1, 1, 0, tzinfo=timezone.utc)),
            ("@daily", datetime(2024, 1, 2, 0, 0, tzinfo=timezone.utc)),
            ("@midnight", datetime(2024, 1, 2, 0, 0, tzinfo=timezone.utc)),
            ("@weekly", datetime(2024, 1, 7, 0, 0, tzinfo=timezone.utc)),
            ("@monthly", datetime(2024, 2, 1, 0, 0, tzinfo=timezone.utc)),
            ("@yearly", datetime(2025, 1, 1, 0, 0, tzinfo=timezone.utc)),
            ("@annually", datetime(2025, 1, 1, 0, 0, tzinfo=timezone.utc)),
        ],
    )
    def test_predefined_schedules(self, descriptor, expected):
        trigger = build_trigger(descriptor, timezone="UTC")

        assert _next(trigger, MONDAY) == expected

    @pytest.mark.parametrize(
        "expression, seconds",
        [
            ("@every 90s", 90),
            ("@every 5m", 300),
            ("@every 1h30m", 5400),
            ("@every 1500ms", 1.5),
        ],
    )
    def test_every_interval(self, expression, seconds):
        trigger = build_trigger(expression, timezone="UTC")

        assert isinstance(trigger, IntervalTrigger)
        assert trigger.interval == timedelta(seconds=seconds)


class TestInvalidExpressions:
    """Anything unrecognized raises SchedulingError."""

    @pytest.mark.parametrize(
        "expression",
        [
            "",
            "   ",
            "* * *",
            "* * * * * * *",
            "@fortnightly",
            "@every",
            "@every soon",
            "@every 0s",
            "61 * * * *",
            "* 25 * * *",
            "* * * * 8",
            "* * * * mon-fri/0",
            "not a cron",
        ],
    )
    def test_rejected(self, expression):
        with pytest.raises(SchedulingError) as exc_info:
            build_trigger(expression)

        assert exc_info.value.details["expression"] == expression


class TestTranslateDayOfWeek:
    """Test cases for crontab -> APScheduler day-of-week translation."""

    @pytest.mark.parametrize(
        "field, expected",
        [
            ("*", "*"),
            ("?", "*"),
            ("0", "sun"),
            ("7", "sun"),
            ("1-5", "mon,tue,wed,thu,fri"),
            ("5-7", "sun,fri,sat"),
            ("0,6", "sun,sat"),
            ("*/2", "sun,tue,thu,sat"),
            ("1/3", "mon,thu"),
            ("MON-WED", "mon,tue,wed"),
            ("sat,sun", "sun,sat"),
        ],
    )
    def test_translation(self, field, expected):
        assert translate_day_of_week(field) == expected

    @pytest.mark.parametrize("field", ["8", "5-2", "funday", "*/0"])
    def test_invalid(self, field):
        with pytest.raises(ValueError):
            translate_day_of_week(field)


class TestTimeHelper:
    """Test cases for duration parsing and formatting."""

    @pytest.mark.parametrize(
        "text, seconds",
        [
            ("90s", 90.0),
            ("5m", 300.0),
            ("1h30m", 5400.0),
            ("1.5h", 5400.0),
            ("250ms", 0.25),
            ("1m30s", 90.0),
        ],
    )
    def test_parse_duration(self, text, seconds):
        assert TimeHelper.parse_duration(text) == pytest.approx(seconds)

    @pytest.mark.parametrize("text", ["", "abc", "10", "5 minutes", "0s", "-5s"])
    def test_parse_duration_invalid(self, text):
        assert TimeHelper.parse_duration(text) is None

    @pytest.mark.parametrize(
        "seconds, expected",
        [
            (1.2044, "1.204s"),
            (0.087312, "87.312ms"),
            (0.00064, "640µs"),
        ],
    )
    def test_format_duration(self, seconds, expected):
        assert TimeHelper.format_duration(seconds) == expected
