"""Tests for minute-of-day arithmetic."""

import pytest

from supplements.engine.clock import (
    UPON_WAKING,
    add_offset,
    describe_offset,
    format_minute_of_day,
    parse_wake_time,
    resolve_absolute_minute,
    safe_wake_minute,
)
from supplements.engine.errors import InvalidTimeFormat


class TestParseWakeTime:
    @pytest.mark.parametrize(
        "value, expected",
        [("00:00", 0), ("07:30", 450), ("7:30", 450), ("23:59", 1439), ("12:00", 720)],
    )
    def test_valid(self, value, expected):
        assert parse_wake_time(value) == expected

    @pytest.mark.parametrize(
        "value",
        ["24:00", "7:60", "0730", "07:5", "", "ab:cd", " 07:30", "07:30\n", None, 730],
        ids=["hour_24", "minute_60", "no_colon", "short_minute", "empty", "letters",
             "leading_space", "trailing_newline", "none", "int"],
    )
    def test_malformed_raises(self, value):
        with pytest.raises(InvalidTimeFormat):
            parse_wake_time(value)

    def test_safe_variant_falls_back_to_midnight(self):
        assert safe_wake_minute("25:99") == 0
        assert safe_wake_minute("06:15") == 375


class TestResolveAbsoluteMinute:
    def test_zero_offset_is_wake_time(self):
        assert resolve_absolute_minute("06:45", 0) == parse_wake_time("06:45")

    def test_wraps_past_midnight(self):
        # 23:00 + 2h -> 01:00 next day
        assert resolve_absolute_minute("23:00", 120) == 60

    def test_always_within_day(self):
        for offset in range(0, 1440, 7):
            minute = resolve_absolute_minute("18:20", offset)
            assert 0 <= minute <= 1439

    def test_offset_longer_than_a_day_wraps(self):
        assert resolve_absolute_minute("07:00", 1440 + 30) == 450

    def test_malformed_wake_time_raises(self):
        with pytest.raises(InvalidTimeFormat):
            resolve_absolute_minute("7am", 30)

    def test_add_offset_matches_parsed_form(self):
        assert add_offset(23 * 60, 120) == resolve_absolute_minute("23:00", 120) == 60


class TestFormatMinuteOfDay:
    @pytest.mark.parametrize(
        "minute, expected",
        [
            (0, "12:00 AM"),
            (5, "12:05 AM"),
            (60, "1:00 AM"),
            (450, "7:30 AM"),
            (720, "12:00 PM"),
            (779, "12:59 PM"),
            (1020, "5:00 PM"),
            (1439, "11:59 PM"),
        ],
    )
    def test_twelve_hour_format(self, minute, expected):
        assert format_minute_of_day(minute) == expected


class TestDescribeOffset:
    def test_zero_is_upon_waking(self):
        assert describe_offset(0) == UPON_WAKING

    def test_minutes_only(self):
        assert describe_offset(30) == "30 min after waking"

    def test_whole_hours(self):
        assert describe_offset(120) == "2h after waking"

    def test_hours_and_minutes(self):
        assert describe_offset(90) == "1h 30m after waking"
