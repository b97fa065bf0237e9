"""
Tests for Time Window Tool
Clock, HH:MM parsing and 12-hour display formatting
"""

import pytest
from datetime import datetime, date, time

from errors import InvalidTimeFormat
from tools.time_window import (
    Clock,
    FixedClock,
    parse_time_of_day,
    normalize_deadline,
    format_time_12h,
    format_time_display,
)


# =============================================================================
# Clock Tests
# =============================================================================

class TestClock:
    """Tests for Clock and FixedClock"""

    @pytest.mark.unit
    def test_fixed_clock_values(self):
        clock = FixedClock(datetime(2024, 3, 13, 9, 5, 42))

        assert clock.now() == datetime(2024, 3, 13, 9, 5, 42)
        assert clock.now_time_of_day() == "09:05"
        assert clock.today() == date(2024, 3, 13)
        assert clock.today_key() == "2024-03-13"

    @pytest.mark.unit
    def test_fixed_clock_set(self):
        clock = FixedClock(datetime(2024, 3, 13, 9, 0))
        clock.set(datetime(2024, 3, 14, 23, 59))

        assert clock.today_key() == "2024-03-14"
        assert clock.now_time_of_day() == "23:59"

    @pytest.mark.unit
    def test_custom_now_function(self):
        clock = Clock(lambda: datetime(2023, 12, 31, 0, 1))
        assert clock.today() == date(2023, 12, 31)
        assert clock.now_time_of_day() == "00:01"


# =============================================================================
# Parsing Tests
# =============================================================================

class TestParseTimeOfDay:
    """Tests for parse_time_of_day and normalize_deadline"""

    @pytest.mark.unit
    @pytest.mark.parametrize("value,expected", [
        ("08:00", time(8, 0)),
        ("8:05", time(8, 5)),
        ("23:59:30", time(23, 59, 30)),
        (" 00:00 ", time(0, 0)),
    ])
    def test_valid_values(self, value, expected):
        assert parse_time_of_day(value) == expected

    @pytest.mark.unit
    def test_time_passthrough(self):
        assert parse_time_of_day(time(7, 30)) == time(7, 30)

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["24:00", "12:60", "noon", "", "1230", None, 830])
    def test_invalid_values_raise(self, value):
        with pytest.raises(InvalidTimeFormat):
            parse_time_of_day(value)

    @pytest.mark.unit
    def test_invalid_time_is_value_error(self):
        with pytest.raises(ValueError):
            parse_time_of_day("99:99")

    @pytest.mark.unit
    @pytest.mark.parametrize("value,expected", [
        ("8:00", "08:00"),
        ("08:00:45", "08:00"),
        ("21:30", "21:30"),
    ])
    def test_normalize_deadline(self, value, expected):
        assert normalize_deadline(value) == expected


# =============================================================================
# Formatting Tests
# =============================================================================

class TestFormatTime:
    """Tests for 12-hour display helpers"""

    @pytest.mark.unit
    @pytest.mark.parametrize("value,expected", [
        ("00:15", "12:15 AM"),
        ("08:00", "8:00 AM"),
        ("12:00", "12:00 PM"),
        ("14:30", "2:30 PM"),
        ("23:59:00", "11:59 PM"),
    ])
    def test_format_time_12h(self, value, expected):
        assert format_time_12h(value) == expected

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["", "soon", "ab:cd"])
    def test_unparseable_returned_unchanged(self, value):
        assert format_time_12h(value) == value

    @pytest.mark.unit
    def test_format_time_display_prefix(self):
        assert format_time_display("08:00", "Due by") == "Due by 8:00 AM"
        assert format_time_display("13:30") == "1:30 PM"
