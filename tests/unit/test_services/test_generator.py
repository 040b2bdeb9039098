"""
Unit tests for the occurrence generator.

Tests next_occurrence for every rule kind, including short months,
leap years, ordinal weekdays and the weekly interval scan.
"""

from datetime import datetime

import pytest

from recurrence_engine.exceptions import InvalidRecurrenceRuleError
from recurrence_engine.models.recurrence import (
    CustomRule,
    DailyRule,
    DateInYear,
    DayOfMonth,
    MonthlyRule,
    NoRecurrence,
    NthWeekday,
    NthWeekdayOfMonth,
    WeeklyRule,
    YearlyRule,
)
from recurrence_engine.services.generator import next_occurrence


class TestDaily:
    """Test daily rules."""

    def test_next_day(self):
        assert next_occurrence(datetime(2024, 5, 6, 10, 0), DailyRule()) == datetime(2024, 5, 7, 10, 0)

    def test_interval(self):
        """Interval 3 skips two days and crosses month ends."""
        assert next_occurrence(datetime(2024, 2, 28, 8, 15), DailyRule(interval=3)) == datetime(2024, 3, 2, 8, 15)

    def test_normalized_interval(self):
        """Interval 0 behaves as 1."""
        assert next_occurrence(datetime(2024, 5, 6), DailyRule(interval=0)) == datetime(2024, 5, 7)


class TestWeekly:
    """Test weekly rules and the week-boundary scan."""

    def test_same_week_next_selected_day(self):
        """Monday -> Wednesday of the same week."""
        rule = WeeklyRule(interval=2, days_of_week={1, 3})
        assert next_occurrence(datetime(2024, 5, 6, 9, 0), rule) == datetime(2024, 5, 8, 9, 0)

    def test_skips_intervening_week(self):
        """Wednesday -> Monday two weeks later with interval 2."""
        rule = WeeklyRule(interval=2, days_of_week={1, 3})
        assert next_occurrence(datetime(2024, 5, 8, 9, 0), rule) == datetime(2024, 5, 20, 9, 0)

    def test_every_week_single_day(self):
        """Interval 1 on the same weekday advances seven days."""
        rule = WeeklyRule(interval=1, days_of_week={1})
        assert next_occurrence(datetime(2024, 5, 6), rule) == datetime(2024, 5, 13)

    def test_every_third_week(self):
        rule = WeeklyRule(interval=3, days_of_week={1})
        assert next_occurrence(datetime(2024, 5, 6), rule) == datetime(2024, 5, 27)

    def test_sunday_selected_with_interval(self):
        """Sunday starts a new week, so it needs the full interval."""
        rule = WeeklyRule(interval=2, days_of_week={0, 6})
        # Saturday 2024-05-11 -> Sunday is one boundary away -> skip to 2024-05-19
        assert next_occurrence(datetime(2024, 5, 11), rule) == datetime(2024, 5, 19)

    def test_empty_days_use_current_weekday(self):
        """Without selected days the current weekday repeats."""
        rule = WeeklyRule(interval=1)
        assert next_occurrence(datetime(2024, 5, 8), rule) == datetime(2024, 5, 15)

    def test_empty_days_use_default_weekday(self):
        """default_weekday overrides the current weekday."""
        rule = WeeklyRule(interval=1)
        assert next_occurrence(datetime(2024, 5, 8), rule, default_weekday=1) == datetime(2024, 5, 13)

    def test_large_interval(self):
        """Intervals past the default scan window are still honoured."""
        rule = WeeklyRule(interval=10, days_of_week={1})
        assert next_occurrence(datetime(2024, 5, 6), rule) == datetime(2024, 7, 15)


class TestMonthly:
    """Test monthly rules."""

    def test_day_of_month(self):
        rule = MonthlyRule(mode=DayOfMonth(day=15))
        assert next_occurrence(datetime(2024, 1, 15, 14, 0), rule) == datetime(2024, 2, 15, 14, 0)

    def test_day_31_clamps_to_february(self):
        """January 31 -> February 29 in a leap year."""
        rule = MonthlyRule(mode=DayOfMonth(day=31))
        assert next_occurrence(datetime(2024, 1, 31), rule) == datetime(2024, 2, 29)

    def test_day_31_clamps_common_year(self):
        rule = MonthlyRule(mode=DayOfMonth(day=31))
        assert next_occurrence(datetime(2023, 1, 31), rule) == datetime(2023, 2, 28)

    def test_day_31_recovers_after_clamp(self):
        """The rule's day is used, not the clamped current day."""
        rule = MonthlyRule(mode=DayOfMonth(day=31))
        assert next_occurrence(datetime(2024, 2, 29), rule) == datetime(2024, 3, 31)

    def test_interval_crosses_year(self):
        rule = MonthlyRule(interval=3, mode=DayOfMonth(day=10))
        assert next_occurrence(datetime(2024, 11, 10), rule) == datetime(2025, 2, 10)

    def test_nth_weekday(self):
        """Second Tuesday of each month."""
        rule = MonthlyRule(mode=NthWeekday(week=2, weekday=2))
        assert next_occurrence(datetime(2024, 5, 14, 18, 30), rule) == datetime(2024, 6, 11, 18, 30)

    def test_last_weekday(self):
        """Last Friday: June 2024 has four Fridays, May has five."""
        rule = MonthlyRule(mode=NthWeekday(week=-1, weekday=5))
        assert next_occurrence(datetime(2024, 5, 31), rule) == datetime(2024, 6, 28)
        assert next_occurrence(datetime(2024, 4, 26), rule) == datetime(2024, 5, 31)


class TestYearly:
    """Test yearly rules."""

    def test_date_in_year(self):
        rule = YearlyRule(mode=DateInYear(month=6, day=14))
        assert next_occurrence(datetime(2024, 7, 14, 12, 0), rule) == datetime(2025, 7, 14, 12, 0)

    def test_leap_day_skips_common_years(self):
        """February 29 only fires in leap years."""
        rule = YearlyRule(mode=DateInYear(month=1, day=29))
        assert next_occurrence(datetime(2024, 2, 29), rule) == datetime(2028, 2, 29)

    def test_leap_day_century(self):
        """2100 is not a leap year, so 2096 jumps to 2104."""
        rule = YearlyRule(mode=DateInYear(month=1, day=29))
        assert next_occurrence(datetime(2096, 2, 29), rule) == datetime(2104, 2, 29)

    def test_impossible_date(self):
        """April 31 never exists."""
        rule = YearlyRule(mode=DateInYear(month=3, day=31))
        assert next_occurrence(datetime(2024, 4, 30), rule) is None

    def test_last_weekday_of_month(self):
        """Last Monday of May."""
        rule = YearlyRule(mode=NthWeekdayOfMonth(month=4, week=-1, weekday=1))
        assert next_occurrence(datetime(2024, 5, 27), rule) == datetime(2025, 5, 26)

    def test_nth_weekday_of_month_interval(self):
        """Fourth Thursday of November every 2 years."""
        rule = YearlyRule(interval=2, mode=NthWeekdayOfMonth(month=10, week=4, weekday=4))
        assert next_occurrence(datetime(2024, 11, 28), rule) == datetime(2026, 11, 26)


class TestCustom:
    """Test custom unit rules."""

    def test_days(self):
        assert next_occurrence(datetime(2024, 5, 6), CustomRule(interval=10, unit="days")) == datetime(2024, 5, 16)

    def test_weeks(self):
        assert next_occurrence(datetime(2024, 5, 6), CustomRule(interval=2, unit="weeks")) == datetime(2024, 5, 20)

    def test_months(self):
        assert next_occurrence(datetime(2024, 5, 6, 7, 0), CustomRule(interval=2, unit="months")) == datetime(2024, 7, 6, 7, 0)

    def test_months_roll_over(self):
        """Custom months are not clamped."""
        assert next_occurrence(datetime(2024, 1, 31), CustomRule(interval=1, unit="months")) == datetime(2024, 3, 2)

    def test_years(self):
        assert next_occurrence(datetime(2024, 5, 6), CustomRule(interval=1, unit="years")) == datetime(2025, 5, 6)


class TestNoRecurrenceAndErrors:
    """Test non-repeating and unsupported rules."""

    def test_no_recurrence(self):
        assert next_occurrence(datetime(2024, 5, 6), NoRecurrence()) is None

    def test_unsupported_rule(self):
        """Objects that are not rules are rejected."""
        with pytest.raises(InvalidRecurrenceRuleError):
            next_occurrence(datetime(2024, 5, 6), {"kind": "daily"})
