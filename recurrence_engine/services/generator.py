"""
Occurrence generator.

Computes the next start instant of a series from the current one.
``next_occurrence`` is a pure function of (current instant, rule): it keeps
the time of day and never looks at anything but its arguments.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta

from recurrence_engine.exceptions import InvalidRecurrenceRuleError
from recurrence_engine.models.recurrence import (
    CustomRule,
    DailyRule,
    DateInYear,
    DayOfMonth,
    MonthlyRule,
    NoRecurrence,
    RecurrenceRule,
    WeeklyRule,
    YearlyRule,
)
from recurrence_engine.services.calendar_math import (
    add_months_rolling,
    clamp_day_to_month,
    nth_weekday_of_month,
    sunday_based_weekday,
)

logger = logging.getLogger(__name__)

# Weeks scanned by the weekly generator before falling back
WEEKLY_SCAN_WEEKS = 8

# Intervals tried when a fixed yearly date is missing (Feb 29)
YEARLY_DATE_ATTEMPTS = 8


def _at_time_of(day: date, current: datetime) -> datetime:
    return datetime.combine(day, current.time())


def next_daily(current: datetime, rule: DailyRule) -> datetime:
    return current + timedelta(days=rule.interval)


def next_weekly(
    current: datetime,
    rule: WeeklyRule,
    default_weekday: Optional[int] = None,
) -> datetime:
    """
    Next selected weekday, honouring the week interval.

    Days are scanned one at a time. Each time the Sunday-based weekday
    wraps (Saturday -> Sunday) one week boundary has been crossed. A
    selected day qualifies while still in the current week (no boundary
    crossed) or once at least ``interval`` boundaries are behind it.

    Args:
        current: Current occurrence start
        rule: Weekly rule
        default_weekday: Weekday used when the rule selects no days
            (defaults to the weekday of ``current``)

    Returns:
        Next occurrence start; ``current + 7 * interval`` days if the scan
        finds nothing
    """
    days = rule.days_of_week
    if not days:
        fallback_day = default_weekday if default_weekday is not None else sunday_based_weekday(current)
        days = frozenset({fallback_day})

    scan_days = 7 * max(WEEKLY_SCAN_WEEKS, rule.interval + 1)
    previous = sunday_based_weekday(current)
    boundaries = 0

    for offset in range(1, scan_days + 1):
        candidate = current + timedelta(days=offset)
        weekday = sunday_based_weekday(candidate)
        if weekday < previous:
            boundaries += 1
        previous = weekday

        if weekday in days and (boundaries == 0 or boundaries >= rule.interval):
            return candidate

    logger.debug(f"Weekly scan found no day in {sorted(days)}, using plain interval")
    return current + timedelta(weeks=rule.interval)


def next_monthly(current: datetime, rule: MonthlyRule) -> Optional[datetime]:
    """
    Same day (clamped) or same ordinal weekday, ``interval`` months later.

    Returns:
        Next occurrence start, or None when the ordinal weekday does not
        exist in the target month
    """
    base = current + relativedelta(months=rule.interval)
    mode = rule.mode

    if isinstance(mode, DayOfMonth):
        return _at_time_of(clamp_day_to_month(base.year, base.month - 1, mode.day), current)

    resolved = nth_weekday_of_month(base.year, base.month - 1, mode.weekday, mode.week)
    if resolved is None:
        return None
    return _at_time_of(resolved, current)


def next_yearly(current: datetime, rule: YearlyRule) -> Optional[datetime]:
    """
    Same date or same ordinal weekday of a month, ``interval`` years later.

    A fixed date is not clamped: February 29 only fires in leap years, so
    years where the date does not exist are skipped.

    Returns:
        Next occurrence start, or None when no valid date is found
    """
    mode = rule.mode

    if isinstance(mode, DateInYear):
        year = current.year
        for _ in range(YEARLY_DATE_ATTEMPTS):
            year += rule.interval
            try:
                return _at_time_of(date(year, mode.month + 1, mode.day), current)
            except ValueError:
                continue
        logger.debug(
            f"No valid date for month={mode.month} day={mode.day} "
            f"within {YEARLY_DATE_ATTEMPTS} intervals after {current.date()}"
        )
        return None

    resolved = nth_weekday_of_month(
        current.year + rule.interval, mode.month, mode.weekday, mode.week
    )
    if resolved is None:
        return None
    return _at_time_of(resolved, current)


def next_custom(current: datetime, rule: CustomRule) -> datetime:
    """Fixed step of days, weeks, months or years (month steps roll over)."""
    if rule.unit == "days":
        return current + timedelta(days=rule.interval)
    if rule.unit == "weeks":
        return current + timedelta(weeks=rule.interval)
    if rule.unit == "months":
        return add_months_rolling(current, rule.interval)
    return add_months_rolling(current, 12 * rule.interval)


def next_occurrence(
    current: datetime,
    rule: RecurrenceRule,
    default_weekday: Optional[int] = None,
) -> Optional[datetime]:
    """
    Compute the start of the occurrence following ``current``.

    Args:
        current: Start instant of the current occurrence
        rule: Recurrence rule
        default_weekday: Weekday for weekly rules without selected days

    Returns:
        Next start instant, or None if the pattern cannot be satisfied
        (or the rule does not repeat)

    Raises:
        InvalidRecurrenceRuleError: If the rule is not a known rule type
    """
    if isinstance(rule, NoRecurrence):
        return None
    if isinstance(rule, DailyRule):
        return next_daily(current, rule)
    if isinstance(rule, WeeklyRule):
        return next_weekly(current, rule, default_weekday)
    if isinstance(rule, MonthlyRule):
        return next_monthly(current, rule)
    if isinstance(rule, YearlyRule):
        return next_yearly(current, rule)
    if isinstance(rule, CustomRule):
        return next_custom(current, rule)

    raise InvalidRecurrenceRuleError(f"Unsupported recurrence rule: {type(rule).__name__}")
