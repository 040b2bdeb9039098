"""
Calendar arithmetic helpers.

Pure functions over naive dates. Conventions used throughout the engine:
- months are 0-based (0 = January, 11 = December)
- weekdays are Sunday-based (0 = Sunday, 6 = Saturday)

Uses python-dateutil's relativedelta for month arithmetic and
weekday resolution.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta, MO, TU, WE, TH, FR, SA, SU

END_OF_DAY = time(23, 59, 59, 999000)

# Indexed by Sunday-based weekday
_WEEKDAYS = (SU, MO, TU, WE, TH, FR, SA)


def is_leap_year(year: int) -> bool:
    """Gregorian leap year test."""
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def _first_of_month(year: int, month0: int) -> date:
    """First day of a month, carrying month overflow into the year."""
    carry, month0 = divmod(month0, 12)
    return date(year + carry, month0 + 1, 1)


def days_in_month(year: int, month0: int) -> int:
    """
    Number of days in a month.

    Computed as the day before the first of the following month.

    Args:
        year: Calendar year
        month0: 0-based month

    Returns:
        28-31
    """
    next_month = _first_of_month(year, month0) + relativedelta(months=1)
    return (next_month - timedelta(days=1)).day


def sunday_based_weekday(d: date) -> int:
    """Weekday with 0 = Sunday .. 6 = Saturday."""
    return (d.weekday() + 1) % 7


def _dateutil_weekday(weekday: int):
    """Map a Sunday-based weekday to dateutil's MO..SU constants."""
    return _WEEKDAYS[weekday]


def nth_weekday_of_month(year: int, month0: int, weekday: int, n: int) -> Optional[date]:
    """
    Resolve the nth occurrence of a weekday in a month.

    Args:
        year: Calendar year
        month0: 0-based month (values past 11 carry into later years)
        weekday: Sunday-based weekday (0-6)
        n: 1 for the first occurrence, 2 for the second, ... or -1 for the last

    Returns:
        The date, or None if the month has no such ordinal
        (e.g. a fifth Monday)

    Raises:
        ValueError: If n is 0 or below -1
    """
    if n == 0 or n < -1:
        raise ValueError(f"Ordinal week must be >= 1 or -1, got {n}")

    first = _first_of_month(year, month0)

    if n == -1:
        return first + relativedelta(day=31, weekday=_dateutil_weekday(weekday)(-1))

    result = first + relativedelta(weekday=_dateutil_weekday(weekday)(+1), weeks=n - 1)
    if result.month != first.month:
        return None
    return result


def clamp_day_to_month(year: int, month0: int, day: int) -> date:
    """
    Build a date, clamping the day to the month's last day.

    January 31 + "day 31 of February" gives February 28 (or 29), never
    a date in March.
    """
    return _first_of_month(year, month0) + relativedelta(day=day)


def add_months_rolling(d: datetime, months: int) -> datetime:
    """
    Add months without clamping the day.

    A day that does not exist in the target month rolls over into the
    next one: January 31 + 1 month is March 2 (March 3 in a common year).

    Args:
        d: Starting datetime
        months: Months to add

    Returns:
        Shifted datetime with the same time of day
    """
    first = _first_of_month(d.year, d.month - 1 + months)
    return datetime.combine(first + timedelta(days=d.day - 1), d.time())


# =============================================================================
# Range Boundaries
# =============================================================================


def start_of_day(d: date) -> datetime:
    return datetime.combine(d, time.min)


def end_of_day(d: date) -> datetime:
    return datetime.combine(d, END_OF_DAY)


def start_of_week(d: date, first_day_of_week: int = 1) -> datetime:
    """
    Midnight of the first day of the week containing ``d``.

    Args:
        d: Reference date
        first_day_of_week: Sunday-based weekday the week starts on
    """
    offset = (sunday_based_weekday(d) - first_day_of_week) % 7
    return start_of_day(d - timedelta(days=offset))


def end_of_week(d: date, first_day_of_week: int = 1) -> datetime:
    """Last instant of the week containing ``d``."""
    first = start_of_week(d, first_day_of_week).date()
    return end_of_day(first + timedelta(days=6))


def start_of_month(d: date) -> datetime:
    return start_of_day(d.replace(day=1))


def end_of_month(d: date) -> datetime:
    return end_of_day(d.replace(day=days_in_month(d.year, d.month - 1)))


def start_of_year(d: date) -> datetime:
    return start_of_day(date(d.year, 1, 1))


def end_of_year(d: date) -> datetime:
    return end_of_day(date(d.year, 12, 31))
