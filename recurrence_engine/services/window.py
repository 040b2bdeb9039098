"""
Display window filtering.

Decides which already-materialized instances are visible in a year,
month, week or day view. Nothing is expanded here; recurring events
were expanded when they were created.

Windows are closed intervals: an instance that ends exactly at the
window start, or starts exactly at the window end, is visible.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Literal, Optional, Protocol, TypeVar

from recurrence_engine.config import get_settings
from recurrence_engine.exceptions import InvalidDisplayRangeError
from recurrence_engine.services.calendar_math import (
    end_of_day,
    end_of_month,
    end_of_week,
    end_of_year,
    start_of_day,
    start_of_month,
    start_of_week,
    start_of_year,
)

logger = logging.getLogger(__name__)

ViewGranularity = Literal["year", "month", "week", "day"]
GRANULARITIES = ("year", "month", "week", "day")


class Scheduled(Protocol):
    """Anything with a start and end instant (templates and occurrences)."""

    @property
    def start_instant(self) -> datetime: ...

    @property
    def end_instant(self) -> datetime: ...


T = TypeVar("T", bound=Scheduled)


@dataclass(frozen=True)
class DisplayRange:
    """Closed time interval shown by a view."""

    start: datetime
    end: datetime

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """Closed-interval overlap test against [start, end]."""
        return start <= self.end and end >= self.start


def build_display_range(
    granularity: ViewGranularity,
    reference: date,
    first_day_of_week: Optional[int] = None,
) -> DisplayRange:
    """
    Build the window for a view around a reference date.

    Args:
        granularity: 'year', 'month', 'week' or 'day'
        reference: Any date inside the wanted period
        first_day_of_week: Week start for week views (0 = Sunday);
            defaults to the configured first_day_of_week

    Returns:
        DisplayRange from 00:00:00.000 of the first day to
        23:59:59.999 of the last day

    Raises:
        InvalidDisplayRangeError: If granularity or first_day_of_week is invalid
    """
    if granularity == "year":
        return DisplayRange(start_of_year(reference), end_of_year(reference))
    if granularity == "month":
        return DisplayRange(start_of_month(reference), end_of_month(reference))
    if granularity == "day":
        return DisplayRange(start_of_day(reference), end_of_day(reference))
    if granularity == "week":
        if first_day_of_week is None:
            first_day_of_week = get_settings().first_day_of_week
        if not 0 <= first_day_of_week <= 6:
            raise InvalidDisplayRangeError(
                f"first_day_of_week must be between 0 and 6, got {first_day_of_week}"
            )
        return DisplayRange(
            start_of_week(reference, first_day_of_week),
            end_of_week(reference, first_day_of_week),
        )

    raise InvalidDisplayRangeError(
        f"Unknown view granularity: {granularity!r} (expected one of {', '.join(GRANULARITIES)})"
    )


def is_visible(instance: Scheduled, display_range: DisplayRange) -> bool:
    """Check whether an instance overlaps the window."""
    return display_range.overlaps(instance.start_instant, instance.end_instant)


def filter_instances(instances: Iterable[T], display_range: DisplayRange) -> list[T]:
    """
    Keep the instances that overlap a window.

    Args:
        instances: Recurring or single instances
        display_range: Window to test against

    Returns:
        Visible instances in their original order
    """
    return [instance for instance in instances if is_visible(instance, display_range)]


def filter_for_view(
    instances: Iterable[T],
    granularity: ViewGranularity,
    reference: date,
    first_day_of_week: Optional[int] = None,
) -> list[T]:
    """
    Filter instances for a view.

    Example:
        >>> may = filter_for_view(occurrences, "month", date(2024, 5, 15))
    """
    display_range = build_display_range(granularity, reference, first_day_of_week)
    visible = filter_instances(instances, display_range)
    logger.debug(
        f"{len(visible)} instances visible in {granularity} view "
        f"[{display_range.start} - {display_range.end}]"
    )
    return visible
