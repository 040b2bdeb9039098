"""
Query helpers over materialized instances.

Provides the lookups the calendar needs besides view filtering:
- Day and month lookups
- Upcoming instances
- Multi-criteria search
- Category and series lookups

All functions take the instances as an argument and return new lists;
the caller's store owns the data.
"""

from collections import defaultdict
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from recurrence_engine.models.events import Occurrence, TemplateEvent
from recurrence_engine.services.calendar_math import end_of_day, start_of_day
from recurrence_engine.services.window import (
    DisplayRange,
    build_display_range,
    filter_instances,
)


def _by_start(instances: Iterable[TemplateEvent]) -> list[TemplateEvent]:
    return sorted(instances, key=lambda instance: instance.start_instant)


# =============================================================================
# Date Queries
# =============================================================================


def get_instances_for_day(
    instances: Iterable[TemplateEvent],
    day: date,
) -> list[TemplateEvent]:
    """
    Get instances visible on a day.

    Args:
        instances: Instances to search
        day: Day to query

    Returns:
        Instances overlapping the day, in original order
    """
    return filter_instances(instances, build_display_range("day", day))


def get_instances_for_month(
    instances: Iterable[TemplateEvent],
    year: int,
    month0: int,
) -> list[TemplateEvent]:
    """
    Get instances visible in a month.

    Args:
        instances: Instances to search
        year: Calendar year
        month0: 0-based month

    Returns:
        Instances overlapping the month, in original order
    """
    return filter_instances(instances, build_display_range("month", date(year, month0 + 1, 1)))


def get_upcoming_instances(
    instances: Iterable[TemplateEvent],
    now: datetime,
    limit: Optional[int] = None,
) -> list[TemplateEvent]:
    """
    Get instances starting at or after ``now``, soonest first.

    Args:
        instances: Instances to search
        now: Reference instant
        limit: Maximum number to return (None or <= 0 = no limit)

    Returns:
        Upcoming instances sorted by start
    """
    upcoming = _by_start(i for i in instances if i.start_instant >= now)
    if limit and limit > 0:
        return upcoming[:limit]
    return upcoming


# =============================================================================
# Search
# =============================================================================


def _contains(value: Optional[str], needle: str) -> bool:
    return bool(value) and needle.lower() in value.lower()


def search_instances(
    instances: Iterable[TemplateEvent],
    title: Optional[str] = None,
    category_id: Optional[str] = None,
    location: Optional[str] = None,
    description: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> list[TemplateEvent]:
    """
    Search instances by several criteria.

    Text criteria are case-insensitive substring matches. Date bounds
    cover whole days: start_date keeps instances ending on or after its
    midnight, end_date keeps instances starting on or before its last
    instant.

    Args:
        instances: Instances to search
        title: Text contained in the title
        category_id: Exact category identifier
        location: Text contained in the location
        description: Text contained in the description
        start_date: Earliest day of interest
        end_date: Latest day of interest

    Returns:
        Matching instances sorted by start
    """
    results = list(instances)

    if title:
        results = [i for i in results if _contains(i.title, title)]

    if category_id:
        results = [i for i in results if i.category_id == category_id]

    if location:
        results = [i for i in results if _contains(i.location, location)]

    if description:
        results = [i for i in results if _contains(i.description, description)]

    if start_date or end_date:
        window = DisplayRange(
            start_of_day(start_date) if start_date else datetime.min,
            end_of_day(end_date) if end_date else datetime.max,
        )
        results = filter_instances(results, window)

    return _by_start(results)


def get_instances_by_category(
    instances: Iterable[TemplateEvent],
    category_id: Optional[str],
) -> list[TemplateEvent]:
    """Get instances in a category (None = uncategorized), in original order."""
    return [i for i in instances if i.category_id == category_id]


# =============================================================================
# Series Queries
# =============================================================================


def get_series(instances: Iterable[Occurrence], series_id: str) -> list[Occurrence]:
    """
    Get the occurrences of one series.

    Args:
        instances: Occurrences to search
        series_id: Series token

    Returns:
        Occurrences sorted by sequence number
    """
    return sorted(
        (i for i in instances if i.series_id == series_id),
        key=lambda occurrence: occurrence.sequence_number,
    )


def group_by_series(instances: Sequence[Occurrence]) -> dict[str, list[Occurrence]]:
    """
    Group occurrences by series.

    Returns:
        Dict mapping series_id to its occurrences sorted by sequence number
    """
    groups: dict[str, list[Occurrence]] = defaultdict(list)
    for occurrence in instances:
        groups[occurrence.series_id].append(occurrence)
    return {
        series_id: sorted(members, key=lambda o: o.sequence_number)
        for series_id, members in groups.items()
    }
