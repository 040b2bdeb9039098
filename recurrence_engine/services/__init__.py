"""
Service layer for the recurrence engine.

Provides:
- Calendar arithmetic
- Next-occurrence generation
- Series expansion with a safety cap
- Display window filtering
- Queries over materialized instances
"""

from recurrence_engine.services.calendar_math import (
    is_leap_year,
    days_in_month,
    nth_weekday_of_month,
    clamp_day_to_month,
    sunday_based_weekday,
    add_months_rolling,
    start_of_day,
    end_of_day,
    start_of_week,
    end_of_week,
    start_of_month,
    end_of_month,
    start_of_year,
    end_of_year,
)

from recurrence_engine.services.generator import next_occurrence

from recurrence_engine.services.expander import (
    MAX_SERIES_OCCURRENCES,
    SeriesExpansion,
    expand,
    expand_series,
)

from recurrence_engine.services.window import (
    DisplayRange,
    build_display_range,
    is_visible,
    filter_instances,
    filter_for_view,
)

from recurrence_engine.services.queries import (
    get_instances_for_day,
    get_instances_for_month,
    get_upcoming_instances,
    search_instances,
    get_instances_by_category,
    get_series,
    group_by_series,
)

__all__ = [
    # Calendar math
    "is_leap_year",
    "days_in_month",
    "nth_weekday_of_month",
    "clamp_day_to_month",
    "sunday_based_weekday",
    "add_months_rolling",
    "start_of_day",
    "end_of_day",
    "start_of_week",
    "end_of_week",
    "start_of_month",
    "end_of_month",
    "start_of_year",
    "end_of_year",
    # Generation
    "next_occurrence",
    # Expansion
    "MAX_SERIES_OCCURRENCES",
    "SeriesExpansion",
    "expand",
    "expand_series",
    # Window filter
    "DisplayRange",
    "build_display_range",
    "is_visible",
    "filter_instances",
    "filter_for_view",
    # Queries
    "get_instances_for_day",
    "get_instances_for_month",
    "get_upcoming_instances",
    "search_instances",
    "get_instances_by_category",
    "get_series",
    "group_by_series",
]
