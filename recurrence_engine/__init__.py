"""
Recurrence engine for the desktop calendar.

Expands a template event and a recurrence rule into a bounded series of
occurrences, and filters instances for year/month/week/day views.
"""

from recurrence_engine.exceptions import (
    RecurrenceEngineError,
    InvalidRecurrenceRuleError,
    InvalidDisplayRangeError,
)
from recurrence_engine.models import (
    TemplateEvent,
    Occurrence,
    parse_recurrence_rule,
    rule_from_form_data,
)
from recurrence_engine.services import (
    MAX_SERIES_OCCURRENCES,
    SeriesExpansion,
    expand,
    expand_series,
    next_occurrence,
    build_display_range,
    filter_instances,
    filter_for_view,
)

__all__ = [
    # Errors
    "RecurrenceEngineError",
    "InvalidRecurrenceRuleError",
    "InvalidDisplayRangeError",
    # Models
    "TemplateEvent",
    "Occurrence",
    "parse_recurrence_rule",
    "rule_from_form_data",
    # Engine
    "MAX_SERIES_OCCURRENCES",
    "SeriesExpansion",
    "expand",
    "expand_series",
    "next_occurrence",
    # Window filter
    "build_display_range",
    "filter_instances",
    "filter_for_view",
]
