"""
Custom exceptions for the recurrence engine.

Only malformed input at the boundary is escalated as an exception.
Date-math problems inside a series (short months, missing ordinals)
are clamped or end the series instead.
"""


class RecurrenceEngineError(Exception):
    """Base exception for recurrence engine operations."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class InvalidRecurrenceRuleError(RecurrenceEngineError):
    """
    Recurrence rule could not be interpreted.

    Causes:
    - Unknown recurrence kind or monthly/yearly mode
    - Fields that do not belong to the declared kind
    - Out-of-range weekday, month or ordinal week

    Raised before expansion starts, so no partial series exists.
    """


class InvalidDisplayRangeError(RecurrenceEngineError):
    """
    Display range could not be built.

    Causes:
    - Unknown view granularity
    - first_day_of_week outside 0..6
    """
