"""
Data models for the recurrence engine.

Event templates and occurrences, plus the recurrence rule variants.
"""

from recurrence_engine.models.events import TemplateEvent, Occurrence
from recurrence_engine.models.recurrence import (
    # End conditions
    EndNever,
    EndAfter,
    EndOnDate,
    EndCondition,
    # Monthly / yearly modes
    DayOfMonth,
    NthWeekday,
    DateInYear,
    NthWeekdayOfMonth,
    # Rules
    NoRecurrence,
    DailyRule,
    WeeklyRule,
    MonthlyRule,
    YearlyRule,
    CustomRule,
    RecurrenceRule,
    # Parsing
    parse_recurrence_rule,
    rule_from_form_data,
    describe_rule,
)

__all__ = [
    # Events
    "TemplateEvent",
    "Occurrence",
    # End conditions
    "EndNever",
    "EndAfter",
    "EndOnDate",
    "EndCondition",
    # Modes
    "DayOfMonth",
    "NthWeekday",
    "DateInYear",
    "NthWeekdayOfMonth",
    # Rules
    "NoRecurrence",
    "DailyRule",
    "WeeklyRule",
    "MonthlyRule",
    "YearlyRule",
    "CustomRule",
    "RecurrenceRule",
    # Parsing
    "parse_recurrence_rule",
    "rule_from_form_data",
    "describe_rule",
]
