"""
Recurrence rule models.

A recurrence rule is a closed tagged union discriminated on ``kind``:

- none:    no repetition
- daily:   every N days
- weekly:  every N weeks on selected weekdays
- monthly: every N months on a day of month or an nth weekday
- yearly:  every N years on a date or an nth weekday of a month
- custom:  every N days/weeks/months/years

Weekdays are 0 = Sunday .. 6 = Saturday and months are 0-based
(0 = January), matching the event editor's payloads.
"""

import logging
from datetime import date
from typing import Annotated, Any, Literal, Mapping, Optional, Union

from dateutil.parser import parse as parse_datetime
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from recurrence_engine.config import get_settings
from recurrence_engine.exceptions import InvalidRecurrenceRuleError

logger = logging.getLogger(__name__)

Weekday = Annotated[int, Field(ge=0, le=6)]
Month0 = Annotated[int, Field(ge=0, le=11)]
DayNumber = Annotated[int, Field(ge=1, le=31)]
OrdinalWeek = Literal[1, 2, 3, 4, -1]

WEEKDAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
MONTH_NAMES = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
ORDINAL_NAMES = {1: "1st", 2: "2nd", 3: "3rd", 4: "4th", -1: "last"}


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


# =============================================================================
# End Conditions
# =============================================================================


class EndNever(_Frozen):
    """Series repeats until the safety cap."""

    type: Literal["never"] = "never"


class EndAfter(_Frozen):
    """Series stops after N occurrences beyond the original event."""

    type: Literal["after"] = "after"
    occurrences: int = Field(..., ge=1, description="Additional occurrences after the original")


class EndOnDate(_Frozen):
    """Series stops after the given date (inclusive)."""

    type: Literal["on_date"] = "on_date"
    date: date


EndCondition = Annotated[
    Union[EndNever, EndAfter, EndOnDate],
    Field(discriminator="type"),
]


# =============================================================================
# Monthly / Yearly Modes
# =============================================================================


class DayOfMonth(_Frozen):
    """Fixed day of the month, clamped to the month's last day."""

    type: Literal["day_of_month"] = "day_of_month"
    day: DayNumber


class NthWeekday(_Frozen):
    """Nth weekday of the month (week -1 = last)."""

    type: Literal["nth_weekday"] = "nth_weekday"
    week: OrdinalWeek
    weekday: Weekday


class DateInYear(_Frozen):
    """Fixed month and day of the year."""

    type: Literal["date_in_year"] = "date_in_year"
    month: Month0
    day: DayNumber


class NthWeekdayOfMonth(_Frozen):
    """Nth weekday of a fixed month (week -1 = last)."""

    type: Literal["nth_weekday_of_month"] = "nth_weekday_of_month"
    month: Month0
    week: OrdinalWeek
    weekday: Weekday


MonthlyMode = Annotated[Union[DayOfMonth, NthWeekday], Field(discriminator="type")]
YearlyMode = Annotated[Union[DateInYear, NthWeekdayOfMonth], Field(discriminator="type")]


# =============================================================================
# Rules
# =============================================================================


class NoRecurrence(_Frozen):
    """Single, non-repeating event."""

    kind: Literal["none"] = "none"


class _RepeatingRule(_Frozen):
    """Common fields of every repeating rule."""

    interval: int = Field(default=1, description="Repeat every N units (normalized to >= 1)")
    end: EndCondition = Field(default_factory=EndNever)

    @field_validator("interval", mode="before")
    @classmethod
    def default_missing_interval(cls, v: Any) -> Any:
        return 1 if v is None else v

    @field_validator("interval")
    @classmethod
    def normalize_interval(cls, v: int) -> int:
        # Intervals are user input; degrade instead of failing
        if v < 1:
            logger.debug(f"Normalizing recurrence interval {v} to 1")
            return 1
        return v


class DailyRule(_RepeatingRule):
    """Every N days."""

    kind: Literal["daily"] = "daily"


class WeeklyRule(_RepeatingRule):
    """
    Every N weeks on the selected weekdays.

    An empty day set means "the weekday of the template's start date".
    """

    kind: Literal["weekly"] = "weekly"
    days_of_week: frozenset[Weekday] = Field(default_factory=frozenset)


class MonthlyRule(_RepeatingRule):
    """Every N months."""

    kind: Literal["monthly"] = "monthly"
    mode: MonthlyMode


class YearlyRule(_RepeatingRule):
    """Every N years."""

    kind: Literal["yearly"] = "yearly"
    mode: YearlyMode


class CustomRule(_RepeatingRule):
    """Every N units of days, weeks, months or years."""

    kind: Literal["custom"] = "custom"
    unit: Literal["days", "weeks", "months", "years"]


RecurrenceRule = Annotated[
    Union[NoRecurrence, DailyRule, WeeklyRule, MonthlyRule, YearlyRule, CustomRule],
    Field(discriminator="kind"),
]

RULE_TYPES = (NoRecurrence, DailyRule, WeeklyRule, MonthlyRule, YearlyRule, CustomRule)

_rule_adapter: TypeAdapter = TypeAdapter(RecurrenceRule)


# =============================================================================
# Parsing
# =============================================================================


def parse_recurrence_rule(data: Any) -> RecurrenceRule:
    """
    Validate a ``kind``-tagged mapping into a recurrence rule.

    Args:
        data: Mapping such as ``{"kind": "daily", "interval": 2}``, an
            already-built rule, or None for no recurrence

    Returns:
        Recurrence rule model

    Raises:
        InvalidRecurrenceRuleError: If the kind, mode or fields are invalid
    """
    if data is None:
        return NoRecurrence()

    if isinstance(data, RULE_TYPES):
        return data

    if not isinstance(data, Mapping):
        raise InvalidRecurrenceRuleError(
            f"Recurrence rule must be a mapping, got {type(data).__name__}"
        )

    try:
        return _rule_adapter.validate_python(dict(data))
    except ValidationError as e:
        raise InvalidRecurrenceRuleError(f"Invalid recurrence rule: {e}", original_error=e)


def _coerce_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    """Parse an integer form value, falling back to ``default``."""
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _end_from_form_data(end: Optional[Mapping]) -> dict:
    """Convert the editor's end payload into an end condition mapping."""
    if not end:
        return {"type": "never"}

    end_type = end.get("type")

    if end_type == "after":
        occurrences = _coerce_int(end.get("occurrences")) or get_settings().default_end_after_occurrences
        return {"type": "after", "occurrences": occurrences}

    if end_type == "on-date":
        raw = end.get("date")
        if isinstance(raw, date):
            return {"type": "on_date", "date": raw}
        try:
            return {"type": "on_date", "date": parse_datetime(str(raw)).date()}
        except (ValueError, TypeError, OverflowError) as e:
            raise InvalidRecurrenceRuleError(
                f"Invalid recurrence end date: {raw!r}", original_error=e
            )

    return {"type": "never"}


def rule_from_form_data(data: Optional[Mapping], start_date: date) -> RecurrenceRule:
    """
    Build a rule from the event editor's recurrence payload.

    The editor sends ``type`` plus kind-specific keys (``days``,
    ``monthlyType``, ``dayOfMonth``, ``weekNumber``, ``dayOfWeek``,
    ``yearlyType``, ``month``, ``unit``) and an ``end`` object.
    Values the editor derives from the start date are filled in the
    same way here when missing.

    Args:
        data: Editor payload (None or ``type == "none"`` for no recurrence)
        start_date: Template start date

    Returns:
        Recurrence rule model

    Raises:
        InvalidRecurrenceRuleError: If the type is unknown or fields are invalid
    """
    if not data or data.get("type", "none") == "none":
        return NoRecurrence()

    rule_type = data.get("type")
    rule: dict[str, Any] = {
        "kind": rule_type,
        "interval": _coerce_int(data.get("interval"), 1),
        "end": _end_from_form_data(data.get("end")),
    }
    start_weekday = (start_date.weekday() + 1) % 7

    if rule_type == "daily":
        pass
    elif rule_type == "weekly":
        days = [_coerce_int(d) for d in data.get("days") or []]
        rule["days_of_week"] = [d for d in days if d is not None] or [start_weekday]
    elif rule_type == "monthly":
        if data.get("monthlyType", "day-of-month") == "day-of-month":
            rule["mode"] = {
                "type": "day_of_month",
                "day": _coerce_int(data.get("dayOfMonth"), start_date.day),
            }
        else:
            rule["mode"] = {
                "type": "nth_weekday",
                "week": _coerce_int(data.get("weekNumber")),
                "weekday": _coerce_int(data.get("dayOfWeek"), start_weekday),
            }
    elif rule_type == "yearly":
        month = _coerce_int(data.get("month"), start_date.month - 1)
        if data.get("yearlyType", "date") == "date":
            rule["mode"] = {
                "type": "date_in_year",
                "month": month,
                "day": _coerce_int(data.get("dayOfMonth"), start_date.day),
            }
        else:
            rule["mode"] = {
                "type": "nth_weekday_of_month",
                "month": month,
                "week": _coerce_int(data.get("weekNumber")),
                "weekday": _coerce_int(data.get("dayOfWeek"), start_weekday),
            }
    elif rule_type == "custom":
        rule["unit"] = data.get("unit")
    else:
        raise InvalidRecurrenceRuleError(f"Unknown recurrence type: {rule_type!r}")

    return parse_recurrence_rule(rule)


# =============================================================================
# Description
# =============================================================================


def _every(interval: int, unit: str) -> str:
    return f"every {unit}" if interval == 1 else f"every {interval} {unit}s"


def _describe_end(end: Union[EndNever, EndAfter, EndOnDate]) -> str:
    if isinstance(end, EndAfter):
        return f", {end.occurrences} more times"
    if isinstance(end, EndOnDate):
        return f", until {end.date.isoformat()}"
    return ""


def describe_rule(rule: RecurrenceRule) -> str:
    """
    Short English summary of a rule, used in log messages.

    Example:
        >>> describe_rule(WeeklyRule(interval=2, days_of_week={1, 3}))
        'every 2 weeks on Mon, Wed'
    """
    if isinstance(rule, NoRecurrence):
        return "does not repeat"

    if isinstance(rule, DailyRule):
        text = _every(rule.interval, "day")
    elif isinstance(rule, WeeklyRule):
        text = _every(rule.interval, "week")
        if rule.days_of_week:
            text += " on " + ", ".join(WEEKDAY_NAMES[d] for d in sorted(rule.days_of_week))
    elif isinstance(rule, MonthlyRule):
        text = _every(rule.interval, "month")
        if isinstance(rule.mode, DayOfMonth):
            text += f" on day {rule.mode.day}"
        else:
            text += f" on the {ORDINAL_NAMES[rule.mode.week]} {WEEKDAY_NAMES[rule.mode.weekday]}"
    elif isinstance(rule, YearlyRule):
        text = _every(rule.interval, "year")
        mode = rule.mode
        if isinstance(mode, DateInYear):
            text += f" on {MONTH_NAMES[mode.month]} {mode.day}"
        else:
            text += (
                f" on the {ORDINAL_NAMES[mode.week]} {WEEKDAY_NAMES[mode.weekday]}"
                f" of {MONTH_NAMES[mode.month]}"
            )
    else:
        text = _every(rule.interval, rule.unit.rstrip("s"))

    return text + _describe_end(rule.end)
