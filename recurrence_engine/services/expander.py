"""
Series expansion service.

Turns one template event and one recurrence rule into the finite,
ordered list of occurrences that gets stored. Expansion happens once,
when the event is created; views only filter the stored occurrences.

Termination is guaranteed by MAX_SERIES_OCCURRENCES, which wins over
every end condition.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterator, Literal, Optional

from recurrence_engine.models.events import Occurrence, TemplateEvent
from recurrence_engine.models.recurrence import (
    EndAfter,
    EndCondition,
    EndNever,
    EndOnDate,
    NoRecurrence,
    WeeklyRule,
    describe_rule,
    parse_recurrence_rule,
)
from recurrence_engine.services.calendar_math import sunday_based_weekday
from recurrence_engine.services.generator import next_occurrence

logger = logging.getLogger(__name__)

# Hard upper bound on the length of any series, original event included
MAX_SERIES_OCCURRENCES = 100

StopReason = Literal["single", "end_condition", "exhausted", "safety_cap", "stalled"]


@dataclass
class SeriesExpansion:
    """Result of expanding one template."""

    series_id: str
    occurrences: list[Occurrence] = field(default_factory=list)
    stop_reason: StopReason = "single"

    @property
    def hit_safety_cap(self) -> bool:
        """True if the series was cut off by MAX_SERIES_OCCURRENCES."""
        return self.stop_reason == "safety_cap"

    def __len__(self) -> int:
        return len(self.occurrences)

    def __iter__(self) -> Iterator[Occurrence]:
        return iter(self.occurrences)


def new_series_id() -> str:
    """Generate an opaque series token."""
    return uuid.uuid4().hex


def _end_reached(end: EndCondition, emitted: int) -> bool:
    return isinstance(end, EndAfter) and emitted >= end.occurrences + 1


def expand_series(template: TemplateEvent, rule: Any = None) -> SeriesExpansion:
    """
    Expand a template into a recurring series.

    Occurrence 0 is the template itself. Each following occurrence is the
    template shifted to the next generated start, keeping its duration.
    The loop stops when:
    - the generator has no next date (e.g. missing ordinal weekday, or
      the next date would fall past the end of the calendar)
    - an EndAfter(N) series holds N + 1 occurrences
    - an EndOnDate(d) series generates a date after d (not emitted)
    - MAX_SERIES_OCCURRENCES is reached

    Args:
        template: Validated event to repeat
        rule: Recurrence rule model, ``kind``-tagged mapping, or None

    Returns:
        SeriesExpansion with occurrences in strictly increasing start order

    Raises:
        InvalidRecurrenceRuleError: If ``rule`` cannot be parsed
    """
    rule = parse_recurrence_rule(rule)
    series_id = new_series_id()
    expansion = SeriesExpansion(series_id=series_id)
    expansion.occurrences.append(Occurrence.from_template(template, series_id, 0))

    if isinstance(rule, NoRecurrence):
        return expansion

    end = rule.end
    default_weekday = None
    if isinstance(rule, WeeklyRule) and not rule.days_of_week:
        default_weekday = sunday_based_weekday(template.start_date)

    current: datetime = template.start_instant
    stop_reason: Optional[StopReason] = None

    while True:
        if _end_reached(end, len(expansion.occurrences)):
            stop_reason = "end_condition"
            break
        if len(expansion.occurrences) >= MAX_SERIES_OCCURRENCES:
            stop_reason = "safety_cap"
            break

        try:
            candidate = next_occurrence(current, rule, default_weekday)
        except (OverflowError, ValueError) as e:
            logger.info(
                f"Series {series_id} ends early after {len(expansion.occurrences)} "
                f"occurrences: cannot step past {current.date()}: {e}"
            )
            stop_reason = "exhausted"
            break

        if candidate is None:
            logger.info(
                f"Series {series_id} ends early after {len(expansion.occurrences)} "
                f"occurrences: no date satisfies '{describe_rule(rule)}' after {current.date()}"
            )
            stop_reason = "exhausted"
            break
        elif candidate <= current:
            logger.warning(
                f"Series {series_id} stalled at {current}: rule '{describe_rule(rule)}' "
                f"did not advance"
            )
            stop_reason = "stalled"
            break
        elif isinstance(end, EndOnDate) and candidate.date() > end.date:
            stop_reason = "end_condition"
            break

        try:
            occurrence = Occurrence.from_template(
                template,
                series_id,
                len(expansion.occurrences),
                anchor=candidate,
            )
        except OverflowError as e:
            logger.info(
                f"Series {series_id} ends early after {len(expansion.occurrences)} "
                f"occurrences: occurrence at {candidate} does not fit the calendar: {e}"
            )
            stop_reason = "exhausted"
            break

        expansion.occurrences.append(occurrence)
        current = candidate

    expansion.stop_reason = stop_reason

    if expansion.hit_safety_cap:
        if isinstance(end, EndNever):
            logger.info(
                f"Series {series_id} ('{describe_rule(rule)}') has no end; "
                f"materialized the first {MAX_SERIES_OCCURRENCES} occurrences"
            )
        else:
            logger.warning(
                f"Series {series_id} ('{describe_rule(rule)}') hit the safety cap of "
                f"{MAX_SERIES_OCCURRENCES} occurrences before its end condition"
            )

    return expansion


def expand(template: TemplateEvent, rule: Any = None) -> list[Occurrence]:
    """
    Expand a template and return only the occurrences.

    See ``expand_series`` for the stop conditions.
    """
    return expand_series(template, rule).occurrences
