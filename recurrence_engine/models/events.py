"""
Event template and occurrence models.

Entities:
- TemplateEvent: the validated event handed over by the event editor
- Occurrence: one materialized copy of a template inside a series
"""

from datetime import date, datetime, time, timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class TemplateEvent(BaseModel):
    """
    Event being repeated.

    Date and time fields are naive (no time zone). Times are ignored for
    all-day events, which start and end at midnight of their dates.
    """

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., description="Event title")
    start_date: date = Field(..., description="First day of the event")
    end_date: date = Field(..., description="Last day of the event")
    start_time: time = Field(default=time.min, description="Start time (ignored if all-day)")
    end_time: time = Field(default=time.min, description="End time (ignored if all-day)")
    is_all_day: bool = Field(default=False, description="Whether this is an all-day event")
    category_id: Optional[str] = Field(None, description="Category identifier")
    location: str = Field(default="", description="Event location")
    description: str = Field(default="", description="Event description")

    @field_validator("title")
    @classmethod
    def validate_title_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()

    @model_validator(mode="after")
    def validate_end_after_start(self) -> "TemplateEvent":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        if (
            self.end_date == self.start_date
            and not self.is_all_day
            and self.end_time <= self.start_time
        ):
            raise ValueError("end_time must be after start_time on a single-day event")
        return self

    @property
    def start_instant(self) -> datetime:
        """Start date combined with start time (midnight for all-day)."""
        return datetime.combine(
            self.start_date, time.min if self.is_all_day else self.start_time
        )

    @property
    def end_instant(self) -> datetime:
        """End date combined with end time (midnight for all-day)."""
        return datetime.combine(
            self.end_date, time.min if self.is_all_day else self.end_time
        )

    @property
    def duration(self) -> timedelta:
        """Time between start and end instants."""
        return self.end_instant - self.start_instant

    def shifted_fields(self, anchor: datetime) -> dict:
        """
        Field updates that move this event so it starts at ``anchor``.

        The duration is kept, so a two-day event stays two days long
        and an evening event that ends after midnight still does.

        Args:
            anchor: New start instant

        Returns:
            Dict with start_date and end_date for the shifted copy
        """
        return {
            "start_date": anchor.date(),
            "end_date": (anchor + self.duration).date(),
        }


class Occurrence(TemplateEvent):
    """
    One event instance inside a recurring series.

    A fully independent copy of the template. Nothing links it back to
    the rule that produced it; only series_id and sequence_number remain.
    """

    series_id: str = Field(..., description="Token shared by all occurrences of one series")
    sequence_number: int = Field(
        ..., ge=0, description="Position in the series (0 = original event)"
    )

    @classmethod
    def from_template(
        cls,
        template: TemplateEvent,
        series_id: str,
        sequence_number: int,
        anchor: Optional[datetime] = None,
    ) -> "Occurrence":
        """
        Build an occurrence from a template.

        Args:
            template: Event being repeated
            series_id: Series token
            sequence_number: Position in the series
            anchor: New start instant (None keeps the template's dates)

        Returns:
            New Occurrence
        """
        fields = template.model_dump(
            exclude={"series_id", "sequence_number"}
        )
        if anchor is not None:
            fields.update(template.shifted_fields(anchor))
        return cls(
            **fields,
            series_id=series_id,
            sequence_number=sequence_number,
        )

    def __repr__(self) -> str:
        """String representation showing title, date and position."""
        return (
            f"<Occurrence(title='{self.title}', start='{self.start_date}', "
            f"series='{self.series_id}', seq={self.sequence_number})>"
        )
