"""
Calendar event models.

Events are fixed commitments (meetings, appointments) that occupy calendar
capacity. The scheduler never moves them.
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from app.models.schedule import ExistingEvent
from app.utils.datetime_utils import parse_time_to_minutes


class CalendarEventCreate(BaseModel):
    """Schema for creating a calendar event."""

    title: str = Field(..., min_length=1, max_length=500)
    date: date
    start_time: str = Field(..., description="HH:MM")
    end_time: str = Field(..., description="HH:MM (24:00 allowed)")

    @model_validator(mode="after")
    def validate_times(self):
        start = parse_time_to_minutes(self.start_time)
        end = parse_time_to_minutes(self.end_time, allow_end_of_day=True)
        if start is None or end is None:
            raise ValueError("start_time and end_time must be HH:MM")
        if end <= start:
            raise ValueError("end_time must be after start_time")
        return self


class CalendarEvent(CalendarEventCreate):
    """Persisted calendar event."""

    id: UUID
    user_id: str
    created_at: Optional[datetime] = None

    def to_existing_event(self) -> ExistingEvent:
        return ExistingEvent(date=self.date, start_time=self.start_time, end_time=self.end_time)
