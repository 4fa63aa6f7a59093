# backend/ajanvaraus/schemas/availability.py
"""
Pydantic schemas for availability rules, bookings and calculator results.

Wall-clock times are accepted as "HH:MM" or "HH:MM:SS" and stored as
datetime.time. Day of week follows the Sunday-first convention:
0 = Sunday ... 6 = Saturday.
"""

import re
from datetime import date, datetime, time
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)(?::([0-5]\d))?$")


def parse_wall_time(value) -> time:
    """Parse "HH:MM" / "HH:MM:SS" into a time. time objects pass through."""
    if isinstance(value, time):
        return value.replace(tzinfo=None, microsecond=0)
    if not isinstance(value, str):
        raise ValueError("Time must be a string in HH:MM or HH:MM:SS format")
    match = TIME_PATTERN.match(value.strip())
    if not match:
        raise ValueError("Time must be in HH:MM or HH:MM:SS format")
    hours, minutes, seconds = match.groups()
    return time(int(hours), int(minutes), int(seconds or 0))


class _HoursRule(BaseModel):
    start_time: time
    end_time: time
    is_available: bool = True

    model_config = {"from_attributes": True}

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def validate_time(cls, v):
        return parse_wall_time(v)

    @model_validator(mode="after")
    def check_hours_order(self):
        if self.is_available and self.end_time <= self.start_time:
            raise ValueError(
                f"end_time {self.end_time} must be later than start_time {self.start_time}"
            )
        return self


class WeeklyRule(_HoursRule):
    """Recurring hours for one day of the week."""
    day_of_week: int = Field(ge=0, le=6)


class DateOverride(_HoursRule):
    """Special hours replacing the weekly rule on one date."""
    date: date


class BlockedDate(BaseModel):
    date: date
    reason: str = ""

    model_config = {"from_attributes": True}


class ExistingBooking(BaseModel):
    """A booking that occupies time. Status filtering is done by the caller."""
    start_time: datetime
    end_time: datetime

    model_config = {"from_attributes": True}

    @model_validator(mode="after")
    def check_interval(self):
        if (self.start_time.tzinfo is None) != (self.end_time.tzinfo is None):
            raise ValueError("Booking start_time and end_time must both be naive or both timezone-aware")
        if self.end_time <= self.start_time:
            raise ValueError(
                f"Booking end_time {self.end_time} must be later than start_time {self.start_time}"
            )
        return self


class Service(BaseModel):
    duration_minutes: int = Field(gt=0)

    model_config = {"from_attributes": True}


# ── Results ──────────────────────────────────────────────────────────────


class UnavailableReason(str, Enum):
    DATE_BLOCKED = "date blocked"
    CLOSED = "closed"
    OUTSIDE_HOURS = "outside business hours"
    IN_PAST = "in the past"
    SLOT_CONFLICT = "slot conflict"


class SlotCheckResult(BaseModel):
    """Decision for a single requested start time."""
    available: bool
    end: Optional[datetime] = None
    reason: Optional[UnavailableReason] = None
    detail: Optional[str] = None


class TimeSlot(BaseModel):
    start: datetime
    end: datetime


class MonthAvailability(BaseModel):
    """Per-day classification of a month. The two lists partition the month."""
    year: int
    month: int
    available_dates: list[date] = []
    blocked_dates: list[date] = []


class DaySchedule(BaseModel):
    enabled: bool = False
    start_time: Optional[time] = None
    end_time: Optional[time] = None
