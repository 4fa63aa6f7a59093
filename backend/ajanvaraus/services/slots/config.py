# backend/ajanvaraus/services/slots/config.py
"""
Booking configuration for slots calculation.
"""

from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ...config import settings


ALLOWED_STEPS = (5, 10, 15, 20, 30, 60)
DUPLICATE_POLICIES = ("reject", "last_wins")


@dataclass(frozen=True)
class BookingConfig:
    """
    Configuration for the availability calculator.

    Attributes:
        slot_step_minutes: Candidate grid step in minutes (5/10/15/20/30/60)
        timezone: IANA zone of the business; naive datetimes are local wall time
        duplicate_weekly_rules: "reject" raises on a second rule for the same
            day (or override for the same date), "last_wins" keeps the later one
    """
    slot_step_minutes: int = 15
    timezone: str = "Europe/Helsinki"
    duplicate_weekly_rules: str = "reject"

    def __post_init__(self):
        """Validate configuration."""
        if self.slot_step_minutes not in ALLOWED_STEPS:
            raise ValueError(
                f"slot_step_minutes must be one of {ALLOWED_STEPS}, got {self.slot_step_minutes}"
            )
        if self.duplicate_weekly_rules not in DUPLICATE_POLICIES:
            raise ValueError(
                f"duplicate_weekly_rules must be one of {DUPLICATE_POLICIES}, "
                f"got {self.duplicate_weekly_rules!r}"
            )
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone {self.timezone!r}")

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def to_local(self, dt: datetime) -> datetime:
        """Convert to naive business-local wall time. Naive input is already local."""
        if dt.tzinfo is None:
            return dt
        return dt.astimezone(self.zone).replace(tzinfo=None)

    def now(self) -> datetime:
        """Current business-local wall time (naive)."""
        return datetime.now(self.zone).replace(tzinfo=None)


@lru_cache
def get_booking_config() -> BookingConfig:
    """
    Get booking configuration (singleton), built from settings.
    """
    return BookingConfig(
        slot_step_minutes=settings.slot_step_minutes,
        timezone=settings.timezone,
        duplicate_weekly_rules=settings.duplicate_weekly_rules,
    )


def minutes_to_time_str(minutes: int) -> str:
    """Minutes since midnight → "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
