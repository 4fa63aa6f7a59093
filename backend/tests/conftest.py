from datetime import date, datetime

import pytest

from ajanvaraus.schemas.availability import WeeklyRule
from ajanvaraus.services.slots import BookingConfig


# Monday morning; every date used below is in the future relative to it.
NOW = datetime(2026, 10, 19, 8, 0)
MONDAY = date(2026, 10, 26)
SATURDAY = date(2026, 10, 31)
SUNDAY = date(2026, 10, 25)


def at(d: date, hour: int, minute: int = 0) -> datetime:
    return datetime(d.year, d.month, d.day, hour, minute)


@pytest.fixture
def config() -> BookingConfig:
    return BookingConfig(
        slot_step_minutes=15,
        timezone="Europe/Helsinki",
        duplicate_weekly_rules="reject",
    )


@pytest.fixture
def monday_rule() -> WeeklyRule:
    return WeeklyRule(day_of_week=1, start_time="09:00:00", end_time="17:00:00", is_available=True)


@pytest.fixture
def weekday_rules() -> list[WeeklyRule]:
    """Monday-Friday 09:00-17:00, weekend closed."""
    rules = [
        WeeklyRule(day_of_week=dow, start_time="09:00", end_time="17:00")
        for dow in range(1, 6)
    ]
    rules.append(WeeklyRule(day_of_week=6, start_time="10:00", end_time="14:00", is_available=False))
    return rules
