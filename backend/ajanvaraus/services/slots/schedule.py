# backend/ajanvaraus/services/slots/schedule.py
"""
Weekly schedule helpers.

Default hours (new installation):
  Mon-Fri 10:00-18:00
  Sat     10:00-14:00
  Sun     closed
"""

from datetime import time
from typing import Iterable, Optional

from ...schemas.availability import DaySchedule, WeeklyRule
from .config import minutes_to_time_str
from .rules import DAY_NAMES, coerce_records


def default_weekly_rules() -> list[WeeklyRule]:
    """Standard schedule: weekdays 10-18, Saturday 10-14."""
    rules = [
        WeeklyRule(day_of_week=dow, start_time="10:00", end_time="18:00")
        for dow in range(1, 6)
    ]
    rules.append(WeeklyRule(day_of_week=6, start_time="10:00", end_time="14:00"))
    return rules


def weekly_schedule(rules: Optional[Iterable]) -> dict[str, DaySchedule]:
    """
    Sunday-first view of weekly rules, one entry per day.

    Days without a rule, or with an unavailable rule, are disabled.
    With repeated rules for a day the later one is shown.
    """
    schedule = {name: DaySchedule() for name in DAY_NAMES}
    for rule in coerce_records(rules, WeeklyRule, "weekly rule"):
        if not rule.is_available:
            schedule[DAY_NAMES[rule.day_of_week]] = DaySchedule()
            continue
        schedule[DAY_NAMES[rule.day_of_week]] = DaySchedule(
            enabled=True,
            start_time=rule.start_time,
            end_time=rule.end_time,
        )
    return schedule


def format_day_value(day: DaySchedule) -> str:
    """
    - enabled 10:00-18:00 → "10:00-18:00"
    - disabled → "closed"
    """
    if not day.enabled:
        return "closed"
    return f"{_hhmm(day.start_time)}-{_hhmm(day.end_time)}"


def format_schedule(rules: Optional[Iterable]) -> list[str]:
    """
    Printable schedule.

    Sunday: closed
    Monday: 10:00-18:00
    ...
    """
    return [
        f"{name}: {format_day_value(day)}"
        for name, day in weekly_schedule(rules).items()
    ]


def _hhmm(value: time) -> str:
    return minutes_to_time_str(value.hour * 60 + value.minute)
