# backend/ajanvaraus/services/slots/__init__.py
"""
Slots calculation module.

Rule set: weekly hours + date overrides + blocked dates
Calculator: single slot check, month calendar, day slot list
"""

from .config import BookingConfig, get_booking_config
from .errors import AvailabilityError, InvalidInputError, RuleDataError, DuplicateRuleError
from .rules import RuleSet, DayHours, day_of_week
from .calculator import (
    is_slot_available,
    list_available_dates,
    list_available_slots,
    group_bookings_by_date,
    overlaps,
)
from .schedule import default_weekly_rules, weekly_schedule, format_schedule

__all__ = [
    "BookingConfig",
    "get_booking_config",
    "AvailabilityError",
    "InvalidInputError",
    "RuleDataError",
    "DuplicateRuleError",
    "RuleSet",
    "DayHours",
    "day_of_week",
    "is_slot_available",
    "list_available_dates",
    "list_available_slots",
    "group_bookings_by_date",
    "overlaps",
    "default_weekly_rules",
    "weekly_schedule",
    "format_schedule",
]
