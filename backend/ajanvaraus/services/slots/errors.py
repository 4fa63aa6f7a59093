# backend/ajanvaraus/services/slots/errors.py
"""
Availability errors.

"Not available" is a normal calculator result, never an exception.
These are raised only for bad requests and broken rule data.
"""


class AvailabilityError(Exception):
    """Base class for availability calculation errors."""


class InvalidInputError(AvailabilityError, ValueError):
    """Request input is malformed (non-positive duration, bad date, ...)."""


class RuleDataError(AvailabilityError, ValueError):
    """Rule, override, blocked date or booking data is malformed."""


class DuplicateRuleError(RuleDataError):
    """More than one weekly rule for a day, or override for a date."""
