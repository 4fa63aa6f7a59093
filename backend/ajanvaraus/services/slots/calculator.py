# backend/ajanvaraus/services/slots/calculator.py
"""
Availability calculation.

Three entry points:
  is_slot_available    → one requested start time → yes/no + end / reason
  list_available_dates → month → available / blocked dates (partition)
  list_available_slots → one date → every bookable start time

Candidate start times for a day:
  ✓ grid from opening time, step = slot_step_minutes
  ✓ end of every booking inside the window (gaps opening off-grid)
  ✓ candidate + duration <= closing time
  ✓ "now" itself on today's date
  ✗ candidates before "now" on today's date

Overlap is half-open: [a, b) and [c, d) overlap iff a < d and c < b.
A booking ending at 10:00 does not conflict with a slot starting at 10:00.

No I/O. Callers pass already loaded records.
"""

import calendar
import logging
from collections import defaultdict
from collections.abc import Mapping
from datetime import date, datetime, timedelta
from typing import Iterable, Iterator, Optional, Union

from ...schemas.availability import (
    ExistingBooking,
    MonthAvailability,
    SlotCheckResult,
    TimeSlot,
    UnavailableReason,
)
from .config import BookingConfig, get_booking_config
from .errors import InvalidInputError
from .rules import DayHours, RuleSet, coerce_records

logger = logging.getLogger(__name__)

BookingsInput = Union[Mapping[date, Iterable], Iterable, None]


def is_slot_available(
    requested_start: Union[datetime, str],
    duration_minutes: int,
    rules: Optional[Iterable] = None,
    overrides: Optional[Iterable] = None,
    blocked: Optional[Iterable] = None,
    bookings: Optional[Iterable] = None,
    *,
    config: BookingConfig | None = None,
    now: datetime | None = None,
) -> SlotCheckResult:
    """
    Check whether a booking can start at requested_start.

    Returns:
        SlotCheckResult: available=True with end, or available=False with reason.

    Raises:
        InvalidInputError: non-positive duration or malformed start.
        RuleDataError: malformed rule / override / booking records.
    """
    config = config or get_booking_config()
    duration = _validate_duration(duration_minutes)
    start = config.to_local(_parse_start(requested_start))
    now = config.to_local(now) if now else config.now()

    ruleset = _build_ruleset(rules, overrides, blocked, config)
    day_bookings = _coerce_bookings(bookings, config)

    end = start + duration
    target = start.date()

    # Step 1: Blocked date
    if ruleset.is_blocked(target):
        logger.debug(f"{start.isoformat()}: date blocked")
        return SlotCheckResult(
            available=False,
            reason=UnavailableReason.DATE_BLOCKED,
            detail=ruleset.blocked_reason(target) or None,
        )

    # Step 2: Effective hours (override > weekly)
    hours = ruleset.hours_for(target)
    if hours is None:
        logger.debug(f"{start.isoformat()}: closed")
        return SlotCheckResult(available=False, reason=UnavailableReason.CLOSED)

    # Step 3: Inside opening window
    if start < hours.open or end > hours.close:
        logger.debug(
            f"{start.isoformat()}-{end.time().isoformat()}: outside "
            f"{hours.open.time().isoformat()}-{hours.close.time().isoformat()}"
        )
        return SlotCheckResult(available=False, reason=UnavailableReason.OUTSIDE_HOURS)

    # Step 4: Past
    if start < now:
        return SlotCheckResult(available=False, reason=UnavailableReason.IN_PAST)

    # Step 5: Conflicts with existing bookings
    for booking in day_bookings:
        if overlaps(start, end, booking.start_time, booking.end_time):
            logger.debug(
                f"{start.isoformat()}: conflicts with booking "
                f"{booking.start_time.isoformat()}-{booking.end_time.isoformat()}"
            )
            return SlotCheckResult(available=False, reason=UnavailableReason.SLOT_CONFLICT)

    return SlotCheckResult(available=True, end=end)


def list_available_dates(
    year: int,
    month: int,
    duration_minutes: int,
    rules: Optional[Iterable] = None,
    overrides: Optional[Iterable] = None,
    blocked: Optional[Iterable] = None,
    bookings_by_date: BookingsInput = None,
    *,
    config: BookingConfig | None = None,
    now: datetime | None = None,
) -> MonthAvailability:
    """
    Classify every day of a month as available or blocked.

    A day is available when at least one slot of duration_minutes fits
    inside its effective hours without overlapping a booking.

    Args:
        bookings_by_date: {date: [bookings]} or a flat iterable of bookings
    """
    config = config or get_booking_config()
    duration = _validate_duration(duration_minutes)
    _validate_month(year, month)
    now = config.to_local(now) if now else config.now()
    today = now.date()

    ruleset = _build_ruleset(rules, overrides, blocked, config)
    grouped = _group_bookings_input(bookings_by_date, config)

    result = MonthAvailability(year=year, month=month)
    days_in_month = calendar.monthrange(year, month)[1]

    for day in range(1, days_in_month + 1):
        current = date(year, month, day)

        if current < today:
            result.blocked_dates.append(current)
            continue

        if ruleset.is_blocked(current):
            result.blocked_dates.append(current)
            continue

        hours = ruleset.hours_for(current)
        if hours is None:
            result.blocked_dates.append(current)
            continue

        not_before = now if current == today else None
        first = next(
            _free_starts(hours, duration, grouped.get(current, []), config, not_before),
            None,
        )
        if first is None:
            result.blocked_dates.append(current)
        else:
            result.available_dates.append(current)

    logger.debug(
        f"{year}-{month:02d}: {len(result.available_dates)} available, "
        f"{len(result.blocked_dates)} blocked (duration {duration_minutes} min)"
    )
    return result


def list_available_slots(
    target_date: Union[date, str],
    duration_minutes: int,
    rules: Optional[Iterable] = None,
    overrides: Optional[Iterable] = None,
    blocked: Optional[Iterable] = None,
    bookings: BookingsInput = None,
    *,
    config: BookingConfig | None = None,
    now: datetime | None = None,
) -> list[TimeSlot]:
    """
    All bookable start times for a date, ascending.

    Past, blocked or closed dates return an empty list.
    """
    config = config or get_booking_config()
    duration = _validate_duration(duration_minutes)
    target = _parse_date(target_date)
    now = config.to_local(now) if now else config.now()

    ruleset = _build_ruleset(rules, overrides, blocked, config)
    grouped = _group_bookings_input(bookings, config)

    if target < now.date():
        return []

    hours = ruleset.hours_for(target)
    if hours is None:
        return []

    not_before = now if target == now.date() else None
    return [
        TimeSlot(start=start, end=start + duration)
        for start in _free_starts(hours, duration, grouped.get(target, []), config, not_before)
    ]


# ── Intervals ────────────────────────────────────────────────────────────


def overlaps(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    """Half-open interval overlap; touching endpoints do not overlap."""
    return start_a < end_b and start_b < end_a


def _candidate_starts(
    hours: DayHours,
    duration: timedelta,
    bookings: list[ExistingBooking],
    config: BookingConfig,
    not_before: datetime | None = None,
) -> list[datetime]:
    """
    Grid starts plus booking end times that still leave room for the slot.

    On today's date "now" is a candidate too, and nothing earlier is.
    """
    latest = hours.close - duration
    if latest < hours.open:
        return []

    step = timedelta(minutes=config.slot_step_minutes)
    candidates = set()

    t = hours.open
    while t <= latest:
        candidates.add(t)
        t += step

    for booking in bookings:
        if hours.open <= booking.end_time <= latest:
            candidates.add(booking.end_time)

    if not_before is None:
        return sorted(candidates)

    if hours.open <= not_before <= latest:
        candidates.add(not_before)
    return sorted(t for t in candidates if t >= not_before)


def _free_starts(
    hours: DayHours,
    duration: timedelta,
    bookings: list[ExistingBooking],
    config: BookingConfig,
    not_before: datetime | None = None,
) -> Iterator[datetime]:
    """Yield candidate starts that do not overlap any booking."""
    for start in _candidate_starts(hours, duration, bookings, config, not_before):
        end = start + duration
        if any(overlaps(start, end, b.start_time, b.end_time) for b in bookings):
            continue
        yield start


# ── Input helpers ────────────────────────────────────────────────────────


def _validate_duration(duration_minutes) -> timedelta:
    if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int):
        raise InvalidInputError(
            f"duration_minutes must be an integer, got {type(duration_minutes).__name__}"
        )
    if duration_minutes <= 0:
        raise InvalidInputError(f"duration_minutes must be positive, got {duration_minutes}")
    return timedelta(minutes=duration_minutes)


def _validate_month(year, month) -> None:
    if isinstance(year, bool) or not isinstance(year, int) or not 1 <= year <= 9999:
        raise InvalidInputError(f"Invalid year: {year!r}")
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise InvalidInputError(f"Invalid month: {month!r}")


def _parse_start(value) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            raise InvalidInputError(f"Invalid start time: {value!r}")
    raise InvalidInputError(f"Start time must be a datetime, got {type(value).__name__}")


def _parse_date(value) -> date:
    if isinstance(value, datetime):
        raise InvalidInputError("Expected a date without time, got a datetime")
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            raise InvalidInputError(f"Date must be in YYYY-MM-DD format, got {value!r}")
    raise InvalidInputError(f"Date must be a date, got {type(value).__name__}")


def _build_ruleset(rules, overrides, blocked, config: BookingConfig) -> RuleSet:
    return RuleSet.build(
        rules=rules,
        overrides=overrides,
        blocked=blocked,
        duplicate_policy=config.duplicate_weekly_rules,
    )


def _coerce_bookings(bookings, config: BookingConfig) -> list[ExistingBooking]:
    """Validate bookings and convert their times to business-local wall time."""
    return [
        ExistingBooking(
            start_time=config.to_local(b.start_time),
            end_time=config.to_local(b.end_time),
        )
        for b in coerce_records(bookings, ExistingBooking, "booking")
    ]


def group_bookings_by_date(
    bookings: Optional[Iterable],
    config: BookingConfig | None = None,
) -> dict[date, list[ExistingBooking]]:
    """
    Group bookings under every local date they touch.

    A booking 23:00-01:00 is listed under both dates.
    """
    config = config or get_booking_config()
    grouped: dict[date, list[ExistingBooking]] = defaultdict(list)
    for booking in _coerce_bookings(bookings, config):
        current = booking.start_time.date()
        last = (booking.end_time - timedelta(microseconds=1)).date()
        while current <= last:
            grouped[current].append(booking)
            current += timedelta(days=1)
    return dict(grouped)


def _group_bookings_input(bookings: BookingsInput, config: BookingConfig) -> dict[date, list[ExistingBooking]]:
    if bookings is None:
        return {}
    if isinstance(bookings, Mapping):
        flat = [b for day_bookings in bookings.values() for b in (day_bookings or ())]
        return group_bookings_by_date(flat, config)
    return group_bookings_by_date(bookings, config)
