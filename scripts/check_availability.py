"""
scripts/check_availability.py

Print the weekly schedule and the available dates of a month for rule data
exported to JSON:

{
  "weekly_rules": [{"day_of_week": 1, "start_time": "10:00", "end_time": "18:00"}],
  "overrides":    [{"date": "2026-12-23", "start_time": "10:00", "end_time": "14:00"}],
  "blocked":      [{"date": "2026-12-24", "reason": "Christmas Eve"}],
  "bookings":     [{"start_time": "2026-12-01T10:00", "end_time": "2026-12-01T11:00"}]
}

Usage:
  python scripts/check_availability.py rules.json 2026 12 --duration 60
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from ajanvaraus.config import settings
from ajanvaraus.schemas.availability import Service
from ajanvaraus.services.slots import (
    AvailabilityError,
    format_schedule,
    list_available_dates,
)

logger = logging.getLogger("check_availability")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Check availability for a month")
    parser.add_argument("data", type=Path, help="JSON file with rules and bookings")
    parser.add_argument("year", type=int)
    parser.add_argument("month", type=int)
    parser.add_argument("--duration", type=int, default=60, help="Service duration in minutes")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.resolved_log_level)

    try:
        service = Service(duration_minutes=args.duration)
    except ValidationError as e:
        logger.error(f"Invalid --duration {args.duration}: {e}")
        return 1

    try:
        data = json.loads(args.data.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Cannot read {args.data}: {e}")
        return 1

    weekly_rules = data.get("weekly_rules", [])

    try:
        schedule_lines = format_schedule(weekly_rules)
        result = list_available_dates(
            args.year,
            args.month,
            service.duration_minutes,
            rules=weekly_rules,
            overrides=data.get("overrides", []),
            blocked=data.get("blocked", []),
            bookings_by_date=data.get("bookings", []),
        )
    except AvailabilityError as e:
        logger.error(f"Availability check failed: {e}")
        return 1

    print(f"Found {len(weekly_rules)} weekly rules:")
    for line in schedule_lines:
        print(f"  {line}")

    print(f"\n{args.year}-{args.month:02d}, {service.duration_minutes} min:")
    print("Available:", ", ".join(d.isoformat() for d in result.available_dates) or "-")
    print("Blocked:  ", ", ".join(d.isoformat() for d in result.blocked_dates) or "-")
    return 0


if __name__ == "__main__":
    sys.exit(main())
