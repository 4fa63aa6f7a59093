# backend/ajanvaraus/services/slots/rules.py
"""
Rule set: weekly hours, date overrides and blocked dates, indexed once.

Effective hours for a date:
  1. blocked date          → closed
  2. override for the date → override hours (even if weekly rule is closed)
  3. weekly rule for dow   → weekly hours
  4. nothing               → closed
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Optional, Union

from pydantic import BaseModel, ValidationError

from ...schemas.availability import BlockedDate, DateOverride, WeeklyRule
from .errors import DuplicateRuleError, RuleDataError

logger = logging.getLogger(__name__)

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def day_of_week(d: date) -> int:
    """Sunday-first day of week: 0 = Sunday ... 6 = Saturday."""
    return (d.weekday() + 1) % 7


@dataclass(frozen=True)
class DayHours:
    """Opening window of one date as local datetimes."""
    open: datetime
    close: datetime


def coerce_records(records: Optional[Iterable], model: type[BaseModel], label: str) -> list:
    """
    Validate incoming records into schema models.

    Accepts model instances, dicts or attribute objects (ORM rows).
    Malformed records raise RuleDataError.
    """
    result = []
    for index, record in enumerate(records or ()):
        if isinstance(record, model):
            result.append(record)
            continue
        try:
            result.append(model.model_validate(record))
        except ValidationError as e:
            raise RuleDataError(f"Invalid {label} #{index}: {e}") from e
    return result


@dataclass
class RuleSet:
    weekly: dict[int, WeeklyRule] = field(default_factory=dict)
    overrides: dict[date, DateOverride] = field(default_factory=dict)
    blocked: dict[date, BlockedDate] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        rules: Optional[Iterable] = None,
        overrides: Optional[Iterable] = None,
        blocked: Optional[Iterable] = None,
        duplicate_policy: str = "reject",
    ) -> "RuleSet":
        """
        Index raw collections.

        Args:
            rules: weekly rules (WeeklyRule / dict / row)
            overrides: special dates (DateOverride / dict / row)
            blocked: blocked dates (BlockedDate / dict / row / plain date)
            duplicate_policy: "reject" or "last_wins" for repeated
                day_of_week rules and repeated override dates
        """
        ruleset = cls()

        for rule in coerce_records(rules, WeeklyRule, "weekly rule"):
            ruleset._put(ruleset.weekly, rule.day_of_week, rule, duplicate_policy,
                         f"weekly rule for {DAY_NAMES[rule.day_of_week]}")

        for ovr in coerce_records(overrides, DateOverride, "date override"):
            ruleset._put(ruleset.overrides, ovr.date, ovr, duplicate_policy,
                         f"override for {ovr.date.isoformat()}")

        blocked_records = [
            BlockedDate(date=b) if isinstance(b, date) and not isinstance(b, datetime) else b
            for b in (blocked or ())
        ]
        for blk in coerce_records(blocked_records, BlockedDate, "blocked date"):
            # Repeated blocks are harmless; keep the first reason.
            ruleset.blocked.setdefault(blk.date, blk)

        return ruleset

    @staticmethod
    def _put(index: dict, key, record, policy: str, label: str) -> None:
        if key in index:
            if policy == "reject":
                raise DuplicateRuleError(f"Duplicate {label}")
            logger.warning(f"Duplicate {label}; later record replaces earlier one")
        index[key] = record

    # ── Lookups ──────────────────────────────────────────────────────────

    def is_blocked(self, d: date) -> bool:
        return d in self.blocked

    def blocked_reason(self, d: date) -> Optional[str]:
        blk = self.blocked.get(d)
        return blk.reason if blk else None

    def effective_rule(self, d: date) -> Optional[Union[DateOverride, WeeklyRule]]:
        """Override for the date if any, else weekly rule for its day of week."""
        ovr = self.overrides.get(d)
        if ovr is not None:
            return ovr
        return self.weekly.get(day_of_week(d))

    def hours_for(self, d: date) -> Optional[DayHours]:
        """Opening window for the date, or None when blocked/closed."""
        if self.is_blocked(d):
            return None
        rule = self.effective_rule(d)
        if rule is None or not rule.is_available:
            return None
        return DayHours(
            open=datetime.combine(d, rule.start_time),
            close=datetime.combine(d, rule.end_time),
        )
