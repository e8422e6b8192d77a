"""Type definitions for recur_rule data structures.

Two shapes live here:

1. **RecurrenceRuleConfig** (TypedDict, total=False): the plain dict a host
   application persists and hands back to `RecurrenceEngine.from_config()`.
   Dates may be ISO strings so the dict round-trips through JSON storage.

2. **RecurrenceRule** (frozen dataclass): the validated, normalized rule.
   Built only by `data_builders.build_recurrence_rule()`, never mutated.

DATE-ONLY INVARIANT: `origin` and `until` are `datetime.date` values. All
engine comparisons happen on dates, so time-of-day can never leak into a
comparison. `time_of_day` is applied only when an occurrence is emitted.

IMPORTANT: This file must NOT import from engines/ or data_builders.py.
Only import from const.py (constants) and typing (type machinery).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import TypedDict

from . import const


class RecurrenceRuleConfig(TypedDict, total=False):
    """Host-facing configuration for a recurrence rule.

    Exactly one of `until` / `count` must be present.
    """

    frequency: str  # FREQUENCY_* constant from const.py
    interval: int  # Units of frequency between occurrences (default: 1)
    start: str | date | datetime  # ISO datetime string or date/datetime
    until: str | date | datetime  # Inclusive last day (mutually exclusive with count)
    count: int  # Total number of occurrences (mutually exclusive with until)


@dataclass(frozen=True, slots=True)
class RecurrenceRule:
    """Validated recurrence rule.

    Attributes:
        frequency: FREQUENCY_* constant
        interval: Frequency units between occurrences (>= 1)
        origin: Time-stripped start date, anchor of every interval offset
        time_of_day: Wall-clock time (and tzinfo label) reapplied to occurrences
        until: Inclusive last calendar day, or None for count-terminated rules
        count: Total occurrences, or None for until-terminated rules
        anchor_weekday: Origin weekday (0=Mon, 6=Sun), monthly rules only
        anchor_week_of_month: 1-based ordinal of the origin weekday, monthly only
        monthly_pattern: MONTHLY_PATTERN_* constant, monthly rules only
    """

    frequency: str
    interval: int
    origin: date
    time_of_day: time
    until: date | None = None
    count: int | None = None
    anchor_weekday: int | None = None
    anchor_week_of_month: int | None = None
    monthly_pattern: str | None = None

    @property
    def is_count_bounded(self) -> bool:
        """Return True when the rule terminates after a fixed count."""
        return self.count is not None

    @property
    def until_end(self) -> datetime | None:
        """Return the last instant of the `until` day (inclusive bound)."""
        if self.until is None:
            return None
        return datetime(
            self.until.year,
            self.until.month,
            self.until.day,
            const.END_OF_DAY_HOUR,
            const.END_OF_DAY_MINUTE,
            const.END_OF_DAY_SECOND,
            const.END_OF_DAY_MICROSECOND,
            tzinfo=self.time_of_day.tzinfo,
        )
