"""Schedule Engine for recur_rule.

Enumerates the concrete occurrence dates of a validated RecurrenceRule:
- Fixed-length steps (DAILY, WEEKLY) use day arithmetic with a
  mathematical fast-forward to the query window.
- Variable-length steps (MONTHLY, YEARLY) walk month/year indices with
  `dateutil.relativedelta`, resolving the nth/last weekday pattern or the
  Feb 29 leap-year rule for each candidate.

Every frequency is expressed as one lazy iterator of dates at or after a
given day. Count queries take the first N from the origin, range queries
take dates up to the window end. Time-of-day is applied only on output.

IMPORTANT: This module must NOT perform validation of rule fields. Rules
arrive already validated from data_builders.py. Only query arguments are
checked here.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import MAXYEAR, UTC, date, datetime
from itertools import islice, takewhile
from typing import TYPE_CHECKING, ClassVar

from dateutil.rrule import (
    DAILY,
    FR,
    MO,
    MONTHLY,
    SA,
    SU,
    TH,
    TU,
    WE,
    WEEKLY,
    YEARLY,
    rrule,
    weekday,
)

from .. import const
from ..data_builders import (
    InvalidCountError,
    InvalidRangeError,
    build_recurrence_rule,
    build_recurrence_rule_from_config,
    is_positive_int,
    rule_to_config,
)
from ..utils.dt_utils import (
    add_months,
    apply_time_of_day,
    dt_add_days,
    dt_now_local,
    dt_parse,
    is_leap_year,
    months_between,
    resolve_last_weekday,
    resolve_nth_weekday,
)

if TYPE_CHECKING:
    from ..type_defs import RecurrenceRule, RecurrenceRuleConfig


class RecurrenceEngine:
    """Occurrence enumeration over one immutable RecurrenceRule.

    The engine holds no state besides the rule, so every query recomputes
    its result and instances are safe to share between threads.

    Result sizes are bounded only by the rule's terminator and the query
    window. A very large `count` or an `until` centuries away is the
    caller's responsibility; no internal cap is applied.
    """

    # Mapping from frequency constants to rrule frequencies
    FREQUENCY_TO_RRULE: ClassVar[dict[str, int]] = {
        const.FREQUENCY_DAILY: DAILY,
        const.FREQUENCY_WEEKLY: WEEKLY,
        const.FREQUENCY_MONTHLY: MONTHLY,
        const.FREQUENCY_YEARLY: YEARLY,
    }

    # rrule weekday constants indexed by date.weekday()
    RRULE_WEEKDAYS: ClassVar[tuple[weekday, ...]] = (MO, TU, WE, TH, FR, SA, SU)

    def __init__(self, rule: RecurrenceRule) -> None:
        """Initialize the engine with a validated rule.

        Args:
            rule: RecurrenceRule built by data_builders.build_recurrence_rule().
        """
        self._rule = rule

    @classmethod
    def create(
        cls,
        frequency: str,
        interval: int,
        start: str | date | datetime,
        *,
        until: str | date | datetime | None = None,
        count: int | None = None,
    ) -> RecurrenceEngine:
        """Validate raw inputs and return an engine for the resulting rule.

        Raises:
            RecurrenceValidationError: See data_builders for the taxonomy.
        """
        return cls(
            build_recurrence_rule(frequency, interval, start, until=until, count=count)
        )

    @classmethod
    def from_config(cls, config: RecurrenceRuleConfig) -> RecurrenceEngine:
        """Build an engine from a host-persisted config dict."""
        return cls(build_recurrence_rule_from_config(config))

    @property
    def rule(self) -> RecurrenceRule:
        """The immutable rule this engine enumerates."""
        return self._rule

    def to_config(self) -> RecurrenceRuleConfig:
        """Return the rule as a config dict accepted by from_config()."""
        return rule_to_config(self._rule)

    # =========================================================================
    # Public queries
    # =========================================================================

    def all(self) -> list[datetime]:
        """Return every occurrence of the rule.

        Count-terminated rules return by_count(count); until-terminated rules
        return every occurrence from the origin through the until day.
        """
        rule = self._rule
        if rule.count is not None:
            return self.by_count(rule.count)

        assert rule.until is not None
        return self._to_occurrences(self._dates_between(rule.origin, rule.until))

    def by_count(self, count: int) -> list[datetime]:
        """Return the first `count` occurrences starting at the origin.

        The until bound is not applied: this is the unbounded enumeration
        truncated to `count` entries. Months without a resolvable weekday
        and non-leap years for Feb 29 rules do not consume a slot.

        Args:
            count: Number of occurrences (positive int).

        Raises:
            InvalidCountError: If count is not a positive int.
        """
        if not is_positive_int(count):
            raise InvalidCountError(
                field=const.DATA_RULE_COUNT,
                placeholders={"value": str(count)},
            )

        dates = islice(self._iter_occurrence_dates(self._rule.origin), count)
        return self._to_occurrences(dates)

    def between(
        self,
        start: str | date | datetime,
        end: str | date | datetime,
    ) -> list[datetime]:
        """Return occurrences whose date lies within [start, end].

        Both bounds are compared as whole days, so any time-of-day on the
        arguments is ignored. The result is further limited to the rule's
        own [origin, until] span. An empty intersection (including a window
        whose start day is after its end day) returns an empty list.

        Raises:
            InvalidRangeError: If either bound is not a valid calendar instant.
        """
        start_day = self._parse_query_day(start, const.DATA_QUERY_START)
        end_day = self._parse_query_day(end, const.DATA_QUERY_END)
        return self._to_occurrences(self._dates_between(start_day, end_day))

    def get_next_occurrence(
        self,
        after: str | date | datetime | None = None,
        require_future: bool = True,
    ) -> datetime | None:
        """Return the next occurrence relative to a reference instant.

        Args:
            after: Reference instant. If None, uses the current time.
            require_future: If True, result must be strictly after `after`,
                otherwise an occurrence equal to `after` qualifies.

        Returns:
            Next occurrence, or None if the rule has no occurrence left.

        Raises:
            InvalidRangeError: If `after` is not a valid calendar instant.
        """
        rule = self._rule
        tz_info = rule.time_of_day.tzinfo

        if after is None:
            reference = dt_now_local(tz_info)
        else:
            parsed = dt_parse(after)
            if parsed is None:
                raise InvalidRangeError(
                    field=const.DATA_QUERY_AFTER,
                    placeholders={"value": str(after)},
                )
            reference = self._align_reference(parsed)

        if rule.count is not None:
            candidates: Iterator[date] = islice(
                self._iter_occurrence_dates(rule.origin), rule.count
            )
        else:
            from_day = max(reference.date(), rule.origin)
            candidates = self._iter_occurrence_dates(from_day)
            if rule.until is not None:
                until = rule.until
                candidates = takewhile(lambda day: day <= until, candidates)

        for day in candidates:
            occurrence = apply_time_of_day(day, rule.time_of_day)
            if occurrence > reference or (
                not require_future and occurrence == reference
            ):
                return occurrence

        const.LOGGER.debug(
            "RecurrenceEngine: No occurrence after %s, rule has ended", reference
        )
        return None

    def to_rrule_string(self) -> str:
        """Generate RFC 5545 RRULE string for iCal export.

        Returns:
            RRULE string, e.g. "FREQ=MONTHLY;INTERVAL=1;BYDAY=-1FR;COUNT=6"
        """
        rule = self._rule
        parts = [
            f"FREQ={const.RRULE_FREQUENCY_NAMES[rule.frequency]}",
            f"INTERVAL={rule.interval}",
        ]

        if rule.frequency == const.FREQUENCY_WEEKLY:
            parts.append(f"BYDAY={const.RRULE_WEEKDAY_CODES[rule.origin.weekday()]}")
        elif rule.frequency == const.FREQUENCY_MONTHLY:
            assert rule.anchor_weekday is not None
            code = const.RRULE_WEEKDAY_CODES[rule.anchor_weekday]
            if rule.monthly_pattern == const.MONTHLY_PATTERN_LAST_WEEKDAY:
                parts.append(f"BYDAY=-1{code}")
            else:
                parts.append(f"BYDAY=+{rule.anchor_week_of_month}{code}")
        elif rule.frequency == const.FREQUENCY_YEARLY:
            parts.append(f"BYMONTH={rule.origin.month}")
            parts.append(f"BYMONTHDAY={rule.origin.day}")

        if rule.count is not None:
            parts.append(f"COUNT={rule.count}")
        elif rule.until is not None:
            until_end = rule.until_end
            assert until_end is not None
            if until_end.tzinfo is not None:
                # Aware DTSTART requires a UTC UNTIL (RFC 5545 3.3.10)
                parts.append(
                    f"UNTIL={until_end.astimezone(UTC):{const.RRULE_UNTIL_UTC_FORMAT}}"
                )
            else:
                parts.append(
                    f"UNTIL={rule.until:%Y%m%d}{const.RRULE_UNTIL_TIME_SUFFIX}"
                )

        return ";".join(parts)

    def to_dateutil_rrule(self) -> rrule:
        """Build an equivalent `dateutil.rrule.rrule` for interop.

        The returned rrule yields the same datetimes as all().
        """
        rule = self._rule
        byweekday = None
        if rule.frequency == const.FREQUENCY_MONTHLY:
            assert rule.anchor_weekday is not None
            day = self.RRULE_WEEKDAYS[rule.anchor_weekday]
            if rule.monthly_pattern == const.MONTHLY_PATTERN_LAST_WEEKDAY:
                byweekday = day(-1)
            else:
                byweekday = day(rule.anchor_week_of_month)

        # Type stubs expect Literal frequencies, rrule accepts the int at runtime
        return rrule(
            self.FREQUENCY_TO_RRULE[rule.frequency],  # type: ignore[arg-type]
            interval=rule.interval,
            dtstart=apply_time_of_day(rule.origin, rule.time_of_day),
            byweekday=byweekday,
            count=rule.count,
            until=rule.until_end,
        )

    # =========================================================================
    # Private: window handling
    # =========================================================================

    def _dates_between(self, start_day: date, end_day: date) -> list[date]:
        """Return occurrence dates within [start_day, end_day] and the rule span."""
        rule = self._rule

        if start_day > end_day:
            const.LOGGER.debug(
                "RecurrenceEngine: Empty window %s > %s", start_day, end_day
            )
            return []

        if end_day < rule.origin or (rule.until is not None and start_day > rule.until):
            const.LOGGER.debug(
                "RecurrenceEngine: Window %s..%s outside rule span", start_day, end_day
            )
            return []

        if rule.count is not None:
            # Count-terminated: the full sequence is the reference, filter it
            all_dates = islice(self._iter_occurrence_dates(rule.origin), rule.count)
            return [day for day in all_dates if start_day <= day <= end_day]

        effective_start = max(start_day, rule.origin)
        effective_end = end_day if rule.until is None else min(end_day, rule.until)

        return list(
            takewhile(
                lambda day: day <= effective_end,
                self._iter_occurrence_dates(effective_start),
            )
        )

    def _parse_query_day(self, value: str | date | datetime, field: str) -> date:
        """Parse a window bound to a calendar day or raise InvalidRangeError."""
        parsed = dt_parse(value)
        if parsed is None:
            raise InvalidRangeError(field=field, placeholders={"value": str(value)})
        return parsed.date()

    def _align_reference(self, reference: datetime) -> datetime:
        """Bring a reference instant into the rule's tz convention.

        Aware references are converted to an aware rule's zone. When only one
        side is aware, the reference is read as wall-clock time in the rule's
        convention.
        """
        tz_info = self._rule.time_of_day.tzinfo
        if tz_info is not None and reference.tzinfo is not None:
            return reference.astimezone(tz_info)
        return reference.replace(tzinfo=tz_info)

    def _to_occurrences(self, dates: Iterator[date] | list[date]) -> list[datetime]:
        """Apply the rule's time-of-day to every date."""
        time_of_day = self._rule.time_of_day
        return [apply_time_of_day(day, time_of_day) for day in dates]

    # =========================================================================
    # Private: occurrence iterators
    # =========================================================================

    def _iter_occurrence_dates(self, from_day: date) -> Iterator[date]:
        """Yield occurrence dates on or after `from_day`, ascending, unbounded.

        Iteration stops only at the end of the supported calendar range
        (year 9999); callers bound it with islice/takewhile.
        """
        freq = self._rule.frequency

        if freq == const.FREQUENCY_DAILY:
            return self._iter_fixed_step(from_day, self._rule.interval)
        if freq == const.FREQUENCY_WEEKLY:
            return self._iter_fixed_step(
                from_day, self._rule.interval * const.DAYS_PER_WEEK
            )
        if freq == const.FREQUENCY_MONTHLY:
            return self._iter_monthly(from_day)
        return self._iter_yearly(from_day)

    def _iter_fixed_step(self, from_day: date, step_days: int) -> Iterator[date]:
        """Yield origin + k * step_days for every k landing on/after from_day."""
        current = self._fast_forward_fixed_interval(from_day, step_days)
        while current is not None:
            yield current
            current = dt_add_days(current, step_days)

    def _fast_forward_fixed_interval(
        self, from_day: date, step_days: int
    ) -> date | None:
        """Jump to the first interval-aligned date on or after from_day.

        Computes the number of whole intervals between the origin and
        from_day with integer division instead of stepping.

        Returns:
            The aligned date, or None if it falls past date.max.
        """
        origin = self._rule.origin
        if from_day <= origin:
            return origin

        intervals_passed = (from_day - origin).days // step_days
        candidate = dt_add_days(origin, intervals_passed * step_days)
        if candidate is not None and candidate < from_day:
            candidate = dt_add_days(candidate, step_days)

        const.LOGGER.debug(
            "RecurrenceEngine: Fast-forward %s intervals from %s to %s",
            intervals_passed,
            origin,
            candidate,
        )
        return candidate

    def _iter_monthly(self, from_day: date) -> Iterator[date]:
        """Yield nth/last-weekday dates every `interval` months.

        Starts at the last interval-aligned month at or before from_day's
        month. Months where the nth weekday does not exist are skipped.
        """
        rule = self._rule
        months_elapsed = max(0, months_between(rule.origin, from_day))
        offset = (months_elapsed // rule.interval) * rule.interval
        if offset:
            const.LOGGER.debug(
                "RecurrenceEngine: Fast-forward %s months from %s", offset, rule.origin
            )

        while True:
            try:
                month_start = add_months(rule.origin, offset)
            except (ValueError, OverflowError):
                return

            occurrence = self._resolve_monthly(month_start.year, month_start.month)
            if occurrence is None:
                const.LOGGER.debug(
                    "RecurrenceEngine: Skipping %s-%02d, no occurrence #%s of weekday %s",
                    month_start.year,
                    month_start.month,
                    rule.anchor_week_of_month,
                    rule.anchor_weekday,
                )
            elif occurrence >= from_day:
                yield occurrence

            offset += rule.interval

    def _resolve_monthly(self, year: int, month: int) -> date | None:
        """Resolve the rule's weekday pattern in (year, month)."""
        rule = self._rule
        assert rule.anchor_weekday is not None
        if rule.monthly_pattern == const.MONTHLY_PATTERN_LAST_WEEKDAY:
            return resolve_last_weekday(year, month, rule.anchor_weekday)

        assert rule.anchor_week_of_month is not None
        return resolve_nth_weekday(
            year, month, rule.anchor_weekday, rule.anchor_week_of_month
        )

    def _iter_yearly(self, from_day: date) -> Iterator[date]:
        """Yield the origin's month/day every `interval` years.

        A Feb 29 origin only yields in leap years. Non-leap candidates are
        skipped and the next candidate is `year + interval`.
        """
        rule = self._rule
        origin = rule.origin
        years_elapsed = max(0, from_day.year - origin.year)
        year = origin.year + (years_elapsed // rule.interval) * rule.interval
        is_leap_day = (origin.month, origin.day) == (
            const.LEAP_DAY_MONTH,
            const.LEAP_DAY_DAY,
        )

        while year <= MAXYEAR:
            if is_leap_day and not is_leap_year(year):
                const.LOGGER.debug(
                    "RecurrenceEngine: Skipping %s, Feb 29 needs a leap year", year
                )
            else:
                occurrence = date(year, origin.month, origin.day)
                if occurrence >= from_day:
                    yield occurrence
            year += rule.interval


# =============================================================================
# Module-level convenience functions
# =============================================================================


def calculate_occurrences(
    frequency: str,
    interval: int,
    start: str | date | datetime,
    *,
    until: str | date | datetime | None = None,
    count: int | None = None,
) -> list[datetime]:
    """Build a rule and return all of its occurrences.

    Examples:
        calculate_occurrences("daily", 3, "2024-01-01T09:00:00", count=4)
        → [2024-01-01 09:00, 2024-01-04 09:00, 2024-01-07 09:00, 2024-01-10 09:00]
    """
    engine = RecurrenceEngine.create(
        frequency, interval, start, until=until, count=count
    )
    return engine.all()


def calculate_occurrences_between(
    config: RecurrenceRuleConfig,
    start: str | date | datetime,
    end: str | date | datetime,
) -> list[datetime]:
    """Return the occurrences of a persisted rule config within [start, end]."""
    return RecurrenceEngine.from_config(config).between(start, end)
