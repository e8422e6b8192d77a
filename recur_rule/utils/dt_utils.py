# File: utils/dt_utils.py
"""Date and time utilities for recur_rule.

Pure calendar functions shared by the rule builder and the recurrence engine.
Nothing here knows about rules: inputs are plain dates, outputs are plain
dates (or None when a date does not exist).

Uses standard library: datetime, calendar. Month arithmetic uses dateutil.

Functions:
    - dt_now_local: Current wall-clock datetime (naive, or in a given tz)
    - dt_parse_date: Parse date-only strings
    - dt_parse: Normalize str/date/datetime input to a datetime
    - normalize_date: Strip time-of-day from a datetime
    - extract_time_of_day: Capture hour/minute/second (and tz label)
    - apply_time_of_day: Combine a date with a captured time-of-day
    - dt_add_days: Add days, None past the supported calendar range
    - is_leap_year / days_in_month: Gregorian calendar facts
    - first_of_month / add_months / months_between: Month arithmetic
    - week_of_month / is_last_weekday_of_month: Weekday ordinals
    - resolve_nth_weekday / resolve_last_weekday: Monthly pattern resolvers
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
import logging
from typing import TYPE_CHECKING

from dateutil.relativedelta import relativedelta

if TYPE_CHECKING:
    from datetime import tzinfo

# Module-level logger (utils must not import package constants)
_LOGGER = logging.getLogger(__name__)

DAYS_PER_WEEK = 7

# Accepted non-ISO date layouts, tried in order
DATE_FALLBACK_FORMATS = ("%Y/%m/%d", "%Y%m%d")


# ==============================================================================
# Current Date/Time
# ==============================================================================


def dt_now_local(tz: tzinfo | None = None) -> datetime:
    """Return the current wall-clock datetime.

    Args:
        tz: Optional timezone. Naive local time when omitted.
    """
    return datetime.now(tz)


# ==============================================================================
# Parsing
# ==============================================================================


def dt_parse_date(date_str: str | None) -> date | None:
    """Safely parse a date string into a `datetime.date`.

    Accepts "2025-04-07" (ISO), "2025/04/07" and "20250407".

    Returns:
        datetime.date or None if parsing fails.
    """
    if not date_str or not isinstance(date_str, str):
        return None

    try:
        return date.fromisoformat(date_str)
    except ValueError:
        pass

    for fmt in DATE_FALLBACK_FORMATS:
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue

    return None


def dt_parse(dt_input: str | date | datetime | None) -> datetime | None:
    """Normalize string, date or datetime input to a datetime.

    Naive inputs stay naive: the engine works in one implicit local calendar
    and never converts between zones.

    Args:
        dt_input: ISO string, date or datetime, or None

    Returns:
        datetime, or None if the input is empty, of an unsupported type, or
        not a real calendar instant.

    Example:
        >>> dt_parse("2025-04-15")
        datetime.datetime(2025, 4, 15, 0, 0)

        >>> dt_parse(date(2025, 4, 15))
        datetime.datetime(2025, 4, 15, 0, 0)
    """
    if dt_input is None or dt_input == "":
        return None

    if isinstance(dt_input, datetime):
        return dt_input

    if isinstance(dt_input, date):
        return datetime.combine(dt_input, time.min)

    if isinstance(dt_input, str):
        try:
            return datetime.fromisoformat(dt_input.strip())
        except ValueError:
            parsed_date = dt_parse_date(dt_input.strip())
            if parsed_date:
                return datetime.combine(parsed_date, time.min)
            _LOGGER.debug("dt_parse: Could not parse datetime string: %s", dt_input)
            return None

    _LOGGER.debug("dt_parse: Unsupported input type: %s", type(dt_input).__name__)
    return None


# ==============================================================================
# Date / Time-of-day Normalization
# ==============================================================================


def normalize_date(dt_obj: date | datetime) -> date:
    """Return the calendar date of a date or datetime (time-of-day stripped)."""
    if isinstance(dt_obj, datetime):
        return dt_obj.date()
    return dt_obj


def extract_time_of_day(dt_obj: datetime) -> time:
    """Capture hour, minute and second of a datetime.

    Microseconds are dropped. The tzinfo label is kept so emitted
    occurrences carry the same zone as the start instant.
    """
    return time(dt_obj.hour, dt_obj.minute, dt_obj.second, tzinfo=dt_obj.tzinfo)


def apply_time_of_day(day: date, time_of_day: time) -> datetime:
    """Combine a calendar date with a captured time-of-day."""
    return datetime.combine(day, time_of_day)


def dt_add_days(day: date, days: int) -> date | None:
    """Add days to a date.

    Returns:
        The shifted date, or None when it falls outside date.min..date.max.
    """
    try:
        return day + timedelta(days=days)
    except OverflowError:
        return None


# ==============================================================================
# Calendar Facts
# ==============================================================================


def is_leap_year(year: int) -> bool:
    """Gregorian leap year: divisible by 4, not by 100 unless also by 400."""
    return calendar.isleap(year)


def days_in_month(year: int, month: int) -> int:
    """Number of days in the given month."""
    return calendar.monthrange(year, month)[1]


# ==============================================================================
# Month Arithmetic
# ==============================================================================


def first_of_month(day: date) -> date:
    """Return the 1st of the date's month."""
    return day.replace(day=1)


def add_months(day: date, months: int) -> date:
    """Add whole months to the 1st of the date's month.

    Always lands on the 1st, so month-end clamping never applies.

    Raises:
        ValueError/OverflowError: If the result is outside the date range.
    """
    return first_of_month(day) + relativedelta(months=months)


def months_between(start: date, end: date) -> int:
    """Whole calendar months from start's month to end's month (can be negative)."""
    delta = relativedelta(first_of_month(end), first_of_month(start))
    return delta.years * 12 + delta.months


# ==============================================================================
# Weekday Ordinals and Monthly Pattern Resolvers
# ==============================================================================


def week_of_month(day: date) -> int:
    """Return the 1-based ordinal of the date's weekday within its month.

    Example:
        2024-01-09 is the 2nd Tuesday of January -> 2
    """
    first_weekday = date(day.year, day.month, 1).weekday()
    first_occurrence = 1 + (day.weekday() - first_weekday) % DAYS_PER_WEEK
    return (day.day - first_occurrence) // DAYS_PER_WEEK + 1


def is_last_weekday_of_month(day: date) -> bool:
    """Return True if the same weekday one week later is in another month."""
    return day.day + DAYS_PER_WEEK > days_in_month(day.year, day.month)


def resolve_nth_weekday(
    year: int, month: int, weekday: int, ordinal: int
) -> date | None:
    """Return the `ordinal`-th `weekday` of (year, month).

    Args:
        year: Calendar year
        month: Month 1-12
        weekday: 0=Mon ... 6=Sun
        ordinal: 1-based occurrence number

    Returns:
        The date, or None when the month has fewer than `ordinal` such
        weekdays (e.g. a 5th Friday in a four-Friday month).
    """
    first_weekday = date(year, month, 1).weekday()
    first_occurrence = 1 + (weekday - first_weekday) % DAYS_PER_WEEK
    target_day = first_occurrence + (ordinal - 1) * DAYS_PER_WEEK
    if target_day > days_in_month(year, month):
        return None
    return date(year, month, target_day)


def resolve_last_weekday(year: int, month: int, weekday: int) -> date:
    """Return the last `weekday` of (year, month).

    Every month has at least four of each weekday, so this always resolves.
    """
    last_day = days_in_month(year, month)
    last_weekday = date(year, month, last_day).weekday()
    days_back = (last_weekday - weekday) % DAYS_PER_WEEK
    return date(year, month, last_day - days_back)
