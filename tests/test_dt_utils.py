"""Tests for utils/dt_utils.py calendar helpers.

Covers:
- dt_parse / dt_parse_date: input normalization and invalid inputs
- Time-of-day capture and reapplication
- Leap years and month arithmetic
- Weekday ordinals and the nth/last weekday resolvers
"""

from datetime import date, datetime, time, timedelta, timezone

import pytest

from recur_rule.utils.dt_utils import (
    add_months,
    apply_time_of_day,
    days_in_month,
    dt_add_days,
    dt_parse,
    dt_parse_date,
    extract_time_of_day,
    is_last_weekday_of_month,
    is_leap_year,
    months_between,
    normalize_date,
    resolve_last_weekday,
    resolve_nth_weekday,
    week_of_month,
)

MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY = range(5)


# =============================================================================
# Parsing
# =============================================================================


class TestDatetimeParsing:
    """Input normalization for dates and datetimes."""

    def test_iso_date_string_is_midnight(self) -> None:
        """ISO date-only strings parse to midnight."""
        assert dt_parse("2024-01-01") == datetime(2024, 1, 1)

    def test_iso_datetime_string(self) -> None:
        """ISO datetime strings keep their time and offset."""
        result = dt_parse("2024-01-01T09:30:00+02:00")
        assert result == datetime(
            2024, 1, 1, 9, 30, tzinfo=timezone(timedelta(hours=2))
        )

    def test_naive_input_stays_naive(self) -> None:
        """No timezone is attached to naive input."""
        result = dt_parse("2024-01-01T09:30:00")
        assert result is not None
        assert result.tzinfo is None

    def test_date_and_datetime_objects(self) -> None:
        """date becomes midnight, datetime passes through unchanged."""
        assert dt_parse(date(2024, 3, 5)) == datetime(2024, 3, 5)
        original = datetime(2024, 3, 5, 14, 15, 16)
        assert dt_parse(original) is original

    def test_fallback_date_formats(self) -> None:
        """Slash-separated dates are accepted."""
        assert dt_parse("2024/01/05") == datetime(2024, 1, 5)
        assert dt_parse_date("2024/01/05") == date(2024, 1, 5)

    @pytest.mark.parametrize(
        "value",
        ["", None, "not-a-date", "2025-13-45", "2023-02-29", 42, 3.5, ["2024-01-01"]],
    )
    def test_invalid_inputs_return_none(self, value: object) -> None:
        """Unparsable or unsupported inputs return None."""
        assert dt_parse(value) is None  # type: ignore[arg-type]

    def test_dt_parse_date_rejects_non_strings(self) -> None:
        """dt_parse_date only handles strings."""
        assert dt_parse_date(None) is None
        assert dt_parse_date(20240101) is None  # type: ignore[arg-type]


# =============================================================================
# Time-of-day
# =============================================================================


class TestTimeOfDay:
    """Normalization and reapplication of wall-clock time."""

    def test_normalize_date_strips_time(self) -> None:
        """datetime inputs lose their time-of-day, dates pass through."""
        assert normalize_date(datetime(2024, 1, 1, 23, 59)) == date(2024, 1, 1)
        assert normalize_date(date(2024, 1, 1)) == date(2024, 1, 1)

    def test_extract_drops_microseconds(self) -> None:
        """Hour, minute and second are kept, microseconds are not."""
        captured = extract_time_of_day(datetime(2024, 1, 1, 9, 30, 45, 123456))
        assert captured == time(9, 30, 45)

    def test_extract_keeps_tz_label(self) -> None:
        """The tzinfo label travels with the captured time."""
        tz = timezone(timedelta(hours=9))
        captured = extract_time_of_day(datetime(2024, 1, 1, 7, 0, tzinfo=tz))
        assert captured.tzinfo is tz

    def test_apply_time_of_day(self) -> None:
        """A captured time is combined with any date."""
        result = apply_time_of_day(date(2030, 6, 15), time(18, 45, 5))
        assert result == datetime(2030, 6, 15, 18, 45, 5)

    def test_dt_add_days_overflow(self) -> None:
        """Stepping past the supported calendar range returns None."""
        assert dt_add_days(date(9999, 12, 31), 1) is None
        assert dt_add_days(date(2024, 2, 28), 1) == date(2024, 2, 29)


# =============================================================================
# Calendar facts and month arithmetic
# =============================================================================


class TestCalendarFacts:
    """Leap years, month lengths and month offsets."""

    @pytest.mark.parametrize(
        ("year", "expected"),
        [(2024, True), (2023, False), (1900, False), (2000, True), (2100, False)],
    )
    def test_is_leap_year(self, year: int, expected: bool) -> None:
        """Gregorian rule: /4, not /100 unless /400."""
        assert is_leap_year(year) is expected

    def test_days_in_month(self) -> None:
        """February length follows the leap year rule."""
        assert days_in_month(2024, 2) == 29
        assert days_in_month(2023, 2) == 28
        assert days_in_month(2024, 4) == 30

    def test_add_months_lands_on_first(self) -> None:
        """Month arithmetic works on the 1st, so Jan 31 never clamps."""
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 1)
        assert add_months(date(2024, 11, 15), 3) == date(2025, 2, 1)

    def test_months_between(self) -> None:
        """Whole calendar months, ignoring day-of-month."""
        assert months_between(date(2024, 1, 31), date(2024, 3, 1)) == 2
        assert months_between(date(2024, 5, 15), date(2023, 12, 1)) == -5
        assert months_between(date(2024, 1, 9), date(2030, 3, 1)) == 74


# =============================================================================
# Weekday ordinals and resolvers
# =============================================================================


class TestWeekdayOrdinals:
    """week_of_month and is_last_weekday_of_month."""

    @pytest.mark.parametrize(
        ("day", "expected"),
        [
            (date(2024, 1, 1), 1),
            (date(2024, 1, 9), 2),
            (date(2024, 1, 26), 4),
            (date(2024, 1, 29), 5),
            (date(2024, 1, 31), 5),
        ],
    )
    def test_week_of_month(self, day: date, expected: int) -> None:
        """Ordinal of the date's weekday within its month."""
        assert week_of_month(day) == expected

    @pytest.mark.parametrize(
        ("day", "expected"),
        [
            (date(2024, 1, 26), True),
            (date(2024, 1, 19), False),
            (date(2024, 2, 29), True),
            (date(2024, 2, 22), False),
            (date(2024, 12, 25), True),
        ],
    )
    def test_is_last_weekday_of_month(self, day: date, expected: bool) -> None:
        """Last iff the same weekday a week later is in another month."""
        assert is_last_weekday_of_month(day) is expected


class TestMonthlyResolvers:
    """resolve_nth_weekday and resolve_last_weekday."""

    def test_nth_weekday(self) -> None:
        """2nd Tuesday of January 2024 is the 9th."""
        assert resolve_nth_weekday(2024, 1, TUESDAY, 2) == date(2024, 1, 9)

    def test_first_weekday_on_the_first(self) -> None:
        """March 1st 2024 is itself the first Friday."""
        assert resolve_nth_weekday(2024, 3, FRIDAY, 1) == date(2024, 3, 1)

    def test_fifth_weekday_missing(self) -> None:
        """February 2024 has only four Mondays."""
        assert resolve_nth_weekday(2024, 2, MONDAY, 5) is None

    def test_fifth_weekday_present(self) -> None:
        """April 2024 has five Mondays."""
        assert resolve_nth_weekday(2024, 4, MONDAY, 5) == date(2024, 4, 29)

    def test_last_weekday(self) -> None:
        """Last Friday resolves backward from the month end."""
        assert resolve_last_weekday(2024, 2, FRIDAY) == date(2024, 2, 23)
        assert resolve_last_weekday(2024, 12, FRIDAY) == date(2024, 12, 27)

    def test_last_weekday_is_month_end(self) -> None:
        """The month's last day can itself be the answer."""
        assert resolve_last_weekday(2024, 1, WEDNESDAY) == date(2024, 1, 31)

    def test_last_weekday_leap_february(self) -> None:
        """Feb 29 is the last Thursday of February 2024."""
        assert resolve_last_weekday(2024, 2, THURSDAY) == date(2024, 2, 29)
