# File: data_builders.py
"""Validation and construction of recurrence rules.

This module is the SINGLE SOURCE OF TRUTH for rule validation. It is used by:
- `RecurrenceEngine.create()` / `RecurrenceEngine.from_config()` (raising)
- Host configuration forms via `validate_recurrence_rule_data()` (error dict)

All checks run eagerly here, so a caller never receives a partially built
rule and the engine never has to re-validate rule fields.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from datetime import date, datetime
from typing import Any

from . import const
from .type_defs import RecurrenceRule, RecurrenceRuleConfig
from .utils.dt_utils import (
    dt_parse,
    extract_time_of_day,
    is_last_weekday_of_month,
    normalize_date,
    week_of_month,
)

# ==============================================================================
# EXCEPTIONS
# ==============================================================================


class RecurrenceValidationError(ValueError):
    """Validation error with field-specific information.

    Raised when rule construction or a query receives invalid input. The
    field attribute lets a configuration form highlight the input that
    failed.

    Attributes:
        field: The DATA_RULE_* / DATA_QUERY_* constant identifying the input
        translation_key: The TRANS_KEY_* constant for the error message
        placeholders: Optional dict for translation string placeholders

    Example:
        raise InvalidIntervalError(
            field=const.DATA_RULE_INTERVAL,
            placeholders={"value": str(interval)},
        )
    """

    default_translation_key = const.TRANS_KEY_ERROR_INVALID_RULE

    def __init__(
        self,
        field: str,
        translation_key: str | None = None,
        placeholders: dict[str, str] | None = None,
    ) -> None:
        """Initialize RecurrenceValidationError.

        Args:
            field: The constant for the input that failed validation
            translation_key: Overrides the subclass default translation key
            placeholders: Optional dict for translation placeholders
        """
        self.field = field
        self.translation_key = translation_key or self.default_translation_key
        self.placeholders = placeholders or {}
        super().__init__(self.translation_key)


class InvalidFrequencyError(RecurrenceValidationError):
    """Frequency is not one of daily/weekly/monthly/yearly."""

    default_translation_key = const.TRANS_KEY_ERROR_INVALID_FREQUENCY


class InvalidIntervalError(RecurrenceValidationError):
    """Interval is not a positive integer."""

    default_translation_key = const.TRANS_KEY_ERROR_INVALID_INTERVAL


class InvalidStartError(RecurrenceValidationError):
    """Start is not a valid calendar instant."""

    default_translation_key = const.TRANS_KEY_ERROR_INVALID_START


class InvalidUntilError(RecurrenceValidationError):
    """Until is not a valid calendar instant."""

    default_translation_key = const.TRANS_KEY_ERROR_INVALID_UNTIL


class InvalidCountError(RecurrenceValidationError):
    """Count is present but not a positive integer."""

    default_translation_key = const.TRANS_KEY_ERROR_INVALID_COUNT


class AmbiguousTerminatorError(RecurrenceValidationError):
    """Both or neither of until/count were given."""

    default_translation_key = const.TRANS_KEY_ERROR_AMBIGUOUS_TERMINATOR


class InvertedRangeError(RecurrenceValidationError):
    """Start date falls after the until date."""

    default_translation_key = const.TRANS_KEY_ERROR_INVERTED_RANGE


class InvalidRangeError(RecurrenceValidationError):
    """A query window bound is not a valid calendar instant."""

    default_translation_key = const.TRANS_KEY_ERROR_INVALID_RANGE


# ==============================================================================
# FIELD HELPERS
# ==============================================================================


def is_positive_int(value: Any) -> bool:
    """Return True for ints >= 1 (bools are rejected)."""
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def _is_absent(value: Any) -> bool:
    """None and empty strings both mean "not provided"."""
    return value is None or value == ""


def _iter_validation_errors(
    frequency: Any,
    interval: Any,
    start: Any,
    until: Any,
    count: Any,
) -> Iterator[RecurrenceValidationError]:
    """Yield validation errors in the order construction reports them."""
    if frequency not in const.FREQUENCY_OPTIONS:
        yield InvalidFrequencyError(
            field=const.DATA_RULE_FREQUENCY,
            placeholders={"value": str(frequency)},
        )

    if not is_positive_int(interval):
        yield InvalidIntervalError(
            field=const.DATA_RULE_INTERVAL,
            placeholders={"value": str(interval)},
        )

    start_dt = dt_parse(start)
    if start_dt is None:
        yield InvalidStartError(
            field=const.DATA_RULE_START,
            placeholders={"value": str(start)},
        )

    has_until = not _is_absent(until)
    has_count = count is not None

    if has_until and has_count:
        yield AmbiguousTerminatorError(field=const.DATA_RULE_COUNT)
        return

    if has_count and not is_positive_int(count):
        yield InvalidCountError(
            field=const.DATA_RULE_COUNT,
            placeholders={"value": str(count)},
        )

    if not has_until and not has_count:
        yield AmbiguousTerminatorError(field=const.DATA_RULE_UNTIL)
        return

    if has_until:
        until_dt = dt_parse(until)
        if until_dt is None:
            yield InvalidUntilError(
                field=const.DATA_RULE_UNTIL,
                placeholders={"value": str(until)},
            )
        elif start_dt is not None and start_dt.date() > until_dt.date():
            yield InvertedRangeError(
                field=const.DATA_RULE_UNTIL,
                placeholders={
                    "start": start_dt.date().isoformat(),
                    "until": until_dt.date().isoformat(),
                },
            )


# ==============================================================================
# RULES
# ==============================================================================


def validate_recurrence_rule_data(data: Mapping[str, Any]) -> dict[str, str]:
    """Validate a rule config dict without raising.

    Used by configuration forms that need every failing field at once.

    Args:
        data: RecurrenceRuleConfig-shaped mapping

    Returns:
        Dict of {field: translation_key}, empty when the data is valid.
        Only the first error per field is reported.
    """
    errors: dict[str, str] = {}
    for error in _iter_validation_errors(
        data.get(const.DATA_RULE_FREQUENCY),
        data.get(const.DATA_RULE_INTERVAL, const.DEFAULT_INTERVAL),
        data.get(const.DATA_RULE_START),
        data.get(const.DATA_RULE_UNTIL),
        data.get(const.DATA_RULE_COUNT),
    ):
        errors.setdefault(error.field, error.translation_key)
    return errors


def build_recurrence_rule(
    frequency: str,
    interval: int,
    start: str | date | datetime,
    *,
    until: str | date | datetime | None = None,
    count: int | None = None,
) -> RecurrenceRule:
    """Validate inputs and build an immutable RecurrenceRule.

    Args:
        frequency: FREQUENCY_* constant
        interval: Frequency units between occurrences (>= 1)
        start: First occurrence instant (ISO string, date or datetime)
        until: Inclusive last day (mutually exclusive with count)
        count: Total occurrences (mutually exclusive with until)

    Returns:
        RecurrenceRule with origin/time-of-day split and, for monthly rules,
        the weekday pattern derived from the origin.

    Raises:
        RecurrenceValidationError: The first failing check (see subclasses).
    """
    error = next(
        _iter_validation_errors(frequency, interval, start, until, count), None
    )
    if error is not None:
        const.LOGGER.debug(
            "build_recurrence_rule: %s (field=%s, %s)",
            error.translation_key,
            error.field,
            error.placeholders,
        )
        raise error

    start_dt = dt_parse(start)
    assert start_dt is not None  # validated above
    origin = start_dt.date()

    until_day: date | None = None
    if not _is_absent(until):
        until_dt = dt_parse(until)
        assert until_dt is not None
        until_day = normalize_date(until_dt)

    anchor_weekday: int | None = None
    anchor_week_of_month: int | None = None
    monthly_pattern: str | None = None
    if frequency == const.FREQUENCY_MONTHLY:
        anchor_weekday = origin.weekday()
        anchor_week_of_month = week_of_month(origin)
        monthly_pattern = (
            const.MONTHLY_PATTERN_LAST_WEEKDAY
            if is_last_weekday_of_month(origin)
            else const.MONTHLY_PATTERN_NTH_WEEKDAY
        )

    rule = RecurrenceRule(
        frequency=frequency,
        interval=interval,
        origin=origin,
        time_of_day=extract_time_of_day(start_dt),
        until=until_day,
        count=count,
        anchor_weekday=anchor_weekday,
        anchor_week_of_month=anchor_week_of_month,
        monthly_pattern=monthly_pattern,
    )

    const.LOGGER.debug(
        "build_recurrence_rule: %s every %s from %s (until=%s, count=%s, pattern=%s)",
        rule.frequency,
        rule.interval,
        rule.origin,
        rule.until,
        rule.count,
        rule.monthly_pattern,
    )
    return rule


def build_recurrence_rule_from_config(config: RecurrenceRuleConfig) -> RecurrenceRule:
    """Build a rule from a host-persisted config dict.

    A missing interval defaults to DEFAULT_INTERVAL. An explicit invalid
    interval is still rejected.
    """
    return build_recurrence_rule(
        config.get("frequency"),  # type: ignore[arg-type]
        config.get("interval", const.DEFAULT_INTERVAL),
        config.get("start"),  # type: ignore[arg-type]
        until=config.get("until"),
        count=config.get("count"),
    )


def rule_to_config(rule: RecurrenceRule) -> RecurrenceRuleConfig:
    """Serialize a rule back to its host-facing config dict.

    The start instant is rebuilt from origin + time-of-day, the until bound
    is written as an ISO date.
    """
    config: RecurrenceRuleConfig = {
        "frequency": rule.frequency,
        "interval": rule.interval,
        "start": datetime.combine(rule.origin, rule.time_of_day).isoformat(),
    }
    if rule.until is not None:
        config["until"] = rule.until.isoformat()
    else:
        assert rule.count is not None
        config["count"] = rule.count
    return config
