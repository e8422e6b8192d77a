"""recur_rule: recurrence-rule engine for calendar occurrences.

Given a start instant, a frequency (daily/weekly/monthly/yearly), an interval
and either an inclusive `until` day or an occurrence `count`, enumerate the
calendar dates on which the event recurs.

Usage:
    from recur_rule import RecurrenceEngine

    engine = RecurrenceEngine.create("monthly", 1, "2024-01-26T18:30:00", count=6)
    engine.all()                                  # last Friday of each month
    engine.between("2024-03-01", "2024-04-30")    # window query
"""

from .data_builders import (
    AmbiguousTerminatorError,
    InvalidCountError,
    InvalidFrequencyError,
    InvalidIntervalError,
    InvalidRangeError,
    InvalidStartError,
    InvalidUntilError,
    InvertedRangeError,
    RecurrenceValidationError,
    build_recurrence_rule,
    build_recurrence_rule_from_config,
    validate_recurrence_rule_data,
)
from .engines import (
    RecurrenceEngine,
    calculate_occurrences,
    calculate_occurrences_between,
)
from .type_defs import RecurrenceRule, RecurrenceRuleConfig

__all__ = [
    "AmbiguousTerminatorError",
    "InvalidCountError",
    "InvalidFrequencyError",
    "InvalidIntervalError",
    "InvalidRangeError",
    "InvalidStartError",
    "InvalidUntilError",
    "InvertedRangeError",
    "RecurrenceEngine",
    "RecurrenceRule",
    "RecurrenceRuleConfig",
    "RecurrenceValidationError",
    "build_recurrence_rule",
    "build_recurrence_rule_from_config",
    "calculate_occurrences",
    "calculate_occurrences_between",
    "validate_recurrence_rule_data",
]
