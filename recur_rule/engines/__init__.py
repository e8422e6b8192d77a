"""Engine modules for recur_rule.

Contains the computation engines:
- schedule_engine: Occurrence enumeration, range queries and RRULE export
"""

from .schedule_engine import (
    RecurrenceEngine,
    calculate_occurrences,
    calculate_occurrences_between,
)

__all__ = [
    "RecurrenceEngine",
    "calculate_occurrences",
    "calculate_occurrences_between",
]
