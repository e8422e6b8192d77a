# File: const.py
"""Constants for the recur_rule package.

This file centralizes frequency identifiers, config field keys, error
translation keys and calendar constants so the builder, the engine and any
host application share one vocabulary.
"""

import logging

# ------------------------------------------------------------------------------------------------
# General
# ------------------------------------------------------------------------------------------------
# Logger
LOGGER = logging.getLogger(__package__)

# ------------------------------------------------------------------------------------------------
# Frequencies
# ------------------------------------------------------------------------------------------------
FREQUENCY_DAILY = "daily"
FREQUENCY_MONTHLY = "monthly"
FREQUENCY_WEEKLY = "weekly"
FREQUENCY_YEARLY = "yearly"

FREQUENCY_OPTIONS = [
    FREQUENCY_DAILY,
    FREQUENCY_WEEKLY,
    FREQUENCY_MONTHLY,
    FREQUENCY_YEARLY,
]

# RFC 5545 FREQ values
RRULE_FREQUENCY_NAMES = {
    FREQUENCY_DAILY: "DAILY",
    FREQUENCY_WEEKLY: "WEEKLY",
    FREQUENCY_MONTHLY: "MONTHLY",
    FREQUENCY_YEARLY: "YEARLY",
}

# ------------------------------------------------------------------------------------------------
# Monthly Patterns
# ------------------------------------------------------------------------------------------------
MONTHLY_PATTERN_LAST_WEEKDAY = "last_weekday"
MONTHLY_PATTERN_NTH_WEEKDAY = "nth_weekday"

# ------------------------------------------------------------------------------------------------
# Config Field Keys (RecurrenceRuleConfig)
# ------------------------------------------------------------------------------------------------
DATA_RULE_COUNT = "count"
DATA_RULE_FREQUENCY = "frequency"
DATA_RULE_INTERVAL = "interval"
DATA_RULE_START = "start"
DATA_RULE_UNTIL = "until"

# Query argument names (used as error fields)
DATA_QUERY_AFTER = "after"
DATA_QUERY_END = "end"
DATA_QUERY_START = "start"

# Defaults
DEFAULT_INTERVAL = 1

# ------------------------------------------------------------------------------------------------
# Calendar
# ------------------------------------------------------------------------------------------------
DAYS_PER_WEEK = 7

# Feb 29 anchor (yearly rules only recur in leap years)
LEAP_DAY_MONTH = 2
LEAP_DAY_DAY = 29

# End of day, inclusive upper bound for `until`
END_OF_DAY_HOUR = 23
END_OF_DAY_MINUTE = 59
END_OF_DAY_SECOND = 59
END_OF_DAY_MICROSECOND = 999999

# RFC 5545 BYDAY codes indexed by date.weekday()
RRULE_WEEKDAY_CODES = ("MO", "TU", "WE", "TH", "FR", "SA", "SU")
RRULE_UNTIL_TIME_SUFFIX = "T235959"
RRULE_UNTIL_UTC_FORMAT = "%Y%m%dT%H%M%SZ"

# ------------------------------------------------------------------------------------------------
# Translation Keys (errors)
# ------------------------------------------------------------------------------------------------
TRANS_KEY_ERROR_AMBIGUOUS_TERMINATOR = "ambiguous_terminator"
TRANS_KEY_ERROR_INVALID_COUNT = "invalid_count"
TRANS_KEY_ERROR_INVALID_FREQUENCY = "invalid_frequency"
TRANS_KEY_ERROR_INVALID_INTERVAL = "invalid_interval"
TRANS_KEY_ERROR_INVALID_RANGE = "invalid_range"
TRANS_KEY_ERROR_INVALID_RULE = "invalid_rule"
TRANS_KEY_ERROR_INVALID_START = "invalid_start"
TRANS_KEY_ERROR_INVALID_UNTIL = "invalid_until"
TRANS_KEY_ERROR_INVERTED_RANGE = "inverted_range"
