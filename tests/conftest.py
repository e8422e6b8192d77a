"""Shared fixtures for recur_rule tests."""

from datetime import datetime

import pytest

from recur_rule import const
from recur_rule.engines.schedule_engine import RecurrenceEngine


@pytest.fixture
def daily_every_third_day() -> RecurrenceEngine:
    """Daily, interval 3, four occurrences from Monday 2024-01-01 09:30."""
    return RecurrenceEngine.create(
        const.FREQUENCY_DAILY, 3, datetime(2024, 1, 1, 9, 30), count=4
    )


@pytest.fixture
def biweekly_until_february() -> RecurrenceEngine:
    """Every second Monday from 2024-01-01 through 2024-02-01."""
    return RecurrenceEngine.create(
        const.FREQUENCY_WEEKLY, 2, "2024-01-01T08:00:00", until="2024-02-01"
    )


@pytest.fixture
def last_friday_monthly() -> RecurrenceEngine:
    """Last Friday of every month from 2024-01-26 18:30, six occurrences."""
    return RecurrenceEngine.create(
        const.FREQUENCY_MONTHLY, 1, "2024-01-26T18:30:00", count=6
    )


@pytest.fixture
def second_tuesday_monthly() -> RecurrenceEngine:
    """2nd Tuesday of every month from 2024-01-09, open until 2100."""
    return RecurrenceEngine.create(
        const.FREQUENCY_MONTHLY, 1, "2024-01-09T10:00:00", until="2100-12-31"
    )


@pytest.fixture
def leap_day_yearly() -> RecurrenceEngine:
    """Yearly on Feb 29 from 2024, open until 2100."""
    return RecurrenceEngine.create(
        const.FREQUENCY_YEARLY, 1, "2024-02-29T07:00:00", until="2100-12-31"
    )
