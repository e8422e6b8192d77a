# File: utils/__init__.py
"""Pure Python utilities for recur_rule.

This module contains calendar helpers with no knowledge of rules or engines.
All functions here can be unit tested with plain dates.

Submodules:
    - dt_utils: Date parsing, normalization, month arithmetic, weekday resolvers

Usage:
    from . import dt_utils
    from .dt_utils import resolve_nth_weekday
"""

from . import dt_utils

__all__ = ["dt_utils"]
