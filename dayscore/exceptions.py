"""
Error types raised by the scoring core.

Both concrete errors subclass ValueError so callers that already guard
input parsing with ``except ValueError`` keep working.
"""
from __future__ import annotations


class DayScoreError(Exception):
    """Base class for all scoring core errors."""


class InputValidationError(DayScoreError, ValueError):
    """Raised when logged input (times, ratings, flags, dates) is malformed."""


class DateRangeError(DayScoreError, ValueError):
    """Raised when a historical query has its start date after its end date."""
