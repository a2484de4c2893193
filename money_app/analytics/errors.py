"""Errors raised by the analytics core.

All of them are ``ValueError`` subclasses so request handlers can map them to
a 400 response in one place.
"""

from __future__ import annotations


class AnalyticsError(ValueError):
    """Base class for invalid analytics input."""


class InvalidPeriod(AnalyticsError):
    def __init__(self, value: object) -> None:
        super().__init__(f"Unknown period kind: {value!r}")
        self.value = value


class InvalidBounds(AnalyticsError):
    def __init__(self, start: object, end: object) -> None:
        super().__init__(f"Period end {end} is before start {start}")
        self.start = start
        self.end = end


class InvalidGrouping(AnalyticsError):
    def __init__(self, value: object) -> None:
        super().__init__(f"Unknown grouping: {value!r}")
        self.value = value


class DivisionGuardViolation(AnalyticsError):
    """A ratio was computed against a zero denominator.

    The guarded helpers (``percent_of``, ``progress``, ``change_pct``) return
    their documented fallback values instead and never raise this.
    """
