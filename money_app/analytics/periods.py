"""Calendar period resolution.

Bounds are inclusive on both ends. Weeks start on Monday (ISO 8601).
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Iterator

from .errors import InvalidBounds, InvalidPeriod


class PeriodKind(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @classmethod
    def parse(cls, value: "PeriodKind | str") -> "PeriodKind":
        if isinstance(value, PeriodKind):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidPeriod(value)


@dataclass(frozen=True)
class PeriodBounds:
    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise InvalidBounds(self.start, self.end)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1


def _last_day_of_month(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def _add_months(day: date, delta: int) -> date:
    index = day.year * 12 + (day.month - 1) + delta
    year, month = divmod(index, 12)
    month += 1
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last))


def resolve(kind: PeriodKind | str, reference_date: date) -> PeriodBounds:
    kind = PeriodKind.parse(kind)
    if kind is PeriodKind.DAILY:
        return PeriodBounds(reference_date, reference_date)
    if kind is PeriodKind.WEEKLY:
        start = reference_date - timedelta(days=reference_date.weekday())
        return PeriodBounds(start, start + timedelta(days=6))
    if kind is PeriodKind.MONTHLY:
        start = reference_date.replace(day=1)
        return PeriodBounds(start, _last_day_of_month(start.year, start.month))
    return PeriodBounds(date(reference_date.year, 1, 1), date(reference_date.year, 12, 31))


def previous(bounds: PeriodBounds, kind: PeriodKind | str) -> PeriodBounds:
    """The period immediately before ``bounds``.

    Month and year periods are re-resolved from the day before ``bounds.start``
    so varying month lengths and leap years are respected.
    """
    kind = PeriodKind.parse(kind)
    if kind is PeriodKind.DAILY:
        return PeriodBounds(bounds.start - timedelta(days=1), bounds.end - timedelta(days=1))
    if kind is PeriodKind.WEEKLY:
        return PeriodBounds(bounds.start - timedelta(days=7), bounds.end - timedelta(days=7))
    return resolve(kind, bounds.start - timedelta(days=1))


def add_period(day: date, kind: PeriodKind | str, count: int = 1) -> date:
    """Advance ``day`` by ``count`` periods; month steps clamp to month end."""
    kind = PeriodKind.parse(kind)
    if kind is PeriodKind.DAILY:
        return day + timedelta(days=count)
    if kind is PeriodKind.WEEKLY:
        return day + timedelta(weeks=count)
    if kind is PeriodKind.MONTHLY:
        return _add_months(day, count)
    return _add_months(day, 12 * count)


def iter_days(bounds: PeriodBounds) -> Iterator[date]:
    current = bounds.start
    while current <= bounds.end:
        yield current
        current += timedelta(days=1)


def month_bounds(year: int, month: int) -> PeriodBounds:
    return resolve(PeriodKind.MONTHLY, date(year, month, 1))
