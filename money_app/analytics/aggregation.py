from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Iterable, Mapping

from .errors import InvalidGrouping
from .periods import PeriodBounds, iter_days


class EntryType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class GroupBy(str, Enum):
    CATEGORY = "category"
    DAY = "day"


@dataclass(frozen=True)
class LedgerEntry:
    """A transaction reduced to what aggregation needs.

    ``amount`` is already normalized (non-null, non-negative float).
    ``is_transfer`` marks entries booked against the transfer category.
    """

    amount: float
    type: EntryType
    occurred_at: date | datetime
    category_id: int | None = None
    is_transfer: bool = False
    is_essential: bool = True
    id: int | None = None

    @property
    def day(self) -> date:
        value = self.occurred_at
        if isinstance(value, datetime):
            return value.date()
        return value


@dataclass(frozen=True)
class DayTotals:
    date: date
    income: float = 0.0
    expense: float = 0.0


@dataclass
class AggregateResult:
    income_total: float = 0.0
    expense_total: float = 0.0
    transaction_count: int = 0
    per_category: dict[int | None, float] = field(default_factory=dict)
    per_day: list[DayTotals] = field(default_factory=list)

    @property
    def net(self) -> float:
        return self.income_total - self.expense_total


def _coerce_group_by(value: GroupBy | str | None) -> GroupBy | None:
    if value is None or isinstance(value, GroupBy):
        return value
    try:
        return GroupBy(value)
    except ValueError:
        raise InvalidGrouping(value) from None


def filter_entries(entries: Iterable[LedgerEntry], bounds: PeriodBounds) -> list[LedgerEntry]:
    return [entry for entry in entries if bounds.contains(entry.day)]


def aggregate(
    entries: Iterable[LedgerEntry],
    bounds: PeriodBounds,
    group_by: GroupBy | str | None = None,
    *,
    include_income: bool = False,
    sort_by_amount: bool = False,
) -> AggregateResult:
    """Sum income/expense inside ``bounds``, optionally grouped.

    Transfer entries are skipped entirely. Category grouping covers expenses
    only unless ``include_income`` is set; day grouping yields a dense series
    with one row per calendar day.
    """
    grouping = _coerce_group_by(group_by)
    result = AggregateResult()
    per_category: dict[int | None, float] = {}
    daily: defaultdict[date, list[float]] = defaultdict(lambda: [0.0, 0.0])

    for entry in filter_entries(entries, bounds):
        if entry.is_transfer:
            continue
        result.transaction_count += 1
        is_income = entry.type == EntryType.INCOME
        if is_income:
            result.income_total += entry.amount
        else:
            result.expense_total += entry.amount

        if grouping is GroupBy.CATEGORY and (include_income or not is_income):
            per_category[entry.category_id] = per_category.get(entry.category_id, 0.0) + entry.amount
        elif grouping is GroupBy.DAY:
            daily[entry.day][0 if is_income else 1] += entry.amount

    if grouping is GroupBy.CATEGORY:
        if sort_by_amount:
            # sorted() is stable, so equal amounts keep first-encounter order
            per_category = dict(sorted(per_category.items(), key=lambda item: item[1], reverse=True))
        result.per_category = per_category
    elif grouping is GroupBy.DAY:
        result.per_day = [
            DayTotals(date=day, income=daily[day][0], expense=daily[day][1]) if day in daily else DayTotals(date=day)
            for day in iter_days(bounds)
        ]
    return result


def category_type_mismatches(
    entries: Iterable[LedgerEntry],
    category_types: Mapping[int, EntryType | str],
) -> list[LedgerEntry]:
    """Entries whose category is typed differently from the entry itself.

    Transfer entries and uncategorized entries are exempt.
    """
    mismatched: list[LedgerEntry] = []
    for entry in entries:
        if entry.is_transfer or entry.category_id is None:
            continue
        expected = category_types.get(entry.category_id)
        if expected is None:
            continue
        if EntryType(expected) != entry.type:
            mismatched.append(entry)
    return mismatched
