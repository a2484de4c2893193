"""Financial health score.

Three sub-scores, each 0-100:

- consistency: days with at least one logged transaction over the last 30
  days, full marks from 20 active days on;
- savings: savings rate of the current month, full marks from 20 %;
- spending: share of the month's expenses that went to essential categories.

The overall score weights them 30/40/30.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Iterable

from .aggregation import EntryType, LedgerEntry, aggregate, filter_entries
from .periods import PeriodBounds

CONSISTENCY_WINDOW_DAYS = 30
CONSISTENCY_TARGET_DAYS = 20
SAVINGS_TARGET_RATE_PCT = 20


class ScoreTip(str, Enum):
    CONSISTENCY_LOW = "TIP_CONSISTENCY_LOW"
    SAVINGS_LOW = "TIP_SAVINGS_LOW"
    SPENDING_HIGH = "TIP_SPENDING_HIGH"
    EXCELLENT = "TIP_EXCELLENT"


@dataclass
class FinancialScore:
    score: int
    consistency_score: int
    savings_score: int
    spending_score: int
    total_income: float
    total_expense: float
    essential_expense: float
    non_essential_expense: float
    tips: list[ScoreTip] = field(default_factory=list)


def _clamp(value: int, low: int = 0, high: int = 100) -> int:
    return max(low, min(high, value))


def consistency_score(entries: Iterable[LedgerEntry], today: date) -> int:
    window = PeriodBounds(today - timedelta(days=CONSISTENCY_WINDOW_DAYS), today)
    active_days = {entry.day for entry in filter_entries(entries, window)}
    return _clamp(int(len(active_days) * 100 / CONSISTENCY_TARGET_DAYS))


def savings_score(income: float, expense: float) -> int:
    if income <= 0:
        return 0
    # rate * (100 / target) * 100, truncated toward zero before clamping
    return _clamp(int((income - expense) * 100 * (100 / SAVINGS_TARGET_RATE_PCT) / income))


def spending_score(expense: float, non_essential: float) -> int:
    if expense <= 0:
        return 100
    return _clamp(int((expense - non_essential) * 100 / expense))


def financial_score(entries: Iterable[LedgerEntry], today: date) -> FinancialScore:
    entries = list(entries)
    month = PeriodBounds(today.replace(day=1), today)
    totals = aggregate(entries, month)

    essential = 0.0
    non_essential = 0.0
    for entry in filter_entries(entries, month):
        if entry.is_transfer or entry.type != EntryType.EXPENSE:
            continue
        if entry.is_essential:
            essential += entry.amount
        else:
            non_essential += entry.amount

    consistency = consistency_score(entries, today)
    savings = savings_score(totals.income_total, totals.expense_total)
    spending = spending_score(totals.expense_total, non_essential)
    overall = (3 * consistency + 4 * savings + 3 * spending) // 10

    tips: list[ScoreTip] = []
    if consistency < 60:
        tips.append(ScoreTip.CONSISTENCY_LOW)
    if savings < 50:
        tips.append(ScoreTip.SAVINGS_LOW)
    if spending < 60:
        tips.append(ScoreTip.SPENDING_HIGH)
    if overall > 80:
        tips.append(ScoreTip.EXCELLENT)

    return FinancialScore(
        score=overall,
        consistency_score=consistency,
        savings_score=savings,
        spending_score=spending,
        total_income=totals.income_total,
        total_expense=totals.expense_total,
        essential_expense=essential,
        non_essential_expense=non_essential,
        tips=tips,
    )
