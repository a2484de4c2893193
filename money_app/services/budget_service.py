from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from sqlalchemy.orm import Session, joinedload

from money_app import models
from money_app.analytics.aggregation import GroupBy, LedgerEntry, aggregate
from money_app.analytics.budgeting import BudgetProgress, BudgetStatus, classify, progress
from money_app.analytics.periods import PeriodBounds, PeriodKind, resolve

from .ledger import load_bounds


@dataclass
class BudgetEvaluation:
    budget: models.Budget
    bounds: PeriodBounds
    progress: BudgetProgress
    status: BudgetStatus


def budget_bounds(budget: models.Budget, reference_date: date) -> PeriodBounds:
    """The budget's own period (week, month or year) around ``reference_date``."""
    return resolve(PeriodKind(budget.period.value), reference_date)


class BudgetService:
    """Evaluate budgets against the category expenses of their period."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def list_for_user(self, user_id: int) -> list[models.Budget]:
        return (
            self.db.query(models.Budget)
            .options(joinedload(models.Budget.category))
            .filter(models.Budget.user_id == user_id)
            .order_by(models.Budget.id)
            .all()
        )

    def evaluate(
        self,
        budget: models.Budget,
        reference_date: date,
        entries: Optional[Iterable[LedgerEntry]] = None,
    ) -> BudgetEvaluation:
        bounds = budget_bounds(budget, reference_date)
        if entries is None:
            entries = load_bounds(self.db, budget.user_id, bounds)
        spent = aggregate(entries, bounds, GroupBy.CATEGORY).per_category.get(budget.category_id)
        result = progress(budget.amount, spent)
        return BudgetEvaluation(
            budget=budget,
            bounds=bounds,
            progress=result,
            status=classify(result.percentage),
        )

    def evaluate_all(self, user_id: int, reference_date: date) -> list[BudgetEvaluation]:
        budgets = self.list_for_user(user_id)
        if not budgets:
            return []
        # one query spanning every budget period; each evaluation re-filters to its own bounds
        entries = load_bounds(self.db, user_id, *(budget_bounds(b, reference_date) for b in budgets))
        return [self.evaluate(b, reference_date, entries) for b in budgets]
