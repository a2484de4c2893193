from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .numbers import percent_of, to_amount

WARNING_THRESHOLD = 80.0
OVER_BUDGET_THRESHOLD = 100.0
# the dashboard raises its alert earlier than the budget list marks a warning
DASHBOARD_ALERT_THRESHOLD = 90.0


class BudgetStatus(str, Enum):
    OK = "ok"
    WARNING = "warning"
    OVER_BUDGET = "over_budget"


@dataclass(frozen=True)
class BudgetProgress:
    spent: float
    remaining: float
    percentage: float


def progress(amount: float, category_expense_sum: float | None) -> BudgetProgress:
    """Spent/remaining/percentage of a budget.

    A zero budget reports 0 % instead of failing. The percentage is not
    clamped, so an overspent budget reports more than 100.
    """
    planned = to_amount(amount)
    spent = to_amount(category_expense_sum)
    return BudgetProgress(
        spent=spent,
        remaining=max(0.0, planned - spent),
        percentage=percent_of(spent, planned),
    )


def classify(
    percentage: float,
    *,
    warning_threshold: float = WARNING_THRESHOLD,
    over_threshold: float = OVER_BUDGET_THRESHOLD,
) -> BudgetStatus:
    if percentage > over_threshold:
        return BudgetStatus.OVER_BUDGET
    if percentage > warning_threshold:
        return BudgetStatus.WARNING
    return BudgetStatus.OK
