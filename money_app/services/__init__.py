"""Service layer: database-aware orchestration around the analytics core."""

from .budget_service import BudgetEvaluation, BudgetService
from .gamification_service import GamificationService
from .recurring_service import RecurringService
from .transaction_service import WalletBalanceService

__all__ = [
    "BudgetEvaluation",
    "BudgetService",
    "GamificationService",
    "RecurringService",
    "WalletBalanceService",
]
