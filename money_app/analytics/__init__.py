"""Pure aggregation and scoring functions.

Nothing in this package touches the database, the network or logging: every
function is a deterministic computation over inputs already in memory.
"""

from .aggregation import AggregateResult, DayTotals, EntryType, GroupBy, LedgerEntry, aggregate, filter_entries
from .budgeting import BudgetProgress, BudgetStatus, classify, progress
from .change import change_pct
from .errors import AnalyticsError, DivisionGuardViolation, InvalidBounds, InvalidGrouping, InvalidPeriod
from .periods import PeriodBounds, PeriodKind, add_period, previous, resolve

__all__ = [
    "AggregateResult",
    "AnalyticsError",
    "BudgetProgress",
    "BudgetStatus",
    "DayTotals",
    "DivisionGuardViolation",
    "EntryType",
    "GroupBy",
    "InvalidBounds",
    "InvalidGrouping",
    "InvalidPeriod",
    "LedgerEntry",
    "PeriodBounds",
    "PeriodKind",
    "add_period",
    "aggregate",
    "change_pct",
    "classify",
    "filter_entries",
    "previous",
    "progress",
    "resolve",
]
