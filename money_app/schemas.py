from __future__ import annotations

from datetime import date, time, datetime
import datetime as dt
from typing import Literal, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
)

from .analytics.budgeting import BudgetStatus
from .analytics.numbers import percent_of
from .analytics.periods import PeriodKind
from .analytics.scoring import ScoreTip
from .models import (
    BudgetPeriod,
    DebtStatus,
    DebtType,
    RecurringFrequency,
    TxnType,
)


def _upper_currency(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if len(v) != 3:
        raise ValueError("currency must be 3-letter code")
    return v.upper()


# ===== Wallets =====

class WalletCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    icon: Optional[str] = Field(default=None, max_length=32)
    color: Optional[str] = Field(default=None, max_length=9)
    balance: float = 0
    is_default: bool = False
    description: Optional[str] = None


class WalletUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    icon: Optional[str] = Field(default=None, max_length=32)
    color: Optional[str] = Field(default=None, max_length=9)
    balance: Optional[float] = None
    is_default: Optional[bool] = None
    description: Optional[str] = None


class WalletOut(BaseModel):
    id: int
    user_id: int
    name: str
    icon: Optional[str]
    color: Optional[str]
    balance: float
    is_default: bool
    description: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WalletTotalOut(BaseModel):
    total_balance: float
    wallet_count: int


# ===== Categories =====

class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    icon: Optional[str] = Field(default=None, max_length=32)
    color: Optional[str] = Field(default=None, max_length=9)
    type: TxnType
    is_essential: bool = True


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    icon: Optional[str] = Field(default=None, max_length=32)
    color: Optional[str] = Field(default=None, max_length=9)
    is_essential: Optional[bool] = None


class CategoryOut(BaseModel):
    id: int
    user_id: int
    name: str
    icon: Optional[str]
    color: Optional[str]
    type: TxnType
    is_default: bool
    is_essential: bool

    model_config = ConfigDict(from_attributes=True)


# ===== Transactions =====

class TransactionCreate(BaseModel):
    wallet_id: Optional[int] = None
    category_id: Optional[int] = None
    type: TxnType
    amount: float = Field(ge=0)
    occurred_at: Optional[date] = Field(
        default=None,
        validation_alias=AliasChoices("occurred_at", "date"),
    )
    occurred_time: Optional[time] = None
    currency: Optional[str] = None
    original_amount: Optional[float] = Field(default=None, ge=0)
    exchange_rate: float = Field(default=1, gt=0)
    description: Optional[str] = Field(default=None, max_length=255)
    notes: Optional[str] = None
    proof_url: Optional[str] = Field(default=None, max_length=500)

    model_config = ConfigDict(extra="ignore")

    @field_validator("currency")
    def currency_len(cls, v: Optional[str]):
        return _upper_currency(v)


class TransactionUpdate(BaseModel):
    wallet_id: Optional[int] = None
    category_id: Optional[int] = None
    type: Optional[TxnType] = None
    amount: Optional[float] = Field(default=None, ge=0)
    occurred_at: Optional[date] = Field(
        default=None,
        validation_alias=AliasChoices("occurred_at", "date"),
    )
    occurred_time: Optional[time] = None
    description: Optional[str] = Field(default=None, max_length=255)
    notes: Optional[str] = None
    proof_url: Optional[str] = Field(default=None, max_length=500)

    model_config = ConfigDict(extra="ignore")


class TransactionOut(BaseModel):
    id: int
    user_id: int
    wallet_id: int
    category_id: Optional[int]
    occurred_at: date
    occurred_time: Optional[time]
    type: TxnType
    amount: float
    original_amount: Optional[float]
    currency: str
    exchange_rate: float
    description: Optional[str]
    notes: Optional[str]
    proof_url: Optional[str]
    category: Optional[CategoryOut] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TransactionListOut(BaseModel):
    transactions: list[TransactionOut]
    total: int
    page: int
    limit: int


class TransferRequest(BaseModel):
    source_wallet_id: int
    target_wallet_id: int
    amount: float = Field(gt=0)
    description: Optional[str] = None
    occurred_at: Optional[date] = Field(
        default=None,
        validation_alias=AliasChoices("occurred_at", "date"),
    )


class TransferResult(BaseModel):
    expense: TransactionOut
    income: TransactionOut


# ===== Budgets =====

class BudgetCreate(BaseModel):
    category_id: int
    amount: float = Field(ge=0)
    period: BudgetPeriod = BudgetPeriod.MONTHLY
    start_date: Optional[date] = None


class BudgetUpdate(BaseModel):
    amount: Optional[float] = Field(default=None, ge=0)
    period: Optional[BudgetPeriod] = None
    start_date: Optional[date] = None


class BudgetOut(BaseModel):
    id: int
    user_id: int
    category_id: int
    amount: float
    period: BudgetPeriod
    start_date: Optional[date]
    category: Optional[CategoryOut] = None
    period_start: date
    period_end: date
    spent: float
    remaining: float
    percentage: float
    status: BudgetStatus


# ===== Dashboard / reports =====

class CategorySpendingOut(BaseModel):
    category_id: Optional[int]
    category_name: str
    category_icon: Optional[str] = None
    color: Optional[str] = None
    amount: float
    percentage: float
    change_pct: float


class BudgetProgressOut(BaseModel):
    budget_id: int
    category_id: int
    category_name: str
    budget_amount: float
    spent_amount: float
    remaining: float
    percentage: float
    status: BudgetStatus


class DailyTrendOut(BaseModel):
    date: dt.date
    income: float
    expense: float


class DashboardSummaryOut(BaseModel):
    period: PeriodKind
    period_start: date
    period_end: date
    total_income: float
    total_expense: float
    net: float
    balance: float
    transaction_count: int
    income_change_pct: float
    expense_change_pct: float
    monthly_income: float
    monthly_expense: float
    recent_transactions: list[TransactionOut]
    category_spending: list[CategorySpendingOut]
    budget_progress: list[BudgetProgressOut]
    budget_alerts: list[BudgetProgressOut]
    daily_trends: list[DailyTrendOut]


class CategoryBreakdownOut(BaseModel):
    category_id: Optional[int]
    category_name: str
    category_icon: Optional[str] = None
    amount: float
    percentage: float


class MonthComparisonOut(BaseModel):
    income_change: float
    expense_change: float
    savings_change: float


class MonthlyReportOut(BaseModel):
    year: int
    month: int
    total_income: float
    total_expense: float
    net_savings: float
    savings_rate: float
    category_breakdown: list[CategoryBreakdownOut]
    comparison: MonthComparisonOut
    daily_trend: list[DailyTrendOut]
    transaction_count: int


class FinancialScoreOut(BaseModel):
    score: int
    consistency_score: int
    savings_score: int
    spending_score: int
    total_income: float
    total_expense: float
    essential_expense: float
    non_essential_expense: float
    tips: list[ScoreTip]


# ===== Gamification =====

class BadgeOut(BaseModel):
    id: int
    name: str
    description: Optional[str]
    icon: Optional[str]
    criteria: Optional[str]

    model_config = ConfigDict(from_attributes=True)


class EarnedBadgeOut(BadgeOut):
    earned_at: datetime


class GamificationStatusOut(BaseModel):
    level: int
    xp: int
    next_level_xp: int
    current_streak: int
    longest_streak: int
    badges: list[EarnedBadgeOut]


# ===== Recurring =====

class RecurringCreate(BaseModel):
    wallet_id: int
    category_id: Optional[int] = None
    amount: float = Field(ge=0)
    type: TxnType
    description: Optional[str] = Field(default=None, max_length=255)
    frequency: RecurringFrequency
    start_date: Optional[date] = None


class RecurringOut(BaseModel):
    id: int
    user_id: int
    wallet_id: int
    category_id: Optional[int]
    amount: float
    type: TxnType
    description: Optional[str]
    frequency: RecurringFrequency
    start_date: date
    next_run_date: date
    last_run_date: Optional[date]
    is_active: bool
    category: Optional[CategoryOut] = None
    wallet: Optional[WalletOut] = None

    model_config = ConfigDict(from_attributes=True)


class RecurringProcessResult(BaseModel):
    created: int
    transactions: list[TransactionOut]


# ===== Goals =====

class GoalCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    target_amount: float = Field(ge=0)
    current_amount: float = Field(default=0, ge=0)
    deadline: Optional[date] = None
    icon: Optional[str] = Field(default=None, max_length=32)
    color: Optional[str] = Field(default=None, max_length=9)
    description: Optional[str] = None


class GoalUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    target_amount: Optional[float] = Field(default=None, ge=0)
    current_amount: Optional[float] = Field(default=None, ge=0)
    deadline: Optional[date] = None
    icon: Optional[str] = Field(default=None, max_length=32)
    color: Optional[str] = Field(default=None, max_length=9)
    description: Optional[str] = None


class GoalOut(BaseModel):
    id: int
    user_id: int
    name: str
    target_amount: float
    current_amount: float
    deadline: Optional[date]
    icon: Optional[str]
    color: Optional[str]
    description: Optional[str]

    model_config = ConfigDict(from_attributes=True)

    @computed_field(return_type=float)
    def progress(self) -> float:
        return round(percent_of(self.current_amount, self.target_amount), 2)


class GoalFundsRequest(BaseModel):
    amount: float = Field(gt=0)
    occurred_at: Optional[date] = Field(
        default=None,
        validation_alias=AliasChoices("occurred_at", "date"),
    )
    notes: Optional[str] = None


class GoalContributionOut(BaseModel):
    id: int
    goal_id: int
    user_id: int
    amount: float
    occurred_at: date
    notes: Optional[str]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ===== Debts =====

class DebtCreate(BaseModel):
    type: DebtType
    person_name: str = Field(min_length=1, max_length=120)
    amount: float = Field(ge=0)
    description: Optional[str] = None
    due_date: Optional[date] = None


class DebtUpdate(BaseModel):
    type: Optional[DebtType] = None
    person_name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    amount: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = None
    due_date: Optional[date] = None
    status: Optional[DebtStatus] = None


class DebtOut(BaseModel):
    id: int
    user_id: int
    type: DebtType
    person_name: str
    amount: float
    description: Optional[str]
    due_date: Optional[date]
    status: DebtStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ===== Calendar =====

class CalendarEventOut(BaseModel):
    id: int
    date: dt.date
    title: str
    amount: float
    type: Literal["income", "expense", "debt_payable", "debt_receivable"]
    source: Literal["recurring", "debt"]
    source_id: int
    category_icon: Optional[str] = None


class CalendarEventsOut(BaseModel):
    events: list[CalendarEventOut]
    month: int
    year: int
