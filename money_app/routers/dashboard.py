from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from money_app import models
from money_app.analytics.aggregation import GroupBy, aggregate
from money_app.analytics.budgeting import DASHBOARD_ALERT_THRESHOLD
from money_app.analytics.change import change_pct
from money_app.analytics.numbers import percent_of, round_money, round_pct
from money_app.analytics.periods import PeriodKind, previous, resolve
from money_app.core.config import settings
from money_app.core.database import get_db
from money_app.core.deps import get_current_user
from money_app.schemas import (
    BudgetProgressOut,
    CategorySpendingOut,
    DailyTrendOut,
    DashboardSummaryOut,
)
from money_app.services.budget_service import BudgetService
from money_app.services.ledger import load_bounds
from money_app.services.recurring_service import RecurringService

from .common import UNCATEGORIZED_NAME, analytics_errors

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def _category_lookup(db: Session, user_id: int) -> dict[int, models.Category]:
    return {c.id: c for c in db.query(models.Category).filter(models.Category.user_id == user_id)}


@router.get("/summary", response_model=DashboardSummaryOut)
def dashboard_summary(
    period: str = Query(PeriodKind.MONTHLY.value, description="daily | weekly | monthly | yearly"),
    reference_date: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    with analytics_errors():
        kind = PeriodKind.parse(period)

    RecurringService(db).process_due(current_user.id)
    db.commit()

    ref = reference_date or models.today_local()
    with analytics_errors():
        bounds = resolve(kind, ref)
        prev_bounds = previous(bounds, kind)
        month = resolve(PeriodKind.MONTHLY, ref)
        entries = load_bounds(db, current_user.id, bounds, prev_bounds, month)

        current = aggregate(entries, bounds, GroupBy.CATEGORY, sort_by_amount=True)
        last = aggregate(entries, prev_bounds, GroupBy.CATEGORY)
        trend = aggregate(entries, bounds, GroupBy.DAY)
        month_totals = aggregate(entries, month)
        evaluations = BudgetService(db).evaluate_all(current_user.id, ref)

    categories = _category_lookup(db, current_user.id)
    category_spending: list[CategorySpendingOut] = []
    for category_id, amount in current.per_category.items():
        category = categories.get(category_id) if category_id is not None else None
        category_spending.append(
            CategorySpendingOut(
                category_id=category_id,
                category_name=category.name if category else UNCATEGORIZED_NAME,
                category_icon=category.icon if category else None,
                color=category.color if category else None,
                amount=round_money(amount),
                percentage=round_pct(percent_of(amount, current.expense_total)),
                change_pct=round_pct(change_pct(amount, last.per_category.get(category_id, 0.0))),
            )
        )

    budget_progress: list[BudgetProgressOut] = []
    budget_alerts: list[BudgetProgressOut] = []
    for evaluation in evaluations:
        budget = evaluation.budget
        row = BudgetProgressOut(
            budget_id=budget.id,
            category_id=budget.category_id,
            category_name=budget.category.name if budget.category else UNCATEGORIZED_NAME,
            budget_amount=round_money(float(budget.amount)),
            spent_amount=round_money(evaluation.progress.spent),
            remaining=round_money(evaluation.progress.remaining),
            percentage=round_pct(evaluation.progress.percentage),
            status=evaluation.status,
        )
        budget_progress.append(row)
        if evaluation.progress.percentage >= DASHBOARD_ALERT_THRESHOLD:
            budget_alerts.append(row)

    balance = (
        db.query(func.coalesce(func.sum(models.Wallet.balance), 0))
        .filter(models.Wallet.user_id == current_user.id)
        .scalar()
    )
    recent = (
        db.query(models.Transaction)
        .options(joinedload(models.Transaction.category))
        .filter(models.Transaction.user_id == current_user.id)
        .order_by(models.Transaction.occurred_at.desc(), models.Transaction.id.desc())
        .limit(settings.RECENT_TRANSACTIONS_LIMIT)
        .all()
    )

    return DashboardSummaryOut(
        period=kind,
        period_start=bounds.start,
        period_end=bounds.end,
        total_income=round_money(current.income_total),
        total_expense=round_money(current.expense_total),
        net=round_money(current.net),
        balance=round_money(float(balance or 0)),
        transaction_count=current.transaction_count,
        income_change_pct=round_pct(change_pct(current.income_total, last.income_total)),
        expense_change_pct=round_pct(change_pct(current.expense_total, last.expense_total)),
        monthly_income=round_money(month_totals.income_total),
        monthly_expense=round_money(month_totals.expense_total),
        recent_transactions=recent,
        category_spending=category_spending,
        budget_progress=budget_progress,
        budget_alerts=budget_alerts,
        daily_trends=[DailyTrendOut(date=d.date, income=round_money(d.income), expense=round_money(d.expense)) for d in trend.per_day],
    )
