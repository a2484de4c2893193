from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from money_app import models
from money_app.analytics.aggregation import GroupBy, aggregate
from money_app.analytics.change import change_pct
from money_app.analytics.numbers import percent_of, round_money, round_pct
from money_app.analytics.periods import PeriodKind, month_bounds, previous
from money_app.core.database import get_db
from money_app.core.deps import get_current_user
from money_app.schemas import (
    CategoryBreakdownOut,
    DailyTrendOut,
    MonthComparisonOut,
    MonthlyReportOut,
)
from money_app.services.ledger import load_bounds

from .common import UNCATEGORIZED_NAME, analytics_errors

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/monthly", response_model=MonthlyReportOut)
def monthly_report(
    year: Optional[int] = Query(None, ge=1900, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    today = models.today_local()
    year = year or today.year
    month = month or today.month

    with analytics_errors():
        bounds = month_bounds(year, month)
        prev_bounds = previous(bounds, PeriodKind.MONTHLY)
        entries = load_bounds(db, current_user.id, bounds, prev_bounds)
        current = aggregate(entries, bounds, GroupBy.CATEGORY, sort_by_amount=True)
        trend = aggregate(entries, bounds, GroupBy.DAY)
        last = aggregate(entries, prev_bounds)

    names = {
        c.id: c
        for c in db.query(models.Category).filter(models.Category.user_id == current_user.id)
    }
    breakdown = [
        CategoryBreakdownOut(
            category_id=category_id,
            category_name=names[category_id].name if category_id in names else UNCATEGORIZED_NAME,
            category_icon=names[category_id].icon if category_id in names else None,
            amount=round_money(amount),
            percentage=round_pct(percent_of(amount, current.expense_total)),
        )
        for category_id, amount in current.per_category.items()
    ]

    return MonthlyReportOut(
        year=year,
        month=month,
        total_income=round_money(current.income_total),
        total_expense=round_money(current.expense_total),
        net_savings=round_money(current.net),
        savings_rate=round_pct(percent_of(current.net, current.income_total)),
        category_breakdown=breakdown,
        comparison=MonthComparisonOut(
            income_change=round_pct(change_pct(current.income_total, last.income_total)),
            expense_change=round_pct(change_pct(current.expense_total, last.expense_total)),
            savings_change=round_pct(change_pct(current.net, last.net)),
        ),
        daily_trend=[
            DailyTrendOut(date=d.date, income=round_money(d.income), expense=round_money(d.expense))
            for d in trend.per_day
        ],
        transaction_count=current.transaction_count,
    )
