from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from money_app import models
from money_app.analytics.numbers import round_money, round_pct
from money_app.core.database import get_db
from money_app.core.deps import get_current_user
from money_app.schemas import BudgetCreate, BudgetOut, BudgetUpdate, CategoryOut
from money_app.services.budget_service import BudgetEvaluation, BudgetService

from .common import analytics_errors, get_owned

router = APIRouter(prefix="/budgets", tags=["budgets"])


def budget_out(evaluation: BudgetEvaluation) -> BudgetOut:
    budget = evaluation.budget
    return BudgetOut(
        id=budget.id,
        user_id=budget.user_id,
        category_id=budget.category_id,
        amount=float(budget.amount),
        period=budget.period,
        start_date=budget.start_date,
        category=CategoryOut.model_validate(budget.category) if budget.category else None,
        period_start=evaluation.bounds.start,
        period_end=evaluation.bounds.end,
        spent=round_money(evaluation.progress.spent),
        remaining=round_money(evaluation.progress.remaining),
        percentage=round_pct(evaluation.progress.percentage),
        status=evaluation.status,
    )


def _ensure_unique(
    db: Session,
    user_id: int,
    category_id: int,
    period: models.BudgetPeriod,
    exclude_id: Optional[int] = None,
) -> None:
    q = db.query(models.Budget).filter(
        models.Budget.user_id == user_id,
        models.Budget.category_id == category_id,
        models.Budget.period == period,
    )
    if exclude_id is not None:
        q = q.filter(models.Budget.id != exclude_id)
    if q.first():
        raise HTTPException(status_code=409, detail="Budget already exists for this category and period")


@router.get("", response_model=list[BudgetOut])
def list_budgets(
    reference_date: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    ref = reference_date or models.today_local()
    with analytics_errors():
        evaluations = BudgetService(db).evaluate_all(current_user.id, ref)
    return [budget_out(e) for e in evaluations]


@router.post("", response_model=BudgetOut, status_code=201)
def create_budget(payload: BudgetCreate, db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    get_owned(db, models.Category, payload.category_id, current_user.id, "Category")
    _ensure_unique(db, current_user.id, payload.category_id, payload.period)
    budget = models.Budget(user_id=current_user.id, **payload.model_dump())
    db.add(budget)
    db.commit()
    db.refresh(budget)
    with analytics_errors():
        return budget_out(BudgetService(db).evaluate(budget, models.today_local()))


@router.get("/{budget_id}", response_model=BudgetOut)
def get_budget(
    budget_id: int,
    reference_date: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    budget = get_owned(db, models.Budget, budget_id, current_user.id, "Budget")
    with analytics_errors():
        return budget_out(BudgetService(db).evaluate(budget, reference_date or models.today_local()))


@router.patch("/{budget_id}", response_model=BudgetOut)
def update_budget(
    budget_id: int,
    payload: BudgetUpdate,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    budget = get_owned(db, models.Budget, budget_id, current_user.id, "Budget")
    data = payload.model_dump(exclude_unset=True)
    if data.get("period") is not None and data["period"] != budget.period:
        _ensure_unique(db, current_user.id, budget.category_id, data["period"], exclude_id=budget.id)
    for k, v in data.items():
        if v is None and k in ("amount", "period"):
            continue
        setattr(budget, k, v)
    db.commit()
    db.refresh(budget)
    with analytics_errors():
        return budget_out(BudgetService(db).evaluate(budget, models.today_local()))


@router.delete("/{budget_id}", status_code=204)
def delete_budget(budget_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    budget = get_owned(db, models.Budget, budget_id, current_user.id, "Budget")
    db.delete(budget)
    db.commit()
    return None
