from __future__ import annotations

from dataclasses import asdict
from datetime import timedelta

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from money_app import models
from money_app.analytics.numbers import round_money
from money_app.analytics.scoring import CONSISTENCY_WINDOW_DAYS, financial_score
from money_app.core.database import get_db
from money_app.core.deps import get_current_user
from money_app.schemas import FinancialScoreOut
from money_app.services.ledger import load_entries

from .common import analytics_errors

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/score", response_model=FinancialScoreOut)
def get_financial_score(db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    today = models.today_local()
    start = min(today - timedelta(days=CONSISTENCY_WINDOW_DAYS), today.replace(day=1))
    entries = load_entries(db, current_user.id, start=start, end=today)
    with analytics_errors():
        score = financial_score(entries, today)
    data = asdict(score)
    for key in ("total_income", "total_expense", "essential_expense", "non_essential_expense"):
        data[key] = round_money(data[key])
    return FinancialScoreOut(**data)
