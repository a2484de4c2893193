from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, joinedload

from money_app import models
from money_app.core.database import get_db
from money_app.core.deps import get_current_user
from money_app.schemas import RecurringCreate, RecurringOut, RecurringProcessResult
from money_app.services.recurring_service import RecurringService

from .common import get_owned

router = APIRouter(prefix="/recurring", tags=["recurring"])


@router.get("", response_model=list[RecurringOut])
def list_recurring(db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    RecurringService(db).process_due(current_user.id)
    db.commit()
    return (
        db.query(models.RecurringTransaction)
        .options(
            joinedload(models.RecurringTransaction.category),
            joinedload(models.RecurringTransaction.wallet),
        )
        .filter(models.RecurringTransaction.user_id == current_user.id)
        .order_by(models.RecurringTransaction.next_run_date, models.RecurringTransaction.id)
        .all()
    )


@router.post("", response_model=RecurringOut, status_code=201)
def create_recurring(payload: RecurringCreate, db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    get_owned(db, models.Wallet, payload.wallet_id, current_user.id, "Wallet")
    if payload.category_id is not None:
        get_owned(db, models.Category, payload.category_id, current_user.id, "Category")
    data = payload.model_dump()
    start = data.pop("start_date") or models.today_local()
    rule = models.RecurringTransaction(
        user_id=current_user.id,
        start_date=start,
        next_run_date=start,
        is_active=True,
        **data,
    )
    db.add(rule)
    db.commit()
    db.refresh(rule)
    return rule


@router.post("/process", response_model=RecurringProcessResult)
def process_recurring(db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    created = RecurringService(db).process_due(current_user.id)
    db.commit()
    for tx in created:
        db.refresh(tx)
    return RecurringProcessResult(created=len(created), transactions=created)


@router.delete("/{rule_id}", status_code=204)
def delete_recurring(rule_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    rule = get_owned(db, models.RecurringTransaction, rule_id, current_user.id, "Recurring transaction")
    db.delete(rule)
    db.commit()
    return None
