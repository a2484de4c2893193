from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from money_app import models
from money_app.core.database import get_db
from money_app.core.deps import get_current_user
from money_app.schemas import DebtCreate, DebtOut, DebtUpdate

from .common import get_owned

router = APIRouter(prefix="/debts", tags=["debts"])


@router.get("", response_model=list[DebtOut])
def list_debts(
    type: Optional[models.DebtType] = Query(None),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    q = db.query(models.Debt).filter(models.Debt.user_id == current_user.id)
    if type is not None:
        q = q.filter(models.Debt.type == type)
    return q.order_by(models.Debt.status, models.Debt.due_date, models.Debt.id).all()


@router.post("", response_model=DebtOut, status_code=201)
def create_debt(payload: DebtCreate, db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    debt = models.Debt(user_id=current_user.id, status=models.DebtStatus.UNPAID, **payload.model_dump())
    db.add(debt)
    db.commit()
    db.refresh(debt)
    return debt


@router.get("/{debt_id}", response_model=DebtOut)
def get_debt(debt_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    return get_owned(db, models.Debt, debt_id, current_user.id, "Debt")


@router.patch("/{debt_id}", response_model=DebtOut)
def update_debt(
    debt_id: int,
    payload: DebtUpdate,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    debt = get_owned(db, models.Debt, debt_id, current_user.id, "Debt")
    for k, v in payload.model_dump(exclude_unset=True).items():
        if v is None and k in ("type", "person_name", "amount", "status"):
            continue
        setattr(debt, k, v)
    db.commit()
    db.refresh(debt)
    return debt


@router.delete("/{debt_id}", status_code=204)
def delete_debt(debt_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    debt = get_owned(db, models.Debt, debt_id, current_user.id, "Debt")
    db.delete(debt)
    db.commit()
    return None
