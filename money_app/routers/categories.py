from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from money_app import models
from money_app.core.database import get_db
from money_app.core.deps import get_current_user
from money_app.schemas import CategoryCreate, CategoryOut, CategoryUpdate

from .common import get_owned

router = APIRouter(prefix="/categories", tags=["categories"])


def _ensure_unique(db: Session, user_id: int, name: str, txn_type: models.TxnType, exclude_id: int | None = None) -> None:
    q = db.query(models.Category).filter(
        models.Category.user_id == user_id,
        models.Category.name == name,
        models.Category.type == txn_type,
    )
    if exclude_id is not None:
        q = q.filter(models.Category.id != exclude_id)
    if q.first():
        raise HTTPException(status_code=409, detail="Category already exists")


@router.get("", response_model=list[CategoryOut])
def list_categories(
    type: Optional[models.TxnType] = Query(None),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    q = db.query(models.Category).filter(models.Category.user_id == current_user.id)
    if type is not None:
        q = q.filter(models.Category.type == type)
    return q.order_by(models.Category.type, models.Category.name).all()


@router.post("", response_model=CategoryOut, status_code=201)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    _ensure_unique(db, current_user.id, payload.name, payload.type)
    category = models.Category(user_id=current_user.id, is_default=False, **payload.model_dump())
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@router.get("/{category_id}", response_model=CategoryOut)
def get_category(category_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    return get_owned(db, models.Category, category_id, current_user.id, "Category")


@router.patch("/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    category = get_owned(db, models.Category, category_id, current_user.id, "Category")
    data = payload.model_dump(exclude_unset=True)
    if data.get("name") is not None:
        _ensure_unique(db, current_user.id, data["name"], category.type, exclude_id=category.id)
    for k, v in data.items():
        if v is None and k in ("name", "is_essential"):
            continue
        setattr(category, k, v)
    db.commit()
    db.refresh(category)
    return category


@router.delete("/{category_id}", status_code=204)
def delete_category(category_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    category = get_owned(db, models.Category, category_id, current_user.id, "Category")
    if category.is_default:
        raise HTTPException(status_code=400, detail="Default categories cannot be deleted")
    # mirror the FK actions explicitly; SQLite only enforces them with the pragma on
    for model in (models.Transaction, models.RecurringTransaction):
        db.query(model).filter(model.category_id == category.id).update(
            {model.category_id: None}, synchronize_session=False
        )
    db.query(models.Budget).filter(models.Budget.category_id == category.id).delete(synchronize_session=False)
    db.delete(category)
    db.commit()
    return None
