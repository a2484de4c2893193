from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from money_app import models
from money_app.core.database import get_db
from money_app.core.deps import get_current_user
from money_app.schemas import WalletCreate, WalletOut, WalletTotalOut, WalletUpdate

from .common import get_owned

router = APIRouter(prefix="/wallets", tags=["wallets"])

_REQUIRED_WALLET_FIELDS = ("name", "balance", "is_default")


def _clear_other_defaults(db: Session, user_id: int, keep_id: int) -> None:
    (
        db.query(models.Wallet)
        .filter(models.Wallet.user_id == user_id, models.Wallet.id != keep_id)
        .update({models.Wallet.is_default: False}, synchronize_session=False)
    )


def _promote_other_default(db: Session, user_id: int, current_id: int) -> None:
    other = (
        db.query(models.Wallet)
        .filter(models.Wallet.user_id == user_id, models.Wallet.id != current_id)
        .order_by(models.Wallet.id)
        .first()
    )
    if not other:
        raise HTTPException(status_code=400, detail="The only wallet must stay the default")
    other.is_default = True


def _ensure_unique_name(db: Session, user_id: int, name: str, exclude_id: int | None = None) -> None:
    q = db.query(models.Wallet).filter(models.Wallet.user_id == user_id, models.Wallet.name == name)
    if exclude_id is not None:
        q = q.filter(models.Wallet.id != exclude_id)
    if q.first():
        raise HTTPException(status_code=409, detail="Wallet name already exists")


@router.get("", response_model=list[WalletOut])
def list_wallets(db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    return (
        db.query(models.Wallet)
        .filter(models.Wallet.user_id == current_user.id)
        .order_by(models.Wallet.is_default.desc(), models.Wallet.id)
        .all()
    )


@router.get("/total", response_model=WalletTotalOut)
def wallets_total(db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    total, count = (
        db.query(func.coalesce(func.sum(models.Wallet.balance), 0), func.count(models.Wallet.id))
        .filter(models.Wallet.user_id == current_user.id)
        .one()
    )
    return WalletTotalOut(total_balance=float(total or 0), wallet_count=int(count or 0))


@router.post("", response_model=WalletOut, status_code=201)
def create_wallet(payload: WalletCreate, db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    _ensure_unique_name(db, current_user.id, payload.name)
    has_wallet = db.query(models.Wallet.id).filter(models.Wallet.user_id == current_user.id).first() is not None
    wallet = models.Wallet(user_id=current_user.id, **payload.model_dump())
    if not has_wallet:
        wallet.is_default = True
    db.add(wallet)
    db.flush()
    if wallet.is_default:
        _clear_other_defaults(db, current_user.id, wallet.id)
    db.commit()
    db.refresh(wallet)
    return wallet


@router.get("/{wallet_id}", response_model=WalletOut)
def get_wallet(wallet_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    return get_owned(db, models.Wallet, wallet_id, current_user.id, "Wallet")


@router.patch("/{wallet_id}", response_model=WalletOut)
def update_wallet(
    wallet_id: int,
    payload: WalletUpdate,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    wallet = get_owned(db, models.Wallet, wallet_id, current_user.id, "Wallet")
    data = payload.model_dump(exclude_unset=True)
    if data.get("name") is not None:
        _ensure_unique_name(db, current_user.id, data["name"], exclude_id=wallet.id)
    if data.get("is_default") is False and wallet.is_default:
        _promote_other_default(db, current_user.id, wallet.id)
    for k, v in data.items():
        if v is None and k in _REQUIRED_WALLET_FIELDS:
            continue
        setattr(wallet, k, v)
    if data.get("is_default"):
        _clear_other_defaults(db, current_user.id, wallet.id)
    db.commit()
    db.refresh(wallet)
    return wallet


@router.delete("/{wallet_id}", status_code=204)
def delete_wallet(wallet_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    wallet = get_owned(db, models.Wallet, wallet_id, current_user.id, "Wallet")
    remaining = (
        db.query(models.Wallet)
        .filter(models.Wallet.user_id == current_user.id, models.Wallet.id != wallet.id)
        .order_by(models.Wallet.id)
        .all()
    )
    if not remaining:
        raise HTTPException(status_code=400, detail="Cannot delete the only wallet")
    # the wallet's history goes with it
    db.query(models.RecurringTransaction).filter(models.RecurringTransaction.wallet_id == wallet.id).delete(
        synchronize_session=False
    )
    db.query(models.Transaction).filter(models.Transaction.wallet_id == wallet.id).delete(synchronize_session=False)
    if wallet.is_default:
        remaining[0].is_default = True
    db.delete(wallet)
    db.commit()
    return None
