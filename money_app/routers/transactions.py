from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from money_app import models
from money_app.analytics.aggregation import category_type_mismatches
from money_app.core.config import settings
from money_app.core.database import get_db
from money_app.core.deps import get_current_user
from money_app.schemas import (
    TransactionCreate,
    TransactionListOut,
    TransactionOut,
    TransactionUpdate,
    TransferRequest,
    TransferResult,
)
from money_app.services.gamification_service import GamificationService
from money_app.services.ledger import to_entry
from money_app.services.transaction_service import WalletBalanceService, resolve_wallet_id
from money_app.utils import TRANSFER_CATEGORY_NAME, is_transfer_category_name

from .common import get_owned

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transactions", tags=["transactions"])


def _check_category(db: Session, user_id: int, category_id: Optional[int]) -> Optional[models.Category]:
    if category_id is None:
        return None
    return get_owned(db, models.Category, category_id, user_id, "Category")


def _warn_on_type_mismatch(tx: models.Transaction, category: Optional[models.Category]) -> None:
    if category is None:
        return
    if category_type_mismatches([to_entry(tx)], {category.id: category.type.value}):
        logger.warning(
            "transaction %s is %s but category %r is %s",
            tx.id,
            tx.type.value,
            category.name,
            category.type.value,
        )


def _get_transfer_category(db: Session, user_id: int) -> models.Category:
    for category in db.query(models.Category).filter(models.Category.user_id == user_id).order_by(models.Category.id):
        if is_transfer_category_name(category.name):
            return category
    category = models.Category(
        user_id=user_id,
        name=TRANSFER_CATEGORY_NAME,
        icon="🔁",
        type=models.TxnType.EXPENSE,
        is_default=False,
        is_essential=True,
    )
    db.add(category)
    db.flush()
    return category


@router.get("", response_model=TransactionListOut)
def list_transactions(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    category_id: Optional[int] = Query(None),
    type: Optional[models.TxnType] = Query(None),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    q = db.query(models.Transaction).filter(models.Transaction.user_id == current_user.id)
    if start_date is not None:
        q = q.filter(models.Transaction.occurred_at >= start_date)
    if end_date is not None:
        q = q.filter(models.Transaction.occurred_at <= end_date)
    if category_id is not None:
        q = q.filter(models.Transaction.category_id == category_id)
    if type is not None:
        q = q.filter(models.Transaction.type == type)
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        q = q.filter(
            or_(
                models.Transaction.description.ilike(pattern),
                models.Transaction.notes.ilike(pattern),
            )
        )

    total = q.count()
    rows = (
        q.options(joinedload(models.Transaction.category))
        .order_by(models.Transaction.occurred_at.desc(), models.Transaction.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return TransactionListOut(transactions=rows, total=total, page=page, limit=limit)


@router.post("/transfer", response_model=TransferResult, status_code=201)
def transfer_between_wallets(
    payload: TransferRequest,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    if payload.source_wallet_id == payload.target_wallet_id:
        raise HTTPException(status_code=400, detail="Source and target wallet must differ")
    source = get_owned(db, models.Wallet, payload.source_wallet_id, current_user.id, "Source wallet")
    target = get_owned(db, models.Wallet, payload.target_wallet_id, current_user.id, "Target wallet")
    category = _get_transfer_category(db, current_user.id)
    occurred_at = payload.occurred_at or models.today_local()
    description = payload.description or f"Transfer {source.name} → {target.name}"

    balances = WalletBalanceService(db)
    legs: list[models.Transaction] = []
    for wallet, txn_type in ((source, models.TxnType.EXPENSE), (target, models.TxnType.INCOME)):
        tx = models.Transaction(
            user_id=current_user.id,
            wallet_id=wallet.id,
            category_id=category.id,
            occurred_at=occurred_at,
            type=txn_type,
            amount=payload.amount,
            currency=settings.DEFAULT_CURRENCY,
            exchange_rate=1,
            description=description,
        )
        db.add(tx)
        balances.apply_transaction(tx)
        legs.append(tx)
    db.commit()
    for tx in legs:
        db.refresh(tx)
    logger.info("transfer of %s from wallet %s to wallet %s", payload.amount, source.id, target.id)
    return TransferResult(expense=legs[0], income=legs[1])


@router.get("/{txn_id}", response_model=TransactionOut)
def get_transaction(txn_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    return get_owned(db, models.Transaction, txn_id, current_user.id, "Transaction")


@router.post("", response_model=TransactionOut, status_code=201)
def create_transaction(
    payload: TransactionCreate,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    wallet_id = resolve_wallet_id(db, current_user.id, payload.wallet_id)
    if wallet_id is None:
        raise HTTPException(status_code=400, detail="No wallet available")
    get_owned(db, models.Wallet, wallet_id, current_user.id, "Wallet")
    category = _check_category(db, current_user.id, payload.category_id)

    data = payload.model_dump()
    data["wallet_id"] = wallet_id
    if data.get("occurred_at") is None:
        data["occurred_at"] = models.today_local()
    if not data.get("currency"):
        data["currency"] = settings.DEFAULT_CURRENCY

    tx = models.Transaction(user_id=current_user.id, **data)
    db.add(tx)
    db.flush()
    WalletBalanceService(db).apply_transaction(tx)
    _warn_on_type_mismatch(tx, category)
    GamificationService(db).record_transaction(current_user, tx.occurred_at)
    db.commit()
    db.refresh(tx)
    return tx


@router.patch("/{txn_id}", response_model=TransactionOut)
def update_transaction(
    txn_id: int,
    payload: TransactionUpdate,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    tx = get_owned(db, models.Transaction, txn_id, current_user.id, "Transaction")
    data = payload.model_dump(exclude_unset=True)
    if data.get("wallet_id") is not None:
        get_owned(db, models.Wallet, data["wallet_id"], current_user.id, "Wallet")
    else:
        data.pop("wallet_id", None)
    if "category_id" in data:
        _check_category(db, current_user.id, data["category_id"])
    for key in ("type", "amount", "occurred_at"):
        if key in data and data[key] is None:
            data.pop(key)

    balances = WalletBalanceService(db)
    balances.revert_transaction(tx)
    for k, v in data.items():
        setattr(tx, k, v)
    db.flush()
    balances.apply_transaction(tx)
    db.commit()
    db.refresh(tx)
    return tx


@router.delete("/{txn_id}", status_code=204)
def delete_transaction(txn_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    tx = get_owned(db, models.Transaction, txn_id, current_user.id, "Transaction")
    WalletBalanceService(db).revert_transaction(tx)
    db.delete(tx)
    db.commit()
    return None
