"""Load transactions as analytics ledger entries.

This is the single normalization pass between storage and the analytics core:
absent amounts become zero here, category flags are resolved here, and the
core never sees ORM rows.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from sqlalchemy.orm import Session, joinedload

from money_app import models
from money_app.analytics.aggregation import EntryType, LedgerEntry
from money_app.analytics.numbers import to_amount
from money_app.analytics.periods import PeriodBounds
from money_app.utils import is_transfer_category_name


def to_entry(tx: models.Transaction) -> LedgerEntry:
    category = tx.category
    return LedgerEntry(
        id=tx.id,
        amount=abs(to_amount(tx.amount)),
        type=EntryType(tx.type.value),
        occurred_at=tx.occurred_at,
        category_id=tx.category_id,
        is_transfer=bool(category and is_transfer_category_name(category.name)),
        is_essential=True if category is None else bool(category.is_essential),
    )


def to_entries(rows: Iterable[models.Transaction]) -> list[LedgerEntry]:
    return [to_entry(tx) for tx in rows]


def load_entries(
    db: Session,
    user_id: int,
    *,
    start: Optional[date] = None,
    end: Optional[date] = None,
    category_id: Optional[int] = None,
) -> list[LedgerEntry]:
    """Every matching transaction of the user, unpaginated."""
    q = (
        db.query(models.Transaction)
        .options(joinedload(models.Transaction.category))
        .filter(models.Transaction.user_id == user_id)
    )
    if start is not None:
        q = q.filter(models.Transaction.occurred_at >= start)
    if end is not None:
        q = q.filter(models.Transaction.occurred_at <= end)
    if category_id is not None:
        q = q.filter(models.Transaction.category_id == category_id)
    return to_entries(q.order_by(models.Transaction.occurred_at, models.Transaction.id).all())


def load_bounds(db: Session, user_id: int, *bounds: PeriodBounds) -> list[LedgerEntry]:
    """Entries covering the union of the given bounds in one query."""
    if not bounds:
        return []
    return load_entries(
        db,
        user_id,
        start=min(b.start for b in bounds),
        end=max(b.end for b in bounds),
    )


def category_types(db: Session, user_id: int) -> dict[int, models.TxnType]:
    rows = db.query(models.Category.id, models.Category.type).filter(models.Category.user_id == user_id)
    return {cid: ctype for cid, ctype in rows}
