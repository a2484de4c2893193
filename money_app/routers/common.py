from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, TypeVar

from fastapi import HTTPException
from sqlalchemy.orm import Session

from money_app.analytics.errors import AnalyticsError

T = TypeVar("T")


def get_owned(db: Session, model: type[T], obj_id: int, user_id: int, label: str) -> T:
    """Load a row belonging to ``user_id`` or raise 404."""
    obj = (
        db.query(model)
        .filter(model.id == obj_id, model.user_id == user_id)  # type: ignore[attr-defined]
        .first()
    )
    if not obj:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return obj


@contextmanager
def analytics_errors() -> Iterator[None]:
    """Turn invalid analytics input into a 400 response."""
    try:
        yield
    except AnalyticsError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


# label for spending that has no (or a since-deleted) category
UNCATEGORIZED_NAME = "Lainnya"
