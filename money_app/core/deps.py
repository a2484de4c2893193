from __future__ import annotations

from fastapi import Depends
from sqlalchemy.orm import Session

from money_app.core.database import get_db
from money_app import models
from money_app.seed import seed_user_defaults


def get_current_user(db: Session = Depends(get_db)) -> models.User:
    """Very lightweight current user resolver.

    Authentication lives outside this service. Until a session layer is wired
    in, the first user is treated as the caller; a demo user with a default
    wallet and category set is created when the database is empty.
    """
    user = db.query(models.User).order_by(models.User.id).first()
    if not user:
        user = models.User(email="demo@example.com", name="Demo")
        db.add(user)
        db.flush()
        seed_user_defaults(db, user)
        db.commit()
        db.refresh(user)
    return user
