from __future__ import annotations

from sqlalchemy.orm import Session

from .core.database import SessionLocal
from .analytics.gamification import BADGE_CATALOG
from .models import Badge, Category, TxnType, User, Wallet


DEFAULT_CATEGORIES: tuple[dict, ...] = (
    {"name": "Gaji", "icon": "💰", "color": "#22c55e", "type": TxnType.INCOME},
    {"name": "Freelance", "icon": "💻", "color": "#3b82f6", "type": TxnType.INCOME},
    {"name": "Investasi", "icon": "📈", "color": "#8b5cf6", "type": TxnType.INCOME},
    {"name": "Makanan", "icon": "🍔", "color": "#f97316", "type": TxnType.EXPENSE},
    {"name": "Transport", "icon": "🚗", "color": "#eab308", "type": TxnType.EXPENSE},
    {"name": "Belanja", "icon": "🛒", "color": "#ec4899", "type": TxnType.EXPENSE, "is_essential": False},
    {"name": "Hiburan", "icon": "🎬", "color": "#06b6d4", "type": TxnType.EXPENSE, "is_essential": False},
    {"name": "Tagihan", "icon": "📄", "color": "#ef4444", "type": TxnType.EXPENSE},
    {"name": "Kesehatan", "icon": "🏥", "color": "#14b8a6", "type": TxnType.EXPENSE},
)


def seed_user_defaults(db: Session, user: User) -> None:
    """Give a fresh user a default wallet and the default category set.

    Idempotent by name. Flushes but does not commit.
    """
    if not db.query(Wallet).filter_by(user_id=user.id).first():
        db.add(
            Wallet(
                user_id=user.id,
                name="Dompet Utama",
                icon="💰",
                color="#22c55e",
                balance=0,
                is_default=True,
                description="Dompet utama Anda",
            )
        )
    existing = {name for (name,) in db.query(Category.name).filter(Category.user_id == user.id)}
    for item in DEFAULT_CATEGORIES:
        if item["name"] in existing:
            continue
        db.add(Category(user_id=user.id, is_default=True, **item))
    db.flush()


def ensure_badges(db: Session) -> None:
    existing = {name for (name,) in db.query(Badge.name)}
    for item in BADGE_CATALOG:
        if item["name"] not in existing:
            db.add(Badge(**item))
    db.flush()


def seed() -> None:
    db: Session = SessionLocal()
    try:
        user = db.query(User).filter_by(email="demo@example.com").first()
        if not user:
            user = User(email="demo@example.com", name="Demo")
            db.add(user)
            db.flush()
        seed_user_defaults(db, user)
        ensure_badges(db)
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed()
