from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from money_app import models
from money_app.analytics.aggregation import aggregate
from money_app.analytics.gamification import (
    ActivitySnapshot,
    LevelState,
    StreakState,
    apply_xp,
    earned_badges,
    next_level_xp,
    update_streak,
)
from money_app.analytics.periods import PeriodBounds
from money_app.core.config import settings
from money_app.seed import ensure_badges

from .ledger import load_entries

logger = logging.getLogger(__name__)


class GamificationService:
    """Persist XP, streak and badge state on the user row."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def record_transaction(self, user: models.User, occurred_at: date) -> list[str]:
        """Award XP for one logged transaction and re-check badges.

        Returns the names of newly earned badges. Flushes but does not commit.
        """
        streak = update_streak(
            StreakState(
                current=user.current_streak or 0,
                longest=user.longest_streak or 0,
                last_date=user.last_transaction_date,
            ),
            occurred_at,
        )
        user.current_streak = streak.current
        user.longest_streak = streak.longest
        user.last_transaction_date = streak.last_date

        before = user.level or 1
        state = apply_xp(LevelState(level=before, xp=user.xp or 0), settings.XP_PER_TRANSACTION)
        user.level = state.level
        user.xp = state.xp
        if state.level > before:
            logger.info("user %s reached level %s", user.id, state.level)

        self.db.flush()
        return self.award_badges(user)

    def award_badges(self, user: models.User, today: Optional[date] = None) -> list[str]:
        if today is None:
            today = models.today_local()
        ensure_badges(self.db)

        month = PeriodBounds(today.replace(day=1), today)
        week_start = today - timedelta(days=6)
        entries = load_entries(self.db, user.id, start=min(month.start, week_start), end=today)
        totals = aggregate(entries, month)
        count = (
            self.db.query(func.count(models.Transaction.id))
            .filter(models.Transaction.user_id == user.id)
            .scalar()
        ) or 0
        snapshot = ActivitySnapshot(
            transaction_count=int(count),
            longest_streak=user.longest_streak or 0,
            level=user.level or 1,
            month_income=totals.income_total,
            month_expense=totals.expense_total,
        )

        owned = {ub.badge.name for ub in user.badges}
        new_names = sorted(earned_badges(snapshot, entries, today) - owned)
        if not new_names:
            return []
        badges = self.db.query(models.Badge).filter(models.Badge.name.in_(new_names)).all()
        for badge in badges:
            user.badges.append(models.UserBadge(badge=badge))
            logger.info("user %s earned badge %r", user.id, badge.name)
        self.db.flush()
        return [b.name for b in badges]

    def status(self, user: models.User) -> dict:
        earned = sorted(user.badges, key=lambda ub: (ub.earned_at, ub.badge_id))
        return {
            "level": user.level,
            "xp": user.xp,
            "next_level_xp": next_level_xp(user.level),
            "current_streak": user.current_streak,
            "longest_streak": user.longest_streak,
            "badges": [
                {
                    "id": ub.badge.id,
                    "name": ub.badge.name,
                    "description": ub.badge.description,
                    "icon": ub.badge.icon,
                    "criteria": ub.badge.criteria,
                    "earned_at": ub.earned_at,
                }
                for ub in earned
            ],
        }
