from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from money_app import models
from money_app.analytics.periods import PeriodBounds, PeriodKind, add_period
from money_app.core.config import settings

from .transaction_service import WalletBalanceService

logger = logging.getLogger(__name__)

AUTO_SUFFIX = " (Otomatis)"


def due_occurrences(rule: models.RecurringTransaction, today: date) -> tuple[list[date], date]:
    """Occurrences from ``next_run_date`` up to ``today`` and the one after.

    Dates are stepped from ``start_date`` rather than from the previous
    occurrence so a rule starting on the 31st comes back to the 31st after a
    short month.
    """
    kind = PeriodKind(rule.frequency.value)
    due: list[date] = []
    step = _steps_before(rule.start_date, rule.last_run_date, kind)
    while True:
        day = add_period(rule.start_date, kind, step)
        step += 1
        if day < rule.next_run_date:
            continue
        if day > today:
            return due, day
        due.append(day)


def occurrences_between(rule: models.RecurringTransaction, bounds: PeriodBounds) -> list[date]:
    """Projected occurrences inside ``bounds``, none earlier than ``next_run_date``."""
    kind = PeriodKind(rule.frequency.value)
    floor = max(rule.next_run_date, bounds.start)
    found: list[date] = []
    step = _steps_before(rule.start_date, floor, kind)
    while True:
        day = add_period(rule.start_date, kind, step)
        step += 1
        if day < floor:
            continue
        if day > bounds.end:
            return found
        found.append(day)


def _steps_before(start: date, last_run: Optional[date], kind: PeriodKind) -> int:
    """A step index whose occurrence is on or before ``last_run``.

    Lets the walk resume near the last materialized occurrence instead of
    replaying the whole history of an old rule.
    """
    if last_run is None or last_run <= start:
        return 0
    if kind is PeriodKind.DAILY:
        steps = (last_run - start).days
    elif kind is PeriodKind.WEEKLY:
        steps = (last_run - start).days // 7
    elif kind is PeriodKind.MONTHLY:
        steps = (last_run.year - start.year) * 12 + last_run.month - start.month
    else:
        steps = last_run.year - start.year
    # month-end clamping can overshoot by one step
    while steps > 0 and add_period(start, kind, steps) > last_run:
        steps -= 1
    return steps


class RecurringService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.balances = WalletBalanceService(db)

    def process_due(self, user_id: int, today: Optional[date] = None) -> list[models.Transaction]:
        """Materialize every due occurrence of the user's active rules.

        Each occurrence becomes a transaction dated on the occurrence itself,
        so a rule that was not processed for a while catches up completely.
        Flushes but does not commit.
        """
        if today is None:
            today = models.today_local()
        rules = (
            self.db.query(models.RecurringTransaction)
            .filter(
                models.RecurringTransaction.user_id == user_id,
                models.RecurringTransaction.is_active.is_(True),
                models.RecurringTransaction.next_run_date <= today,
            )
            .order_by(models.RecurringTransaction.next_run_date, models.RecurringTransaction.id)
            .all()
        )
        created: list[models.Transaction] = []
        for rule in rules:
            due, upcoming = due_occurrences(rule, today)
            for occurred_at in due:
                tx = models.Transaction(
                    user_id=rule.user_id,
                    wallet_id=rule.wallet_id,
                    category_id=rule.category_id,
                    occurred_at=occurred_at,
                    type=rule.type,
                    amount=float(rule.amount),
                    currency=settings.DEFAULT_CURRENCY,
                    exchange_rate=1,
                    description=f"{rule.description or ''}{AUTO_SUFFIX}".strip(),
                )
                self.db.add(tx)
                self.balances.apply_transaction(tx)
                created.append(tx)
            if due:
                rule.last_run_date = due[-1]
            rule.next_run_date = upcoming
            logger.info(
                "recurring rule %s: %d occurrence(s) created, next run %s",
                rule.id,
                len(due),
                upcoming,
            )
        if created:
            self.db.flush()
        return created
