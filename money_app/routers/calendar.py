from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, joinedload

from money_app import models
from money_app.analytics.numbers import to_amount
from money_app.analytics.periods import month_bounds
from money_app.core.database import get_db
from money_app.core.deps import get_current_user
from money_app.schemas import CalendarEventOut, CalendarEventsOut
from money_app.services.recurring_service import occurrences_between

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/calendar", tags=["calendar"])


def _debt_title(debt: models.Debt) -> str:
    if debt.description:
        return f"{debt.person_name} - {debt.description}"
    return debt.person_name


@router.get("/events", response_model=CalendarEventsOut)
def list_events(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    month: Optional[int] = Query(None, ge=1, le=12),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    """Upcoming recurring occurrences and unpaid debt due dates in one month."""
    today = models.today_local()
    year = year or today.year
    month = month or today.month
    bounds = month_bounds(year, month)

    events: list[CalendarEventOut] = []
    rules = (
        db.query(models.RecurringTransaction)
        .options(joinedload(models.RecurringTransaction.category))
        .filter(
            models.RecurringTransaction.user_id == current_user.id,
            models.RecurringTransaction.is_active.is_(True),
            models.RecurringTransaction.next_run_date <= bounds.end,
        )
        .all()
    )
    for rule in rules:
        icon = rule.category.icon if rule.category else None
        for day in occurrences_between(rule, bounds):
            events.append(
                CalendarEventOut(
                    id=rule.id,
                    date=day,
                    title=rule.description or "",
                    amount=to_amount(rule.amount),
                    type=rule.type.value,
                    source="recurring",
                    source_id=rule.id,
                    category_icon=icon,
                )
            )

    debts = (
        db.query(models.Debt)
        .filter(
            models.Debt.user_id == current_user.id,
            models.Debt.status == models.DebtStatus.UNPAID,
            models.Debt.due_date.between(bounds.start, bounds.end),
        )
        .all()
    )
    for debt in debts:
        events.append(
            CalendarEventOut(
                id=debt.id,
                date=debt.due_date,
                title=_debt_title(debt),
                amount=to_amount(debt.amount),
                type=f"debt_{debt.type.value}",
                source="debt",
                source_id=debt.id,
            )
        )

    events.sort(key=lambda e: (e.date, e.source, e.source_id))
    logger.debug("Calendar %04d-%02d: %d events for user %s", year, month, len(events), current_user.id)
    return CalendarEventsOut(events=events, month=month, year=year)
