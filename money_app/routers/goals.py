from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from money_app import models
from money_app.core.database import get_db
from money_app.core.deps import get_current_user
from money_app.schemas import (
    GoalContributionOut,
    GoalCreate,
    GoalFundsRequest,
    GoalOut,
    GoalUpdate,
)

from .common import get_owned

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/goals", tags=["goals"])


@router.get("", response_model=list[GoalOut])
def list_goals(db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    return (
        db.query(models.Goal)
        .filter(models.Goal.user_id == current_user.id)
        .order_by(models.Goal.created_at.desc(), models.Goal.id.desc())
        .all()
    )


@router.post("", response_model=GoalOut, status_code=201)
def create_goal(payload: GoalCreate, db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    goal = models.Goal(user_id=current_user.id, **payload.model_dump())
    db.add(goal)
    db.commit()
    db.refresh(goal)
    return goal


@router.get("/{goal_id}", response_model=GoalOut)
def get_goal(goal_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    return get_owned(db, models.Goal, goal_id, current_user.id, "Goal")


@router.patch("/{goal_id}", response_model=GoalOut)
def update_goal(
    goal_id: int,
    payload: GoalUpdate,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    goal = get_owned(db, models.Goal, goal_id, current_user.id, "Goal")
    for k, v in payload.model_dump(exclude_unset=True).items():
        if v is None and k in ("name", "target_amount", "current_amount"):
            continue
        setattr(goal, k, v)
    db.commit()
    db.refresh(goal)
    return goal


@router.delete("/{goal_id}", status_code=204)
def delete_goal(goal_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    goal = get_owned(db, models.Goal, goal_id, current_user.id, "Goal")
    db.delete(goal)
    db.commit()
    return None


@router.post("/{goal_id}/funds", response_model=GoalOut)
def add_goal_funds(
    goal_id: int,
    payload: GoalFundsRequest,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    goal = get_owned(db, models.Goal, goal_id, current_user.id, "Goal")
    goal.contributions.append(
        models.GoalContribution(
            user_id=current_user.id,
            amount=payload.amount,
            occurred_at=payload.occurred_at or models.today_local(),
            notes=payload.notes,
        )
    )
    goal.current_amount = float(goal.current_amount or 0) + payload.amount
    db.commit()
    db.refresh(goal)
    if float(goal.target_amount) > 0 and float(goal.current_amount) >= float(goal.target_amount):
        logger.info("goal %s reached its target", goal.id)
    return goal


@router.get("/{goal_id}/history", response_model=list[GoalContributionOut])
def goal_history(goal_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    goal = get_owned(db, models.Goal, goal_id, current_user.id, "Goal")
    return (
        db.query(models.GoalContribution)
        .filter(models.GoalContribution.goal_id == goal.id)
        .order_by(models.GoalContribution.occurred_at.desc(), models.GoalContribution.id.desc())
        .all()
    )
