from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from money_app.core.database import get_db
from money_app.core.deps import get_current_user
from money_app.schemas import GamificationStatusOut
from money_app.services.gamification_service import GamificationService

router = APIRouter(prefix="/gamification", tags=["gamification"])


@router.get("/status", response_model=GamificationStatusOut)
def gamification_status(db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    svc = GamificationService(db)
    # badges such as No Jajan Week depend on the date, not only on new entries
    if svc.award_badges(current_user):
        db.commit()
        db.refresh(current_user)
    return svc.status(current_user)
