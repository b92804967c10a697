"""Achievements API router."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import and_
from sqlalchemy.orm import Session

from core.auth import CurrentUser, get_current_user
from database import models
from database.deps import get_db_read
from schemas import AchievementResponse

router = APIRouter(prefix="/api", tags=["achievements"])


@router.get("/achievements", response_model=List[AchievementResponse])
def list_achievements(db: Session = Depends(get_db_read), current: CurrentUser = Depends(get_current_user)):
    """Return every achievement definition with the caller's earned status.

    Sorted by category, earned first, then by name.
    """
    rows = (
        db.query(models.AchievementDefinition, models.UserAchievement)
        .outerjoin(
            models.UserAchievement,
            and_(
                models.UserAchievement.achievement_definition_id == models.AchievementDefinition.id,
                models.UserAchievement.user_id == current.id,
            ),
        )
        .all()
    )
    rows.sort(key=lambda r: (r[0].category or "", r[1] is None, r[0].name))
    return [
        AchievementResponse(
            id=definition.id,
            name=definition.name,
            description=definition.description,
            icon_class=definition.icon_class,
            category=definition.category,
            criteria_description=definition.criteria_description,
            points=definition.points,
            is_earned=earned is not None,
            achieved_date=earned.achieved_date.isoformat() if earned and earned.achieved_date else None,
        )
        for definition, earned in rows
    ]
