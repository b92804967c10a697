"""Advice API router.

`POST /api/advice` evaluates a client-supplied profile and diary day;
`GET /api/advice` evaluates the stored profile and diary for a date.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.auth import CurrentUser, get_current_user
from core.exceptions import ValidationError
from core.logger import get_logger
from core.repository import get_or_404
from database import models
from database.deps import get_db_read
from schemas import AdviceItem, AdviceRequest
from services import diary_service
from services.advice_engine import advice_engine

logger = get_logger("api.advice")
router = APIRouter(prefix="/api/advice", tags=["advice"])


@router.post("", response_model=List[AdviceItem])
def advice_for_payload(payload: AdviceRequest, current: CurrentUser = Depends(get_current_user)):
    """Return advice for the posted profile and diary.

    Raises:
        ValidationError: If the profile or the diary is missing. A present but
            incomplete diary yields an empty list instead.
    """
    if payload.profile is None or payload.diary is None:
        raise ValidationError("Missing profile or diary data", field="profile" if payload.profile is None else "diary")
    advice = advice_engine.get_advice(payload.profile, payload.diary, limit=payload.limit)
    logger.info("Advice for user %s: %s item(s)", current.id, len(advice))
    return advice


@router.get("", response_model=List[AdviceItem])
def advice_for_day(
    day: Optional[str] = Query(None, alias="date", description="Diary day in YYYY-MM-DD format, defaults to today"),
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db_read),
    current: CurrentUser = Depends(get_current_user),
):
    """Return advice for the caller's stored profile and diary day."""
    user = get_or_404(db, models.User, current.id, "User")
    target_day = diary_service.parse_day(day) if day else date.today()
    diary = diary_service.get_day(db, current.id, target_day)
    advice = advice_engine.get_advice(user, diary, limit=limit)
    logger.info("Advice for user %s on %s: %s item(s)", current.id, target_day, len(advice))
    return advice
