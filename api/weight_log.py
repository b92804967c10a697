"""Weight log endpoint."""

from datetime import date

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from core.auth import CurrentUser, get_current_user
from core.logger import get_logger
from core.repository import get_or_404
from database import models
from database.deps import get_db_write
from schemas import WeightLogRequest, WeightLogResponse
from services.achievement_evaluator import ActionType, schedule_check
from services.calorie_calculator import calorie_calculator
from services.diary_service import parse_day

logger = get_logger("api.weight_log")
router = APIRouter(prefix="/api", tags=["weight"])


def upsert_weight_log(db: Session, user_id: int, day: date, weight: float) -> models.WeightLog:
    """Create or overwrite the user's weight entry for `day`. Does not commit."""
    log = db.query(models.WeightLog).filter_by(user_id=user_id, log_date=day).first()
    if log is None:
        log = models.WeightLog(user_id=user_id, log_date=day, weight=weight)
        db.add(log)
    else:
        log.weight = weight
    return log


@router.post("/weight-log", response_model=WeightLogResponse, status_code=201)
def log_weight(
    payload: WeightLogRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db_write),
    current: CurrentUser = Depends(get_current_user),
):
    """Record the caller's weight for a day (today by default).

    Logging today's weight also updates the profile weight and the derived
    calorie values.
    """
    user = get_or_404(db, models.User, current.id, "User")
    day = parse_day(payload.date) if payload.date else date.today()

    log = upsert_weight_log(db, user.id, day, payload.weight)
    if day == date.today():
        user.weight = payload.weight
        calorie_calculator.apply_to(user)
    db.commit()
    db.refresh(log)

    logger.info("Weight logged: user=%s date=%s weight=%s", user.id, day, payload.weight)
    schedule_check(background_tasks, user.id, ActionType.WEIGHT_LOGGED, {"date": day.isoformat()})
    return WeightLogResponse(id=log.id, log_date=log.log_date.isoformat(), weight=log.weight)
