"""Physical activity API router.

Calories burned are computed once, when the activity is logged, from the
exercise definition and the caller's current weight.
"""

from datetime import date

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from core.auth import CurrentUser, ensure_owner_or_admin, get_current_user
from core.exceptions import ValidationError
from core.logger import get_logger
from core.numbers import round_half_up
from core.repository import delete, get_or_404, save
from database import models
from database.deps import get_db_write
from schemas import ActivityCreateRequest, ActivityResponse
from services.achievement_evaluator import ActionType, schedule_check
from services.diary_service import parse_day
from services.nutrition_aggregator import calories_burned
from api.exercises import visible_exercise

logger = get_logger("api.activities")
router = APIRouter(prefix="/api/activities", tags=["activities"])


@router.post("", response_model=ActivityResponse, status_code=201)
def log_activity(
    payload: ActivityCreateRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db_write),
    current: CurrentUser = Depends(get_current_user),
):
    """Log a workout for the caller.

    Raises:
        ValidationError: If the caller has no weight set or the date is invalid.
        NotFoundError: If the profile or the exercise does not exist.
    """
    user = get_or_404(db, models.User, current.id, "User")
    if not user.weight or user.weight <= 0:
        raise ValidationError("Set your weight in your profile before logging activities", field="weight")
    exercise = visible_exercise(db, payload.exercise_definition_id, current)
    day = parse_day(payload.activity_date, field="activity_date") if payload.activity_date else date.today()

    burned = round_half_up(calories_burned(exercise.met_value, exercise.calories_per_minute, user.weight, payload.duration_minutes))
    activity = save(db, models.PhysicalActivity(
        user_id=user.id,
        exercise_definition_id=exercise.id,
        activity_date=day,
        duration_minutes=payload.duration_minutes,
        calories_burned=burned,
        activity_type=exercise.name,
    ))

    logger.info("Activity %s logged: user=%s exercise=%s minutes=%s kcal=%s",
                activity.id, user.id, exercise.name, payload.duration_minutes, burned)
    schedule_check(background_tasks, user.id, ActionType.ACTIVITY_LOGGED, {
        "activity_date": day.isoformat(),
        "duration_minutes": payload.duration_minutes,
    })
    return ActivityResponse(
        id=activity.id,
        exercise_definition_id=activity.exercise_definition_id,
        activity_type=activity.activity_type,
        activity_date=activity.activity_date.isoformat(),
        duration_minutes=activity.duration_minutes,
        calories_burned=activity.calories_burned,
    )


@router.delete("/{activity_id}")
def delete_activity(activity_id: int, db: Session = Depends(get_db_write), current: CurrentUser = Depends(get_current_user)):
    activity = get_or_404(db, models.PhysicalActivity, activity_id, "Activity")
    ensure_owner_or_admin(current, activity.user_id, "Activity")
    delete(db, activity)
    logger.info("Activity %s deleted by user %s", activity_id, current.id)
    return {"message": "Activity deleted", "id": activity_id}
