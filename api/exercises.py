"""Exercise definitions API router."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import or_
from sqlalchemy.orm import Session

from core.auth import CurrentUser, ensure_owner_or_admin, get_current_user
from core.exceptions import NotFoundError, ValidationError
from core.logger import get_logger
from core.repository import delete, save
from database import models
from database.deps import get_db_read, get_db_write
from schemas import ExerciseCreateRequest, ExerciseResponse, ExerciseUpdateRequest

logger = get_logger("api.exercises")
router = APIRouter(prefix="/api/exercises", tags=["exercises"])


def exercise_response(exercise: models.ExerciseDefinition) -> ExerciseResponse:
    return ExerciseResponse(
        id=exercise.id,
        name=exercise.name,
        description=exercise.description,
        met_value=exercise.met_value,
        calories_per_minute=exercise.calories_per_minute,
        is_public=exercise.is_public,
        created_by=exercise.created_by,
    )


def visible_exercise(db: Session, exercise_id: int, current: CurrentUser) -> models.ExerciseDefinition:
    exercise = db.get(models.ExerciseDefinition, exercise_id)
    if exercise is None or not (exercise.is_public or exercise.created_by == current.id or current.is_admin):
        raise NotFoundError("Exercise", exercise_id)
    return exercise


@router.get("", response_model=List[ExerciseResponse])
def list_exercises(db: Session = Depends(get_db_read), current: CurrentUser = Depends(get_current_user)):
    query = db.query(models.ExerciseDefinition)
    if not current.is_admin:
        query = query.filter(
            or_(models.ExerciseDefinition.is_public.is_(True), models.ExerciseDefinition.created_by == current.id)
        )
    return [exercise_response(e) for e in query.order_by(models.ExerciseDefinition.name).all()]


@router.post("", response_model=ExerciseResponse, status_code=201)
def create_exercise(
    payload: ExerciseCreateRequest,
    db: Session = Depends(get_db_write),
    current: CurrentUser = Depends(get_current_user),
):
    """Create an exercise definition.

    Raises:
        ValidationError: If neither a MET value nor kcal per minute is given.
    """
    if payload.met_value is None and payload.calories_per_minute is None:
        raise ValidationError("Provide met_value or calories_per_minute", field="met_value")
    exercise = save(db, models.ExerciseDefinition(**payload.model_dump(), created_by=current.id))
    logger.info("Exercise %s created by user %s", exercise.id, current.id)
    return exercise_response(exercise)


@router.get("/{exercise_id}", response_model=ExerciseResponse)
def get_exercise(exercise_id: int, db: Session = Depends(get_db_read), current: CurrentUser = Depends(get_current_user)):
    return exercise_response(visible_exercise(db, exercise_id, current))


@router.put("/{exercise_id}", response_model=ExerciseResponse)
def update_exercise(
    exercise_id: int,
    payload: ExerciseUpdateRequest,
    db: Session = Depends(get_db_write),
    current: CurrentUser = Depends(get_current_user),
):
    """Replace an exercise definition. Only its creator or an admin may do so.

    Raises:
        ValidationError: If neither a MET value nor kcal per minute is given.
        ForbiddenError: If the caller neither created the exercise nor is an admin.
    """
    if payload.met_value is None and payload.calories_per_minute is None:
        raise ValidationError("Provide met_value or calories_per_minute", field="met_value")
    exercise = visible_exercise(db, exercise_id, current)
    ensure_owner_or_admin(current, exercise.created_by, "Exercise")
    exercise.name = payload.name.strip()
    exercise.description = payload.description.strip() if payload.description else None
    exercise.met_value = payload.met_value
    exercise.calories_per_minute = payload.calories_per_minute
    if payload.is_public is not None:
        exercise.is_public = payload.is_public
    exercise = save(db, exercise)
    logger.info("Exercise %s updated by user %s", exercise.id, current.id)
    return exercise_response(exercise)


@router.delete("/{exercise_id}")
def delete_exercise(exercise_id: int, db: Session = Depends(get_db_write), current: CurrentUser = Depends(get_current_user)):
    """Delete an exercise definition.

    Activities logged against it keep their stored calories and name.
    """
    exercise = visible_exercise(db, exercise_id, current)
    ensure_owner_or_admin(current, exercise.created_by, "Exercise")
    detached = (
        db.query(models.PhysicalActivity)
        .filter(models.PhysicalActivity.exercise_definition_id == exercise_id)
        .update({models.PhysicalActivity.exercise_definition_id: None}, synchronize_session=False)
    )
    delete(db, exercise)
    logger.info("Exercise %s deleted by user %s (%s activities detached)", exercise_id, current.id, detached)
    return {"message": "Exercise deleted", "id": exercise_id}
