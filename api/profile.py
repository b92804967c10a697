"""Profile API router.

The caller's identity comes from the auth layer; the first PUT creates the
profile row for that id. Every update recomputes BMR, TDEE and the target
calories, and a changed weight is also written to the weight log.
"""

import re
from datetime import date
from typing import Any, Dict

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from core.auth import CurrentUser, get_current_user
from core.exceptions import ConflictError, ValidationError
from core.logger import get_logger
from core.repository import get_or_404
from database import models
from database.deps import get_db_read, get_db_write
from schemas import ProfileResponse, ProfileUpdateRequest
from services.achievement_evaluator import ActionType, schedule_check
from services.calorie_calculator import ACTIVITY_MULTIPLIERS, BMR_FORMULAS, calorie_calculator
from api.weight_log import upsert_weight_log

logger = get_logger("api.profile")
router = APIRouter(prefix="/api", tags=["profile"])

GOALS = ("lose", "gain", "maintain")
GENDERS = ("male", "female", "other")
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def profile_response(user: models.User) -> ProfileResponse:
    return ProfileResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        weight=user.weight,
        height=user.height,
        age=user.age,
        gender=user.gender,
        activity_level=user.activity_level,
        goal=user.goal,
        bmr_formula=user.bmr_formula or "mifflin_st_jeor",
        body_fat_percentage=user.body_fat_percentage,
        target_calories_override=user.target_calories_override,
        bmr=user.bmr,
        calculated_tdee=user.calculated_tdee,
        calculated_target_calories=user.calculated_target_calories,
        effective_target_calories=calorie_calculator.effective_target(user),
    )


def validate_profile_changes(changes: Dict[str, Any]) -> None:
    """Raise ValidationError for the first invalid field in a partial update."""
    if "name" in changes and not (changes["name"] or "").strip():
        raise ValidationError("Name cannot be empty", field="name")
    if "email" in changes and not EMAIL_RE.match(changes["email"] or ""):
        raise ValidationError("Invalid email address", field="email")
    if changes.get("goal") is not None and changes["goal"] not in GOALS:
        raise ValidationError(f"Goal must be one of {', '.join(GOALS)}", field="goal")
    if changes.get("gender") is not None and changes["gender"] not in GENDERS:
        raise ValidationError(f"Gender must be one of {', '.join(GENDERS)} or null", field="gender")
    if changes.get("activity_level") is not None and changes["activity_level"] not in ACTIVITY_MULTIPLIERS:
        raise ValidationError(
            f"Activity level must be one of {', '.join(ACTIVITY_MULTIPLIERS)}", field="activity_level"
        )
    if "bmr_formula" in changes and changes["bmr_formula"] not in BMR_FORMULAS:
        raise ValidationError(f"BMR formula must be one of {', '.join(BMR_FORMULAS)}", field="bmr_formula")
    for field in ("weight", "height"):
        if changes.get(field) is not None and changes[field] <= 0:
            raise ValidationError(f"{field.capitalize()} must be a positive number", field=field)
    if changes.get("age") is not None and not 1 <= changes["age"] <= 120:
        raise ValidationError("Age must be between 1 and 120", field="age")
    bfp = changes.get("body_fat_percentage")
    if bfp is not None and not 0 <= bfp < 100:
        raise ValidationError("Body fat percentage must be between 0 and 100", field="body_fat_percentage")
    override = changes.get("target_calories_override")
    if override is not None and override < 0:
        raise ValidationError("Target calories override cannot be negative", field="target_calories_override")


@router.get("/profile", response_model=ProfileResponse)
def get_profile(db: Session = Depends(get_db_read), current: CurrentUser = Depends(get_current_user)):
    """Return the caller's profile with the derived calorie values."""
    user = get_or_404(db, models.User, current.id, "User")
    return profile_response(user)


@router.put("/profile", response_model=ProfileResponse)
def update_profile(
    payload: ProfileUpdateRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db_write),
    current: CurrentUser = Depends(get_current_user),
):
    """Apply a partial profile update and recompute the calorie targets.

    Raises:
        ValidationError: If a field is out of range or not an allowed value.
        ConflictError: If the e-mail belongs to another user.
    """
    changes = payload.model_dump(exclude_unset=True)
    validate_profile_changes(changes)

    user = db.get(models.User, current.id)
    if user is None:
        if not changes.get("name") or not changes.get("email"):
            raise ValidationError("Name and email are required to create a profile", field="email")
        user = models.User(id=current.id, role=current.role, name=changes["name"], email=changes["email"])
        db.add(user)
        logger.info("Creating profile for user %s", current.id)

    if "email" in changes:
        clash = db.query(models.User.id).filter(models.User.email == changes["email"], models.User.id != current.id).first()
        if clash:
            raise ConflictError("Email is already in use by another account", field="email")

    weight_logged = changes.get("weight") is not None and changes["weight"] != user.weight
    for field, value in changes.items():
        setattr(user, field, value)

    details = calorie_calculator.apply_to(user)
    if weight_logged:
        upsert_weight_log(db, current.id, date.today(), changes["weight"])
    db.commit()
    db.refresh(user)

    logger.info("Profile updated for user %s (fields=%s, calories=%s)", user.id, sorted(changes), details)
    schedule_check(background_tasks, user.id, ActionType.PROFILE_UPDATED, {"weight_logged": weight_logged})
    return profile_response(user)
