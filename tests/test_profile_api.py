"""Tests for the profile and weight log endpoints."""

from datetime import date

import pytest
from fastapi import BackgroundTasks

from api.profile import get_profile, update_profile
from api.weight_log import log_weight
from core.auth import CurrentUser
from core.exceptions import ConflictError, NotFoundError, ValidationError
from database import models
from schemas import ProfileUpdateRequest, WeightLogRequest


def put(db, current, **fields):
    return update_profile(payload=ProfileUpdateRequest(**fields), background_tasks=BackgroundTasks(), db=db, current=current)


def test_get_missing_profile_raises_404(db, current):
    with pytest.raises(NotFoundError) as exc_info:
        get_profile(db=db, current=current)
    assert "User" in exc_info.value.message
    assert exc_info.value.status_code == 404


def test_first_put_creates_profile(db):
    current = CurrentUser(id=7)
    profile = put(db, current, name="Robin", email="robin@example.com", weight=60, height=165, age=25,
                  gender="female", activity_level="moderate", goal="maintain")
    assert profile.id == 7
    assert (profile.bmr, profile.calculated_tdee, profile.calculated_target_calories) == (1345, 2085, 2085)
    assert profile.effective_target_calories == 2085
    assert get_profile(db=db, current=current).name == "Robin"


def test_first_put_requires_name_and_email(db):
    with pytest.raises(ValidationError):
        put(db, CurrentUser(id=8), weight=60)


def test_partial_update_recomputes_targets(db, user, current):
    """A loss goal subtracts 500 kcal from TDEE but never goes below BMR."""
    before = get_profile(db=db, current=current)
    after = put(db, current, goal="lose")
    assert after.weight == 70
    assert after.calculated_tdee == before.calculated_tdee
    assert after.calculated_target_calories == max(before.calculated_tdee - 500, after.bmr)


def test_override_becomes_effective_target(db, user, current):
    profile = put(db, current, target_calories_override=1800)
    assert profile.effective_target_calories == 1800
    cleared = put(db, current, target_calories_override=None)
    assert cleared.effective_target_calories == cleared.calculated_target_calories


def test_formula_fallback_is_silent(db, user, current):
    """Katch-McArdle without body fat still yields the Mifflin-St Jeor values."""
    mifflin = get_profile(db=db, current=current)
    katch = put(db, current, bmr_formula="katch_mcardle")
    assert katch.bmr == mifflin.bmr
    with_fat = put(db, current, body_fat_percentage=20)
    assert with_fat.bmr == 1580


@pytest.mark.parametrize("fields, field", [
    ({"goal": "bulk"}, "goal"),
    ({"gender": "robot"}, "gender"),
    ({"activity_level": "extreme"}, "activity_level"),
    ({"bmr_formula": "guess"}, "bmr_formula"),
    ({"weight": -1}, "weight"),
    ({"age": 0}, "age"),
    ({"body_fat_percentage": 100}, "body_fat_percentage"),
    ({"email": "not-an-email"}, "email"),
])
def test_invalid_fields_rejected(db, user, current, fields, field):
    with pytest.raises(ValidationError) as exc_info:
        put(db, current, **fields)
    assert exc_info.value.details == {"field": field}


def test_email_clash_is_conflict(db, user):
    put(db, CurrentUser(id=2), name="Jo", email="jo@example.com")
    with pytest.raises(ConflictError) as exc_info:
        put(db, CurrentUser(id=2), email="alex@example.com")
    assert exc_info.value.status_code == 409


def test_weight_change_writes_weight_log(db, user, current):
    tasks = BackgroundTasks()
    update_profile(payload=ProfileUpdateRequest(weight=72.5), background_tasks=tasks, db=db, current=current)
    log = db.query(models.WeightLog).filter_by(user_id=1, log_date=date.today()).one()
    assert log.weight == 72.5
    assert tasks.tasks[0].args[2] == {"weight_logged": True}

    put(db, current, weight=72.5)
    assert db.query(models.WeightLog).filter_by(user_id=1).count() == 1


def test_weight_log_for_today_updates_profile(db, user, current):
    old_bmr = user.bmr
    response = log_weight(payload=WeightLogRequest(weight=80), background_tasks=BackgroundTasks(), db=db, current=current)
    assert response.log_date == date.today().isoformat()
    profile = get_profile(db=db, current=current)
    assert profile.weight == 80
    assert profile.bmr == old_bmr + 100


def test_weight_log_for_past_day_keeps_profile(db, user, current):
    log_weight(payload=WeightLogRequest(weight=75, date="2024-01-01"), background_tasks=BackgroundTasks(), db=db, current=current)
    log_weight(payload=WeightLogRequest(weight=74, date="2024-01-01"), background_tasks=BackgroundTasks(), db=db, current=current)
    logs = db.query(models.WeightLog).filter_by(user_id=1).all()
    assert [(entry.log_date.isoformat(), entry.weight) for entry in logs] == [("2024-01-01", 74)]
    assert get_profile(db=db, current=current).weight == 70


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
