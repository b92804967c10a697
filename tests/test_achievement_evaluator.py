"""Tests for achievement checks and awarding.

Uses the seeded achievement definitions and an evaluator with a fixed
clock, so streak windows are deterministic.
"""

from datetime import date, timedelta

import pytest

from database import models
from services.achievement_evaluator import (
    CRITERIA,
    AchievementEvaluator,
    ActionType,
    award_achievement,
    streak,
)

TODAY = date(2024, 5, 10)


@pytest.fixture
def evaluator(session_factory):
    return AchievementEvaluator(clock=lambda: TODAY, session_factory=session_factory)


def definition_id(db, name):
    return db.query(models.AchievementDefinition).filter_by(name=name).one().id


def awarded_names(db, ids):
    return {db.get(models.AchievementDefinition, i).name for i in ids}


def log_meal(db, day, meal_type, product, grams):
    meal = db.query(models.Meal).filter_by(user_id=1, meal_date=day, meal_type=meal_type).first()
    if meal is None:
        meal = models.Meal(user_id=1, meal_date=day, meal_type=meal_type)
        db.add(meal)
        db.flush()
    db.add(models.MealProduct(meal_id=meal.id, product_id=product.id, product_amount=grams))
    db.commit()


def test_first_meal_is_awarded_once(db, user, product, evaluator):
    """A second check for the same action awards nothing and keeps one row."""
    log_meal(db, TODAY, "lunch", product("Broccoli"), 100)
    first = evaluator.check_and_award(db, user.id, ActionType.MEAL_LOGGED, {"date": TODAY.isoformat()})
    second = evaluator.check_and_award(db, user.id, ActionType.MEAL_LOGGED, {"date": TODAY.isoformat()})

    assert awarded_names(db, first) == {"First Bite"}
    assert second == []
    rows = db.query(models.UserAchievement).filter_by(user_id=user.id).count()
    assert rows == 1


def test_award_achievement_is_idempotent(db, user):
    achievement_id = definition_id(db, "Fresh Start")
    assert award_achievement(db, user.id, achievement_id) is True
    assert award_achievement(db, user.id, achievement_id) is False
    assert db.query(models.UserAchievement).filter_by(user_id=user.id).count() == 1


class ConcurrentAward:
    """Existence lookup that lets another session award the row right after the check."""

    def __init__(self, query, award_elsewhere):
        self.query = query
        self.award_elsewhere = award_elsewhere

    def filter_by(self, **kwargs):
        self.query = self.query.filter_by(**kwargs)
        return self

    def first(self):
        found = self.query.first()
        self.award_elsewhere()
        return found


def test_concurrent_duplicate_award_counts_as_earned(db, user, session_factory, monkeypatch):
    achievement_id = definition_id(db, "Fresh Start")
    user_id = user.id

    def award_elsewhere():
        other = session_factory()
        try:
            other.add(models.UserAchievement(user_id=user_id, achievement_definition_id=achievement_id))
            other.commit()
        finally:
            other.close()

    query = db.query
    monkeypatch.setattr(db, "query", lambda *entities: ConcurrentAward(query(*entities), award_elsewhere))
    assert award_achievement(db, user_id, achievement_id) is False
    monkeypatch.undo()

    assert db.query(models.UserAchievement).filter_by(user_id=user_id, achievement_definition_id=achievement_id).count() == 1
    # the failed insert was rolled back, so the session stays usable
    assert award_achievement(db, user_id, definition_id(db, "All About Me")) is True


def test_unknown_action_is_ignored(db, user, evaluator):
    assert evaluator.check_and_award(db, user.id, "SOMETHING_ELSE") == []
    assert db.query(models.UserAchievement).count() == 0


def test_profile_update_awards_profile_achievements(db, user, evaluator):
    """A complete profile whose weight changed earns three getting-started badges."""
    awarded = evaluator.check_and_award(db, user.id, ActionType.PROFILE_UPDATED, {"weight_logged": True})
    assert awarded_names(db, awarded) == {"All About Me", "Fresh Start", "On the Scale"}


def test_failing_criteria_does_not_stop_the_rest(db, user, evaluator, monkeypatch):
    def broken(ctx, definition):
        raise RuntimeError("lookup failed")

    monkeypatch.setitem(CRITERIA, "profile_updated", (frozenset({ActionType.PROFILE_UPDATED}), broken))
    awarded = evaluator.check_and_award(db, user.id, ActionType.PROFILE_UPDATED, {"weight_logged": True})
    assert awarded_names(db, awarded) == {"All About Me", "On the Scale"}


def test_three_day_streak(db, user, product, evaluator):
    for offset in range(3):
        log_meal(db, TODAY - timedelta(days=offset), "breakfast", product("Rolled oats"), 50)
    awarded = evaluator.check_and_award(db, user.id, ActionType.MEAL_LOGGED, {"date": TODAY.isoformat()})
    names = awarded_names(db, awarded)
    assert "Three-Day Streak" in names
    assert "Full Week" not in names


def test_broken_streak_is_not_awarded(db, user, product, evaluator):
    for offset in (0, 1, 3):
        log_meal(db, TODAY - timedelta(days=offset), "breakfast", product("Rolled oats"), 50)
    awarded = evaluator.check_and_award(db, user.id, ActionType.MEAL_LOGGED, {"date": TODAY.isoformat()})
    assert "Three-Day Streak" not in awarded_names(db, awarded)


def test_streak_counts_back_from_latest_day():
    days = [TODAY, TODAY - timedelta(days=1), TODAY - timedelta(days=2), TODAY - timedelta(days=4)]
    assert streak(days, TODAY) == 3
    assert streak([TODAY - timedelta(days=1), TODAY - timedelta(days=2)], TODAY) == 2
    assert streak([TODAY + timedelta(days=1)], TODAY) == 0
    assert streak([], TODAY) == 0


def test_long_workout_uses_logged_duration(db, user, evaluator):
    short = evaluator.check_and_award(db, user.id, ActionType.ACTIVITY_LOGGED, {"duration_minutes": 45})
    assert "Endurance" not in awarded_names(db, short)
    long = evaluator.check_and_award(db, user.id, ActionType.ACTIVITY_LOGGED, {"duration_minutes": 60})
    assert "Endurance" in awarded_names(db, long)


def test_calories_burned_in_a_day(db, user, exercise, evaluator):
    running = exercise("Running (10 km/h)")
    db.add(models.PhysicalActivity(user_id=user.id, exercise_definition_id=running.id, activity_date=TODAY,
                                   duration_minutes=50, calories_burned=572, activity_type=running.name))
    db.commit()
    awarded = evaluator.check_and_award(db, user.id, ActionType.ACTIVITY_LOGGED,
                                        {"activity_date": TODAY.isoformat(), "duration_minutes": 50})
    assert "Calorie Crusher" in awarded_names(db, awarded)


def test_protein_target_met(db, user, product, evaluator):
    """400 g chicken breast is 124 g protein, over 1.6 g/kg for 70 kg."""
    log_meal(db, TODAY, "dinner", product("Chicken breast"), 400)
    awarded = evaluator.check_and_award(db, user.id, ActionType.MEAL_LOGGED, {"date": TODAY.isoformat()})
    assert "Protein Power" in awarded_names(db, awarded)


def test_four_meal_types_in_a_day(db, user, product, evaluator):
    for meal_type in models.MEAL_TYPES:
        log_meal(db, TODAY, meal_type, product("Apple"), 100)
    awarded = evaluator.check_and_award(db, user.id, ActionType.DIARY_LOADED, {"date": TODAY.isoformat()})
    assert "Four Square" in awarded_names(db, awarded)


def test_background_run_uses_own_session(db, user, evaluator):
    awarded = evaluator.run_in_background(user.id, "WEIGHT_LOGGED", {"date": TODAY.isoformat()})
    assert awarded == [definition_id(db, "On the Scale")]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
