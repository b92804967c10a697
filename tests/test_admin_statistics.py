"""Tests for the admin dashboard statistics."""

from datetime import date, datetime

import pytest

from api.admin import dashboard_statistics
from core.auth import CurrentUser, require_admin
from core.exceptions import ForbiddenError, ValidationError
from database import models
from services import admin_statistics

TODAY = date(2024, 5, 10)
ADMIN = CurrentUser(id=9, role="admin")


def log_food(db, user_id, day, name, grams, product, meal_type="lunch"):
    meal = models.Meal(user_id=user_id, meal_date=day, meal_type=meal_type)
    db.add(meal)
    db.flush()
    if name:
        db.add(models.MealProduct(meal_id=meal.id, product_id=product(name).id, product_amount=grams))


@pytest.fixture
def platform(db, user, product, exercise):
    """Three users with food and activity spread around TODAY."""
    user.created_at = datetime(2024, 1, 1)
    db.add_all([
        models.User(id=2, name="Robin", email="robin@example.com", created_at=datetime(2024, 5, 8, 9, 30)),
        models.User(id=3, name="Kim", email="kim@example.com", created_at=datetime(2024, 4, 20)),
    ])
    db.add_all([
        models.Product(name="Secret sauce", calories=300, is_public=False, created_by=1),
        models.Recipe(name="Private bowl", user_id=1, is_public=False, total_servings=1),
        models.Recipe(name="Shared stew", user_id=2, is_public=True, total_servings=4),
    ])
    db.flush()

    log_food(db, 1, TODAY, "Chicken breast", 200, product)
    log_food(db, 2, TODAY, "Banana", 100, product)
    log_food(db, 3, TODAY, None, None, product)
    log_food(db, 1, date(2024, 5, 5), "Broccoli", 100, product)
    log_food(db, 1, date(2024, 4, 15), "Chicken breast", 100, product)

    yoga = exercise("Yoga")
    for user_id, day in ((2, TODAY), (1, date(2024, 5, 4)), (1, date(2024, 5, 2))):
        db.add(models.PhysicalActivity(user_id=user_id, exercise_definition_id=yoga.id, activity_date=day,
                                       duration_minutes=30, calories_burned=90, activity_type=yoga.name))
    db.commit()


def test_dashboard_counts(db, platform):
    stats = admin_statistics.dashboard(db, today=TODAY)
    assert stats["users"] == {"total": 3, "new_last_7_days": 1, "new_last_30_days": 2}

    products = db.query(models.Product).count()
    assert stats["content"]["products"] == {"total": products, "public": products - 1, "private": 1}
    assert stats["content"]["recipes"] == {"total": 2, "public": 1, "private": 1}
    exercises = stats["content"]["exercise_definitions"]
    assert exercises["private"] == 0
    assert exercises["total"] == db.query(models.ExerciseDefinition).count()

    # user 3 only has an empty slot today
    assert stats["activity"] == {
        "users_logged_food_today": 2,
        "users_logged_activity_today": 1,
        "meal_items_last_7_days": 3,
        "activities_last_7_days": 2,
    }


def test_platform_averages_per_user_day(db, platform):
    """330 + 89 + 34 kcal over three user-days in the last week."""
    week = admin_statistics.dashboard(db, today=TODAY)["platform_average_nutrition"]
    assert week == {
        "period_days": 7,
        "avg_daily_kcal_consumed": 151,
        "avg_daily_protein": 22.0,
        "avg_daily_fat": 2.6,
        "avg_daily_carbs": 9.9,
        "user_days_logged": 3,
    }

    month = admin_statistics.dashboard(db, period_days=30, today=TODAY)["platform_average_nutrition"]
    assert month["user_days_logged"] == 4
    assert month["avg_daily_kcal_consumed"] == 155
    assert month["avg_daily_protein"] == 24.2


def test_averages_without_any_logs(db):
    averages = admin_statistics.platform_average_nutrition(db, date(2024, 5, 4), TODAY)
    assert averages["user_days_logged"] == 0
    assert averages["avg_daily_kcal_consumed"] == 0
    assert averages["avg_daily_protein"] == 0.0


@pytest.mark.parametrize("period_days", [0, 14, 366])
def test_unknown_average_window_rejected(db, period_days):
    with pytest.raises(ValidationError) as exc_info:
        admin_statistics.dashboard(db, period_days=period_days, today=TODAY)
    assert exc_info.value.details == {"field": "period_days"}


def test_endpoint_is_admin_only(db, platform, current):
    with pytest.raises(ForbiddenError):
        require_admin(current)
    stats = dashboard_statistics(period_days=None, db=db, current=require_admin(ADMIN))
    assert stats["users"]["total"] == 3
    assert stats["platform_average_nutrition"]["period_days"] == 7


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
