"""Platform-wide dashboard numbers for administrators.

Counts come straight from SQL aggregates. Nutrition averages reuse
`diary_service.user_day_nutrition`, so they agree with every diary day a
user sees.
"""

from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from core.exceptions import ValidationError
from core.logger import get_logger
from core.numbers import round_1, round_half_up
from database import models
from services import diary_service

logger = get_logger("services.admin_statistics")

AVERAGE_PERIODS = (7, 30, 180, 365)
DEFAULT_AVERAGE_PERIOD = 7
ACTIVITY_WINDOW_DAYS = 7


def _visibility_counts(db: Session, model) -> Dict[str, int]:
    total, public = db.query(
        func.count(model.id),
        func.coalesce(func.sum(case((model.is_public.is_(True), 1), else_=0)), 0),
    ).one()
    return {"total": total, "public": int(public), "private": total - int(public)}


def _new_users_since(db: Session, day: date) -> int:
    return db.query(func.count(models.User.id)).filter(models.User.created_at >= datetime.combine(day, time.min)).scalar()


def platform_average_nutrition(db: Session, start: date, end: date) -> Dict[str, Any]:
    """Average daily intake over every (user, day) with logged food in the range."""
    totals = diary_service.user_day_nutrition(db, start, end)
    user_days = len(totals)
    sums = {n: sum(t[n] for t in totals.values()) for n in ("kcal", "protein", "fat", "carbs")}
    averages = {n: (value / user_days if user_days else 0.0) for n, value in sums.items()}
    return {
        "period_days": (end - start).days + 1,
        "avg_daily_kcal_consumed": round_half_up(averages["kcal"]),
        "avg_daily_protein": round_1(averages["protein"]),
        "avg_daily_fat": round_1(averages["fat"]),
        "avg_daily_carbs": round_1(averages["carbs"]),
        "user_days_logged": user_days,
    }


def dashboard(db: Session, period_days: Optional[int] = None, today: Optional[date] = None) -> Dict[str, Any]:
    """Build the admin dashboard.

    Args:
        db: Database session.
        period_days: Window for the nutrition averages, one of 7, 30, 180 or 365.
        today: Reference day, defaults to the current date.

    Raises:
        ValidationError: If `period_days` is not an allowed window.
    """
    if period_days is None:
        period_days = DEFAULT_AVERAGE_PERIOD
    if period_days not in AVERAGE_PERIODS:
        raise ValidationError(
            f"period_days must be one of {', '.join(str(p) for p in AVERAGE_PERIODS)}", field="period_days"
        )
    today = today or date.today()
    week_start = today - timedelta(days=ACTIVITY_WINDOW_DAYS - 1)

    logged_meals = (
        db.query(models.Meal)
        .join(models.MealProduct, models.MealProduct.meal_id == models.Meal.id)
    )
    food_today = (
        logged_meals.filter(models.Meal.meal_date == today)
        .with_entities(func.count(func.distinct(models.Meal.user_id)))
        .scalar()
    )
    items_week = (
        logged_meals.filter(models.Meal.meal_date >= week_start, models.Meal.meal_date <= today)
        .with_entities(func.count(models.MealProduct.id))
        .scalar()
    )
    activities = db.query(models.PhysicalActivity)
    activity_today = (
        activities.filter(models.PhysicalActivity.activity_date == today)
        .with_entities(func.count(func.distinct(models.PhysicalActivity.user_id)))
        .scalar()
    )
    activities_week = (
        activities.filter(
            models.PhysicalActivity.activity_date >= week_start,
            models.PhysicalActivity.activity_date <= today,
        )
        .with_entities(func.count(models.PhysicalActivity.id))
        .scalar()
    )

    result = {
        "users": {
            "total": db.query(func.count(models.User.id)).scalar(),
            "new_last_7_days": _new_users_since(db, today - timedelta(days=7)),
            "new_last_30_days": _new_users_since(db, today - timedelta(days=30)),
        },
        "content": {
            "products": _visibility_counts(db, models.Product),
            "recipes": _visibility_counts(db, models.Recipe),
            "exercise_definitions": _visibility_counts(db, models.ExerciseDefinition),
        },
        "activity": {
            "users_logged_food_today": food_today,
            "users_logged_activity_today": activity_today,
            "meal_items_last_7_days": items_week,
            "activities_last_7_days": activities_week,
        },
        "platform_average_nutrition": platform_average_nutrition(
            db, today - timedelta(days=period_days - 1), today
        ),
    }
    logger.info("Admin dashboard built for %s (averages over %s days)", today, period_days)
    return result
