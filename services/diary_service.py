"""Diary loading: turns ORM rows into nutrition aggregator input.

All read paths that need consumed calories (diary day, statistics, advice,
achievement criteria) load their rows here and total them with
`services.nutrition_aggregator`.
"""

from collections import defaultdict
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from core.exceptions import ValidationError
from core.logger import get_logger
from database import models
from services.nutrition_aggregator import (
    activity_calories,
    build_recipe_details,
    compute_day_summary,
    sum_items,
)

logger = get_logger("services.diary_service")

DATE_FORMAT = "%Y-%m-%d"


def parse_day(value: Any, field: str = "date") -> date:
    """Parse a YYYY-MM-DD string (or pass a date through).

    Raises:
        ValidationError: If the value is missing or not a valid calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        raise ValidationError("Date is required in YYYY-MM-DD format", field=field)
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        raise ValidationError(f"Invalid date '{value}', expected YYYY-MM-DD", field=field)


def load_meal_items(db: Session, user_id: Optional[int], start: date, end: Optional[date] = None) -> List[Dict[str, Any]]:
    """Meal item rows for a user (every user when `user_id` is None) between `start` and `end` (inclusive).

    Meals without items yield one row with ``meal_product_id`` None so the
    slot's ``meal_id`` is still reported.
    """
    end = end or start
    query = (
        db.query(models.Meal, models.MealProduct, models.Product)
        .outerjoin(models.MealProduct, models.MealProduct.meal_id == models.Meal.id)
        .outerjoin(models.Product, models.Product.id == models.MealProduct.product_id)
        .filter(models.Meal.meal_date >= start, models.Meal.meal_date <= end)
    )
    if user_id is not None:
        query = query.filter(models.Meal.user_id == user_id)
    rows = query.order_by(models.Meal.meal_date, models.Meal.id, models.MealProduct.id).all()
    out = []
    for meal, item, product in rows:
        row = {
            "meal_id": meal.id,
            "user_id": meal.user_id,
            "meal_date": meal.meal_date,
            "meal_type": meal.meal_type,
            "meal_product_id": item.id if item else None,
            "product_id": item.product_id if item else None,
            "amount_grams": item.product_amount if item else None,
            "recipe_id": item.recipe_id if item else None,
            "servings_consumed": item.servings_consumed if item else None,
            "product_name": None,
            "category_id": None,
            "calories": None,
            "protein": None,
            "fat": None,
            "carbs": None,
        }
        if product is not None:
            row.update(
                product_name=product.name,
                category_id=product.category_id,
                calories=product.calories,
                protein=product.protein,
                fat=product.fat,
                carbs=product.carbs,
            )
        out.append(row)
    return out


def load_recipe_details(db: Session, recipe_ids: Iterable[int]) -> Dict[int, Dict[str, Any]]:
    """Whole-recipe nutrition for the given recipe ids."""
    ids = {rid for rid in recipe_ids if rid is not None}
    if not ids:
        return {}
    recipes = db.query(models.Recipe).filter(models.Recipe.id.in_(ids)).all()
    ingredients = (
        db.query(models.RecipeIngredient, models.Product)
        .join(models.Product, models.Product.id == models.RecipeIngredient.product_id)
        .filter(models.RecipeIngredient.recipe_id.in_(ids))
        .all()
    )
    return build_recipe_details(
        ({"id": r.id, "name": r.name, "total_servings": r.total_servings} for r in recipes),
        (
            {
                "recipe_id": ing.recipe_id,
                "amount_grams": ing.amount_grams,
                "calories": product.calories,
                "protein": product.protein,
                "fat": product.fat,
                "carbs": product.carbs,
            }
            for ing, product in ingredients
        ),
    )


def load_activities(db: Session, user_id: int, start: date, end: Optional[date] = None) -> List[Dict[str, Any]]:
    end = end or start
    rows = (
        db.query(models.PhysicalActivity, models.ExerciseDefinition)
        .outerjoin(models.ExerciseDefinition, models.ExerciseDefinition.id == models.PhysicalActivity.exercise_definition_id)
        .filter(
            models.PhysicalActivity.user_id == user_id,
            models.PhysicalActivity.activity_date >= start,
            models.PhysicalActivity.activity_date <= end,
        )
        .order_by(models.PhysicalActivity.activity_date, models.PhysicalActivity.id)
        .all()
    )
    return [
        {
            "id": activity.id,
            "activity_date": activity.activity_date,
            "exercise_definition_id": activity.exercise_definition_id,
            "activity_type": activity.activity_type or (exercise.name if exercise else None),
            "duration_minutes": activity.duration_minutes,
            "calories_burned": activity.calories_burned,
            "met_value": exercise.met_value if exercise else None,
            "calories_per_minute": exercise.calories_per_minute if exercise else None,
        }
        for activity, exercise in rows
    ]


def get_day(db: Session, user_id: int, day: date) -> Dict[str, Any]:
    """Full diary day: ``{date, meals, summary, activities}``."""
    items = load_meal_items(db, user_id, day)
    recipe_details = load_recipe_details(db, (row["recipe_id"] for row in items))
    activities = load_activities(db, user_id, day)
    result = compute_day_summary(items, recipe_details, activities)
    logger.debug("Diary for user=%s date=%s: %s", user_id, day, result["summary"])
    return {
        "date": day.isoformat(),
        "meals": result["meals"],
        "summary": result["summary"],
        "activities": [
            {
                "id": a["id"],
                "exercise_definition_id": a["exercise_definition_id"],
                "activity_type": a["activity_type"],
                "duration_minutes": a["duration_minutes"],
                "calories_burned": a["calories_burned"],
            }
            for a in activities
        ],
    }


def daily_nutrition(db: Session, user_id: int, start: date, end: date) -> Dict[date, Dict[str, float]]:
    """Unrounded consumed totals per day; days without logged items are absent."""
    items = [row for row in load_meal_items(db, user_id, start, end) if row["meal_product_id"] is not None]
    recipe_details = load_recipe_details(db, (row["recipe_id"] for row in items))
    by_day = defaultdict(list)
    for row in items:
        by_day[row["meal_date"]].append(row)
    return {day: sum_items(rows, recipe_details) for day, rows in by_day.items()}


def daily_burned(db: Session, user_id: int, start: date, end: date) -> Dict[date, float]:
    """Exercise calories per day; days without activities are absent."""
    burned = defaultdict(float)
    for activity in load_activities(db, user_id, start, end):
        burned[activity["activity_date"]] += activity_calories(activity)
    return dict(burned)


def user_day_nutrition(db: Session, start: date, end: date) -> Dict[Tuple[int, date], Dict[str, float]]:
    """Unrounded consumed totals per (user, day) across all users."""
    items = [row for row in load_meal_items(db, None, start, end) if row["meal_product_id"] is not None]
    recipe_details = load_recipe_details(db, (row["recipe_id"] for row in items))
    by_user_day = defaultdict(list)
    for row in items:
        by_user_day[(row["user_id"], row["meal_date"])].append(row)
    return {key: sum_items(rows, recipe_details) for key, rows in by_user_day.items()}
