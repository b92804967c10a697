"""Diary API router.

A diary day has four meal slots. Logging items upserts the slot's Meal row
and appends MealProduct items; every response returns the freshly computed
day so the client never totals anything itself.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from core.auth import CurrentUser, ensure_owner_or_admin, get_current_user
from core.exceptions import DatabaseError, ForbiddenError, NotFoundError, ValidationError
from core.logger import get_logger
from core.repository import get_or_404
from database import models
from database.deps import get_db_read, get_db_write
from schemas import DiaryDayResponse, MealItemInput, MealItemUpdateRequest, SaveMealRequest
from services import diary_service
from services.achievement_evaluator import ActionType, schedule_check

logger = get_logger("api.diary")
router = APIRouter(prefix="/api/diary", tags=["diary"])


def validate_item(db: Session, item: MealItemInput, current: CurrentUser) -> None:
    """Check one item to log: exactly one of product/recipe with a positive quantity."""
    if item.product_id is not None and item.recipe_id is not None:
        raise ValidationError("An item references either a product or a recipe, not both", field="items")
    if item.product_id is not None:
        if item.amount_grams is None or item.amount_grams <= 0:
            raise ValidationError("amountGrams must be greater than 0 for products", field="amountGrams")
        product = db.get(models.Product, item.product_id)
        if product is None or not (product.is_public or product.created_by == current.id or current.is_admin):
            raise NotFoundError("Product", item.product_id)
        return
    if item.recipe_id is not None:
        if item.servings_consumed is None or item.servings_consumed <= 0:
            raise ValidationError("servingsConsumed must be greater than 0 for recipes", field="servingsConsumed")
        recipe = db.get(models.Recipe, item.recipe_id)
        if recipe is None:
            raise NotFoundError("Recipe", item.recipe_id)
        if not (recipe.is_public or recipe.user_id == current.id or current.is_admin):
            raise ForbiddenError("This recipe is private", resource="Recipe")
        return
    raise ValidationError("Each item needs a productId or a recipeId", field="items")


def get_or_create_meal(db: Session, user_id: int, day: date, meal_type: str) -> models.Meal:
    """Return the (user, day, meal_type) Meal row, creating it if needed."""
    query = db.query(models.Meal).filter_by(user_id=user_id, meal_date=day, meal_type=meal_type)
    meal = query.first()
    if meal is not None:
        return meal
    meal = models.Meal(user_id=user_id, meal_date=day, meal_type=meal_type)
    db.add(meal)
    try:
        db.flush()
    except IntegrityError:
        # created concurrently by another request
        db.rollback()
        meal = query.one()
    return meal


@router.get("", response_model=DiaryDayResponse)
def get_diary(
    background_tasks: BackgroundTasks,
    day: Optional[str] = Query(None, alias="date", description="Diary day in YYYY-MM-DD format, defaults to today"),
    db: Session = Depends(get_db_read),
    current: CurrentUser = Depends(get_current_user),
):
    """Return the caller's diary day with per-item nutrition and the daily summary."""
    target_day = diary_service.parse_day(day) if day else date.today()
    result = diary_service.get_day(db, current.id, target_day)
    schedule_check(background_tasks, current.id, ActionType.DIARY_LOADED, {"date": result["date"]})
    return result


@router.post("/{meal_type}", response_model=DiaryDayResponse, status_code=201)
def save_meal(
    meal_type: str,
    payload: SaveMealRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db_write),
    current: CurrentUser = Depends(get_current_user),
):
    """Append products and/or recipes to one meal slot of a day.

    Raises:
        ValidationError: Unknown meal type, bad date, empty item list or an invalid item.
        NotFoundError: If a referenced product or recipe does not exist.
    """
    meal_type = meal_type.lower()
    if meal_type not in models.MEAL_TYPES:
        raise ValidationError(f"Meal type must be one of {', '.join(models.MEAL_TYPES)}", field="meal_type")
    day = diary_service.parse_day(payload.date)
    if not payload.items:
        raise ValidationError("At least one item is required", field="items")
    for item in payload.items:
        validate_item(db, item, current)

    try:
        meal = get_or_create_meal(db, current.id, day, meal_type)
        for item in payload.items:
            db.add(models.MealProduct(
                meal_id=meal.id,
                product_id=item.product_id,
                product_amount=item.amount_grams if item.product_id is not None else None,
                recipe_id=item.recipe_id if item.product_id is None else None,
                servings_consumed=item.servings_consumed if item.product_id is None else None,
            ))
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to save %s for user %s on %s", meal_type, current.id, day)
        raise DatabaseError(f"Could not save meal: {exc.__class__.__name__}", operation="create")

    logger.info("Logged %s item(s) to %s on %s for user %s", len(payload.items), meal_type, day, current.id)
    schedule_check(background_tasks, current.id, ActionType.MEAL_LOGGED, {"date": day.isoformat(), "meal_type": meal_type})
    return diary_service.get_day(db, current.id, day)


def _owned_item(db: Session, item_id: int, current: CurrentUser) -> models.MealProduct:
    item = get_or_404(db, models.MealProduct, item_id, "Meal item")
    ensure_owner_or_admin(current, item.meal.user_id, "Meal item")
    return item


@router.patch("/item/{item_id}", response_model=DiaryDayResponse)
def update_meal_item(
    item_id: int,
    payload: MealItemUpdateRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db_write),
    current: CurrentUser = Depends(get_current_user),
):
    """Change the grams of a product item or the servings of a recipe item."""
    item = _owned_item(db, item_id, current)
    if item.product_id is not None:
        if payload.amount_grams is None or payload.amount_grams <= 0:
            raise ValidationError("amountGrams must be greater than 0", field="amountGrams")
        item.product_amount = payload.amount_grams
    else:
        if payload.servings_consumed is None or payload.servings_consumed <= 0:
            raise ValidationError("servingsConsumed must be greater than 0", field="servingsConsumed")
        item.servings_consumed = payload.servings_consumed
    owner_id, day = item.meal.user_id, item.meal.meal_date
    db.commit()

    logger.info("Meal item %s updated by user %s", item_id, current.id)
    schedule_check(background_tasks, owner_id, ActionType.MEAL_ITEM_UPDATED, {"date": day.isoformat()})
    return diary_service.get_day(db, owner_id, day)


@router.delete("/item/{item_id}", response_model=DiaryDayResponse)
def delete_meal_item(
    item_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db_write),
    current: CurrentUser = Depends(get_current_user),
):
    """Remove an item from the diary and return the updated day."""
    item = _owned_item(db, item_id, current)
    owner_id, day = item.meal.user_id, item.meal.meal_date
    db.delete(item)
    db.commit()

    logger.info("Meal item %s deleted by user %s", item_id, current.id)
    schedule_check(background_tasks, owner_id, ActionType.MEAL_ITEM_DELETED, {"date": day.isoformat()})
    return diary_service.get_day(db, owner_id, day)
