"""Recipes API router.

Recipes are visible when public or owned by the caller (admins see all).
Create and update replace the ingredient list inside one transaction and
respond with total and per-serving nutrition.
"""

from typing import Dict, List

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.auth import CurrentUser, ensure_owner_or_admin, get_current_user
from core.exceptions import DatabaseError, NotFoundError
from core.logger import get_logger
from database import models
from database.deps import get_db_read, get_db_write
from schemas import RecipeCreateRequest, RecipeResponse, RecipeUpdateRequest
from schemas.recipe_schema import IngredientInput
from services.achievement_evaluator import ActionType, schedule_check
from services.diary_service import load_recipe_details
from services.nutrition_aggregator import per_serving, round_totals

logger = get_logger("api.recipes")
router = APIRouter(prefix="/api/recipes", tags=["recipes"])


def recipe_response(recipe: models.Recipe, details: Dict[int, Dict]) -> RecipeResponse:
    totals = details.get(recipe.id) or {"kcal": 0.0, "protein": 0.0, "fat": 0.0, "carbs": 0.0, "total_servings": recipe.total_servings}
    return RecipeResponse(
        id=recipe.id,
        name=recipe.name,
        description=recipe.description,
        user_id=recipe.user_id,
        is_public=recipe.is_public,
        total_servings=recipe.total_servings,
        ingredients=[
            {
                "product_id": ing.product_id,
                "product_name": ing.product.name if ing.product else None,
                "amount_grams": ing.amount_grams,
            }
            for ing in recipe.ingredients
        ],
        total_nutrition=round_totals(totals),
        per_serving=round_totals(per_serving(totals)),
    )


def visible_recipe(db: Session, recipe_id: int, current: CurrentUser) -> models.Recipe:
    recipe = db.get(models.Recipe, recipe_id)
    if recipe is None or not (recipe.is_public or recipe.user_id == current.id or current.is_admin):
        raise NotFoundError("Recipe", recipe_id)
    return recipe


def build_ingredients(db: Session, ingredients: List[IngredientInput]) -> List[models.RecipeIngredient]:
    """Turn ingredient payloads into rows, checking every product exists."""
    rows = []
    for ing in ingredients:
        if db.get(models.Product, ing.product_id) is None:
            raise NotFoundError("Product", ing.product_id)
        rows.append(models.RecipeIngredient(product_id=ing.product_id, amount_grams=ing.amount_grams))
    return rows


@router.get("", response_model=List[RecipeResponse])
def list_recipes(
    mine: bool = False,
    db: Session = Depends(get_db_read),
    current: CurrentUser = Depends(get_current_user),
):
    """Return visible recipes; `mine=true` limits the list to the caller's own."""
    query = db.query(models.Recipe)
    if mine:
        query = query.filter(models.Recipe.user_id == current.id)
    elif not current.is_admin:
        query = query.filter(or_(models.Recipe.is_public.is_(True), models.Recipe.user_id == current.id))
    recipes = query.order_by(models.Recipe.name).all()
    details = load_recipe_details(db, [r.id for r in recipes])
    return [recipe_response(r, details) for r in recipes]


@router.post("", response_model=RecipeResponse, status_code=201)
def create_recipe(
    payload: RecipeCreateRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db_write),
    current: CurrentUser = Depends(get_current_user),
):
    """Create a recipe and its ingredients atomically."""
    ingredients = build_ingredients(db, payload.ingredients)
    recipe = models.Recipe(
        name=payload.name,
        description=payload.description,
        is_public=payload.is_public,
        total_servings=payload.total_servings,
        user_id=current.id,
    )
    recipe.ingredients = ingredients
    try:
        db.add(recipe)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create recipe for user %s", current.id)
        raise DatabaseError(f"Could not create recipe: {exc.__class__.__name__}", operation="create")
    db.refresh(recipe)

    logger.info("Recipe %s created by user %s with %s ingredients", recipe.id, current.id, len(ingredients))
    schedule_check(background_tasks, current.id, ActionType.RECIPE_CREATED, {"recipe_id": recipe.id})
    return recipe_response(recipe, load_recipe_details(db, [recipe.id]))


@router.get("/{recipe_id}", response_model=RecipeResponse)
def get_recipe(recipe_id: int, db: Session = Depends(get_db_read), current: CurrentUser = Depends(get_current_user)):
    recipe = visible_recipe(db, recipe_id, current)
    return recipe_response(recipe, load_recipe_details(db, [recipe.id]))


@router.put("/{recipe_id}", response_model=RecipeResponse)
def update_recipe(
    recipe_id: int,
    payload: RecipeUpdateRequest,
    db: Session = Depends(get_db_write),
    current: CurrentUser = Depends(get_current_user),
):
    """Update recipe fields; a sent ingredient list replaces the old one."""
    recipe = visible_recipe(db, recipe_id, current)
    ensure_owner_or_admin(current, recipe.user_id, "Recipe")
    changes = payload.model_dump(exclude_unset=True, exclude={"ingredients"})
    ingredients = build_ingredients(db, payload.ingredients) if payload.ingredients is not None else None

    try:
        for field, value in changes.items():
            if value is not None or field == "description":
                setattr(recipe, field, value)
        if ingredients is not None:
            recipe.ingredients = ingredients
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to update recipe %s", recipe_id)
        raise DatabaseError(f"Could not update recipe: {exc.__class__.__name__}", operation="update")
    db.refresh(recipe)

    logger.info("Recipe %s updated by user %s", recipe_id, current.id)
    return recipe_response(recipe, load_recipe_details(db, [recipe.id]))


@router.delete("/{recipe_id}")
def delete_recipe(recipe_id: int, db: Session = Depends(get_db_write), current: CurrentUser = Depends(get_current_user)):
    """Delete a recipe and its ingredients.

    Diary items that referenced the recipe stay and are skipped in totals.
    """
    recipe = visible_recipe(db, recipe_id, current)
    ensure_owner_or_admin(current, recipe.user_id, "Recipe")
    db.delete(recipe)
    db.commit()
    logger.info("Recipe %s deleted by user %s", recipe_id, current.id)
    return {"message": "Recipe deleted", "id": recipe_id}
