"""Nutrition aggregation for diary items, recipes and activity logs.

Every caller that needs consumed calories or macros (the diary, the
statistics endpoints and the achievement criteria) goes through `sum_items`
or `compute_day_summary`, so they all use the same serving-ratio math and
rounding.

Inputs are plain dict rows:

- meal item rows: ``meal_id, meal_type, meal_product_id, product_id,
  amount_grams, recipe_id, servings_consumed, product_name, recipe_name``
  plus the product's per-100 g ``calories, protein, fat, carbs`` (None when
  the product no longer exists);
- recipe rows: ``id, name, total_servings``;
- ingredient rows: ``recipe_id, amount_grams, calories, protein, fat, carbs``;
- activity rows: ``calories_burned`` or, when missing, ``met_value``,
  ``calories_per_minute``, ``weight_kg`` and ``duration_minutes``.

Values are summed unrounded and rounded once on output.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional

from core.logger import get_logger
from core.numbers import round_1, round_half_up, to_float
from database.models import MEAL_TYPES

logger = get_logger("services.nutrition_aggregator")

NUTRIENTS = ("kcal", "protein", "fat", "carbs")
# product column holding each nutrient per 100 g
PRODUCT_COLUMNS = {"kcal": "calories", "protein": "protein", "fat": "fat", "carbs": "carbs"}


def empty_totals() -> Dict[str, float]:
    return {n: 0.0 for n in NUTRIENTS}


def scale_per_100g(per_100g: Mapping[str, Any], amount_grams: Any) -> Dict[str, float]:
    """Nutrition of `amount_grams` of a product given its per-100 g values."""
    factor = to_float(amount_grams) / 100.0
    return {n: to_float(per_100g.get(PRODUCT_COLUMNS[n])) * factor for n in NUTRIENTS}


def build_recipe_details(recipes: Iterable[Mapping[str, Any]], ingredients: Iterable[Mapping[str, Any]]) -> Dict[int, Dict[str, Any]]:
    """Total nutrition of whole recipes keyed by recipe id.

    Each entry holds ``name``, ``total_servings`` and the recipe totals
    (``kcal``, ``protein``, ``fat``, ``carbs``) summed over its ingredients.
    """
    details = {}
    for recipe in recipes:
        entry = {
            "name": recipe.get("name") or "Unnamed Recipe",
            "total_servings": to_float(recipe.get("total_servings"), default=1.0),
        }
        entry.update(empty_totals())
        details[recipe["id"]] = entry

    for ingredient in ingredients:
        entry = details.get(ingredient["recipe_id"])
        if entry is None:
            continue
        for nutrient, value in scale_per_100g(ingredient, ingredient.get("amount_grams")).items():
            entry[nutrient] += value
    return details


def per_serving(recipe: Mapping[str, Any]) -> Dict[str, float]:
    """Nutrition of one serving; zero when the recipe has no positive serving count."""
    servings = to_float(recipe.get("total_servings"))
    if servings <= 0:
        return empty_totals()
    return {n: to_float(recipe.get(n)) / servings for n in NUTRIENTS}


def item_nutrition(row: Mapping[str, Any], recipe_details: Mapping[int, Mapping[str, Any]]) -> Optional[Dict[str, float]]:
    """Unrounded nutrition of one diary item, or None when it cannot be resolved."""
    if row.get("product_id") is not None:
        if row.get("calories") is None:
            return None
        return scale_per_100g(row, row.get("amount_grams"))

    if row.get("recipe_id") is not None:
        recipe = recipe_details.get(row["recipe_id"])
        if recipe is None:
            return None
        total_servings = to_float(recipe.get("total_servings"))
        if total_servings <= 0:
            return empty_totals()
        ratio = to_float(row.get("servings_consumed")) / total_servings
        return {n: to_float(recipe.get(n)) * ratio for n in NUTRIENTS}

    return None


def sum_items(rows: Iterable[Mapping[str, Any]], recipe_details: Mapping[int, Mapping[str, Any]]) -> Dict[str, float]:
    """Unrounded totals over diary item rows. Unresolvable items count as zero."""
    totals = empty_totals()
    for row in rows:
        nutrition = item_nutrition(row, recipe_details)
        if nutrition is None:
            continue
        for n in NUTRIENTS:
            totals[n] += nutrition[n]
    return totals


def calories_burned(met_value: Any, calories_per_minute: Any, weight_kg: Any, duration_minutes: Any) -> float:
    """Exercise calories: MET x kg x hours when MET and weight are known, else kcal/min x minutes."""
    duration = to_float(duration_minutes)
    met = to_float(met_value)
    weight = to_float(weight_kg)
    if met > 0 and weight > 0:
        return met * weight * (duration / 60.0)
    per_minute = to_float(calories_per_minute)
    if per_minute > 0:
        return per_minute * duration
    return 0.0


def activity_calories(activity: Mapping[str, Any]) -> float:
    stored = to_float(activity.get("calories_burned"), default=None)
    if stored is not None:
        return stored
    return calories_burned(
        activity.get("met_value"),
        activity.get("calories_per_minute"),
        activity.get("weight_kg"),
        activity.get("duration_minutes"),
    )


def round_totals(totals: Mapping[str, float]) -> Dict[str, Any]:
    """Display rounding: kcal to an integer, macros to one decimal."""
    return {
        "kcal": round_half_up(totals["kcal"]),
        "protein": round_1(totals["protein"]),
        "fat": round_1(totals["fat"]),
        "carbs": round_1(totals["carbs"]),
    }


def _describe_item(row: Mapping[str, Any], recipe_details: Mapping[int, Mapping[str, Any]]) -> Dict[str, Any]:
    if row.get("product_id") is not None:
        return {
            "meal_product_id": row["meal_product_id"],
            "type": "product",
            "product_id": row["product_id"],
            "name": row.get("product_name") or "Unnamed Product",
            "amount_grams": to_float(row.get("amount_grams")),
        }
    recipe = recipe_details.get(row["recipe_id"], {})
    return {
        "meal_product_id": row["meal_product_id"],
        "type": "recipe",
        "recipe_id": row["recipe_id"],
        "name": recipe.get("name") or row.get("recipe_name") or "Unnamed Recipe",
        "servings_consumed": to_float(row.get("servings_consumed")),
    }


def compute_day_summary(
    meal_items: Iterable[Mapping[str, Any]],
    recipe_details: Mapping[int, Mapping[str, Any]],
    activity_logs: Iterable[Mapping[str, Any]],
) -> Dict[str, Any]:
    """Group a day's items by meal slot and total the day.

    Returns ``{"meals": {slot: {"meal_id", "items"}}, "summary": {...}}``
    where the summary uses the canonical keys ``kcal_consumed, protein, fat,
    carbs, kcal_burned_exercise, net_kcal``. All four slots are always
    present.

    ``net_kcal`` is rounded from the unrounded consumed and burned totals, so
    it can differ by 1 from ``kcal_consumed - kcal_burned_exercise``.
    """
    meals = {meal_type: {"meal_id": None, "items": []} for meal_type in MEAL_TYPES}
    totals = empty_totals()

    for row in meal_items:
        slot = meals.get(row.get("meal_type"))
        if slot is None:
            logger.warning("Skipping diary row with unknown meal type %r", row.get("meal_type"))
            continue
        if slot["meal_id"] is None:
            slot["meal_id"] = row.get("meal_id")
        if row.get("meal_product_id") is None:
            continue

        nutrition = item_nutrition(row, recipe_details)
        if nutrition is None:
            logger.warning(
                "Skipping unresolvable diary item %s (product_id=%s, recipe_id=%s)",
                row.get("meal_product_id"), row.get("product_id"), row.get("recipe_id"),
            )
            continue

        item = _describe_item(row, recipe_details)
        item.update(round_totals(nutrition))
        slot["items"].append(item)
        for n in NUTRIENTS:
            totals[n] += nutrition[n]

    burned = sum(activity_calories(a) for a in activity_logs)
    rounded = round_totals(totals)
    summary = {
        "kcal_consumed": rounded["kcal"],
        "protein": rounded["protein"],
        "fat": rounded["fat"],
        "carbs": rounded["carbs"],
        "kcal_burned_exercise": round_half_up(burned),
        "net_kcal": round_half_up(totals["kcal"] - burned),
    }
    return {"meals": meals, "summary": summary}


def macro_distribution(totals: Mapping[str, float]) -> Dict[str, float]:
    """Grams of each macro and its share of macro-derived calories (4/9/4 kcal per g)."""
    protein, fat, carbs = (to_float(totals.get(k)) for k in ("protein", "fat", "carbs"))
    result = {
        "protein_g": round_1(protein),
        "fat_g": round_1(fat),
        "carbs_g": round_1(carbs),
        "protein_pct": 0.0,
        "fat_pct": 0.0,
        "carbs_pct": 0.0,
    }
    kcal = protein * 4 + fat * 9 + carbs * 4
    if kcal <= 0:
        return result
    result["protein_pct"] = round_1(protein * 4 / kcal * 100)
    result["fat_pct"] = round_1(fat * 9 / kcal * 100)
    result["carbs_pct"] = round_1(carbs * 4 / kcal * 100)
    return result


__all__: List[str] = [
    "NUTRIENTS",
    "scale_per_100g",
    "build_recipe_details",
    "per_serving",
    "item_nutrition",
    "sum_items",
    "calories_burned",
    "activity_calories",
    "round_totals",
    "compute_day_summary",
    "macro_distribution",
]
