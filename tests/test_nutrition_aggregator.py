"""Tests for diary item, recipe and daily nutrition aggregation."""

import pytest

from services.nutrition_aggregator import (
    build_recipe_details,
    calories_burned,
    compute_day_summary,
    item_nutrition,
    macro_distribution,
    per_serving,
    scale_per_100g,
    sum_items,
)

CHICKEN = {"calories": 165, "protein": 31, "fat": 3.6, "carbs": 0}


def product_row(meal_product_id, meal_type, grams, per_100g=CHICKEN, name="Chicken breast", product_id=1):
    row = {
        "meal_id": 10,
        "meal_type": meal_type,
        "meal_product_id": meal_product_id,
        "product_id": product_id,
        "amount_grams": grams,
        "recipe_id": None,
        "servings_consumed": None,
        "product_name": name,
    }
    row.update(per_100g)
    return row


def recipe_row(meal_product_id, meal_type, recipe_id, servings):
    return {
        "meal_id": 11,
        "meal_type": meal_type,
        "meal_product_id": meal_product_id,
        "product_id": None,
        "amount_grams": None,
        "recipe_id": recipe_id,
        "servings_consumed": servings,
        "product_name": None,
        "calories": None,
        "protein": None,
        "fat": None,
        "carbs": None,
    }


def test_scale_per_100g():
    assert scale_per_100g(CHICKEN, 150) == pytest.approx({"kcal": 247.5, "protein": 46.5, "fat": 5.4, "carbs": 0})


def test_recipe_details_and_per_serving():
    """Two ingredients summed, then divided by total servings."""
    details = build_recipe_details(
        [{"id": 5, "name": "Bowl", "total_servings": 2}],
        [
            {"recipe_id": 5, "amount_grams": 200, **CHICKEN},
            {"recipe_id": 5, "amount_grams": 100, "calories": 112, "protein": 2.3, "fat": 0.8, "carbs": 23.5},
            {"recipe_id": 99, "amount_grams": 100, **CHICKEN},
        ],
    )
    assert list(details) == [5]
    assert details[5]["kcal"] == pytest.approx(442)
    assert per_serving(details[5])["kcal"] == pytest.approx(221)


def test_recipe_item_uses_serving_ratio():
    """A 100 kcal recipe with 2 servings, 1 serving eaten -> 50 kcal."""
    details = {7: {"name": "Soup", "total_servings": 2, "kcal": 100, "protein": 10, "fat": 4, "carbs": 6}}
    nutrition = item_nutrition(recipe_row(1, "lunch", 7, 1), details)
    assert nutrition == pytest.approx({"kcal": 50, "protein": 5, "fat": 2, "carbs": 3})


def test_recipe_with_zero_servings_contributes_nothing():
    details = {7: {"name": "Soup", "total_servings": 0, "kcal": 100, "protein": 10, "fat": 4, "carbs": 6}}
    assert item_nutrition(recipe_row(1, "lunch", 7, 1), details) == {"kcal": 0.0, "protein": 0.0, "fat": 0.0, "carbs": 0.0}
    assert per_serving(details[7])["kcal"] == 0.0


def test_dangling_items_are_unresolvable():
    """Deleted products and recipes cannot be resolved."""
    deleted_product = product_row(1, "lunch", 100, per_100g={"calories": None, "protein": None, "fat": None, "carbs": None})
    assert item_nutrition(deleted_product, {}) is None
    assert item_nutrition(recipe_row(2, "lunch", 404, 1), {}) is None
    assert sum_items([deleted_product, recipe_row(2, "lunch", 404, 1)], {})["kcal"] == 0.0


def test_day_summary_rounds_once():
    """Two items of 0.4 kcal each total 1 kcal, not 0 + 0."""
    tiny = {"calories": 40, "protein": 0.04, "fat": 0, "carbs": 0}
    rows = [product_row(1, "snack", 1, tiny, "Mint"), product_row(2, "snack", 1, tiny, "Mint")]
    result = compute_day_summary(rows, {}, [])
    assert [item["kcal"] for item in result["meals"]["snack"]["items"]] == [0, 0]
    assert result["summary"]["kcal_consumed"] == 1


def test_day_summary_totals_and_net():
    """150 kcal lunch + 250 kcal dinner = 400 consumed; 120 burned -> net 280."""
    per_100g = {"calories": 100, "protein": 10, "fat": 5, "carbs": 2.5}
    rows = [
        product_row(1, "lunch", 150, per_100g, "Food A"),
        product_row(2, "dinner", 250, per_100g, "Food B"),
        {"meal_id": 12, "meal_type": "breakfast", "meal_product_id": None},
    ]
    result = compute_day_summary(rows, {}, [{"calories_burned": 120}])

    assert set(result["meals"]) == {"breakfast", "lunch", "dinner", "snack"}
    assert result["meals"]["breakfast"] == {"meal_id": 12, "items": []}
    assert result["meals"]["snack"] == {"meal_id": None, "items": []}
    assert result["summary"] == {
        "kcal_consumed": 400,
        "protein": 40.0,
        "fat": 20.0,
        "carbs": 10.0,
        "kcal_burned_exercise": 120,
        "net_kcal": 280,
    }
    lunch_item = result["meals"]["lunch"]["items"][0]
    assert lunch_item["type"] == "product"
    assert lunch_item["name"] == "Food A"
    assert lunch_item["kcal"] == 150


def test_net_kcal_rounds_from_unrounded_totals():
    """100.4 consumed minus a computed 50.6 burned is 49.8, shown as 50 rather than 100 - 51."""
    rows = [product_row(1, "lunch", 100, {"calories": 100.4, "protein": 0, "fat": 0, "carbs": 0}, "Soup")]
    activity = {"calories_burned": None, "met_value": None, "calories_per_minute": 5.06, "duration_minutes": 10}
    summary = compute_day_summary(rows, {}, [activity])["summary"]
    assert (summary["kcal_consumed"], summary["kcal_burned_exercise"], summary["net_kcal"]) == (100, 51, 50)


def test_day_summary_skips_unresolvable_items(caplog):
    rows = [product_row(1, "lunch", 100), recipe_row(2, "lunch", 404, 1)]
    result = compute_day_summary(rows, {}, [])
    assert len(result["meals"]["lunch"]["items"]) == 1
    assert result["summary"]["kcal_consumed"] == 165
    assert any("unresolvable" in record.getMessage() for record in caplog.records)


def test_calories_burned():
    """MET x kg x hours when possible, else kcal per minute x minutes."""
    assert calories_burned(8, None, 70, 30) == pytest.approx(280)
    assert calories_burned(None, 12, 70, 10) == pytest.approx(120)
    assert calories_burned(8, 12, None, 10) == pytest.approx(120)
    assert calories_burned(None, None, 70, 10) == 0.0


def test_macro_distribution():
    result = macro_distribution({"protein": 100, "fat": 50, "carbs": 150})
    assert result["protein_g"] == 100.0
    assert result["protein_pct"] == pytest.approx(27.6)
    assert result["fat_pct"] == pytest.approx(31.0)
    assert result["carbs_pct"] == pytest.approx(41.4)
    assert macro_distribution({})["protein_pct"] == 0.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
