"""Tests for BMR, TDEE and target calorie calculation."""

import pytest

from services.calorie_calculator import CalorieCalculator


@pytest.fixture
def calc():
    return CalorieCalculator()


def profile(**overrides):
    base = {
        "weight": 60,
        "height": 165,
        "age": 25,
        "gender": "female",
        "activity_level": "moderate",
        "goal": "maintain",
        "bmr_formula": "mifflin_st_jeor",
    }
    base.update(overrides)
    return base


def test_mifflin_by_gender(calc):
    """Male adds 5, female subtracts 161, anything else subtracts 78."""
    assert calc.mifflin_st_jeor_bmr(70, 175, 30, "male") == pytest.approx(1648.75)
    assert calc.mifflin_st_jeor_bmr(60, 165, 25, "female") == pytest.approx(1345.25)
    assert calc.mifflin_st_jeor_bmr(60, 165, 25, "other") == pytest.approx(1428.25)
    assert calc.mifflin_st_jeor_bmr(60, 165, 25, None) == pytest.approx(1428.25)


def test_invalid_inputs_return_none(calc):
    """Missing or non-positive weight, height or age gives no values at all."""
    assert calc.mifflin_st_jeor_bmr(0, 165, 25, "female") is None
    assert calc.harris_benedict_bmr(60, None, 25, "female") is None
    assert calc.calculate(profile(age="abc")) == {"bmr": None, "tdee": None, "target_calories": None}
    assert calc.calculate(None) == {"bmr": None, "tdee": None, "target_calories": None}


def test_full_calculation_for_maintain(calc):
    """60 kg / 165 cm / 25 y female, moderate: BMR 1345, TDEE 2085, target 2085."""
    assert calc.calculate(profile()) == {"bmr": 1345, "tdee": 2085, "target_calories": 2085}


def test_goal_adjustments(calc):
    assert calc.calculate(profile(goal="lose"))["target_calories"] == 1585
    assert calc.calculate(profile(goal="gain"))["target_calories"] == 2385


def test_unknown_activity_level_counts_as_light(calc):
    tdee = calc.calculate_tdee(1000, "couch")
    assert tdee == pytest.approx(1375)


def test_harris_benedict_male(calc):
    bmr = calc.calculate_bmr(profile(weight=70, height=175, age=30, gender="male", bmr_formula="harris_benedict"))
    assert bmr == pytest.approx(13.397 * 70 + 4.799 * 175 - 5.677 * 30 + 88.362)


def test_harris_benedict_without_gender_falls_back_to_mifflin(calc):
    bmr = calc.calculate_bmr(profile(gender=None, bmr_formula="harris_benedict"))
    assert bmr == pytest.approx(1428.25)


def test_katch_mcardle_uses_lean_mass(calc):
    bmr = calc.calculate_bmr(profile(weight=70, body_fat_percentage=20, bmr_formula="katch_mcardle"))
    assert bmr == pytest.approx(370 + 21.6 * 56)


@pytest.mark.parametrize("body_fat", [None, 0, 100, 150])
def test_katch_mcardle_falls_back_without_valid_body_fat(calc, body_fat):
    """An unusable body fat percentage silently switches to Mifflin-St Jeor."""
    bmr = calc.calculate_bmr(profile(body_fat_percentage=body_fat, bmr_formula="katch_mcardle"))
    assert bmr == pytest.approx(1345.25)


def test_target_never_below_safe_minimum(calc):
    """A small elderly profile is held at 1200 kcal, whatever the goal."""
    small = profile(weight=45, height=150, age=80, activity_level="sedentary")
    assert calc.calculate(small)["target_calories"] == 1200
    assert calc.calculate(dict(small, goal="lose"))["target_calories"] == 1200


def test_lose_target_never_below_bmr(calc):
    """120 kg sedentary male: TDEE - 500 falls under BMR, so BMR becomes the target."""
    result = calc.calculate(profile(weight=120, height=190, age=30, gender="male",
                                    activity_level="sedentary", goal="lose"))
    assert result["bmr"] == 2243
    assert result["target_calories"] == 2243


def test_effective_target(calc):
    """Override wins when positive, then the computed target, then the default."""
    assert calc.effective_target(profile(target_calories_override=1900)) == 1900
    assert calc.effective_target(profile(target_calories_override=0)) == 2085
    assert calc.effective_target({"name": "Sam"}) == 2000


def test_apply_to_stores_values_on_row(calc):
    class Row:
        weight, height, age, gender = 60, 165, 25, "female"
        activity_level, goal, bmr_formula = "moderate", "maintain", "mifflin_st_jeor"

    row = Row()
    calc.apply_to(row)
    assert (row.bmr, row.calculated_tdee, row.calculated_target_calories) == (1345, 2085, 2085)


def test_macro_targets(calc):
    targets = calc.macro_targets(70, 2000)
    assert targets["protein"] == pytest.approx(112)
    assert targets["fat"] == pytest.approx(2000 * 0.25 / 9)
    assert targets["carbs"] == pytest.approx(225)
    assert calc.macro_targets(None, None) == {"protein": None, "fat": None, "carbs": None}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
