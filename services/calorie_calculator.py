"""Calorie target calculation.

Provides BMR (Mifflin-St Jeor, Harris-Benedict, Katch-McArdle), TDEE and
goal-adjusted daily target calories for a user profile. Every public method
returns None instead of raising when its inputs are missing or invalid.
"""

from typing import Any, Dict, Optional

from core.config import DEFAULT_TARGET_CALORIES
from core.logger import get_logger
from core.numbers import round_half_up, to_float

logger = get_logger("services.calorie_calculator")

ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very_active": 1.9,
}

BMR_FORMULAS = ("mifflin_st_jeor", "harris_benedict", "katch_mcardle")

LOSE_ADJUSTMENT = 500
GAIN_ADJUSTMENT = 300
MIN_SAFE_CALORIES = 1200


def profile_value(profile: Any, key: str, default: Any = None) -> Any:
    """Read `key` from a mapping, an ORM row or a pydantic model."""
    if profile is None:
        return default
    if isinstance(profile, dict):
        return profile.get(key, default)
    return getattr(profile, key, default)


def _positive(value: Any) -> Optional[float]:
    number = to_float(value, default=None)
    if number is None or number <= 0:
        return None
    return number


def _positive_age(value: Any) -> Optional[int]:
    number = _positive(value)
    if number is None:
        return None
    age = int(number)
    return age if age > 0 else None


class CalorieCalculator:
    """Class-based calorie calculator used by the profile, advice and achievement code."""

    def mifflin_st_jeor_bmr(self, weight_kg: Any, height_cm: Any, age: Any, gender: Optional[str]) -> Optional[float]:
        """BMR by Mifflin-St Jeor; genders other than male/female use the -78 midpoint."""
        w, h, a = _positive(weight_kg), _positive(height_cm), _positive_age(age)
        if w is None or h is None or a is None:
            return None
        base = 10 * w + 6.25 * h - 5 * a
        if gender == "male":
            return base + 5
        if gender == "female":
            return base - 161
        return base - 78

    def harris_benedict_bmr(self, weight_kg: Any, height_cm: Any, age: Any, gender: Optional[str]) -> Optional[float]:
        """BMR by the revised Harris-Benedict equations; unknown gender averages both."""
        w, h, a = _positive(weight_kg), _positive(height_cm), _positive_age(age)
        if w is None or h is None or a is None:
            return None
        male = 13.397 * w + 4.799 * h - 5.677 * a + 88.362
        female = 9.247 * w + 3.098 * h - 4.330 * a + 447.593
        if gender == "male":
            return male
        if gender == "female":
            return female
        return (male + female) / 2

    def katch_mcardle_bmr(self, weight_kg: Any, body_fat_percentage: Any) -> Optional[float]:
        """BMR from lean body mass. Body fat must be strictly between 0 and 100."""
        w = _positive(weight_kg)
        bfp = to_float(body_fat_percentage, default=None)
        if w is None or bfp is None or bfp <= 0 or bfp >= 100:
            return None
        lean_mass = w * (1 - bfp / 100)
        if lean_mass <= 0:
            return None
        return 370 + 21.6 * lean_mass

    def calculate_bmr(self, profile: Any) -> Optional[float]:
        """Unrounded BMR for a profile using its selected formula.

        Katch-McArdle without a usable body fat percentage and Harris-Benedict
        without a male/female gender fall back to Mifflin-St Jeor.
        """
        weight = profile_value(profile, "weight")
        height = profile_value(profile, "height")
        age = profile_value(profile, "age")
        gender = profile_value(profile, "gender")
        formula = profile_value(profile, "bmr_formula")

        if _positive(weight) is None or _positive(height) is None or _positive_age(age) is None:
            return None

        if formula == "katch_mcardle":
            bmr = self.katch_mcardle_bmr(weight, profile_value(profile, "body_fat_percentage"))
            if bmr is None:
                logger.debug("Katch-McArdle unavailable, falling back to Mifflin-St Jeor")
                bmr = self.mifflin_st_jeor_bmr(weight, height, age, gender)
            return bmr
        if formula == "harris_benedict":
            if gender in ("male", "female"):
                return self.harris_benedict_bmr(weight, height, age, gender)
            logger.debug("Harris-Benedict needs gender, falling back to Mifflin-St Jeor")
            return self.mifflin_st_jeor_bmr(weight, height, age, "other")
        return self.mifflin_st_jeor_bmr(weight, height, age, gender)

    def calculate_tdee(self, bmr: Optional[float], activity_level: Optional[str]) -> Optional[float]:
        """TDEE = BMR x activity multiplier; unknown levels count as 'light'."""
        if bmr is None or bmr <= 0:
            return None
        multiplier = ACTIVITY_MULTIPLIERS.get(activity_level, ACTIVITY_MULTIPLIERS["light"])
        return bmr * multiplier

    def calculate_target_calories(self, tdee: Optional[float], bmr: Optional[float], goal: Optional[str]) -> Optional[float]:
        """Goal-adjusted daily target, never below MIN_SAFE_CALORIES.

        For weight loss the target also never drops below BMR.
        """
        if tdee is None or tdee <= 0 or bmr is None or bmr <= 0:
            return None
        target = tdee
        if goal == "lose":
            target = max(tdee - LOSE_ADJUSTMENT, bmr, MIN_SAFE_CALORIES)
        elif goal == "gain":
            target = tdee + GAIN_ADJUSTMENT
        return max(target, MIN_SAFE_CALORIES)

    def calculate(self, profile: Any) -> Dict[str, Optional[int]]:
        """Return rounded ``{bmr, tdee, target_calories}`` for a profile.

        Any value that cannot be computed is None. Rounding happens only here;
        the intermediate math stays in floating point.
        """
        result = {"bmr": None, "tdee": None, "target_calories": None}
        bmr = self.calculate_bmr(profile)
        if bmr is None or bmr <= 0:
            return result
        result["bmr"] = round_half_up(bmr)

        tdee = self.calculate_tdee(bmr, profile_value(profile, "activity_level"))
        if tdee is None:
            return result
        result["tdee"] = round_half_up(tdee)

        target = self.calculate_target_calories(tdee, bmr, profile_value(profile, "goal"))
        result["target_calories"] = round_half_up(target)
        logger.debug("Calorie details calculated: %s", result)
        return result

    def effective_target(self, profile: Any, default: int = DEFAULT_TARGET_CALORIES) -> int:
        """Manual override when positive, else the computed target, else `default`."""
        override = to_float(profile_value(profile, "target_calories_override"), default=None)
        if override is not None and override > 0:
            return int(override)
        return self.calculate(profile)["target_calories"] or default

    def apply_to(self, user: Any) -> Dict[str, Optional[int]]:
        """Recompute and store `bmr`, `calculated_tdee` and `calculated_target_calories` on a user row."""
        result = self.calculate(user)
        user.bmr = result["bmr"]
        user.calculated_tdee = result["tdee"]
        user.calculated_target_calories = result["target_calories"]
        return result

    def macro_targets(self, weight_kg: Any, target_calories: Any) -> Dict[str, Optional[float]]:
        """Daily gram targets: protein 1.6 g/kg, fat 25 % and carbs 45 % of calories."""
        weight = _positive(weight_kg)
        calories = _positive(target_calories)
        return {
            "protein": weight * 1.6 if weight is not None else None,
            "fat": calories * 0.25 / 9 if calories is not None else None,
            "carbs": calories * 0.45 / 4 if calories is not None else None,
        }


calorie_calculator = CalorieCalculator()
__all__ = ["CalorieCalculator", "calorie_calculator", "ACTIVITY_MULTIPLIERS", "BMR_FORMULAS", "profile_value"]
