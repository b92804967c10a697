"""Rule-based daily advice.

Each `AdviceRule` is an independent record: a condition evaluated against an
`AdviceContext` (profile, diary, calorie target, RNG and current time) and a
``str.format`` template rendered with the rule's params. Throttled tips draw
from the engine's RNG and time-of-day rules read the engine's clock, so both
can be pinned in tests.
"""

import random
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from core.logger import get_logger
from core.numbers import round_half_up
from services.calorie_calculator import CalorieCalculator, calorie_calculator, profile_value

logger = get_logger("services.advice_engine")

PRIORITIES = (1, 2, 3)
ADVICE_TYPES = ("warning", "suggestion", "praise", "info")

VEGETABLES = re.compile(r"vegetable|salad|broccoli|spinach|carrot|tomato")
FRUIT = re.compile(r"fruit|apple|banana|orange|berry|berries")
PROCESSED = re.compile(r"chip|soda|candy|fast food|processed meat|sausage|hot dog")
LIQUID_CALORIES = re.compile(r"soda|juice|latte|frappe|sweet tea")
FIBER = re.compile(r"oat|quinoa|brown rice|whole grain|legume|bean|lentil|chickpea")
OMEGA3 = re.compile(r"salmon|tuna|mackerel|sardine|walnut|chia|flaxseed")
PROTEIN_SOURCES = {
    "meat": re.compile(r"chicken|beef|pork|meat"),
    "fish": re.compile(r"fish|salmon|tuna"),
    "eggs": re.compile(r"egg"),
    "plant": re.compile(r"bean|legume|tofu"),
}


class AdviceContext:
    """Everything a rule may look at while evaluating one request."""

    def __init__(self, profile: Any, diary: Mapping[str, Any], target: float, rng: random.Random, now: datetime):
        self.profile = profile
        self.diary = diary
        self.target = target
        self.rng = rng
        self.now = now
        self.meals = diary["meals"]
        summary = dict(diary["summary"])
        if summary.get("kcal_consumed") is None and "kcal" in summary:
            summary["kcal_consumed"] = summary["kcal"]
        self.summary = summary
        self.activities = diary.get("activities", diary.get("loggedActivities"))

    @property
    def name(self) -> str:
        return profile_value(self.profile, "name") or "there"

    @property
    def goal(self) -> Optional[str]:
        return profile_value(self.profile, "goal")

    @property
    def weight(self) -> Optional[float]:
        return profile_value(self.profile, "weight")

    @property
    def net(self) -> float:
        return self.summary["net_kcal"]

    @property
    def consumed(self) -> float:
        return self.summary["kcal_consumed"]

    @property
    def burned(self) -> float:
        return self.summary["kcal_burned_exercise"]

    def chance(self, probability: float) -> bool:
        return self.rng.random() < probability

    def slot_items(self, meal_type: str) -> List[Mapping[str, Any]]:
        meal = self.meals.get(meal_type) or {}
        return meal.get("items") or []

    def items(self) -> Iterable[Mapping[str, Any]]:
        for meal in self.meals.values():
            for item in (meal or {}).get("items") or []:
                yield item

    def ate(self, pattern: "re.Pattern") -> bool:
        return any(pattern.search((item.get("name") or "").lower()) for item in self.items())

    def has_recipe(self) -> bool:
        return any(item.get("type") == "recipe" for item in self.items())

    def protein_sources(self) -> set:
        found = set()
        for item in self.items():
            name = (item.get("name") or "").lower()
            found.update(source for source, pattern in PROTEIN_SOURCES.items() if pattern.search(name))
        return found

    def at_time_on_diary_day(self, hour: int, minute: int = 0) -> datetime:
        return datetime.fromisoformat(self.diary["date"]).replace(hour=hour, minute=minute)


@dataclass(frozen=True)
class AdviceRule:
    """One entry of the advice bank."""

    id: str
    priority: int
    type: str
    text: str
    condition: Callable[[AdviceContext], bool]
    params: Optional[Callable[[AdviceContext], Dict[str, Any]]] = None

    def render(self, ctx: AdviceContext) -> Dict[str, Any]:
        params = self.params(ctx) if self.params else {"name": ctx.name}
        return {
            "id": self.id,
            "type": self.type,
            "priority": self.priority,
            "text": self.text.format(**params),
        }


def _calorie_gap(ctx: AdviceContext) -> Dict[str, Any]:
    return {"name": ctx.name, "diff": abs(round_half_up(ctx.net - ctx.target))}


def _skipped_meal(ctx: AdviceContext) -> Optional[str]:
    hour = ctx.now.hour
    if hour >= 11 and not ctx.slot_items("breakfast"):
        return "breakfast"
    if hour >= 16 and not ctx.slot_items("lunch"):
        return "lunch"
    if hour >= 21 and not ctx.slot_items("dinner"):
        return "dinner"
    return None


def _oversized_meal(ctx: AdviceContext) -> Optional[str]:
    for meal_type, meal in ctx.meals.items():
        meal_kcal = sum(item.get("kcal") or 0 for item in (meal or {}).get("items") or [])
        if meal_kcal > ctx.consumed * 0.60:
            return meal_type
    return None


def _is_balanced(ctx: AdviceContext) -> bool:
    s = ctx.summary
    return s["protein"] > 20 and s["carbs"] > 30 and s["fat"] > 15 and ctx.consumed > 800


def _filled_slots(ctx: AdviceContext) -> int:
    return sum(1 for meal in ctx.meals.values() if (meal or {}).get("items"))


ADVICE_BANK = [
    # calorie balance
    AdviceRule(
        "c1", 1, "warning",
        "{name}, you've significantly exceeded your calorie target by ~{diff} kcal. "
        "Consistent overeating can hinder your goals.",
        lambda ctx: bool(ctx.goal) and ctx.net > ctx.target + 500,
        _calorie_gap,
    ),
    AdviceRule(
        "c2", 1, "warning",
        "{name}, you're well below your calorie target by ~{diff} kcal. If your goal isn't significant "
        "weight loss, ensure you're eating enough for energy and nutrients.",
        lambda ctx: ctx.goal != "lose" and ctx.net < ctx.target - 500,
        _calorie_gap,
    ),
    AdviceRule(
        "c3", 1, "warning",
        "For weight loss, a deficit is key, but being ~{diff} kcal below target, {name}, might be too "
        "restrictive. Focus on sustainable habits.",
        lambda ctx: ctx.goal == "lose" and ctx.net < ctx.target - 700,
        _calorie_gap,
    ),
    # macros
    AdviceRule(
        "m1", 1, "warning",
        "Hey {name}, your fat intake appears quite high today. While fats are important, balance is key. "
        "Review your food choices.",
        lambda ctx: ctx.consumed > 1200 and ctx.summary["fat"] > ctx.consumed * 0.40 / 9,
    ),
    AdviceRule(
        "m2", 1, "warning",
        "{name}, a large portion of your calories today came from carbohydrates. Ensure these are "
        "primarily complex carbs for sustained energy.",
        lambda ctx: ctx.consumed > 1200 and ctx.summary["carbs"] > ctx.consumed * 0.65 / 4,
    ),
    AdviceRule(
        "m3", 2, "suggestion",
        "Your protein intake is a bit on the lower side today, {name}. Try incorporating more lean protein "
        "sources like chicken, fish, beans, or tofu.",
        lambda ctx: bool(ctx.weight) and ctx.consumed > 800 and ctx.summary["protein"] < ctx.weight * 1.2,
    ),
    AdviceRule(
        "m4", 2, "praise",
        "Great job on hitting your protein target today, {name}! This supports muscle health and satiety.",
        lambda ctx: bool(ctx.weight) and ctx.summary["protein"] >= ctx.weight * 1.6,
    ),
    # activity
    AdviceRule(
        "a1", 2, "praise",
        "Fantastic effort with your physical activity today! Every bit of movement counts.",
        lambda ctx: ctx.burned >= 300,
    ),
    AdviceRule(
        "a2", 2, "suggestion",
        "It seems like a less active day today. How about a brisk 20-minute walk to boost your energy?",
        lambda ctx: ctx.burned < 100 and len(ctx.activities) == 0,
    ),
    # what was eaten
    AdviceRule(
        "v1", 2, "suggestion",
        "Aim to include more colorful vegetables in your meals, {name}. They're nutritional powerhouses!",
        lambda ctx: not ctx.ate(VEGETABLES),
    ),
    AdviceRule(
        "v1_praise", 2, "praise",
        "Excellent choice including vegetables today, {name}! You're getting those essential vitamins and fiber.",
        lambda ctx: ctx.ate(VEGETABLES),
    ),
    AdviceRule(
        "f1", 2, "suggestion",
        "A piece of fruit or a handful of berries can be a great way to add vitamins and natural sweetness, {name}.",
        lambda ctx: not ctx.ate(FRUIT),
    ),
    AdviceRule(
        "f1_praise", 2, "praise",
        "Great job adding fruit to your day, {name}! Natural sweetness and vitamins are always a smart choice.",
        lambda ctx: ctx.ate(FRUIT),
    ),
    AdviceRule(
        "protein_variety_suggestion", 2, "suggestion",
        "Consider diversifying your protein sources today, {name}. Fish, eggs, legumes, or tofu can add "
        "variety to your nutrition.",
        lambda ctx: len(ctx.protein_sources()) <= 1 and ctx.summary["protein"] > 20,
    ),
    AdviceRule(
        "protein_variety_praise", 2, "praise",
        "Excellent protein variety today, {name}! Mixing different protein sources ensures you get all "
        "essential amino acids.",
        lambda ctx: len(ctx.protein_sources()) >= 3 and ctx.summary["protein"] > 30,
    ),
    # general habits
    AdviceRule(
        "h1", 3, "info",
        "Stay hydrated! Drinking enough water is crucial for overall health, energy, and even metabolism.",
        lambda ctx: ctx.chance(0.3),
    ),
    AdviceRule(
        "g1", 3, "info",
        "Consistency is more important than perfection in your health journey. Keep up the good effort!",
        lambda ctx: ctx.chance(0.2),
    ),
    AdviceRule(
        "g2", 3, "info",
        "Remember that quality sleep plays a big role in recovery, hormone balance, and appetite regulation.",
        lambda ctx: ctx.chance(0.2),
    ),
    # meal timing
    AdviceRule(
        "e1", 2, "suggestion",
        "It appears you might have missed {meal} today, {name}. Regular meal timing can help manage hunger "
        "and energy.",
        lambda ctx: _skipped_meal(ctx) is not None,
        lambda ctx: {"name": ctx.name, "meal": _skipped_meal(ctx) or "a meal"},
    ),
    AdviceRule(
        "e2", 2, "suggestion",
        "Your {meal_type} was quite substantial, {name}. If you often feel overly full, slightly smaller, "
        "more frequent meals might work better.",
        lambda ctx: ctx.consumed >= 800 and _oversized_meal(ctx) is not None,
        lambda ctx: {"name": ctx.name, "meal_type": (_oversized_meal(ctx) or "meal").lower()},
    ),
    AdviceRule(
        "e3", 3, "info",
        "Eating a large meal very late might impact sleep quality. If possible, try to have your last big "
        "meal 2-3 hours before bed.",
        lambda ctx: bool(ctx.slot_items("dinner")) and ctx.at_time_on_diary_day(21, 30) < ctx.now and ctx.chance(0.3),
    ),
    AdviceRule(
        "p1", 3, "suggestion",
        "Diversify your protein! Consider fish, eggs, legumes, tofu, or Greek yogurt alongside meats.",
        lambda ctx: (ctx.summary["protein"] or 0) > 20 and ctx.chance(0.2),
    ),
    AdviceRule(
        "f2", 3, "info",
        "Healthy fats are vital! Avocados, nuts, seeds, and olive oil are excellent sources.",
        lambda ctx: ctx.chance(0.2),
    ),
    AdviceRule(
        "a3", 2, "suggestion",
        "Aim for consistent daily movement. Taking the stairs or a short walk during breaks adds up!",
        lambda ctx: ctx.burned < 150 and ctx.chance(0.35),
    ),
    AdviceRule(
        "a4", 3, "info",
        "Incorporating strength training 2-3 times a week helps build muscle, which boosts your metabolism.",
        lambda ctx: ctx.goal in ("lose", "gain", "maintain") and ctx.chance(0.15),
    ),
    AdviceRule(
        "m5", 3, "info",
        "Focus on progress, not perfection. Each healthy choice is a step in the right direction!",
        lambda ctx: ctx.chance(0.25),
    ),
    AdviceRule(
        "m6", 3, "info",
        "Practice mindful eating: slow down, savor your food, and listen to your body's hunger and fullness signals.",
        lambda ctx: ctx.chance(0.2),
    ),
    AdviceRule(
        "m7", 3, "suggestion",
        "Meal prepping or planning ahead can make healthy eating much easier during busy weeks.",
        lambda ctx: ctx.chance(0.15),
    ),
    AdviceRule(
        "m8", 2, "info",
        "If you had a meal that was off-plan, {name}, don't let it derail you. Just get back to your routine "
        "with the next meal.",
        lambda ctx: bool(ctx.goal) and ctx.consumed > ctx.target + 700 and ctx.chance(0.4),
    ),
    # goal progress
    AdviceRule(
        "gl1", 2, "praise",
        "Well done, {name}! You're effectively managing a calorie deficit for your weight loss goal today.",
        lambda ctx: ctx.goal == "lose" and ctx.target - 600 < ctx.net < ctx.target,
    ),
    AdviceRule(
        "gg1", 2, "praise",
        "Great job fueling your body, {name}! A slight calorie surplus is helpful for your muscle gain objective.",
        lambda ctx: ctx.goal == "gain" and ctx.target < ctx.net < ctx.target + 500,
    ),
    AdviceRule(
        "gm1", 2, "praise",
        "You're doing a good job maintaining your calorie balance today!",
        lambda ctx: ctx.goal == "maintain" and abs(ctx.net - ctx.target) < 200,
    ),
    AdviceRule(
        "e4", 3, "info",
        "Reading food labels helps you make informed choices about serving sizes and nutritional content.",
        lambda ctx: ctx.chance(0.1),
    ),
    AdviceRule(
        "e5", 2, "suggestion",
        "Cooking at home gives you more control over ingredients, portions, and overall healthiness of your meals.",
        lambda ctx: not ctx.has_recipe() and ctx.chance(0.25),
    ),
    AdviceRule(
        "e6", 2, "suggestion",
        "Try to limit highly processed foods. They often contain added sugars, unhealthy fats, and excess sodium.",
        lambda ctx: ctx.ate(PROCESSED),
    ),
    AdviceRule(
        "e7", 3, "info",
        "Aim for a balanced plate: roughly half vegetables/fruits, a quarter lean protein, and a quarter whole grains.",
        lambda ctx: ctx.chance(0.15),
    ),
    AdviceRule(
        "m9", 3, "info",
        "Small, consistent healthy habits compound over time. Keep going!",
        lambda ctx: ctx.chance(0.2),
    ),
    AdviceRule(
        "e8", 2, "suggestion",
        "Be mindful of portion sizes, even for healthy foods. It's easy to overconsume calories without realizing.",
        lambda ctx: ctx.chance(0.2),
    ),
    AdviceRule(
        "e9", 2, "warning",
        "Skipping meals to 'save' calories can backfire, leading to overeating later and nutrient deficiencies. "
        "Aim for regular, balanced meals.",
        lambda ctx: not ctx.slot_items("breakfast") and not ctx.slot_items("lunch") and ctx.at_time_on_diary_day(16) < ctx.now,
    ),
    AdviceRule(
        "m10", 3, "suggestion",
        "Celebrate your milestones with non-food rewards, like a new workout gear, a book, or a relaxing day.",
        lambda ctx: ctx.chance(0.1),
    ),
    AdviceRule(
        "h2", 2, "suggestion",
        "Watch out for liquid calories! Sugary drinks, specialty coffees, and even some juices can add up quickly.",
        lambda ctx: ctx.ate(LIQUID_CALORIES),
    ),
    AdviceRule(
        "s1", 3, "info",
        "Setting small, achievable weekly goals can help you stay motivated and build momentum.",
        lambda ctx: ctx.chance(0.15),
    ),
    AdviceRule(
        "s2", 2, "suggestion",
        "If you're feeling hungry between meals, {name}, opt for a healthy snack like fruit, yogurt, or a small "
        "handful of nuts.",
        lambda ctx: not ctx.slot_items("snack") and ctx.consumed > 1000 and ctx.chance(0.3),
    ),
    AdviceRule(
        "s3", 1, "praise",
        "Excellent discipline, {name}! You've hit your calorie target and made healthy choices today.",
        lambda ctx: bool(ctx.goal) and abs(ctx.net - ctx.target) < 50 and ctx.consumed > 1200,
    ),
    AdviceRule(
        "s4", 2, "suggestion",
        "Feeling stressed? Physical activity is a great stress reliever. Even a short burst can help!",
        lambda ctx: ctx.burned < 50 and ctx.chance(0.2),
    ),
    # habits inferred from today's entries
    AdviceRule(
        "breakfast_habit_praise", 2, "praise",
        "Great job having breakfast today, {name}! Starting your day with a meal helps regulate your "
        "metabolism and energy levels.",
        lambda ctx: bool(ctx.slot_items("breakfast")) and ctx.now.hour < 12,
    ),
    AdviceRule(
        "breakfast_habit_suggestion", 2, "suggestion",
        "Consider having breakfast tomorrow, {name}. It can help kickstart your metabolism and prevent "
        "overeating later.",
        lambda ctx: not ctx.slot_items("breakfast") and 12 <= ctx.now.hour < 18,
    ),
    AdviceRule(
        "home_cooking_praise", 2, "praise",
        "Excellent choice cooking at home today, {name}! You have full control over ingredients and portions.",
        lambda ctx: ctx.has_recipe(),
    ),
    AdviceRule(
        "balanced_meal_praise", 2, "praise",
        "Perfect! You've included protein, carbs, and healthy fats in your meals today, {name}. "
        "That's a well-balanced approach.",
        _is_balanced,
    ),
    AdviceRule(
        "fiber_rich_praise", 2, "praise",
        "Smart choice including fiber-rich foods today, {name}! Fiber helps with satiety and digestive health.",
        lambda ctx: ctx.ate(FIBER),
    ),
    AdviceRule(
        "omega3_praise", 2, "praise",
        "Great job including omega-3 rich foods today, {name}! These healthy fats support brain and heart health.",
        lambda ctx: ctx.ate(OMEGA3),
    ),
    AdviceRule(
        "meal_spacing_praise", 2, "praise",
        "Good meal timing today, {name}! Spacing meals 3-4 hours apart helps maintain steady energy levels.",
        lambda ctx: _filled_slots(ctx) >= 3 and ctx.consumed > 1000,
    ),
    AdviceRule(
        "hydration_reminder", 2, "suggestion",
        "Don't forget to stay hydrated, {name}! Aim for 8 glasses of water throughout the day.",
        lambda ctx: ctx.chance(0.4) and ctx.consumed > 500,
    ),
    AdviceRule(
        "post_workout_nutrition", 2, "suggestion",
        "Since you exercised today, {name}, consider having a protein-rich snack within 30 minutes to "
        "support muscle recovery.",
        lambda ctx: ctx.burned > 200 and ctx.summary["protein"] < ctx.weight * 1.2,
    ),
    AdviceRule(
        "post_workout_praise", 2, "praise",
        "Perfect post-workout nutrition, {name}! You've fueled your body well after that exercise session.",
        lambda ctx: ctx.burned > 200 and ctx.summary["protein"] >= ctx.weight * 1.2,
    ),
]


class AdviceEngine:
    """Evaluates the advice bank for one profile and diary day.

    Args:
        rules: Rule records to evaluate, in bank order.
        rng: Random source for throttled tips; defaults to a fresh `random.Random`.
        clock: Zero-argument callable returning the current local datetime.
        calculator: Calorie calculator used to resolve the day's target.
    """

    def __init__(
        self,
        rules: Optional[List[AdviceRule]] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
        calculator: CalorieCalculator = calorie_calculator,
    ):
        self.rules = list(ADVICE_BANK if rules is None else rules)
        self.rng = rng or random.Random()
        self.clock = clock or datetime.now
        self.calculator = calculator

    def target_for(self, profile: Any) -> int:
        return self.calculator.effective_target(profile)

    def get_advice(self, profile: Any, diary: Optional[Mapping[str, Any]], limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Return advice for the day sorted by priority (1 first).

        Missing profile, diary, summary or meals yields an empty list. A rule
        whose condition or template raises is left out.
        """
        if not profile or not isinstance(diary, Mapping) or not diary.get("summary") or diary.get("meals") is None:
            return []

        ctx = AdviceContext(profile, diary, self.target_for(profile), self.rng, self.clock())
        advice = []
        seen = set()
        for rule in self.rules:
            if rule.id in seen:
                continue
            try:
                if not rule.condition(ctx):
                    continue
                item = rule.render(ctx)
            except Exception as exc:
                logger.debug("Advice rule %s skipped: %s", rule.id, exc)
                continue
            seen.add(rule.id)
            advice.append(item)

        advice.sort(key=lambda a: a["priority"])
        if limit is not None:
            advice = advice[:limit]
        return advice


advice_engine = AdviceEngine()
__all__ = ["AdviceRule", "AdviceContext", "AdviceEngine", "ADVICE_BANK", "advice_engine"]
