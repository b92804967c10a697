"""Achievement check-and-award.

After a user action (meal logged, recipe created, profile updated...) every
achievement definition the user has not earned yet is evaluated against the
action and fresh DB lookups. Criteria handlers are registered per
``criteria_type`` together with the action types that may trigger them.

Evaluation is best effort: a failing definition is logged and skipped, and
`check_and_award` never raises. Awarding is idempotent thanks to the unique
(user_id, achievement_definition_id) constraint.
"""

from datetime import date, timedelta
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional, Tuple

from sqlalchemy import and_, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from core.logger import get_logger
from core.numbers import to_float
from database import WriteSessionLocal, models
from services import diary_service
from services.calorie_calculator import calorie_calculator

logger = get_logger("services.achievement_evaluator")


class ActionType(str, Enum):
    MEAL_LOGGED = "MEAL_LOGGED"
    MEAL_ITEM_UPDATED = "MEAL_ITEM_UPDATED"
    MEAL_ITEM_DELETED = "MEAL_ITEM_DELETED"
    DIARY_LOADED = "DIARY_LOADED"
    RECIPE_CREATED = "RECIPE_CREATED"
    PROFILE_UPDATED = "PROFILE_UPDATED"
    ACTIVITY_LOGGED = "ACTIVITY_LOGGED"
    WEIGHT_LOGGED = "WEIGHT_LOGGED"


class CheckContext:
    """The action being evaluated plus the DB session and today's date."""

    def __init__(self, db: Session, user_id: int, action: ActionType, data: Mapping[str, Any], today: date):
        self.db = db
        self.user_id = user_id
        self.action = action
        self.data = data
        self.today = today

    @property
    def day(self) -> date:
        """Day the action refers to: activity_date, then date, then today."""
        value = self.data.get("activity_date") or self.data.get("date")
        return diary_service.parse_day(value) if value else self.today

    def user(self) -> Optional[models.User]:
        return self.db.get(models.User, self.user_id)

    def day_totals(self) -> Dict[str, float]:
        day = self.day
        totals = diary_service.daily_nutrition(self.db, self.user_id, day, day)
        return totals.get(day, {"kcal": 0.0, "protein": 0.0, "fat": 0.0, "carbs": 0.0})

    def logged_days(self, start: date, end: date) -> Dict[date, set]:
        """Meal types with at least one item, per day."""
        days = {}
        for row in diary_service.load_meal_items(self.db, self.user_id, start, end):
            if row["meal_product_id"] is not None:
                days.setdefault(row["meal_date"], set()).add(row["meal_type"])
        return days


Handler = Callable[[CheckContext, models.AchievementDefinition], bool]
CRITERIA: Dict[str, Tuple[FrozenSet[ActionType], Handler]] = {}

STREAK_WINDOW_DAYS = 30
WEEK_DAYS = 7
CALORIE_TARGET_TOLERANCE = 100
MACRO_TARGET_SHARE = 0.9

DAILY_NUTRITION_ACTIONS = (
    ActionType.MEAL_LOGGED,
    ActionType.MEAL_ITEM_UPDATED,
    ActionType.MEAL_ITEM_DELETED,
    ActionType.DIARY_LOADED,
)


def criteria(name: str, *actions: ActionType):
    """Register a handler for a criteria type and the actions that trigger it."""
    def register(fn: Handler) -> Handler:
        CRITERIA[name] = (frozenset(actions), fn)
        return fn
    return register


def threshold(definition: models.AchievementDefinition, default: float = 0) -> float:
    return to_float(definition.criteria_value_num) or default


def streak(days, today: date) -> int:
    """Length of the run of consecutive days ending at the latest day on or before today."""
    ordered = sorted({d for d in days if d <= today}, reverse=True)
    if not ordered:
        return 0
    count = 1
    for previous, current in zip(ordered, ordered[1:]):
        if previous - current != timedelta(days=1):
            break
        count += 1
    return count


@criteria("first_meal_log", ActionType.MEAL_LOGGED)
def _first_meal_log(ctx, definition):
    return True


@criteria("recipes_created_count", ActionType.RECIPE_CREATED, ActionType.DIARY_LOADED)
def _recipes_created(ctx, definition):
    count = ctx.db.query(func.count(models.Recipe.id)).filter(models.Recipe.user_id == ctx.user_id).scalar()
    return (count or 0) >= threshold(definition, 1)


@criteria("profile_complete", ActionType.PROFILE_UPDATED, ActionType.DIARY_LOADED)
def _profile_complete(ctx, definition):
    user = ctx.user()
    if user is None:
        return False
    return all([user.weight, user.height, user.age, user.goal, user.gender, user.activity_level])


@criteria("profile_updated", ActionType.PROFILE_UPDATED)
def _profile_updated(ctx, definition):
    return True


@criteria("first_weight_log", ActionType.WEIGHT_LOGGED, ActionType.PROFILE_UPDATED)
def _first_weight_log(ctx, definition):
    if ctx.action == ActionType.WEIGHT_LOGGED:
        return True
    return ctx.data.get("weight_logged") is True


@criteria("calories_burned_day", ActionType.ACTIVITY_LOGGED, ActionType.DIARY_LOADED)
def _calories_burned_day(ctx, definition):
    day = ctx.day
    burned = diary_service.daily_burned(ctx.db, ctx.user_id, day, day).get(day, 0.0)
    return burned >= threshold(definition)


@criteria("long_workout", ActionType.ACTIVITY_LOGGED)
def _long_workout(ctx, definition):
    return to_float(ctx.data.get("duration_minutes")) >= threshold(definition)


@criteria("weekly_calories_burned", ActionType.ACTIVITY_LOGGED, ActionType.DIARY_LOADED)
def _weekly_calories_burned(ctx, definition):
    start = ctx.today - timedelta(days=WEEK_DAYS - 1)
    burned = diary_service.daily_burned(ctx.db, ctx.user_id, start, ctx.today)
    return sum(burned.values()) >= threshold(definition)


@criteria("consecutive_days_tracked", ActionType.MEAL_LOGGED, ActionType.DIARY_LOADED)
def _consecutive_days_tracked(ctx, definition):
    start = ctx.today - timedelta(days=STREAK_WINDOW_DAYS)
    return streak(ctx.logged_days(start, ctx.today), ctx.today) >= threshold(definition)


@criteria("consecutive_activity_days", ActionType.ACTIVITY_LOGGED, ActionType.DIARY_LOADED)
def _consecutive_activity_days(ctx, definition):
    start = ctx.today - timedelta(days=STREAK_WINDOW_DAYS)
    days = diary_service.daily_burned(ctx.db, ctx.user_id, start, ctx.today)
    return streak(days.keys(), ctx.today) >= threshold(definition)


@criteria("consecutive_weight_logs", ActionType.WEIGHT_LOGGED, ActionType.DIARY_LOADED)
def _consecutive_weight_logs(ctx, definition):
    start = ctx.today - timedelta(days=STREAK_WINDOW_DAYS)
    rows = (
        ctx.db.query(models.WeightLog.log_date)
        .filter(models.WeightLog.user_id == ctx.user_id, models.WeightLog.log_date >= start)
        .all()
    )
    return streak((r.log_date for r in rows), ctx.today) >= threshold(definition)


@criteria("protein_target_met_times", *DAILY_NUTRITION_ACTIONS)
def _protein_target_met(ctx, definition):
    user = ctx.user()
    protein_target = calorie_calculator.macro_targets(user.weight if user else None, None)["protein"]
    if protein_target is None:
        return False
    protein = ctx.day_totals()["protein"]
    logger.debug("Protein check user=%s day=%s: %.1fg / %.1fg", ctx.user_id, ctx.day, protein, protein_target)
    return protein >= protein_target


@criteria("calorie_target_met", *DAILY_NUTRITION_ACTIONS)
def _calorie_target_met(ctx, definition):
    user = ctx.user()
    if user is None or not user.calculated_target_calories:
        return False
    return abs(ctx.day_totals()["kcal"] - user.calculated_target_calories) <= CALORIE_TARGET_TOLERANCE


@criteria("all_macros_met", *DAILY_NUTRITION_ACTIONS)
def _all_macros_met(ctx, definition):
    user = ctx.user()
    if user is None:
        return False
    targets = calorie_calculator.macro_targets(user.weight, user.calculated_target_calories)
    if any(value is None for value in targets.values()):
        return False
    totals = ctx.day_totals()
    return all(totals[macro] >= targets[macro] * MACRO_TARGET_SHARE for macro in ("protein", "fat", "carbs"))


@criteria("food_variety_day", ActionType.MEAL_LOGGED, ActionType.DIARY_LOADED)
def _food_variety_day(ctx, definition):
    day = ctx.day
    rows = diary_service.load_meal_items(ctx.db, ctx.user_id, day)
    categories = {row["category_id"] for row in rows if row["category_id"] is not None}
    return len(categories) >= threshold(definition)


@criteria("meal_types_day", ActionType.MEAL_LOGGED, ActionType.DIARY_LOADED)
def _meal_types_day(ctx, definition):
    day = ctx.day
    return len(ctx.logged_days(day, day).get(day, ())) >= threshold(definition)


@criteria("own_recipes_used", ActionType.MEAL_LOGGED, ActionType.DIARY_LOADED)
def _own_recipes_used(ctx, definition):
    count = (
        ctx.db.query(func.count(models.MealProduct.id))
        .join(models.Meal, models.Meal.id == models.MealProduct.meal_id)
        .join(models.Recipe, models.Recipe.id == models.MealProduct.recipe_id)
        .filter(models.Meal.user_id == ctx.user_id, models.Recipe.user_id == ctx.user_id)
        .scalar()
    )
    return (count or 0) >= threshold(definition)


@criteria("consistent_meal_times", ActionType.MEAL_LOGGED, ActionType.DIARY_LOADED)
def _consistent_meal_times(ctx, definition):
    start = ctx.today - timedelta(days=WEEK_DAYS - 1)
    return len(ctx.logged_days(start, ctx.today)) >= threshold(definition)


@criteria("complete_meal_week", ActionType.MEAL_LOGGED, ActionType.DIARY_LOADED)
def _complete_meal_week(ctx, definition):
    start = ctx.today - timedelta(days=WEEK_DAYS - 1)
    complete = [day for day, types in ctx.logged_days(start, ctx.today).items() if len(types) >= len(models.MEAL_TYPES)]
    return len(complete) >= threshold(definition)


def award_achievement(db: Session, user_id: int, definition_id: int) -> bool:
    """Insert the (user, achievement) pair unless present. Returns True when newly awarded."""
    exists = (
        db.query(models.UserAchievement.id)
        .filter_by(user_id=user_id, achievement_definition_id=definition_id)
        .first()
    )
    if exists:
        return False
    db.add(models.UserAchievement(user_id=user_id, achievement_definition_id=definition_id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("Achievement %s already awarded to user %s", definition_id, user_id)
        return False
    logger.info("User %s earned achievement %s", user_id, definition_id)
    return True


class AchievementEvaluator:
    """Runs the registered criteria for one user action.

    Args:
        clock: Zero-argument callable returning today's date.
        session_factory: Session factory used by background checks.
    """

    def __init__(self, clock: Optional[Callable[[], date]] = None, session_factory: sessionmaker = WriteSessionLocal):
        self.clock = clock or date.today
        self.session_factory = session_factory

    def unearned(self, db: Session, user_id: int) -> List[models.AchievementDefinition]:
        return (
            db.query(models.AchievementDefinition)
            .outerjoin(
                models.UserAchievement,
                and_(
                    models.UserAchievement.achievement_definition_id == models.AchievementDefinition.id,
                    models.UserAchievement.user_id == user_id,
                ),
            )
            .filter(models.UserAchievement.id.is_(None))
            .order_by(models.AchievementDefinition.id)
            .all()
        )

    def check_and_award(self, db: Session, user_id: int, action: Any, data: Optional[Mapping[str, Any]] = None) -> List[int]:
        """Evaluate unearned achievements for `action` and award those met.

        Returns:
            Ids of the achievement definitions awarded by this call.
        """
        try:
            action = ActionType(action)
        except ValueError:
            logger.warning("Ignoring achievement check for unknown action %r", action)
            return []
        if not user_id:
            logger.warning("Ignoring achievement check without a user id (action=%s)", action.value)
            return []

        awarded = []
        try:
            definitions = self.unearned(db, user_id)
        except Exception:
            logger.exception("Could not load unearned achievements for user %s", user_id)
            db.rollback()
            return awarded

        logger.info("Checking %s unearned achievements for user %s on %s", len(definitions), user_id, action.value)
        ctx = CheckContext(db, user_id, action, dict(data or {}), self.clock())
        for definition in definitions:
            actions, handler = CRITERIA.get(definition.criteria_type, (frozenset(), None))
            if handler is None or action not in actions:
                continue
            try:
                if handler(ctx, definition) and award_achievement(db, user_id, definition.id):
                    awarded.append(definition.id)
            except Exception:
                logger.exception(
                    "Achievement %s (%s) check failed for user %s",
                    definition.id, definition.criteria_type, user_id,
                )
                db.rollback()
        return awarded

    def run_in_background(self, user_id: int, action: Any, data: Optional[Mapping[str, Any]] = None) -> List[int]:
        """Entry point for FastAPI background tasks; uses its own session."""
        db = self.session_factory()
        try:
            return self.check_and_award(db, user_id, action, data)
        finally:
            db.close()


achievement_evaluator = AchievementEvaluator()


def schedule_check(background_tasks, user_id: int, action: ActionType, data: Optional[Mapping[str, Any]] = None) -> None:
    """Queue an achievement check to run after the response is sent."""
    background_tasks.add_task(achievement_evaluator.run_in_background, user_id, action, data)


__all__ = [
    "ActionType",
    "CRITERIA",
    "AchievementEvaluator",
    "achievement_evaluator",
    "award_achievement",
    "schedule_check",
    "streak",
]
