"""Schemas for diary days, meal items and the daily summary."""

from pydantic import AliasChoices, BaseModel, Field
from typing import Dict, List, Optional


class MealItemInput(BaseModel):
    """One item to log: a product with grams or a recipe with servings."""

    product_id: Optional[int] = Field(None, validation_alias=AliasChoices("product_id", "productId"), examples=[3])
    amount_grams: Optional[float] = Field(None, validation_alias=AliasChoices("amount_grams", "amountGrams"), examples=[150])
    recipe_id: Optional[int] = Field(None, validation_alias=AliasChoices("recipe_id", "recipeId"), examples=[None])
    servings_consumed: Optional[float] = Field(None, validation_alias=AliasChoices("servings_consumed", "servingsConsumed"), examples=[None])


class SaveMealRequest(BaseModel):
    """Items appended to one meal slot of a diary day."""

    date: str = Field(..., examples=["2024-05-01"], description="Diary day in YYYY-MM-DD format")
    items: List[MealItemInput] = Field(..., description="Products (grams) or recipes (servings) to add")


class MealItemUpdateRequest(BaseModel):
    amount_grams: Optional[float] = Field(None, validation_alias=AliasChoices("amount_grams", "amountGrams"), examples=[200])
    servings_consumed: Optional[float] = Field(None, validation_alias=AliasChoices("servings_consumed", "servingsConsumed"), examples=[1.5])


class DiaryItem(BaseModel):
    meal_product_id: int
    type: str
    name: str
    product_id: Optional[int] = None
    amount_grams: Optional[float] = None
    recipe_id: Optional[int] = None
    servings_consumed: Optional[float] = None
    kcal: int
    protein: float
    fat: float
    carbs: float


class MealSlot(BaseModel):
    meal_id: Optional[int] = None
    items: List[DiaryItem] = []


class DailySummary(BaseModel):
    """Totals for one day. Older clients send ``kcal`` instead of ``kcal_consumed``."""

    kcal_consumed: float = Field(0, validation_alias=AliasChoices("kcal_consumed", "kcal"))
    protein: float = 0
    fat: float = 0
    carbs: float = 0
    kcal_burned_exercise: float = 0
    net_kcal: float = 0


class LoggedActivity(BaseModel):
    id: int
    exercise_definition_id: Optional[int] = None
    activity_type: Optional[str] = None
    duration_minutes: int
    calories_burned: Optional[float] = None


class DiaryDayResponse(BaseModel):
    """A diary day: the four meal slots, the summary and the logged activities."""

    date: str
    meals: Dict[str, MealSlot]
    summary: DailySummary
    activities: List[LoggedActivity] = []
