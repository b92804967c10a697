"""Schemas for the statistics endpoints."""

from pydantic import BaseModel
from typing import Optional


class WeightPoint(BaseModel):
    date: str
    weight: Optional[float] = None


class CaloriePoint(BaseModel):
    date: str
    consumed: int
    burned: int


class PeriodInfo(BaseModel):
    start_date: str
    end_date: str
    days: int


class PeriodSummaryResponse(BaseModel):
    period: PeriodInfo
    avg_daily_kcal_consumed: int
    avg_daily_protein: float
    avg_daily_fat: float
    avg_daily_carbs: float
    total_kcal_consumed: int
    total_protein: float
    total_fat: float
    total_carbs: float
    total_kcal_burned_exercise: int
    avg_daily_kcal_burned_exercise: int
    days_with_food_log: int
    days_with_activity_log: int


class MacroDistributionResponse(BaseModel):
    protein_g: float
    fat_g: float
    carbs_g: float
    protein_pct: float
    fat_pct: float
    carbs_pct: float


class UserCounts(BaseModel):
    total: int
    new_last_7_days: int
    new_last_30_days: int


class VisibilityCounts(BaseModel):
    total: int
    public: int
    private: int


class ContentCounts(BaseModel):
    products: VisibilityCounts
    recipes: VisibilityCounts
    exercise_definitions: VisibilityCounts


class PlatformActivity(BaseModel):
    users_logged_food_today: int
    users_logged_activity_today: int
    meal_items_last_7_days: int
    activities_last_7_days: int


class PlatformAverageNutrition(BaseModel):
    period_days: int
    avg_daily_kcal_consumed: int
    avg_daily_protein: float
    avg_daily_fat: float
    avg_daily_carbs: float
    user_days_logged: int


class AdminDashboardResponse(BaseModel):
    """Platform-wide counts and nutrition averages for the admin dashboard."""

    users: UserCounts
    content: ContentCounts
    activity: PlatformActivity
    platform_average_nutrition: PlatformAverageNutrition
