"""Pydantic schema package for request and response models."""

from .profile_schema import ProfileUpdateRequest, ProfileResponse
from .diary_schema import SaveMealRequest, MealItemInput, MealItemUpdateRequest, DiaryDayResponse, DailySummary
from .product_schema import ProductCreateRequest, ProductUpdateRequest, ProductResponse, CategoryResponse
from .recipe_schema import RecipeCreateRequest, RecipeUpdateRequest, RecipeResponse
from .activity_schema import (
    ExerciseCreateRequest,
    ExerciseUpdateRequest,
    ExerciseResponse,
    ActivityCreateRequest,
    ActivityResponse,
    WeightLogRequest,
    WeightLogResponse,
)
from .advice_schema import AdviceRequest, AdviceItem
from .achievement_schema import AchievementResponse
from .statistics_schema import (
    WeightPoint,
    CaloriePoint,
    PeriodSummaryResponse,
    MacroDistributionResponse,
    AdminDashboardResponse,
)

__all__ = [
    "ProfileUpdateRequest",
    "ProfileResponse",
    "SaveMealRequest",
    "MealItemInput",
    "MealItemUpdateRequest",
    "DiaryDayResponse",
    "DailySummary",
    "ProductCreateRequest",
    "ProductUpdateRequest",
    "ProductResponse",
    "CategoryResponse",
    "RecipeCreateRequest",
    "RecipeUpdateRequest",
    "RecipeResponse",
    "ExerciseCreateRequest",
    "ExerciseUpdateRequest",
    "ExerciseResponse",
    "ActivityCreateRequest",
    "ActivityResponse",
    "WeightLogRequest",
    "WeightLogResponse",
    "AdviceRequest",
    "AdviceItem",
    "AchievementResponse",
    "WeightPoint",
    "CaloriePoint",
    "PeriodSummaryResponse",
    "MacroDistributionResponse",
    "AdminDashboardResponse",
]
