"""Schemas for the user profile endpoints."""

from pydantic import BaseModel, Field
from typing import Optional


class ProfileUpdateRequest(BaseModel):
    """Partial profile update. Only the fields sent are changed."""

    name: Optional[str] = Field(None, min_length=1, examples=["Dana"], description="Display name")
    email: Optional[str] = Field(None, examples=["dana@example.com"], description="Unique e-mail address")
    weight: Optional[float] = Field(None, examples=[70.0], description="Weight in kilograms")
    height: Optional[float] = Field(None, examples=[175.0], description="Height in centimeters")
    age: Optional[int] = Field(None, examples=[30], description="Age in years (1-120)")
    gender: Optional[str] = Field(None, examples=["female"], description="male, female, other or null")
    activity_level: Optional[str] = Field(None, examples=["moderate"], description="sedentary, light, moderate, active, very_active")
    goal: Optional[str] = Field(None, examples=["maintain"], description="lose, gain or maintain")
    bmr_formula: Optional[str] = Field(None, examples=["mifflin_st_jeor"], description="mifflin_st_jeor, harris_benedict or katch_mcardle")
    body_fat_percentage: Optional[float] = Field(None, examples=[18.5], description="Body fat percentage (0-100), used by Katch-McArdle")
    target_calories_override: Optional[int] = Field(None, examples=[1900], description="Manual daily calorie target; null to use the calculated one")


class ProfileResponse(BaseModel):
    """Stored profile plus the derived calorie values."""

    id: int
    name: str
    email: str
    role: str
    weight: Optional[float] = None
    height: Optional[float] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    activity_level: Optional[str] = None
    goal: Optional[str] = None
    bmr_formula: str
    body_fat_percentage: Optional[float] = None
    target_calories_override: Optional[int] = None
    bmr: Optional[int] = None
    calculated_tdee: Optional[int] = None
    calculated_target_calories: Optional[int] = None
    effective_target_calories: int
