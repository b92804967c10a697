"""Schemas for exercise definitions, logged activities and weight logs."""

from pydantic import AliasChoices, BaseModel, Field
from typing import Optional


class ExerciseCreateRequest(BaseModel):
    """Exercise definition. Give a MET value, kcal per minute, or both."""

    name: str = Field(..., min_length=1, examples=["Rowing"])
    description: Optional[str] = Field(None, examples=["Indoor rowing machine, moderate pace"])
    met_value: Optional[float] = Field(None, gt=0, examples=[7.0])
    calories_per_minute: Optional[float] = Field(None, gt=0, examples=[None])
    is_public: bool = Field(False, examples=[False])


class ExerciseUpdateRequest(BaseModel):
    """Full replacement of an exercise definition; `is_public` is kept when omitted."""

    name: str = Field(..., min_length=1, examples=["Rowing"])
    description: Optional[str] = Field(None, examples=["Indoor rowing machine, hard pace"])
    met_value: Optional[float] = Field(None, gt=0, examples=[8.5])
    calories_per_minute: Optional[float] = Field(None, gt=0, examples=[None])
    is_public: Optional[bool] = Field(None, examples=[True])


class ExerciseResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    met_value: Optional[float] = None
    calories_per_minute: Optional[float] = None
    is_public: bool
    created_by: Optional[int] = None


class ActivityCreateRequest(BaseModel):
    exercise_definition_id: int = Field(
        ..., validation_alias=AliasChoices("exercise_definition_id", "exerciseDefinitionId"), examples=[1]
    )
    duration_minutes: int = Field(
        ..., gt=0, validation_alias=AliasChoices("duration_minutes", "durationMinutes"), examples=[45]
    )
    activity_date: Optional[str] = Field(
        None, validation_alias=AliasChoices("activity_date", "activityDate", "date"), examples=["2024-05-01"],
        description="YYYY-MM-DD, defaults to today",
    )


class ActivityResponse(BaseModel):
    id: int
    exercise_definition_id: Optional[int] = None
    activity_type: Optional[str] = None
    activity_date: str
    duration_minutes: int
    calories_burned: float


class WeightLogRequest(BaseModel):
    weight: float = Field(..., gt=0, le=500, examples=[71.2], description="Weight in kilograms")
    date: Optional[str] = Field(None, examples=["2024-05-01"], description="YYYY-MM-DD, defaults to today")


class WeightLogResponse(BaseModel):
    id: int
    log_date: str
    weight: float
