"""Schemas for the advice endpoints."""

from pydantic import BaseModel, Field
from typing import Any, Dict, Optional


class AdviceRequest(BaseModel):
    """Profile and diary day to evaluate, as returned by the profile and diary endpoints."""

    profile: Optional[Dict[str, Any]] = Field(
        None, examples=[{"name": "Dana", "weight": 70, "height": 175, "age": 30, "gender": "male",
                         "activity_level": "sedentary", "goal": "maintain"}],
    )
    diary: Optional[Dict[str, Any]] = Field(None, description="Diary day with `meals`, `summary` and `activities`")
    limit: Optional[int] = Field(None, ge=1, examples=[6], description="Maximum number of advice items")


class AdviceItem(BaseModel):
    id: str
    type: str
    priority: int
    text: str
