"""Schemas for achievements."""

from pydantic import BaseModel
from typing import Optional


class AchievementResponse(BaseModel):
    """An achievement definition and whether the caller has earned it."""

    id: int
    name: str
    description: Optional[str] = None
    icon_class: Optional[str] = None
    category: Optional[str] = None
    criteria_description: Optional[str] = None
    points: int
    is_earned: bool
    achieved_date: Optional[str] = None
