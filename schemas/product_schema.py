"""Schemas for products and categories."""

from pydantic import BaseModel, Field
from typing import Optional


class ProductCreateRequest(BaseModel):
    """New product; nutrition values are per 100 g."""

    name: str = Field(..., min_length=1, examples=["Greek yogurt"])
    calories: float = Field(..., ge=0, examples=[97], description="kcal per 100 g")
    protein: float = Field(0, ge=0, examples=[9.0], description="Protein grams per 100 g")
    fat: float = Field(0, ge=0, examples=[5.0], description="Fat grams per 100 g")
    carbs: float = Field(0, ge=0, examples=[3.6], description="Carbohydrate grams per 100 g")
    category_id: Optional[int] = Field(None, examples=[6])
    is_public: bool = Field(True, examples=[True])


class ProductUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    calories: Optional[float] = Field(None, ge=0)
    protein: Optional[float] = Field(None, ge=0)
    fat: Optional[float] = Field(None, ge=0)
    carbs: Optional[float] = Field(None, ge=0)
    category_id: Optional[int] = None
    is_public: Optional[bool] = None


class ProductResponse(BaseModel):
    id: int
    name: str
    calories: float
    protein: float
    fat: float
    carbs: float
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    is_public: bool
    created_by: Optional[int] = None


class CategoryResponse(BaseModel):
    id: int
    name: str
    label: str
