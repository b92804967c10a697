"""Schemas for recipes and their ingredients."""

from pydantic import AliasChoices, BaseModel, Field
from typing import List, Optional


class IngredientInput(BaseModel):
    product_id: int = Field(..., validation_alias=AliasChoices("product_id", "productId"), examples=[6])
    amount_grams: float = Field(..., gt=0, validation_alias=AliasChoices("amount_grams", "amountGrams"), examples=[200])


class RecipeCreateRequest(BaseModel):
    """New recipe with its full ingredient list."""

    name: str = Field(..., min_length=1, examples=["Chicken and rice bowl"])
    description: Optional[str] = Field(None, examples=["Weekday lunch prep"])
    is_public: bool = Field(False, examples=[False])
    total_servings: float = Field(1, gt=0, examples=[2], description="Number of servings the recipe yields")
    ingredients: List[IngredientInput] = Field(..., min_length=1)


class RecipeUpdateRequest(BaseModel):
    """Recipe update; when `ingredients` is sent it replaces the whole list."""

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    is_public: Optional[bool] = None
    total_servings: Optional[float] = Field(None, gt=0)
    ingredients: Optional[List[IngredientInput]] = Field(None, min_length=1)


class Nutrition(BaseModel):
    kcal: int
    protein: float
    fat: float
    carbs: float


class IngredientResponse(BaseModel):
    product_id: int
    product_name: Optional[str] = None
    amount_grams: float


class RecipeResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    user_id: int
    is_public: bool
    total_servings: float
    ingredients: List[IngredientResponse]
    total_nutrition: Nutrition
    per_serving: Nutrition
