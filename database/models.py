"""SQLAlchemy ORM models for the calorie diary service.

Models stay behavior-free; nutrition math lives in `services`. Product
nutrition columns are per 100 g.
"""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

MEAL_TYPES = ("breakfast", "lunch", "dinner", "snack")


class User(Base):
    """Application user with the profile fields used by the calorie calculator.

    `bmr`, `calculated_tdee` and `calculated_target_calories` are derived and
    rewritten on every profile update.
    """

    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    role = Column(String(20), nullable=False, default="user")
    weight = Column(Float, nullable=True)
    height = Column(Float, nullable=True)
    age = Column(Integer, nullable=True)
    gender = Column(String(10), nullable=True)
    activity_level = Column(String(20), nullable=True)
    goal = Column(String(10), nullable=True)
    bmr_formula = Column(String(30), nullable=False, default="mifflin_st_jeor")
    body_fat_percentage = Column(Float, nullable=True)
    target_calories_override = Column(Integer, nullable=True)
    bmr = Column(Integer, nullable=True)
    calculated_tdee = Column(Integer, nullable=True)
    calculated_target_calories = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class Category(Base):
    __tablename__ = "categories"
    id = Column(Integer, primary_key=True)
    name = Column(String(50), unique=True, nullable=False)
    label = Column(String(100), nullable=False)


class Product(Base):
    """Food product with nutrition per 100 g."""

    __tablename__ = "products"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    calories = Column(Float, nullable=False)
    protein = Column(Float, nullable=False, default=0)
    fat = Column(Float, nullable=False, default=0)
    carbs = Column(Float, nullable=False, default=0)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    is_public = Column(Boolean, nullable=False, default=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    category = relationship("Category")


class Recipe(Base):
    __tablename__ = "recipes"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    is_public = Column(Boolean, nullable=False, default=False)
    total_servings = Column(Float, nullable=False, default=1)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    owner = relationship("User")
    ingredients = relationship(
        "RecipeIngredient",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="RecipeIngredient.id",
    )


class RecipeIngredient(Base):
    __tablename__ = "recipe_ingredients"
    id = Column(Integer, primary_key=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    amount_grams = Column(Float, nullable=False)

    recipe = relationship("Recipe", back_populates="ingredients")
    product = relationship("Product")


class Meal(Base):
    """One meal slot (breakfast/lunch/dinner/snack) of a user's diary day."""

    __tablename__ = "meals"
    __table_args__ = (UniqueConstraint("user_id", "meal_date", "meal_type", name="uq_meal_user_date_type"),)
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    meal_date = Column(Date, nullable=False, index=True)
    meal_type = Column(String(10), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    items = relationship(
        "MealProduct",
        back_populates="meal",
        cascade="all, delete-orphan",
        order_by="MealProduct.id",
    )


class MealProduct(Base):
    """A diary item: either product_id + product_amount or recipe_id + servings_consumed."""

    __tablename__ = "meal_products"
    id = Column(Integer, primary_key=True, index=True)
    meal_id = Column(Integer, ForeignKey("meals.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True)
    product_amount = Column(Float, nullable=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="SET NULL"), nullable=True)
    servings_consumed = Column(Float, nullable=True)

    meal = relationship("Meal", back_populates="items")


class ExerciseDefinition(Base):
    __tablename__ = "exercise_definitions"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)
    description = Column(Text, nullable=True)
    met_value = Column(Float, nullable=True)
    calories_per_minute = Column(Float, nullable=True)
    is_public = Column(Boolean, nullable=False, default=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class PhysicalActivity(Base):
    """A logged workout; calories_burned is computed once at log time."""

    __tablename__ = "physical_activities"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    exercise_definition_id = Column(Integer, ForeignKey("exercise_definitions.id", ondelete="SET NULL"), nullable=True)
    activity_date = Column(Date, nullable=False, index=True)
    duration_minutes = Column(Integer, nullable=False)
    calories_burned = Column(Float, nullable=True)
    activity_type = Column(String(150), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    exercise = relationship("ExerciseDefinition")


class WeightLog(Base):
    __tablename__ = "weight_logs"
    __table_args__ = (UniqueConstraint("user_id", "log_date", name="uq_weight_user_date"),)
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    log_date = Column(Date, nullable=False)
    weight = Column(Float, nullable=False)


class AchievementDefinition(Base):
    __tablename__ = "achievement_definitions"
    id = Column(Integer, primary_key=True)
    name = Column(String(120), nullable=False)
    description = Column(Text, nullable=True)
    icon_class = Column(String(60), nullable=True)
    category = Column(String(40), nullable=True)
    criteria_description = Column(String(255), nullable=True)
    points = Column(Integer, nullable=False, default=10)
    criteria_type = Column(String(60), nullable=False)
    criteria_value_num = Column(Float, nullable=True)
    criteria_value_str = Column(String(120), nullable=True)


class UserAchievement(Base):
    """An earned achievement. The unique pair makes awarding idempotent."""

    __tablename__ = "user_achievements"
    __table_args__ = (
        UniqueConstraint("user_id", "achievement_definition_id", name="uq_user_achievement"),
    )
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    achievement_definition_id = Column(Integer, ForeignKey("achievement_definitions.id"), nullable=False)
    achieved_date = Column(DateTime, default=datetime.utcnow)
