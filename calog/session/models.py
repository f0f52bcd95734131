"""Payloads as the backend sends them (camelCase on the wire)."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class _Wire(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class User(_Wire):
    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    email: str
    full_name: str | None = Field(default=None, alias="fullName")
    name: str | None = None  # Google display name
    avatar: str | None = None
    role: str = "free"

    @property
    def display_name(self) -> str:
        return self.full_name or self.name or self.email


class AuthResponse(_Wire):
    message: str = ""
    user: User
    access_token: str = Field(alias="accessToken")
    refresh_token: str | None = Field(default=None, alias="refreshToken")


class RefreshTokenResponse(_Wire):
    message: str = ""
    access_token: str = Field(alias="accessToken")
    refresh_token: str | None = Field(default=None, alias="refreshToken")


# ---------------------------------------------------------------------------
# Diary: food entries, meal logs, exercise logs, custom activities
# ---------------------------------------------------------------------------

class MealType(str, Enum):
    breakfast = "breakfast"
    lunch = "lunch"
    dinner = "dinner"
    snack = "snack"


class Nutrients(_Wire):
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    sugar: float = 0
    fat: float = 0
    saturated_fat: float = Field(default=0, alias="saturatedFat")
    fiber: float = 0
    cholesterol: float = 0
    sodium: float = 0


class FoodEntry(_Wire):
    """A logged food item. `id` is the client-side key the backend looks up by."""

    id: str | None = None
    source: Literal["scan", "manual"] = "manual"
    barcode: str | None = None
    data_source: Literal["OpenFoodFacts", "UserInput"] = Field(default="UserInput", alias="dataSource")
    food_name: str = Field(alias="foodName")
    brand: str | None = None
    categories: list[str] = Field(default_factory=list)
    labels: list[str] = Field(default_factory=list)
    ingredients: list[str] = Field(default_factory=list)
    allergens: list[str] = Field(default_factory=list)
    origin_country: str | None = Field(default=None, alias="originCountry")
    packaging: str | None = None
    quantity: float
    unit: str
    serving_size: str | None = Field(default=None, alias="servingSize")
    per_serving: bool = Field(default=True, alias="perServing")
    nutrients: Nutrients = Field(default_factory=Nutrients)
    meal_type: MealType = Field(default=MealType.snack, alias="mealType")
    timestamp: datetime | None = None
    image_url: str | None = Field(default=None, alias="imageUrl")
    notes: str | None = None
    is_favorite: bool = Field(default=False, alias="isFavorite")


class FoodPage(_Wire):
    foods: list[FoodEntry] = Field(default_factory=list)
    total_pages: int = Field(default=0, alias="totalPages")
    current_page: int = Field(default=1, alias="currentPage")
    total: int = 0


class MealEntry(_Wire):
    code: str | None = None
    name: str
    brand: str | None = None
    image_url: str | None = Field(default=None, alias="imageUrl")
    quantity_grams: float = Field(default=100, alias="quantityGrams")
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0
    fiber: float = 0
    timestamp: datetime | None = None


class MealBuckets(_Wire):
    breakfast: list[MealEntry] = Field(default_factory=list)
    lunch: list[MealEntry] = Field(default_factory=list)
    dinner: list[MealEntry] = Field(default_factory=list)
    snack: list[MealEntry] = Field(default_factory=list)

    def entries(self, meal_type: MealType) -> list[MealEntry]:
        return getattr(self, MealType(meal_type).value)

    @property
    def total_calories(self) -> float:
        return sum(entry.calories for meal in MealType for entry in self.entries(meal))


class DailyMealLog(_Wire):
    date: datetime
    meals: MealBuckets = Field(default_factory=MealBuckets)


class ExerciseEntry(_Wire):
    name: str
    duration_minutes: float = Field(default=30, alias="durationMinutes")
    calories: float = 0
    description: str | None = None
    timestamp: datetime | None = None


class DailyExerciseLog(_Wire):
    date: datetime
    exercises: list[ExerciseEntry] = Field(default_factory=list)

    @property
    def total_calories(self) -> float:
        return sum(entry.calories for entry in self.exercises)


class Activity(_Wire):
    """A user-defined exercise with its burn rate."""

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    name: str
    calories_per_30_min: float = Field(alias="caloriesPer30Min", ge=0)
    description: str | None = None
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
