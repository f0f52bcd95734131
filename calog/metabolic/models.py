"""Profile and metrics contracts (Pydantic v2 models)."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Gender(str, Enum):
    male = "male"
    female = "female"


class ActivityLevel(str, Enum):
    sedentary = "sedentary"
    light = "light"
    moderate = "moderate"
    active = "active"
    very_active = "very_active"


class Goal(str, Enum):
    maintain = "maintain"
    lose = "lose"
    gain = "gain"


class BMIStatus(str, Enum):
    underweight = "underweight"
    normal = "normal"
    overweight = "overweight"
    obese = "obese"


class ProfileSnapshot(BaseModel):
    """Physical profile the calculator works from.

    Ranges are enforced here, at the boundary. The calculator functions
    themselves accept any numbers.
    """

    model_config = ConfigDict(frozen=True)

    weight_kg: float = Field(ge=30, le=300)
    height_cm: float = Field(ge=100, le=250)
    age_years: int = Field(ge=10, le=120)
    gender: Gender
    activity_level: ActivityLevel = ActivityLevel.sedentary
    goal: Goal = Goal.maintain
    target_weight_kg: float | None = Field(default=None, ge=30, le=300)
    weight_change_rate_kg_per_week: float | None = Field(default=None, ge=0.1, le=1.0)

    def merged(self, **changes: Any) -> ProfileSnapshot:
        """Return a validated copy with `changes` applied.

        Goal-only fields are dropped when the resulting goal is maintain.
        """
        data = self.model_dump()
        data.update(changes)
        merged = ProfileSnapshot.model_validate(data)
        if merged.goal is Goal.maintain:
            merged = merged.model_copy(
                update={"target_weight_kg": None, "weight_change_rate_kg_per_week": None}
            )
        return merged


class MetabolicProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    bmr: int
    tdee: int
    daily_calorie_goal: int

    @property
    def below_bmr(self) -> bool:
        """Goal intake is under the resting burn; the app shows a warning."""
        return self.daily_calorie_goal < self.bmr


class BodyComposition(BaseModel):
    model_config = ConfigDict(frozen=True)

    body_fat_percentage: float
    body_fat_mass_kg: float
    lean_body_mass_kg: float
    ffmi: float


class BMIReport(BaseModel):
    bmi: float
    bmi_status: BMIStatus


class MetricsReport(BaseModel):
    """Everything the profile screen shows, in one response."""

    bmr: int
    tdee: int
    daily_calorie_goal: int
    below_bmr: bool
    bmi: float
    bmi_status: BMIStatus
