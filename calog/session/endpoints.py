"""Typed wrappers over SessionClient, one method per backend endpoint."""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping

import httpx
from pydantic import BaseModel, ValidationError
from pydantic_core import to_jsonable_python

from calog.metabolic.models import ProfileSnapshot
from calog.session.client import SessionClient
from calog.session.errors import ProtocolError
from calog.session.models import (
    Activity,
    AuthResponse,
    DailyExerciseLog,
    DailyMealLog,
    ExerciseEntry,
    FoodEntry,
    FoodPage,
    MealEntry,
    MealType,
    RefreshTokenResponse,
    User,
)

# snapshot field -> backend profile field
PROFILE_WIRE_FIELDS: dict[str, str] = {
    "weight_kg": "weight",
    "height_cm": "height",
    "age_years": "age",
    "gender": "gender",
    "activity_level": "activityLevel",
    "goal": "goal",
    "target_weight_kg": "targetWeight",
    "weight_change_rate_kg_per_week": "weightChangeRate",
}


def profile_to_wire(snapshot: ProfileSnapshot) -> dict[str, Any]:
    data = snapshot.model_dump(mode="json")
    return {wire: data[field] for field, wire in PROFILE_WIRE_FIELDS.items() if data[field] is not None}


def profile_from_wire(data: dict[str, Any] | None) -> ProfileSnapshot | None:
    """Parse a backend profile. An empty profile (never onboarded) is None."""
    if not data:
        return None
    values = {field: data.get(wire) for field, wire in PROFILE_WIRE_FIELDS.items() if data.get(wire) is not None}
    try:
        return ProfileSnapshot.model_validate(values)
    except ValidationError as exc:
        raise ProtocolError(f"unexpected profile shape: {exc.error_count()} invalid field(s)") from exc


def _parse(model: type, payload: Any) -> Any:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ProtocolError(f"unexpected {model.__name__} shape") from exc


class AuthApi:
    def __init__(self, client: SessionClient) -> None:
        self._client = client

    async def signup(self, full_name: str, email: str, password: str) -> AuthResponse:
        payload = await self._client.post(
            "/auth/signup", {"fullName": full_name, "email": email, "password": password}
        )
        return _parse(AuthResponse, payload)

    async def login(self, email: str, password: str) -> AuthResponse:
        payload = await self._client.post("/auth/login", {"email": email, "password": password})
        return _parse(AuthResponse, payload)

    async def refresh_token(self, refresh_token: str) -> RefreshTokenResponse:
        payload = await self._client.post("/auth/refresh", {"refreshToken": refresh_token})
        return _parse(RefreshTokenResponse, payload)

    async def logout(self, refresh_token: str | None = None) -> None:
        body = {"refreshToken": refresh_token} if refresh_token else {}
        await self._client.post("/auth/logout", body)

    async def current_user(self) -> User:
        payload = await self._client.get("/auth/me")
        if isinstance(payload, dict) and "user" in payload:
            payload = payload["user"]
        return _parse(User, payload)


class ProfileApi:
    def __init__(self, client: SessionClient) -> None:
        self._client = client

    async def get_profile(self) -> ProfileSnapshot | None:
        payload = await self._client.get("/api/profile")
        return profile_from_wire(payload.get("profile") if isinstance(payload, dict) else None)

    async def update_profile(self, snapshot: ProfileSnapshot) -> ProfileSnapshot | None:
        payload = await self._client.put("/api/profile", {"profile": profile_to_wire(snapshot)})
        return profile_from_wire(payload.get("profile") if isinstance(payload, dict) else None)

    async def calculate_calorie_goal(self, snapshot: ProfileSnapshot) -> int:
        """Server-side goal. The backend clamps it, so it may differ from the local one."""
        payload = await self._client.post("/api/profile/calculate-calories", profile_to_wire(snapshot))
        try:
            return int(payload["dailyCalorieGoal"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ProtocolError("unexpected calorie goal shape") from exc


# ---------------------------------------------------------------------------
# Diary
# ---------------------------------------------------------------------------

def _wire_value(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    return to_jsonable_python(value)


def _wire_changes(model: type[BaseModel], changes: Mapping[str, Any]) -> dict[str, Any]:
    """Partial update body: python field names -> wire names, JSON-ready values."""
    fields = model.model_fields
    unknown = sorted(set(changes) - set(fields))
    if unknown:
        raise ValueError(f"unknown {model.__name__} field(s): {', '.join(unknown)}")
    return {
        fields[name].alias or name: _wire_value(value)
        for name, value in changes.items()
    }


def _query(path: str, **params: Any) -> str:
    present = {key: str(value) for key, value in params.items() if value is not None}
    return f"{path}?{httpx.QueryParams(present)}" if present else path


def _day_from_saved(payload: Any, key: str, model: type[BaseModel], day: date) -> Any:
    """Pick `day` out of the whole log document the backend echoes after a write."""
    days = payload.get(key) if isinstance(payload, dict) else None
    for entry in _parse_list(model, days or []):
        if entry.date.date() == day:
            return entry
    return None


def _parse_list(model: type, payload: Any) -> list[Any]:
    if not isinstance(payload, list):
        raise ProtocolError(f"expected a list of {model.__name__}")
    return [_parse(model, item) for item in payload]


class FoodApi:
    def __init__(self, client: SessionClient) -> None:
        self._client = client

    async def add_food_entry(self, entry: FoodEntry) -> FoodEntry:
        payload = await self._client.post(
            "/api/food", entry.model_dump(mode="json", by_alias=True, exclude_none=True)
        )
        return _parse(FoodEntry, payload)

    async def get_food_entries(
        self,
        *,
        page: int | None = None,
        limit: int | None = None,
        meal_type: MealType | None = None,
        day: date | None = None,
    ) -> FoodPage:
        path = _query(
            "/api/food",
            page=page,
            limit=limit,
            mealType=MealType(meal_type).value if meal_type else None,
            date=day.isoformat() if day else None,
        )
        return _parse(FoodPage, await self._client.get(path))

    async def update_food_entry(self, entry_id: str, **changes: Any) -> FoodEntry:
        payload = await self._client.put(f"/api/food/{entry_id}", _wire_changes(FoodEntry, changes))
        return _parse(FoodEntry, payload)

    async def delete_food_entry(self, entry_id: str) -> None:
        await self._client.delete(f"/api/food/{entry_id}")


class MealLogApi:
    """Per-day meal buckets. Entries are addressed by their index in a bucket."""

    def __init__(self, client: SessionClient) -> None:
        self._client = client

    async def add_meal_entry(self, day: date, meal_type: MealType, entry: MealEntry) -> DailyMealLog | None:
        payload = await self._client.post(
            "/api/meal-logs/add",
            {
                "date": day.isoformat(),
                "mealType": MealType(meal_type).value,
                "entry": entry.model_dump(mode="json", by_alias=True, exclude_none=True),
            },
        )
        return _day_from_saved(payload, "mealLogs", DailyMealLog, day)

    async def get_daily_meals(self, day: date) -> DailyMealLog | None:
        days = _parse_list(DailyMealLog, await self._client.get(_query("/api/meal-logs", date=day.isoformat())))
        return days[0] if days else None

    async def get_monthly_meals(self, month: int, year: int) -> list[DailyMealLog]:
        return _parse_list(DailyMealLog, await self._client.get(_query("/api/meal-logs", month=month, year=year)))

    async def update_meal_entry(
        self, day: date, meal_type: MealType, index: int, **changes: Any
    ) -> DailyMealLog | None:
        payload = await self._client.put(
            "/api/meal-logs/update",
            {
                "date": day.isoformat(),
                "mealType": MealType(meal_type).value,
                "index": index,
                "entry": _wire_changes(MealEntry, changes),
            },
        )
        return _day_from_saved(payload, "mealLogs", DailyMealLog, day)

    async def delete_meal_entry(self, day: date, meal_type: MealType, index: int) -> None:
        await self._client.delete(
            _query("/api/meal-logs/remove", date=day.isoformat(), mealType=MealType(meal_type).value, index=index)
        )


class ExerciseLogApi:
    def __init__(self, client: SessionClient) -> None:
        self._client = client

    async def add_exercise_entry(self, day: date, entry: ExerciseEntry) -> DailyExerciseLog | None:
        payload = await self._client.post(
            "/api/exercise-logs/add",
            {"date": day.isoformat(), "entry": entry.model_dump(mode="json", by_alias=True, exclude_none=True)},
        )
        return _day_from_saved(payload, "exerciseLogs", DailyExerciseLog, day)

    async def get_daily_exercises(self, day: date) -> DailyExerciseLog | None:
        days = _parse_list(
            DailyExerciseLog, await self._client.get(_query("/api/exercise-logs", date=day.isoformat()))
        )
        return days[0] if days else None

    async def update_exercise_entry(self, day: date, index: int, **changes: Any) -> DailyExerciseLog | None:
        payload = await self._client.put(
            "/api/exercise-logs/update",
            {"date": day.isoformat(), "index": index, "entry": _wire_changes(ExerciseEntry, changes)},
        )
        return _day_from_saved(payload, "exerciseLogs", DailyExerciseLog, day)

    async def delete_exercise_entry(self, day: date, index: int) -> None:
        await self._client.delete(_query("/api/exercise-logs/remove", date=day.isoformat(), index=index))


class ActivityApi:
    """The user's custom activities (name + kcal per 30 minutes)."""

    def __init__(self, client: SessionClient) -> None:
        self._client = client

    async def create_activity(self, name: str, calories_per_30_min: float, description: str | None = None) -> Activity:
        body: dict[str, Any] = {"name": name, "caloriesPer30Min": calories_per_30_min}
        if description is not None:
            body["description"] = description
        return _parse(Activity, await self._client.post("/api/activities", body))

    async def get_user_activities(self) -> list[Activity]:
        return _parse_list(Activity, await self._client.get("/api/activities"))

    async def update_activity(self, activity_id: str, **changes: Any) -> Activity:
        payload = await self._client.put(f"/api/activities/{activity_id}", _wire_changes(Activity, changes))
        return _parse(Activity, payload)

    async def delete_activity(self, activity_id: str) -> None:
        await self._client.delete(f"/api/activities/{activity_id}")
