"""Metrics HTTP router: the calculator over the wire.

Responses use the {success, data} envelope the mobile client expects.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from calog.auth import verify_api_key
from calog.metabolic import calculator
from calog.metabolic.models import BMIReport, MetricsReport, ProfileSnapshot

router = APIRouter(prefix="/metrics", tags=["metrics"])


def _ok(data: dict) -> dict:
    return {"success": True, "data": data}


@router.post("/profile")
async def profile_metrics(
    snapshot: ProfileSnapshot,
    _: str = Depends(verify_api_key),
) -> dict:
    derived = calculator.derive_metabolic_profile(snapshot)
    bmi = calculator.compute_bmi(snapshot.weight_kg, snapshot.height_cm)
    report = MetricsReport(
        bmr=derived.bmr,
        tdee=derived.tdee,
        daily_calorie_goal=derived.daily_calorie_goal,
        below_bmr=derived.below_bmr,
        bmi=bmi,
        bmi_status=calculator.classify_bmi(bmi),
    )
    return _ok(report.model_dump(mode="json"))


@router.post("/calorie-goal")
async def calorie_goal(
    snapshot: ProfileSnapshot,
    _: str = Depends(verify_api_key),
) -> dict:
    derived = calculator.derive_metabolic_profile(snapshot)
    return _ok({"daily_calorie_goal": derived.daily_calorie_goal})


@router.get("/bmi")
async def bmi(
    _: str = Depends(verify_api_key),
    weight_kg: float = Query(..., ge=30, le=300),
    height_cm: float = Query(..., ge=100, le=250),
) -> dict:
    value = calculator.compute_bmi(weight_kg, height_cm)
    report = BMIReport(bmi=value, bmi_status=calculator.classify_bmi(value))
    return _ok(report.model_dump(mode="json"))
