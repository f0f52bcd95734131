"""Pure stateless metabolic functions. Math only, never raises.

Inputs are assumed validated by the caller (see ProfileSnapshot). Bad
numbers propagate as nan/inf instead of raising.
"""

from __future__ import annotations

import math

from calog.metabolic.models import (
    ActivityLevel,
    BMIStatus,
    BodyComposition,
    Gender,
    Goal,
    MetabolicProfile,
    ProfileSnapshot,
)

ACTIVITY_MULTIPLIERS: dict[str, float] = {
    ActivityLevel.sedentary.value: 1.2,
    ActivityLevel.light.value: 1.375,
    ActivityLevel.moderate.value: 1.55,
    ActivityLevel.active.value: 1.725,
    ActivityLevel.very_active.value: 1.9,
}
DEFAULT_ACTIVITY_MULTIPLIER = 1.2

# Flat daily offset for lose/gain (~0.5 kg/week). Not scaled by the chosen rate.
CALORIE_ADJUSTMENT_KCAL = 550


def _value(member: object) -> object:
    return member.value if isinstance(member, (Gender, ActivityLevel, Goal)) else member


def _round_half_up(value: float, digits: int = 0) -> float:
    """Round .5 away from -inf like the mobile client did; nan/inf pass through."""
    if not math.isfinite(value):
        return value
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


def _to_int(value: float) -> int:
    rounded = _round_half_up(value)
    return int(rounded) if math.isfinite(rounded) else rounded  # type: ignore[return-value]


# ---------------------------------------------------------------------------
# BMR / TDEE / goal
# ---------------------------------------------------------------------------

def compute_bmr(weight_kg: float, height_cm: float, age_years: float, gender: Gender | str) -> int:
    """Mifflin-St Jeor BMR in kcal/day, rounded to the nearest integer."""
    base = 10.0 * weight_kg + 6.25 * height_cm - 5.0 * age_years
    if _value(gender) == Gender.male.value:
        return _to_int(base + 5.0)
    return _to_int(base - 161.0)


def compute_tdee(bmr: float, activity_level: ActivityLevel | str | None) -> int:
    """BMR × activity multiplier. Unknown or missing level counts as sedentary."""
    multiplier = ACTIVITY_MULTIPLIERS.get(_value(activity_level), DEFAULT_ACTIVITY_MULTIPLIER)  # type: ignore[arg-type]
    return _to_int(bmr * multiplier)


def compute_daily_calorie_goal(tdee: int, goal: Goal | str | None) -> int:
    """TDEE shifted by the fixed lose/gain offset. Anything else maintains."""
    goal_value = _value(goal)
    if goal_value == Goal.lose.value:
        return tdee - CALORIE_ADJUSTMENT_KCAL
    if goal_value == Goal.gain.value:
        return tdee + CALORIE_ADJUSTMENT_KCAL
    return tdee


def derive_metabolic_profile(snapshot: ProfileSnapshot) -> MetabolicProfile:
    bmr = compute_bmr(snapshot.weight_kg, snapshot.height_cm, snapshot.age_years, snapshot.gender)
    tdee = compute_tdee(bmr, snapshot.activity_level)
    return MetabolicProfile(
        bmr=bmr,
        tdee=tdee,
        daily_calorie_goal=compute_daily_calorie_goal(tdee, snapshot.goal),
    )


# ---------------------------------------------------------------------------
# BMI
# ---------------------------------------------------------------------------

def compute_bmi(weight_kg: float, height_cm: float) -> float:
    """weight / height(m)², one decimal. Zero height gives inf (nan for zero weight)."""
    height_m = height_cm / 100.0
    if height_m == 0.0:
        if weight_kg == 0.0 or math.isnan(weight_kg):
            return math.nan
        return math.copysign(math.inf, weight_kg)
    return _round_half_up(weight_kg / (height_m * height_m), 1)


def classify_bmi(bmi: float) -> BMIStatus:
    """Half-open WHO bands: 18.5 is normal, 25 overweight, 30 obese."""
    if bmi < 18.5:
        return BMIStatus.underweight
    if bmi < 25.0:
        return BMIStatus.normal
    if bmi < 30.0:
        return BMIStatus.overweight
    return BMIStatus.obese


# ---------------------------------------------------------------------------
# Body composition (US Navy method)
# ---------------------------------------------------------------------------

def compute_body_composition(
    weight_kg: float,
    height_cm: float,
    gender: Gender | str,
    neck_cm: float | None,
    waist_cm: float | None,
    hip_cm: float | None = None,
) -> BodyComposition | None:
    """Navy-method body fat on centimetre tape measurements.

    Returns None when a measurement the formula needs is missing (hip is
    required for women) or the log argument is not positive. Body fat is
    clamped to 3–50 %.
    """
    female = _value(gender) != Gender.male.value
    if not neck_cm or not waist_cm or (female and not hip_cm):
        return None

    if female:
        span = waist_cm + hip_cm - neck_cm  # type: ignore[operator]
    else:
        span = waist_cm - neck_cm
    if span <= 0 or height_cm <= 0:
        return None

    if female:
        body_fat = 163.205 * math.log10(span) - 97.684 * math.log10(height_cm) - 78.387
    else:
        body_fat = 86.01 * math.log10(span) - 70.041 * math.log10(height_cm) + 36.76
    body_fat = max(3.0, min(50.0, body_fat))

    fat_mass = body_fat / 100.0 * weight_kg
    lean_mass = weight_kg - fat_mass
    ffmi = lean_mass / (height_cm / 100.0) ** 2

    return BodyComposition(
        body_fat_percentage=_round_half_up(body_fat, 1),
        body_fat_mass_kg=_round_half_up(fat_mass, 1),
        lean_body_mass_kg=_round_half_up(lean_mass, 1),
        ffmi=_round_half_up(ffmi, 1),
    )
