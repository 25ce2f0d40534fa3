"""Formulas turning body metrics into daily macro targets."""

import logging
import math
from collections.abc import Mapping
from dataclasses import replace
from datetime import UTC, datetime
from enum import StrEnum
from types import MappingProxyType

from macro_ledger.domain.nutrition import (
    KCAL_PER_G_CARBS,
    KCAL_PER_G_FAT,
    KCAL_PER_G_PROTEIN,
    calories_from_macros,
)
from macro_ledger.domain.profiles import (
    ActivityLevel,
    Goal,
    Profile,
    Sex,
    TargetCalculation,
    TargetSet,
)
from macro_ledger.errors import ValidationError

WEIGHT_RANGE_KG = (40.0, 200.0)
HEIGHT_RANGE_CM = (140.0, 220.0)
AGE_RANGE_YEARS = (18, 80)

PROTEIN_BOUNDS_G = (80.0, 400.0)
CARBS_BOUNDS_G = (80.0, 800.0)
FAT_BOUNDS_G = (30.0, 200.0)
CALORIE_BOUNDS_KCAL = (1200.0, 6000.0)

FAT_FLOOR_G_PER_KG = 0.8

ACTIVITY_MULTIPLIERS: Mapping[ActivityLevel, float] = MappingProxyType(
    {
        ActivityLevel.SEDENTARY: 1.20,
        ActivityLevel.LIGHT: 1.375,
        ActivityLevel.MODERATE: 1.55,
        ActivityLevel.ACTIVE: 1.725,
        ActivityLevel.ATHLETE: 1.90,
    }
)

GOAL_CALORIE_FACTORS: Mapping[Goal, float] = MappingProxyType(
    {Goal.BULK: 1.15, Goal.MAINTAIN: 1.0, Goal.CUT: 0.85}
)

PROTEIN_G_PER_KG: Mapping[Goal, float] = MappingProxyType(
    {Goal.BULK: 2.2, Goal.MAINTAIN: 2.0, Goal.CUT: 2.4}
)

PROTEIN_ACTIVITY_BONUS_G_PER_KG: Mapping[ActivityLevel, float] = MappingProxyType(
    {
        ActivityLevel.SEDENTARY: 0.0,
        ActivityLevel.LIGHT: 0.1,
        ActivityLevel.MODERATE: 0.2,
        ActivityLevel.ACTIVE: 0.3,
        ActivityLevel.ATHLETE: 0.4,
    }
)

CARBS_G_PER_KG: Mapping[ActivityLevel, float] = MappingProxyType(
    {
        ActivityLevel.SEDENTARY: 2.0,
        ActivityLevel.LIGHT: 3.0,
        ActivityLevel.MODERATE: 4.0,
        ActivityLevel.ACTIVE: 6.0,
        ActivityLevel.ATHLETE: 8.0,
    }
)

CARBS_GOAL_MODIFIERS: Mapping[Goal, float] = MappingProxyType(
    {Goal.BULK: 1.2, Goal.MAINTAIN: 1.0, Goal.CUT: 0.8}
)

SEX_OFFSETS: Mapping[Sex, float] = MappingProxyType({Sex.MALE: 5.0, Sex.FEMALE: -161.0})

_logger = logging.getLogger(__name__)


def compute_bmr(weight_kg: float, height_cm: float, age: int, sex: Sex) -> float:
    """Return basal metabolic rate in kcal/day (Mifflin-St Jeor).

    Raises:
        ValidationError: if a body metric falls outside its accepted range.
    """
    _require_range(weight_kg, WEIGHT_RANGE_KG, "weight_kg")
    _require_range(height_cm, HEIGHT_RANGE_CM, "height_cm")
    _require_range(age, AGE_RANGE_YEARS, "age")
    offset = SEX_OFFSETS[_as_enum(Sex, sex, "sex")]
    return 10 * weight_kg + 6.25 * height_cm - 5 * age + offset


def compute_tdee(bmr: float, activity_level: ActivityLevel) -> float:
    """Return total daily energy expenditure in kcal/day."""
    return bmr * ACTIVITY_MULTIPLIERS[
        _as_enum(ActivityLevel, activity_level, "activity_level")
    ]


def normalize_profile(profile: Profile) -> Profile:
    """Return the profile with its categorical fields coerced to their enums."""
    return replace(
        profile,
        sex=_as_enum(Sex, profile.sex, "sex"),
        activity_level=_as_enum(
            ActivityLevel, profile.activity_level, "activity_level"
        ),
        goal=_as_enum(Goal, profile.goal, "goal"),
    )


def compute_targets(
    profile: Profile, calculated_at: datetime | None = None
) -> TargetCalculation:
    """Compute the daily target set for a profile.

    Gram targets are rounded to two decimals and calories are always derived
    from them, so ``calories == protein * 4 + carbs * 4 + fats * 9`` holds
    exactly. When the fat floor kicks in, the derived calories win over the
    goal-adjusted TDEE. Out-of-bounds targets are clamped with a warning.
    """
    bmr = compute_bmr(profile.weight_kg, profile.height_cm, profile.age, profile.sex)
    tdee = compute_tdee(bmr, profile.activity_level)
    goal = _as_enum(Goal, profile.goal, "goal")
    activity = _as_enum(ActivityLevel, profile.activity_level, "activity_level")
    weight = profile.weight_kg
    goal_calories = tdee * GOAL_CALORIE_FACTORS[goal]

    protein = (
        weight * PROTEIN_G_PER_KG[goal]
        + weight * PROTEIN_ACTIVITY_BONUS_G_PER_KG[activity]
    )
    carbs = weight * CARBS_G_PER_KG[activity] * CARBS_GOAL_MODIFIERS[goal]
    remaining = goal_calories - protein * KCAL_PER_G_PROTEIN - carbs * KCAL_PER_G_CARBS
    fat_floor = weight * FAT_FLOOR_G_PER_KG
    fats = max(remaining / KCAL_PER_G_FAT, fat_floor)
    if fats == fat_floor:
        _logger.info(
            "Fat floor applied: weight=%s remaining_kcal=%.1f", weight, remaining
        )

    warnings: list[str] = []
    protein = _clamp(round(protein, 2), PROTEIN_BOUNDS_G, "protein", warnings)
    carbs = _clamp(round(carbs, 2), CARBS_BOUNDS_G, "carbs", warnings)
    fats = _clamp(round(fats, 2), FAT_BOUNDS_G, "fats", warnings)
    fats = _fit_calorie_bounds(protein, carbs, fats, warnings)

    targets = TargetSet(
        protein_g=protein,
        carbs_g=carbs,
        fat_g=fats,
        calculated_at=calculated_at or datetime.now(tz=UTC),
    )
    warnings.extend(_advisories(profile, targets, bmr, tdee))
    return TargetCalculation(
        targets=targets,
        bmr=bmr,
        tdee=tdee,
        goal_calories=goal_calories,
        warnings=warnings,
    )


def _require_range(value: float, bounds: tuple[float, float], field: str) -> None:
    low, high = bounds
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValidationError(f"{field} must be a number", field=field)
    if math.isnan(value) or not low <= value <= high:
        raise ValidationError(
            f"{field} must be between {low:g} and {high:g}, got {value}",
            field=field,
        )


def _as_enum(enum_type: type[StrEnum], value: object, field: str) -> StrEnum:
    try:
        return enum_type(value)
    except ValueError as exc:
        choices = ", ".join(member.value for member in enum_type)
        raise ValidationError(
            f"{field} must be one of: {choices}", field=field
        ) from exc


def _clamp(
    value: float, bounds: tuple[float, float], name: str, warnings: list[str]
) -> float:
    low, high = bounds
    clamped = min(max(value, low), high)
    if clamped != value:
        warnings.append(
            f"Daily {name} target {value:g} g is outside {low:g}-{high:g} g; "
            f"clamped to {clamped:g} g"
        )
    return clamped


def _fit_calorie_bounds(
    protein: float, carbs: float, fats: float, warnings: list[str]
) -> float:
    """Move fats so the derived calories land inside the calorie bounds."""
    calories = calories_from_macros(protein, carbs, fats)
    low, high = CALORIE_BOUNDS_KCAL
    if low <= calories <= high:
        return fats
    bound = low if calories < low else high
    lean_calories = protein * KCAL_PER_G_PROTEIN + carbs * KCAL_PER_G_CARBS
    fat_for_bound = (bound - lean_calories) / KCAL_PER_G_FAT
    if bound == low:
        fat_for_bound = math.ceil(fat_for_bound * 100) / 100
    else:
        fat_for_bound = math.floor(fat_for_bound * 100) / 100
    warnings.append(
        f"Daily calories {calories:.0f} kcal are outside {low:g}-{high:g} kcal; "
        f"fats adjusted toward {bound:g} kcal"
    )
    return _clamp(fat_for_bound, FAT_BOUNDS_G, "fats", warnings)


def _advisories(
    profile: Profile, targets: TargetSet, bmr: float, tdee: float
) -> list[str]:
    weight = profile.weight_kg
    warnings: list[str] = []
    if targets.protein_g / weight > 3.0:  # noqa: PLR2004
        warnings.append("Protein target is above 3.0 g per kg of body weight")
    if targets.carbs_g < 100 and profile.goal != Goal.CUT:  # noqa: PLR2004
        warnings.append("Carbs target is below 100 g on a non-cut goal")
    if targets.fat_g / weight < 0.6:  # noqa: PLR2004
        warnings.append("Fat target is below 0.6 g per kg of body weight")
    if targets.calories < bmr * 0.8:
        warnings.append("Calorie target is below 80% of BMR")
    if targets.calories > tdee * 1.3:
        warnings.append("Calorie target is above 130% of TDEE")
    return warnings
