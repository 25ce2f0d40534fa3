"""Resolution of a meal submission into finalized macros."""

import math

from macro_ledger.domain.meals import (
    AnalysisResult,
    MealSubmission,
    Provenance,
    ResolvedMeal,
)
from macro_ledger.domain.nutrition import MacroSet
from macro_ledger.errors import IncompleteSubmissionError, ValidationError

MEAL_PROTEIN_LIMIT_G = 80.0
MEAL_CARBS_LIMIT_G = 150.0
MEAL_FAT_LIMIT_G = 80.0


def resolve(
    submission: MealSubmission, analysis: AnalysisResult | None = None
) -> ResolvedMeal:
    """Pick the macro source for a meal and validate it.

    An analysis result wins over manual macros. Values above the per-meal
    limits are kept and flagged with a warning.

    Raises:
        IncompleteSubmissionError: neither analysis nor manual macros exist.
        ValidationError: a macro is negative or not a finite number.
    """
    if analysis is not None:
        macros = analysis.macros
        provenance = Provenance.AI
        ingredients = list(analysis.ingredients)
    elif submission.manual_macros is not None:
        macros = submission.manual_macros
        provenance = Provenance.MANUAL
        ingredients = []
    else:
        raise IncompleteSubmissionError

    validated = MacroSet(
        protein_g=_validate_grams(macros.protein_g, "protein_g"),
        carbs_g=_validate_grams(macros.carbs_g, "carbs_g"),
        fat_g=_validate_grams(macros.fat_g, "fat_g"),
    )
    return ResolvedMeal(
        macros=validated,
        provenance=provenance,
        ingredients=ingredients,
        warnings=_size_warnings(validated),
    )


def _validate_grams(value: object, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValidationError(f"{field} must be a number", field=field)
    if not math.isfinite(value):
        raise ValidationError(f"{field} must be a finite number", field=field)
    if value < 0:
        raise ValidationError(f"{field} must not be negative", field=field)
    return float(value)


def _size_warnings(macros: MacroSet) -> list[str]:
    warnings = []
    for name, value, limit in (
        ("protein", macros.protein_g, MEAL_PROTEIN_LIMIT_G),
        ("carbs", macros.carbs_g, MEAL_CARBS_LIMIT_G),
        ("fats", macros.fat_g, MEAL_FAT_LIMIT_G),
    ):
        if value > limit:
            warnings.append(
                f"Unusually large {name} for one meal: {value:g} g "
                f"(typical maximum {limit:g} g)"
            )
    return warnings
