"""Macronutrient domain models."""

from dataclasses import dataclass
from enum import StrEnum

KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9


class Macro(StrEnum):
    """Tracked quantities of a day, calories included."""

    PROTEIN = "protein"
    CARBS = "carbs"
    FATS = "fats"
    CALORIES = "calories"


def calories_from_macros(protein_g: float, carbs_g: float, fat_g: float) -> float:
    """Return energy in kcal for the given gram amounts."""
    return (
        protein_g * KCAL_PER_G_PROTEIN
        + carbs_g * KCAL_PER_G_CARBS
        + fat_g * KCAL_PER_G_FAT
    )


@dataclass(frozen=True)
class MacroSet:
    """Protein, carbs and fats in grams; calories are always derived."""

    protein_g: float
    carbs_g: float
    fat_g: float

    @property
    def calories(self) -> float:
        return calories_from_macros(self.protein_g, self.carbs_g, self.fat_g)

    def value_of(self, macro: Macro) -> float:
        """Return the amount tracked for a macro."""
        if macro is Macro.CALORIES:
            return self.calories
        return {
            Macro.PROTEIN: self.protein_g,
            Macro.CARBS: self.carbs_g,
            Macro.FATS: self.fat_g,
        }[macro]


ZERO_MACROS = MacroSet(protein_g=0.0, carbs_g=0.0, fat_g=0.0)
