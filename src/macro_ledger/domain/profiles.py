"""Domain models for body profiles and daily targets."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from macro_ledger.domain.nutrition import Macro, calories_from_macros


class Sex(StrEnum):
    MALE = "male"
    FEMALE = "female"


class ActivityLevel(StrEnum):
    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    ATHLETE = "athlete"


class Goal(StrEnum):
    BULK = "bulk"
    MAINTAIN = "maintain"
    CUT = "cut"


@dataclass(frozen=True)
class Profile:
    """Body metrics, activity and goal of a user."""

    weight_kg: float
    height_cm: float
    age: int
    sex: Sex
    activity_level: ActivityLevel
    goal: Goal


@dataclass(frozen=True)
class TargetSet:
    """Current daily targets; calories always equal the macro energy sum."""

    protein_g: float
    carbs_g: float
    fat_g: float
    calculated_at: datetime

    @property
    def calories(self) -> float:
        return calories_from_macros(self.protein_g, self.carbs_g, self.fat_g)

    def value_of(self, macro: Macro) -> float:
        """Return the target for a macro."""
        if macro is Macro.CALORIES:
            return self.calories
        return {
            Macro.PROTEIN: self.protein_g,
            Macro.CARBS: self.carbs_g,
            Macro.FATS: self.fat_g,
        }[macro]


@dataclass(frozen=True)
class TargetCalculation:
    """A computed target set with its intermediate values and advisories."""

    targets: TargetSet
    bmr: float
    tdee: float
    goal_calories: float
    warnings: list[str] = field(default_factory=list)
