"""Pydantic models for API request payloads."""

from datetime import date

from pydantic import BaseModel

from macro_ledger.domain.meals import MealSubmission, MealType
from macro_ledger.domain.nutrition import MacroSet
from macro_ledger.domain.profiles import ActivityLevel, Goal, Profile, Sex


class ProfilePayload(BaseModel):
    """Body metrics submitted on a profile update."""

    weight_kg: float
    height_cm: float
    age: int
    sex: Sex
    activity_level: ActivityLevel
    goal: Goal

    def to_profile(self) -> Profile:
        return Profile(
            weight_kg=self.weight_kg,
            height_cm=self.height_cm,
            age=self.age,
            sex=self.sex,
            activity_level=self.activity_level,
            goal=self.goal,
        )


class MacroPayload(BaseModel):
    """Manually entered macros; calories are never accepted."""

    protein_g: float
    carbs_g: float
    fat_g: float


class MealPayload(BaseModel):
    """Meal submission payload."""

    meal_type: MealType
    day: date
    description: str | None = None
    macros: MacroPayload | None = None

    def to_submission(self) -> MealSubmission:
        manual = None
        if self.macros is not None:
            manual = MacroSet(
                protein_g=self.macros.protein_g,
                carbs_g=self.macros.carbs_g,
                fat_g=self.macros.fat_g,
            )
        return MealSubmission(
            meal_type=self.meal_type,
            day=self.day,
            description=self.description,
            manual_macros=manual,
        )
