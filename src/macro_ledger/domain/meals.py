"""Domain models for meal logging."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID

from macro_ledger.domain.ledger import DailySummary
from macro_ledger.domain.nutrition import MacroSet


class MealType(StrEnum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class Provenance(StrEnum):
    """Where a meal's macros came from."""

    AI = "ai"
    MANUAL = "manual"


@dataclass(frozen=True)
class MealSubmission:
    """A meal as submitted by the user, before macros are resolved."""

    meal_type: MealType
    day: date
    description: str | None = None
    manual_macros: MacroSet | None = None


@dataclass(frozen=True)
class AnalysisResult:
    """Macro estimate returned by the meal analysis collaborator."""

    macros: MacroSet
    ingredients: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ResolvedMeal:
    """Finalized macros for a submission, with advisory warnings."""

    macros: MacroSet
    provenance: Provenance
    ingredients: list[str]
    warnings: list[str]


@dataclass(frozen=True)
class MealEntry:
    """A logged meal counted toward a calendar day."""

    id: UUID
    user_id: UUID
    day: date
    meal_type: MealType
    description: str | None
    macros: MacroSet
    provenance: Provenance
    ingredients: list[str]
    created_at: datetime


@dataclass(frozen=True)
class LoggedMeal:
    """Outcome of logging a meal."""

    entry: MealEntry
    summary: DailySummary
    warnings: list[str]
