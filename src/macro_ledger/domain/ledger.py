"""Domain models for daily totals and their quality assessment."""

from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from uuid import UUID

from macro_ledger.domain.nutrition import Macro, MacroSet


@dataclass(frozen=True)
class DailySummary:
    """Aggregate of a user's meals for one day."""

    user_id: UUID
    day: date
    totals: MacroSet
    meal_count: int
    targets_met: dict[Macro, bool]


class QualityTier(StrEnum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


@dataclass(frozen=True)
class MacroShortfall:
    """How far a macro is from its target."""

    macro: Macro
    attainment_pct: float
    remaining: float


@dataclass(frozen=True)
class QualityAssessment:
    """Attainment-based quality of a day."""

    score: float
    tier: QualityTier
    attainment: dict[Macro, float]
    shortfalls: list[MacroShortfall]
    guidance: list[str]
