"""Quality assessment of a day's target attainment."""

from macro_ledger.domain.ledger import (
    DailySummary,
    MacroShortfall,
    QualityAssessment,
    QualityTier,
)
from macro_ledger.domain.nutrition import Macro
from macro_ledger.domain.profiles import TargetSet

# Lowest score of each tier, best first.
TIER_FLOORS: tuple[tuple[QualityTier, float], ...] = (
    (QualityTier.EXCELLENT, 90.0),
    (QualityTier.GOOD, 75.0),
    (QualityTier.FAIR, 60.0),
    (QualityTier.POOR, 0.0),
)

_UNITS = {
    Macro.PROTEIN: "g",
    Macro.CARBS: "g",
    Macro.FATS: "g",
    Macro.CALORIES: "kcal",
}


def attainment_pct(total: float, target: float) -> float:
    """Return logged/target as a percentage capped at 100."""
    if target <= 0:
        return 100.0
    return min(total / target, 1.0) * 100


def tier_for_score(score: float) -> QualityTier:
    for tier, floor in TIER_FLOORS:
        if score >= floor:
            return tier
    return QualityTier.POOR


def assess(summary: DailySummary, targets: TargetSet) -> QualityAssessment:
    """Score a day against targets and rank what is still missing."""
    attainment = {
        macro: attainment_pct(
            summary.totals.value_of(macro), targets.value_of(macro)
        )
        for macro in Macro
    }
    score = sum(attainment.values()) / len(attainment)
    shortfalls = sorted(
        (
            MacroShortfall(
                macro=macro,
                attainment_pct=pct,
                remaining=targets.value_of(macro) - summary.totals.value_of(macro),
            )
            for macro, pct in attainment.items()
            if pct < 100.0  # noqa: PLR2004
        ),
        key=lambda shortfall: shortfall.attainment_pct,
    )
    return QualityAssessment(
        score=score,
        tier=tier_for_score(score),
        attainment=attainment,
        shortfalls=shortfalls,
        guidance=_guidance(shortfalls),
    )


def _guidance(shortfalls: list[MacroShortfall]) -> list[str]:
    if not shortfalls:
        return ["All daily targets reached"]
    lines = []
    for index, shortfall in enumerate(shortfalls):
        prefix = "Furthest below target" if index == 0 else "Below target"
        lines.append(
            f"{prefix}: {shortfall.macro.value} at {shortfall.attainment_pct:.0f}% "
            f"({shortfall.remaining:.0f} {_UNITS[shortfall.macro]} to go)"
        )
    return lines
