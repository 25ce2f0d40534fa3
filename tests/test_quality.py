"""Tests for the quality assessor."""

from uuid import uuid4

import pytest

from macro_ledger.domain.ledger import DailySummary, QualityTier
from macro_ledger.domain.nutrition import Macro, MacroSet
from macro_ledger.services.quality import assess, attainment_pct, tier_for_score
from tests.conftest import TODAY, make_targets


def _summary(protein_g: float, carbs_g: float, fat_g: float) -> DailySummary:
    return DailySummary(
        user_id=uuid4(),
        day=TODAY,
        totals=MacroSet(protein_g=protein_g, carbs_g=carbs_g, fat_g=fat_g),
        meal_count=3,
        targets_met={macro: False for macro in Macro},
    )


def test_totals_equal_to_targets_are_excellent() -> None:
    assessment = assess(_summary(150, 250, 70), make_targets(150, 250, 70))

    assert assessment.score == 100
    assert assessment.tier == QualityTier.EXCELLENT
    assert assessment.shortfalls == []
    assert assessment.guidance == ["All daily targets reached"]


def test_overshoot_is_capped_at_full_attainment() -> None:
    assessment = assess(_summary(300, 250, 70), make_targets(150, 250, 70))

    assert assessment.attainment[Macro.PROTEIN] == 100
    assert assessment.score == 100


@pytest.mark.parametrize(
    ("score", "tier"),
    [
        (100, QualityTier.EXCELLENT),
        (90, QualityTier.EXCELLENT),
        (89.99, QualityTier.GOOD),
        (75, QualityTier.GOOD),
        (74.99, QualityTier.FAIR),
        (60, QualityTier.FAIR),
        (59.99, QualityTier.POOR),
        (0, QualityTier.POOR),
    ],
)
def test_tier_boundaries_belong_to_higher_tier(score: float, tier: QualityTier) -> None:
    assert tier_for_score(score) == tier


def test_shortfalls_are_ranked_largest_first() -> None:
    assessment = assess(_summary(75, 225, 56), make_targets(150, 250, 70))

    assert [shortfall.macro for shortfall in assessment.shortfalls] == [
        Macro.PROTEIN,
        Macro.CALORIES,
        Macro.FATS,
        Macro.CARBS,
    ]
    assert assessment.shortfalls[0].attainment_pct == pytest.approx(50)
    assert assessment.shortfalls[0].remaining == pytest.approx(75)
    assert assessment.guidance[0].startswith("Furthest below target: protein")


def test_score_is_unweighted_mean() -> None:
    assessment = assess(_summary(0, 0, 0), make_targets(150, 250, 70))

    assert assessment.score == 0
    assert assessment.tier == QualityTier.POOR


def test_attainment_with_non_positive_target_counts_as_met() -> None:
    assert attainment_pct(10, 0) == 100
