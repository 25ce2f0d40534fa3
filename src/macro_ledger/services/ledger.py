"""Daily ledger of meal entries and their derived summaries."""

import logging
import math
from dataclasses import dataclass, replace
from datetime import date
from typing import Protocol
from uuid import UUID

from macro_ledger.domain.ledger import DailySummary
from macro_ledger.domain.meals import MealEntry
from macro_ledger.domain.nutrition import Macro, MacroSet
from macro_ledger.domain.profiles import TargetSet
from macro_ledger.errors import NotFoundError
from macro_ledger.services.profiles import TargetRepository

_logger = logging.getLogger(__name__)


class MealRepository(Protocol):
    """Persistence interface for meal entries and daily summaries."""

    def list_meals(self, user_id: UUID, start: date, end: date) -> list[MealEntry]:
        """Return a user's meals for days in [start, end]."""

    def get_meal(self, meal_id: UUID) -> MealEntry | None:
        """Return a meal by id regardless of owner."""

    def put_meal(self, user_id: UUID, meal: MealEntry) -> None:
        """Insert a meal entry."""

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> None:
        """Delete a user's meal entry."""

    def get_summary(self, user_id: UUID, day: date) -> DailySummary | None:
        """Return the stored summary for a day, if materialized."""

    def put_summary(self, user_id: UUID, day: date, summary: DailySummary) -> None:
        """Insert or replace the summary for a day."""


@dataclass
class DailyLedgerService:
    """Keeps each (user, day) summary consistent with its meal entries.

    Summaries are always rebuilt from the full entry set and the user's
    current targets, so repeated or reordered recomputations converge.
    """

    meals: MealRepository
    targets: TargetRepository

    def append_meal(self, user_id: UUID, meal: MealEntry) -> DailySummary:
        """Store a meal and return the refreshed summary for its day."""
        self.meals.put_meal(user_id, meal)
        return self.recompute(user_id, meal.day)

    def remove_meal(self, user_id: UUID, meal_id: UUID) -> DailySummary:
        """Delete a user's meal and return the refreshed summary for its day.

        Raises:
            NotFoundError: the meal does not exist or belongs to someone else.
        """
        meal = self.meals.get_meal(meal_id)
        if meal is None or meal.user_id != user_id:
            raise NotFoundError("Meal", meal_id)
        self.meals.delete_meal(user_id, meal_id)
        return self.recompute(user_id, meal.day)

    def list_meals(self, user_id: UUID, day: date) -> list[MealEntry]:
        """Return a day's meals in logging order."""
        return _ordered(self.meals.list_meals(user_id, day, day))

    def get_summary(self, user_id: UUID, day: date) -> DailySummary:
        """Return the day's summary measured against the current targets.

        A stored summary is reused and only its target flags are re-evaluated;
        a day without one is materialized from its entries.
        """
        stored = self.meals.get_summary(user_id, day)
        if stored is None:
            return self.recompute(user_id, day)
        targets = self.targets.get_targets(user_id)
        return replace(stored, targets_met=_targets_met(stored.totals, targets))

    def recompute(self, user_id: UUID, day: date) -> DailySummary:
        """Rebuild and store the summary for a day from its entries."""
        entries = self.meals.list_meals(user_id, day, day)
        targets = self.targets.get_targets(user_id)
        summary = build_summary(user_id, day, entries, targets)
        self.meals.put_summary(user_id, day, summary)
        _logger.debug(
            "Recomputed summary: user_id=%s day=%s meals=%s",
            user_id,
            day.isoformat(),
            summary.meal_count,
        )
        return summary


def build_summary(
    user_id: UUID,
    day: date,
    entries: list[MealEntry],
    targets: TargetSet | None,
) -> DailySummary:
    """Aggregate entries for a day and compare them with the targets.

    Totals use ``math.fsum`` so the result does not depend on entry order.
    Without targets no macro counts as met.
    """
    day_entries = [entry for entry in entries if entry.day == day]
    totals = MacroSet(
        protein_g=math.fsum(entry.macros.protein_g for entry in day_entries),
        carbs_g=math.fsum(entry.macros.carbs_g for entry in day_entries),
        fat_g=math.fsum(entry.macros.fat_g for entry in day_entries),
    )
    return DailySummary(
        user_id=user_id,
        day=day,
        totals=totals,
        meal_count=len(day_entries),
        targets_met=_targets_met(totals, targets),
    )


def _targets_met(totals: MacroSet, targets: TargetSet | None) -> dict[Macro, bool]:
    return {
        macro: targets is not None
        and totals.value_of(macro) >= targets.value_of(macro)
        for macro in Macro
    }


def _ordered(entries: list[MealEntry]) -> list[MealEntry]:
    return sorted(entries, key=lambda entry: (entry.created_at, str(entry.id)))
