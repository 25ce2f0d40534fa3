"""Meal logging service."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID, uuid4

from macro_ledger.domain.ledger import DailySummary
from macro_ledger.domain.meals import (
    AnalysisResult,
    LoggedMeal,
    MealEntry,
    MealSubmission,
    ResolvedMeal,
)
from macro_ledger.services.analysis import AnalysisService
from macro_ledger.services.ledger import DailyLedgerService
from macro_ledger.services.resolver import resolve

_logger = logging.getLogger(__name__)


@dataclass
class MealLogService:
    """Service that resolves meal macros and records them in the ledger."""

    analysis_service: AnalysisService
    ledger: DailyLedgerService

    async def preview(self, submission: MealSubmission) -> ResolvedMeal:
        """Resolve a submission's macros without persisting anything."""
        analysis = await self._analyze(submission)
        resolved = resolve(submission, analysis)
        if _description(submission) and analysis is None:
            return ResolvedMeal(
                macros=resolved.macros,
                provenance=resolved.provenance,
                ingredients=resolved.ingredients,
                warnings=[
                    "Meal analysis unavailable; manual macros were used",
                    *resolved.warnings,
                ],
            )
        return resolved

    async def log_meal(self, user_id: UUID, submission: MealSubmission) -> LoggedMeal:
        """Resolve a submission, append it to its day and return the summary."""
        resolved = await self.preview(submission)
        entry = MealEntry(
            id=uuid4(),
            user_id=user_id,
            day=submission.day,
            meal_type=submission.meal_type,
            description=_description(submission),
            macros=resolved.macros,
            provenance=resolved.provenance,
            ingredients=resolved.ingredients,
            created_at=datetime.now(tz=UTC),
        )
        summary = self.ledger.append_meal(user_id, entry)
        _logger.info(
            "Meal logged: user_id=%s day=%s provenance=%s",
            user_id,
            entry.day.isoformat(),
            entry.provenance.value,
        )
        return LoggedMeal(entry=entry, summary=summary, warnings=resolved.warnings)

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> DailySummary:
        """Remove a user's meal and return the refreshed day summary."""
        return self.ledger.remove_meal(user_id, meal_id)

    async def _analyze(self, submission: MealSubmission) -> AnalysisResult | None:
        description = _description(submission)
        if description is None:
            return None
        return await self.analysis_service.analyze(description)


def _description(submission: MealSubmission) -> str | None:
    if submission.description is None:
        return None
    cleaned = submission.description.strip()
    return cleaned or None
