"""Dashboard view combining profile, targets and the day's ledger."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from macro_ledger.domain.ledger import DailySummary, QualityAssessment
from macro_ledger.domain.meals import MealEntry
from macro_ledger.domain.profiles import Profile, TargetSet
from macro_ledger.services.ledger import DailyLedgerService
from macro_ledger.services.profiles import ProfileService
from macro_ledger.services.quality import assess


@dataclass
class Dashboard:
    """Everything shown for a user's day."""

    profile: Profile
    targets: TargetSet
    summary: DailySummary
    meals: list[MealEntry]
    quality: QualityAssessment


@dataclass
class DashboardService:
    """Service assembling a user's daily dashboard."""

    profile_service: ProfileService
    ledger: DailyLedgerService

    def get_dashboard(self, user_id: UUID, day: date) -> Dashboard:
        """Return the dashboard for a day.

        Raises:
            NotFoundError: the user has no profile or targets yet.
        """
        profile = self.profile_service.get_profile(user_id)
        targets = self.profile_service.get_targets(user_id)
        summary = self.ledger.get_summary(user_id, day)
        return Dashboard(
            profile=profile,
            targets=targets,
            summary=summary,
            meals=self.ledger.list_meals(user_id, day),
            quality=assess(summary, targets),
        )
