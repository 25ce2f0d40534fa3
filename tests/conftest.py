"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

import pytest

from macro_ledger.config import Settings
from macro_ledger.containers import AppContainer
from macro_ledger.domain.ledger import DailySummary
from macro_ledger.domain.meals import MealEntry, MealType, Provenance
from macro_ledger.domain.nutrition import MacroSet
from macro_ledger.domain.profiles import (
    ActivityLevel,
    Goal,
    Profile,
    Sex,
    TargetSet,
)
from macro_ledger.services.analysis import AnalysisClient, AnalysisService
from macro_ledger.services.cache import AnalysisCache, InMemoryCache
from macro_ledger.services.dashboard import DashboardService
from macro_ledger.services.ledger import DailyLedgerService, MealRepository
from macro_ledger.services.meals import MealLogService
from macro_ledger.services.profiles import ProfileRepository, ProfileService

TODAY = date(2026, 3, 14)


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile and target repository for tests."""

    profiles: dict[UUID, Profile] = field(default_factory=dict)
    targets: dict[UUID, TargetSet] = field(default_factory=dict)

    def get_profile(self, user_id: UUID) -> Profile | None:
        return self.profiles.get(user_id)

    def put_profile(self, user_id: UUID, profile: Profile) -> None:
        self.profiles[user_id] = profile

    def get_targets(self, user_id: UUID) -> TargetSet | None:
        return self.targets.get(user_id)

    def put_targets(self, user_id: UUID, targets: TargetSet) -> None:
        self.targets[user_id] = targets


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal and summary repository for tests."""

    meals: dict[UUID, MealEntry] = field(default_factory=dict)
    summaries: dict[tuple[UUID, date], DailySummary] = field(default_factory=dict)

    def list_meals(self, user_id: UUID, start: date, end: date) -> list[MealEntry]:
        return [
            meal
            for meal in self.meals.values()
            if meal.user_id == user_id and start <= meal.day <= end
        ]

    def get_meal(self, meal_id: UUID) -> MealEntry | None:
        return self.meals.get(meal_id)

    def put_meal(self, user_id: UUID, meal: MealEntry) -> None:
        self.meals[meal.id] = meal

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> None:
        meal = self.meals.get(meal_id)
        if meal is not None and meal.user_id == user_id:
            del self.meals[meal_id]

    def get_summary(self, user_id: UUID, day: date) -> DailySummary | None:
        return self.summaries.get((user_id, day))

    def put_summary(self, user_id: UUID, day: date, summary: DailySummary) -> None:
        self.summaries[(user_id, day)] = summary


@dataclass
class FakeAnalysisClient(AnalysisClient):
    """Fake analysis client returning a fixed payload."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "protein_g": 42.0,
            "carbs_g": 55.0,
            "fat_g": 12.0,
            "ingredients": ["chicken breast", "white rice", "olive oil"],
        }
    )
    calls: list[str] = field(default_factory=list)

    async def analyze(
        self,
        *,
        model: str,
        store: bool,
        description: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        self.calls.append(description)
        return self.payload


@dataclass
class FailingAnalysisClient(AnalysisClient):
    """Analysis client that always fails."""

    calls: int = 0

    async def analyze(
        self,
        *,
        model: str,
        store: bool,
        description: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        self.calls += 1
        raise RuntimeError("upstream exploded")


def make_meal(  # noqa: PLR0913
    user_id: UUID,
    protein_g: float,
    carbs_g: float,
    fat_g: float,
    day: date = TODAY,
    meal_type: MealType = MealType.LUNCH,
) -> MealEntry:
    return MealEntry(
        id=uuid4(),
        user_id=user_id,
        day=day,
        meal_type=meal_type,
        description=None,
        macros=MacroSet(protein_g=protein_g, carbs_g=carbs_g, fat_g=fat_g),
        provenance=Provenance.MANUAL,
        ingredients=[],
        created_at=datetime.now(tz=UTC),
    )


def make_targets(
    protein_g: float = 150.0, carbs_g: float = 250.0, fat_g: float = 70.0
) -> TargetSet:
    return TargetSet(
        protein_g=protein_g,
        carbs_g=carbs_g,
        fat_g=fat_g,
        calculated_at=datetime(2026, 3, 1, tzinfo=UTC),
    )


@pytest.fixture
def reference_profile() -> Profile:
    return Profile(
        weight_kg=75,
        height_cm=180,
        age=30,
        sex=Sex.MALE,
        activity_level=ActivityLevel.MODERATE,
        goal=Goal.BULK,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        openai_api_key="openai-key",
    )


@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


@pytest.fixture
def meal_repository() -> InMemoryMealRepository:
    return InMemoryMealRepository()


@pytest.fixture
def analysis_client() -> FakeAnalysisClient:
    return FakeAnalysisClient()


@pytest.fixture
def ledger(
    meal_repository: InMemoryMealRepository,
    profile_repository: InMemoryProfileRepository,
) -> DailyLedgerService:
    return DailyLedgerService(meals=meal_repository, targets=profile_repository)


@pytest.fixture
def container(
    settings: Settings,
    profile_repository: InMemoryProfileRepository,
    ledger: DailyLedgerService,
    analysis_client: FakeAnalysisClient,
) -> AppContainer:
    profile_service = ProfileService(profile_repository)
    analysis_service = AnalysisService(
        client=analysis_client,
        cache=AnalysisCache(InMemoryCache()),
        model=settings.openai_model,
    )
    meal_log_service = MealLogService(
        analysis_service=analysis_service,
        ledger=ledger,
    )
    dashboard_service = DashboardService(
        profile_service=profile_service,
        ledger=ledger,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        profile_service=profile_service,
        analysis_service=analysis_service,
        ledger=ledger,
        meal_log_service=meal_log_service,
        dashboard_service=dashboard_service,
        close_resources=close_resources,
    )
