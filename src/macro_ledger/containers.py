"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from macro_ledger.adapters.openai_analysis_client import OpenAIAnalysisClient
from macro_ledger.adapters.supabase_meal_repository import SupabaseMealRepository
from macro_ledger.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from macro_ledger.config import Settings
from macro_ledger.services.analysis import AnalysisService
from macro_ledger.services.cache import AnalysisCache, InMemoryCache
from macro_ledger.services.dashboard import DashboardService
from macro_ledger.services.ledger import DailyLedgerService
from macro_ledger.services.meals import MealLogService
from macro_ledger.services.profiles import ProfileService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    profile_service: ProfileService
    analysis_service: AnalysisService
    ledger: DailyLedgerService
    meal_log_service: MealLogService
    dashboard_service: DashboardService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    profile_repository = SupabaseProfileRepository(supabase_client)
    meal_repository = SupabaseMealRepository(supabase_client)
    profile_service = ProfileService(profile_repository)
    ledger = DailyLedgerService(meals=meal_repository, targets=profile_repository)
    openai_client = OpenAIAnalysisClient.create(
        api_key=resolved_settings.openai_api_key,
        timeout_seconds=resolved_settings.analysis_timeout_seconds,
    )
    analysis_service = AnalysisService(
        client=openai_client,
        cache=AnalysisCache(
            cache=InMemoryCache(),
            ttl_seconds=resolved_settings.analysis_cache_ttl_seconds,
        ),
        model=resolved_settings.openai_model,
        store=resolved_settings.openai_store,
        timeout_seconds=resolved_settings.analysis_timeout_seconds,
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
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        profile_service=profile_service,
        analysis_service=analysis_service,
        ledger=ledger,
        meal_log_service=meal_log_service,
        dashboard_service=dashboard_service,
        close_resources=close_resources,
    )
