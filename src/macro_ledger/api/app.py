"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date
from uuid import UUID

from fastapi import FastAPI, Request

from macro_ledger.api.errors import register_exception_handlers
from macro_ledger.api.models import MealPayload, ProfilePayload
from macro_ledger.app_logging import configure_logging
from macro_ledger.containers import AppContainer
from macro_ledger.domain.ledger import DailySummary, QualityAssessment
from macro_ledger.domain.meals import MealEntry, ResolvedMeal
from macro_ledger.domain.nutrition import MacroSet
from macro_ledger.domain.profiles import Profile, TargetCalculation, TargetSet
from macro_ledger.services.dashboard import Dashboard


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    register_exception_handlers(app)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.put("/users/{user_id}/profile")
    async def update_profile(
        user_id: UUID, payload: ProfilePayload, request: Request
    ) -> dict[str, object]:
        """Store a profile and return the recomputed targets."""
        state_container: AppContainer = request.app.state.container
        calculation = state_container.profile_service.update_profile(
            user_id, payload.to_profile()
        )
        return _format_calculation(calculation)

    @app.get("/users/{user_id}/dashboard")
    async def dashboard(
        user_id: UUID, day: date, request: Request
    ) -> dict[str, object]:
        """Return profile, targets, the day's meals and its quality."""
        state_container: AppContainer = request.app.state.container
        return _format_dashboard(
            state_container.dashboard_service.get_dashboard(user_id, day)
        )

    @app.post("/users/{user_id}/meals", status_code=201)
    async def log_meal(
        user_id: UUID, payload: MealPayload, request: Request
    ) -> dict[str, object]:
        """Log a meal and return the refreshed day summary."""
        state_container: AppContainer = request.app.state.container
        logged = await state_container.meal_log_service.log_meal(
            user_id, payload.to_submission()
        )
        return {
            "meal": _format_meal(logged.entry),
            "summary": _format_summary(logged.summary),
            "warnings": logged.warnings,
        }

    @app.post("/users/{user_id}/meals/preview")
    async def preview_meal(
        user_id: UUID, payload: MealPayload, request: Request
    ) -> dict[str, object]:
        """Resolve a meal's macros without logging it."""
        state_container: AppContainer = request.app.state.container
        logger.info("Meal preview requested", extra={"user_id": str(user_id)})
        resolved = await state_container.meal_log_service.preview(
            payload.to_submission()
        )
        return _format_resolved(resolved)

    @app.delete("/users/{user_id}/meals/{meal_id}")
    async def delete_meal(
        user_id: UUID, meal_id: UUID, request: Request
    ) -> dict[str, object]:
        """Delete a meal and return the refreshed day summary."""
        state_container: AppContainer = request.app.state.container
        summary = state_container.meal_log_service.delete_meal(user_id, meal_id)
        return {"summary": _format_summary(summary)}

    return app


def _format_macros(macros: MacroSet | TargetSet) -> dict[str, float]:
    return {
        "protein_g": macros.protein_g,
        "carbs_g": macros.carbs_g,
        "fat_g": macros.fat_g,
        "calories": macros.calories,
    }


def _format_profile(profile: Profile) -> dict[str, object]:
    return {
        "weight_kg": profile.weight_kg,
        "height_cm": profile.height_cm,
        "age": profile.age,
        "sex": profile.sex.value,
        "activity_level": profile.activity_level.value,
        "goal": profile.goal.value,
    }


def _format_targets(targets: TargetSet) -> dict[str, object]:
    return {
        **_format_macros(targets),
        "calculated_at": targets.calculated_at.isoformat(),
    }


def _format_calculation(calculation: TargetCalculation) -> dict[str, object]:
    return {
        "targets": _format_targets(calculation.targets),
        "bmr": calculation.bmr,
        "tdee": calculation.tdee,
        "goal_calories": calculation.goal_calories,
        "warnings": calculation.warnings,
    }


def _format_summary(summary: DailySummary) -> dict[str, object]:
    return {
        "day": summary.day.isoformat(),
        "totals": _format_macros(summary.totals),
        "meal_count": summary.meal_count,
        "targets_met": {
            macro.value: met for macro, met in summary.targets_met.items()
        },
    }


def _format_meal(entry: MealEntry) -> dict[str, object]:
    return {
        "id": str(entry.id),
        "day": entry.day.isoformat(),
        "meal_type": entry.meal_type.value,
        "description": entry.description,
        "macros": _format_macros(entry.macros),
        "provenance": entry.provenance.value,
        "ingredients": entry.ingredients,
        "created_at": entry.created_at.isoformat(),
    }


def _format_resolved(resolved: ResolvedMeal) -> dict[str, object]:
    return {
        "macros": _format_macros(resolved.macros),
        "provenance": resolved.provenance.value,
        "ingredients": resolved.ingredients,
        "warnings": resolved.warnings,
    }


def _format_quality(quality: QualityAssessment) -> dict[str, object]:
    return {
        "score": quality.score,
        "tier": quality.tier.value,
        "attainment": {macro.value: pct for macro, pct in quality.attainment.items()},
        "shortfalls": [
            {
                "macro": shortfall.macro.value,
                "attainment_pct": shortfall.attainment_pct,
                "remaining": shortfall.remaining,
            }
            for shortfall in quality.shortfalls
        ],
        "guidance": quality.guidance,
    }


def _format_dashboard(view: Dashboard) -> dict[str, object]:
    return {
        "profile": _format_profile(view.profile),
        "targets": _format_targets(view.targets),
        "summary": _format_summary(view.summary),
        "meals": [_format_meal(entry) for entry in view.meals],
        "quality": _format_quality(view.quality),
    }
