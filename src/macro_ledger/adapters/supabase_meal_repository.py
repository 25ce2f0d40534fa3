"""Supabase repository for meal entries and daily summaries."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from macro_ledger.domain.ledger import DailySummary
from macro_ledger.domain.meals import MealEntry, MealType, Provenance
from macro_ledger.domain.nutrition import Macro, MacroSet
from macro_ledger.errors import StorageError
from macro_ledger.services.ledger import MealRepository

_MEAL_COLUMNS = (
    "id, user_id, day, meal_type, description, protein_g, carbs_g, fat_g, "
    "provenance, ingredients, created_at"
)


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meal entries and summaries."""

    client: Client

    def list_meals(self, user_id: UUID, start: date, end: date) -> list[MealEntry]:
        """Return a user's meals for days in [start, end]."""
        response = (
            self.client.table("meal_entries")
            .select(_MEAL_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("day", start.isoformat())
            .lte("day", end.isoformat())
            .order("created_at", desc=False)
            .execute()
        )
        return [_parse_meal(row) for row in response.data or []]

    def get_meal(self, meal_id: UUID) -> MealEntry | None:
        """Return a meal row by id."""
        response = (
            self.client.table("meal_entries")
            .select(_MEAL_COLUMNS)
            .eq("id", str(meal_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_meal(response.data[0])

    def put_meal(self, user_id: UUID, meal: MealEntry) -> None:
        """Insert a meal row; calories are derived and not stored."""
        response = (
            self.client.table("meal_entries")
            .insert(
                {
                    "id": str(meal.id),
                    "user_id": str(user_id),
                    "day": meal.day.isoformat(),
                    "meal_type": meal.meal_type.value,
                    "description": meal.description,
                    "protein_g": meal.macros.protein_g,
                    "carbs_g": meal.macros.carbs_g,
                    "fat_g": meal.macros.fat_g,
                    "provenance": meal.provenance.value,
                    "ingredients": meal.ingredients,
                    "created_at": meal.created_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise StorageError("Failed to create meal entry", operation="put_meal")

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> None:
        """Delete a meal row owned by the user."""
        (
            self.client.table("meal_entries")
            .delete()
            .eq("id", str(meal_id))
            .eq("user_id", str(user_id))
            .execute()
        )

    def get_summary(self, user_id: UUID, day: date) -> DailySummary | None:
        """Return the stored summary row for a day."""
        response = (
            self.client.table("daily_summaries")
            .select("protein_g, carbs_g, fat_g, meal_count, targets_met")
            .eq("user_id", str(user_id))
            .eq("day", day.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        targets_met = row.get("targets_met") or {}
        return DailySummary(
            user_id=user_id,
            day=day,
            totals=MacroSet(
                protein_g=float(row.get("protein_g", 0.0)),
                carbs_g=float(row.get("carbs_g", 0.0)),
                fat_g=float(row.get("fat_g", 0.0)),
            ),
            meal_count=int(row.get("meal_count", 0)),
            targets_met={
                macro: bool(targets_met.get(macro.value, False)) for macro in Macro
            },
        )

    def put_summary(self, user_id: UUID, day: date, summary: DailySummary) -> None:
        """Insert or replace the summary row for a day."""
        response = (
            self.client.table("daily_summaries")
            .upsert(
                {
                    "user_id": str(user_id),
                    "day": day.isoformat(),
                    "protein_g": summary.totals.protein_g,
                    "carbs_g": summary.totals.carbs_g,
                    "fat_g": summary.totals.fat_g,
                    "meal_count": summary.meal_count,
                    "targets_met": {
                        macro.value: met for macro, met in summary.targets_met.items()
                    },
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="user_id,day",
            )
            .execute()
        )
        if not response.data:
            raise StorageError(
                "Failed to store daily summary", operation="put_summary"
            )


def _parse_meal(row: dict[str, object]) -> MealEntry:
    return MealEntry(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        day=date.fromisoformat(row["day"]),
        meal_type=MealType(row["meal_type"]),
        description=row.get("description"),
        macros=MacroSet(
            protein_g=float(row.get("protein_g", 0.0)),
            carbs_g=float(row.get("carbs_g", 0.0)),
            fat_g=float(row.get("fat_g", 0.0)),
        ),
        provenance=Provenance(row["provenance"]),
        ingredients=list(row.get("ingredients") or []),
        created_at=datetime.fromisoformat(row["created_at"]),
    )
