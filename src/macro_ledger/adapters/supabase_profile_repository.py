"""Supabase-backed profile and target repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from macro_ledger.domain.profiles import (
    ActivityLevel,
    Goal,
    Profile,
    Sex,
    TargetSet,
)
from macro_ledger.errors import StorageError
from macro_ledger.services.profiles import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profiles and current targets."""

    client: Client

    def get_profile(self, user_id: UUID) -> Profile | None:
        """Return the profile row for a user, if present."""
        response = (
            self.client.table("profiles")
            .select("weight_kg, height_cm, age, sex, activity_level, goal")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return Profile(
            weight_kg=float(row["weight_kg"]),
            height_cm=float(row["height_cm"]),
            age=int(row["age"]),
            sex=Sex(row["sex"]),
            activity_level=ActivityLevel(row["activity_level"]),
            goal=Goal(row["goal"]),
        )

    def put_profile(self, user_id: UUID, profile: Profile) -> None:
        """Insert or replace the profile row for a user."""
        response = (
            self.client.table("profiles")
            .upsert(
                {
                    "user_id": str(user_id),
                    "weight_kg": profile.weight_kg,
                    "height_cm": profile.height_cm,
                    "age": profile.age,
                    "sex": profile.sex.value,
                    "activity_level": profile.activity_level.value,
                    "goal": profile.goal.value,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="user_id",
            )
            .execute()
        )
        if not response.data:
            raise StorageError("Failed to store profile", operation="put_profile")

    def get_targets(self, user_id: UUID) -> TargetSet | None:
        """Return the current targets for a user, if computed."""
        response = (
            self.client.table("targets")
            .select("protein_g, carbs_g, fat_g, calculated_at")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return TargetSet(
            protein_g=float(row["protein_g"]),
            carbs_g=float(row["carbs_g"]),
            fat_g=float(row["fat_g"]),
            calculated_at=datetime.fromisoformat(row["calculated_at"]),
        )

    def put_targets(self, user_id: UUID, targets: TargetSet) -> None:
        """Replace the current targets row for a user."""
        response = (
            self.client.table("targets")
            .upsert(
                {
                    "user_id": str(user_id),
                    "protein_g": targets.protein_g,
                    "carbs_g": targets.carbs_g,
                    "fat_g": targets.fat_g,
                    "calculated_at": targets.calculated_at.isoformat(),
                },
                on_conflict="user_id",
            )
            .execute()
        )
        if not response.data:
            raise StorageError("Failed to store targets", operation="put_targets")
