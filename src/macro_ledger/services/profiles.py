"""Profile management and target recomputation."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from macro_ledger.domain.profiles import Profile, TargetCalculation, TargetSet
from macro_ledger.errors import NotFoundError
from macro_ledger.services.formulas import compute_targets, normalize_profile

_logger = logging.getLogger(__name__)


class TargetRepository(Protocol):
    """Persistence interface for a user's current target set."""

    def get_targets(self, user_id: UUID) -> TargetSet | None:
        """Return the current targets for a user, if computed."""

    def put_targets(self, user_id: UUID, targets: TargetSet) -> None:
        """Replace the current targets for a user."""


class ProfileRepository(TargetRepository, Protocol):
    """Persistence interface for profiles and their targets."""

    def get_profile(self, user_id: UUID) -> Profile | None:
        """Return the user's profile, if created."""

    def put_profile(self, user_id: UUID, profile: Profile) -> None:
        """Insert or replace the user's profile."""


@dataclass
class ProfileService:
    """Application service for profile updates."""

    repository: ProfileRepository

    def update_profile(self, user_id: UUID, profile: Profile) -> TargetCalculation:
        """Validate a profile, store it and replace the user's targets."""
        calculation = compute_targets(profile)
        self.repository.put_profile(user_id, normalize_profile(profile))
        self.repository.put_targets(user_id, calculation.targets)
        if calculation.warnings:
            _logger.info(
                "Targets updated with warnings: user_id=%s warnings=%s",
                user_id,
                calculation.warnings,
            )
        return calculation

    def get_profile(self, user_id: UUID) -> Profile:
        profile = self.repository.get_profile(user_id)
        if profile is None:
            raise NotFoundError("Profile", user_id)
        return profile

    def get_targets(self, user_id: UUID) -> TargetSet:
        targets = self.repository.get_targets(user_id)
        if targets is None:
            raise NotFoundError("Targets", user_id)
        return targets
