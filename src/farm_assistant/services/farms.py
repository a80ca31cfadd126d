"""Services for managing farm profiles."""

from dataclasses import dataclass
from typing import Protocol

from farm_assistant.domain.farms import FarmProfile
from farm_assistant.services.errors import ForbiddenError, NotFoundError


class FarmProfileRepository(Protocol):
    """Persistence interface for farm profiles."""

    def create_profile(self, user_id: str, payload: dict[str, object]) -> FarmProfile:
        """Create a farm profile and return it."""

    def get_profile(self, farm_id: str) -> FarmProfile | None:
        """Return a farm profile by id, if present."""

    def list_profiles(self, user_id: str) -> list[FarmProfile]:
        """Return every farm profile owned by a user."""

    def update_profile(self, farm_id: str, payload: dict[str, object]) -> FarmProfile:
        """Apply a partial update and return the stored profile."""

    def delete_profile(self, farm_id: str) -> None:
        """Delete a farm profile."""


@dataclass
class FarmProfileService:
    """Application service for farm profile operations."""

    repository: FarmProfileRepository

    def create_profile(self, user_id: str, payload: dict[str, object]) -> FarmProfile:
        """Create a farm profile owned by the caller."""
        return self.repository.create_profile(user_id, payload)

    def list_profiles(self, user_id: str) -> list[FarmProfile]:
        """Return the caller's farm profiles."""
        return self.repository.list_profiles(user_id)

    def get_profile(self, user_id: str, farm_id: str) -> FarmProfile | None:
        """Return a farm profile when it exists and belongs to the caller."""
        profile = self.repository.get_profile(farm_id)
        if profile is None:
            return None
        if profile.user_id != user_id:
            raise ForbiddenError("You can only access your own farm profiles")
        return profile

    def update_profile(
        self, user_id: str, farm_id: str, payload: dict[str, object]
    ) -> FarmProfile:
        """Update one of the caller's farm profiles."""
        self._require_owned(user_id, farm_id, action="update")
        return self.repository.update_profile(farm_id, payload)

    def delete_profile(self, user_id: str, farm_id: str) -> None:
        """Delete one of the caller's farm profiles."""
        self._require_owned(user_id, farm_id, action="delete")
        self.repository.delete_profile(farm_id)

    def _require_owned(self, user_id: str, farm_id: str, *, action: str) -> None:
        profile = self.repository.get_profile(farm_id)
        if profile is None:
            raise NotFoundError("Farm profile not found")
        if profile.user_id != user_id:
            raise ForbiddenError(f"You can only {action} your own farm profiles")
