"""User-related business logic."""

from dataclasses import dataclass
from typing import Protocol

from farm_assistant.domain.models import UserRecord
from farm_assistant.services.auth import CallerContext
from farm_assistant.services.errors import (
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)


class UserRepository(Protocol):
    """Persistence interface for user data."""

    def get_user(self, user_id: str) -> UserRecord | None:
        """Return the user for an auth uid, if present."""

    def create_user(self, user_id: str, payload: dict[str, object]) -> UserRecord:
        """Create and return a user record keyed by the auth uid."""

    def update_user(self, user_id: str, payload: dict[str, object]) -> UserRecord:
        """Apply a partial update and return the stored user."""


@dataclass
class UserService:
    """Application service for user profile actions."""

    repository: UserRepository

    def create_user(
        self, caller: CallerContext, payload: dict[str, object]
    ) -> UserRecord:
        """Create the profile for the authenticated caller."""
        if caller.user_id is None:
            raise UnauthorizedError("User must be authenticated")
        return self.repository.create_user(caller.user_id, payload)

    def get_me(self, user_id: str) -> UserRecord | None:
        """Return the caller's own profile."""
        return self.repository.get_user(user_id)

    def get_by_id(self, user_id: str, requested_id: str) -> UserRecord | None:
        """Return a profile by id; callers may only read their own."""
        if requested_id != user_id:
            raise ForbiddenError("You can only access your own profile")
        return self.repository.get_user(requested_id)

    def update_user(self, user_id: str, payload: dict[str, object]) -> UserRecord:
        """Update the caller's profile."""
        if self.repository.get_user(user_id) is None:
            raise NotFoundError("User not found")
        return self.repository.update_user(user_id, payload)
