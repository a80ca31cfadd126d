"""Ingredient management and feed ration optimization."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from farm_assistant.domain.nutrition import (
    FeedRationRecord,
    IngredientRecord,
    OptimizationRequest,
    Ration,
)
from farm_assistant.services import feed_solver
from farm_assistant.services.errors import (
    BadRequestError,
    ForbiddenError,
    NotFoundError,
)

_logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class IngredientRepository(Protocol):
    """Persistence interface for feed ingredients."""

    def create_ingredient(
        self, user_id: str, payload: dict[str, object]
    ) -> IngredientRecord:
        """Create an ingredient and return it."""

    def get_ingredient(self, ingredient_id: str) -> IngredientRecord | None:
        """Return an ingredient by id, if present."""

    def list_ingredients(self, user_id: str) -> list[IngredientRecord]:
        """Return every ingredient owned by a user."""

    def list_owned_ingredients(
        self, user_id: str, ingredient_ids: list[str]
    ) -> list[IngredientRecord]:
        """Return the subset of ``ingredient_ids`` owned by the user."""

    def update_ingredient(
        self, ingredient_id: str, payload: dict[str, object]
    ) -> IngredientRecord:
        """Apply a partial update and return the stored ingredient."""

    def delete_ingredient(self, ingredient_id: str) -> None:
        """Delete an ingredient."""


class RationRepository(Protocol):
    """Persistence interface for optimized feed rations."""

    def create_ration(self, user_id: str, ration: Ration) -> FeedRationRecord:
        """Persist a ration and return the stored record."""

    def get_ration(self, ration_id: str) -> FeedRationRecord | None:
        """Return a ration by id, if present."""

    def list_rations(self, user_id: str) -> list[FeedRationRecord]:
        """Return a user's rations, newest first."""


@dataclass
class NutritionService:
    """Application service for ingredients and ration optimization."""

    ingredient_repository: IngredientRepository
    ration_repository: RationRepository
    clock: Callable[[], datetime] = _utc_now

    def create_ingredient(
        self, user_id: str, payload: dict[str, object]
    ) -> IngredientRecord:
        """Create an ingredient owned by the caller."""
        ingredient = self.ingredient_repository.create_ingredient(user_id, payload)
        _logger.info(
            "Ingredient created",
            extra={"user_id": user_id, "ingredient_id": ingredient.id},
        )
        return ingredient

    def list_ingredients(self, user_id: str) -> list[IngredientRecord]:
        """Return the caller's ingredients."""
        return self.ingredient_repository.list_ingredients(user_id)

    def get_ingredient(
        self, user_id: str, ingredient_id: str
    ) -> IngredientRecord | None:
        """Return an ingredient when it exists and belongs to the caller."""
        ingredient = self.ingredient_repository.get_ingredient(ingredient_id)
        if ingredient is None:
            return None
        if ingredient.user_id != user_id:
            raise ForbiddenError("You can only access your own ingredients")
        return ingredient

    def update_ingredient(
        self, user_id: str, ingredient_id: str, payload: dict[str, object]
    ) -> IngredientRecord:
        """Update one of the caller's ingredients."""
        self._require_owned_ingredient(user_id, ingredient_id, action="update")
        return self.ingredient_repository.update_ingredient(ingredient_id, payload)

    def delete_ingredient(self, user_id: str, ingredient_id: str) -> None:
        """Delete one of the caller's ingredients."""
        self._require_owned_ingredient(user_id, ingredient_id, action="delete")
        self.ingredient_repository.delete_ingredient(ingredient_id)
        _logger.info(
            "Ingredient deleted",
            extra={"user_id": user_id, "ingredient_id": ingredient_id},
        )

    def optimize_feed(
        self, user_id: str, request: OptimizationRequest
    ) -> FeedRationRecord:
        """Solve a ration from the caller's ingredients and store the result."""
        _logger.info(
            "Starting feed optimization",
            extra={
                "user_id": user_id,
                "target_animal": request.target_animal,
                "ingredient_count": len(request.ingredients),
                "total_amount": request.total_amount,
            },
        )
        requested_ids = [ingredient.id for ingredient in request.ingredients]
        if len(set(requested_ids)) != len(requested_ids):
            raise BadRequestError("Ingredient ids must be unique")
        if requested_ids:
            owned = self.ingredient_repository.list_owned_ingredients(
                user_id, requested_ids
            )
            if {ingredient.id for ingredient in owned} != set(requested_ids):
                raise BadRequestError(
                    "Some ingredients do not belong to you or do not exist"
                )

        ration = feed_solver.solve(request, clock=self.clock)
        record = self.ration_repository.create_ration(user_id, ration)
        _logger.info(
            "Feed optimization completed",
            extra={
                "user_id": user_id,
                "ration_id": record.id,
                "total_cost": ration.total_cost,
            },
        )
        return record

    def list_rations(self, user_id: str) -> list[FeedRationRecord]:
        """Return the caller's stored rations, newest first."""
        return self.ration_repository.list_rations(user_id)

    def get_ration(self, user_id: str, ration_id: str) -> FeedRationRecord | None:
        """Return a ration when it exists and belongs to the caller."""
        record = self.ration_repository.get_ration(ration_id)
        if record is None:
            return None
        if record.user_id != user_id:
            raise ForbiddenError("You can only access your own feed rations")
        return record

    def _require_owned_ingredient(
        self, user_id: str, ingredient_id: str, *, action: str
    ) -> None:
        ingredient = self.ingredient_repository.get_ingredient(ingredient_id)
        if ingredient is None:
            raise NotFoundError("Ingredient not found")
        if ingredient.user_id != user_id:
            raise ForbiddenError(f"You can only {action} your own ingredients")
