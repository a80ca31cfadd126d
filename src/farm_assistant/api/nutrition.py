"""Ingredient and feed optimization endpoints."""

from fastapi import APIRouter, Depends

from farm_assistant.api.deps import get_container, require_caller
from farm_assistant.api.models import (
    IngredientCreate,
    IngredientUpdate,
    OptimizationRequestModel,
)
from farm_assistant.containers import AppContainer
from farm_assistant.domain.nutrition import FeedRationRecord, IngredientRecord
from farm_assistant.services.auth import CallerContext

router = APIRouter(prefix="/nutrition", tags=["nutrition"])


@router.post("/ingredients")
async def create_ingredient(
    payload: IngredientCreate,
    caller: CallerContext = Depends(require_caller),
    container: AppContainer = Depends(get_container),
) -> IngredientRecord:
    """Add an ingredient to the caller's list."""
    return container.nutrition_service.create_ingredient(
        caller.user_id, payload.to_payload()
    )


@router.get("/ingredients")
async def list_ingredients(
    caller: CallerContext = Depends(require_caller),
    container: AppContainer = Depends(get_container),
) -> list[IngredientRecord]:
    """List the caller's ingredients."""
    return container.nutrition_service.list_ingredients(caller.user_id)


@router.get("/ingredients/{ingredient_id}")
async def get_ingredient(
    ingredient_id: str,
    caller: CallerContext = Depends(require_caller),
    container: AppContainer = Depends(get_container),
) -> IngredientRecord | None:
    """Return one of the caller's ingredients."""
    return container.nutrition_service.get_ingredient(caller.user_id, ingredient_id)


@router.patch("/ingredients/{ingredient_id}")
async def update_ingredient(
    ingredient_id: str,
    payload: IngredientUpdate,
    caller: CallerContext = Depends(require_caller),
    container: AppContainer = Depends(get_container),
) -> IngredientRecord:
    """Apply a partial update to an ingredient."""
    return container.nutrition_service.update_ingredient(
        caller.user_id, ingredient_id, payload.to_payload()
    )


@router.delete("/ingredients/{ingredient_id}")
async def delete_ingredient(
    ingredient_id: str,
    caller: CallerContext = Depends(require_caller),
    container: AppContainer = Depends(get_container),
) -> dict[str, str]:
    """Delete an ingredient."""
    container.nutrition_service.delete_ingredient(caller.user_id, ingredient_id)
    return {"status": "deleted"}


@router.post("/optimize")
async def optimize_feed(
    payload: OptimizationRequestModel,
    caller: CallerContext = Depends(require_caller),
    container: AppContainer = Depends(get_container),
) -> FeedRationRecord:
    """Formulate a least-cost ration and store it."""
    return container.nutrition_service.optimize_feed(
        caller.user_id, payload.to_domain()
    )


@router.get("/rations")
async def list_rations(
    caller: CallerContext = Depends(require_caller),
    container: AppContainer = Depends(get_container),
) -> list[FeedRationRecord]:
    """List the caller's rations, newest first."""
    return container.nutrition_service.list_rations(caller.user_id)


@router.get("/rations/{ration_id}")
async def get_ration(
    ration_id: str,
    caller: CallerContext = Depends(require_caller),
    container: AppContainer = Depends(get_container),
) -> FeedRationRecord | None:
    """Return one of the caller's rations."""
    return container.nutrition_service.get_ration(caller.user_id, ration_id)
