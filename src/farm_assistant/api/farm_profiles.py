"""Farm profile endpoints."""

from fastapi import APIRouter, Depends

from farm_assistant.api.deps import get_container, require_caller
from farm_assistant.api.models import FarmProfileCreate, FarmProfileUpdate
from farm_assistant.containers import AppContainer
from farm_assistant.domain.farms import FarmProfile
from farm_assistant.services.auth import CallerContext

router = APIRouter(prefix="/farm-profiles", tags=["farm-profiles"])


@router.post("")
async def create_farm_profile(
    payload: FarmProfileCreate,
    caller: CallerContext = Depends(require_caller),
    container: AppContainer = Depends(get_container),
) -> FarmProfile:
    """Create a farm profile for the caller."""
    return container.farm_profile_service.create_profile(
        caller.user_id, payload.model_dump()
    )


@router.get("")
async def list_farm_profiles(
    caller: CallerContext = Depends(require_caller),
    container: AppContainer = Depends(get_container),
) -> list[FarmProfile]:
    """List the caller's farm profiles."""
    return container.farm_profile_service.list_profiles(caller.user_id)


@router.get("/{farm_id}")
async def get_farm_profile(
    farm_id: str,
    caller: CallerContext = Depends(require_caller),
    container: AppContainer = Depends(get_container),
) -> FarmProfile | None:
    """Return one of the caller's farm profiles."""
    return container.farm_profile_service.get_profile(caller.user_id, farm_id)


@router.patch("/{farm_id}")
async def update_farm_profile(
    farm_id: str,
    payload: FarmProfileUpdate,
    caller: CallerContext = Depends(require_caller),
    container: AppContainer = Depends(get_container),
) -> FarmProfile:
    """Apply a partial update to a farm profile."""
    return container.farm_profile_service.update_profile(
        caller.user_id, farm_id, payload.model_dump(exclude_unset=True)
    )


@router.delete("/{farm_id}")
async def delete_farm_profile(
    farm_id: str,
    caller: CallerContext = Depends(require_caller),
    container: AppContainer = Depends(get_container),
) -> dict[str, str]:
    """Delete a farm profile."""
    container.farm_profile_service.delete_profile(caller.user_id, farm_id)
    return {"status": "deleted"}
