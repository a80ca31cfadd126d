"""User profile endpoints."""

from fastapi import APIRouter, Depends

from farm_assistant.api.deps import get_container, require_caller
from farm_assistant.api.models import UserCreate, UserUpdate
from farm_assistant.containers import AppContainer
from farm_assistant.domain.models import UserRecord
from farm_assistant.services.auth import CallerContext

router = APIRouter(prefix="/users", tags=["users"])


@router.post("")
async def create_user(
    payload: UserCreate,
    caller: CallerContext = Depends(require_caller),
    container: AppContainer = Depends(get_container),
) -> UserRecord:
    """Create the caller's user profile."""
    return container.user_service.create_user(caller, payload.model_dump())


@router.get("/me")
async def get_me(
    caller: CallerContext = Depends(require_caller),
    container: AppContainer = Depends(get_container),
) -> UserRecord | None:
    """Return the caller's profile."""
    return container.user_service.get_me(caller.user_id)


@router.patch("/me")
async def update_me(
    payload: UserUpdate,
    caller: CallerContext = Depends(require_caller),
    container: AppContainer = Depends(get_container),
) -> UserRecord:
    """Update the caller's profile."""
    return container.user_service.update_user(
        caller.user_id, payload.model_dump(exclude_unset=True)
    )


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    caller: CallerContext = Depends(require_caller),
    container: AppContainer = Depends(get_container),
) -> UserRecord | None:
    """Return a profile by id; only the caller's own is visible."""
    return container.user_service.get_by_id(caller.user_id, user_id)
