"""Agricultural health Q&A endpoint."""

from fastapi import APIRouter, Depends

from farm_assistant.api.deps import get_caller, get_container
from farm_assistant.api.models import HealthQuestion
from farm_assistant.containers import AppContainer
from farm_assistant.domain.health import RagAnswer
from farm_assistant.services.auth import CallerContext

router = APIRouter(prefix="/health", tags=["health"])


@router.post("/ask")
async def ask(
    payload: HealthQuestion,
    caller: CallerContext = Depends(get_caller),
    container: AppContainer = Depends(get_container),
) -> RagAnswer:
    """Answer a health question; anonymous callers are allowed."""
    return await container.health_service.ask(
        caller.user_id, payload.text_query, payload.image_base64
    )
