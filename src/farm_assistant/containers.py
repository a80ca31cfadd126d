"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from farm_assistant.adapters.openai_embedding_client import OpenAIEmbeddingClient
from farm_assistant.adapters.openai_llm_client import OpenAILlmClient
from farm_assistant.adapters.supabase_farm_profile_repository import (
    SupabaseFarmProfileRepository,
)
from farm_assistant.adapters.supabase_image_storage import SupabaseImageStorage
from farm_assistant.adapters.supabase_ingredient_repository import (
    SupabaseIngredientRepository,
)
from farm_assistant.adapters.supabase_knowledge_repository import (
    SupabaseKnowledgeRepository,
)
from farm_assistant.adapters.supabase_ration_repository import (
    SupabaseRationRepository,
)
from farm_assistant.adapters.supabase_token_verifier import SupabaseTokenVerifier
from farm_assistant.adapters.supabase_user_repository import SupabaseUserRepository
from farm_assistant.config import Settings
from farm_assistant.services.auth import TokenVerifier
from farm_assistant.services.farms import FarmProfileService
from farm_assistant.services.health import HealthService
from farm_assistant.services.knowledge import KnowledgeService
from farm_assistant.services.nutrition import NutritionService
from farm_assistant.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    token_verifier: TokenVerifier
    user_service: UserService
    farm_profile_service: FarmProfileService
    nutrition_service: NutritionService
    knowledge_service: KnowledgeService
    health_service: HealthService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    user_repository = SupabaseUserRepository(supabase_client)
    farm_profile_repository = SupabaseFarmProfileRepository(supabase_client)
    ingredient_repository = SupabaseIngredientRepository(supabase_client)
    ration_repository = SupabaseRationRepository(supabase_client)
    knowledge_repository = SupabaseKnowledgeRepository(
        supabase_client,
        match_function=resolved_settings.knowledge_match_function,
    )
    image_storage = SupabaseImageStorage(
        supabase_client, bucket=resolved_settings.supabase_storage_bucket
    )
    llm_client = OpenAILlmClient.create(resolved_settings.openai_api_key)
    embedding_client = OpenAIEmbeddingClient.create(resolved_settings.openai_api_key)

    knowledge_service = KnowledgeService(
        embedding_client=embedding_client,
        repository=knowledge_repository,
        embedding_model=resolved_settings.openai_embedding_model,
        min_score=resolved_settings.knowledge_min_score,
        max_context_chars=resolved_settings.knowledge_max_context_chars,
    )
    health_service = HealthService(
        llm_client=llm_client,
        knowledge_service=knowledge_service,
        image_storage=image_storage,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
        min_confidence=resolved_settings.rag_min_confidence,
    )

    async def close_resources() -> None:
        await llm_client.close()
        await embedding_client.close()

    return AppContainer(
        settings=resolved_settings,
        token_verifier=SupabaseTokenVerifier(supabase_client),
        user_service=UserService(user_repository),
        farm_profile_service=FarmProfileService(farm_profile_repository),
        nutrition_service=NutritionService(ingredient_repository, ration_repository),
        knowledge_service=knowledge_service,
        health_service=health_service,
        close_resources=close_resources,
    )
