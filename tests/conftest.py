"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

import pytest

from farm_assistant.adapters.supabase_farm_profile_repository import (
    parse_farm_profile_row,
)
from farm_assistant.adapters.supabase_ingredient_repository import (
    parse_ingredient_row,
)
from farm_assistant.adapters.supabase_user_repository import parse_user_row
from farm_assistant.config import Settings
from farm_assistant.containers import AppContainer
from farm_assistant.domain.farms import FarmProfile
from farm_assistant.domain.health import KnowledgeDocument, KnowledgeMatch
from farm_assistant.domain.models import UserRecord
from farm_assistant.domain.nutrition import FeedRationRecord, IngredientRecord, Ration
from farm_assistant.services.auth import ANONYMOUS, CallerContext, TokenVerifier
from farm_assistant.services.farms import FarmProfileRepository, FarmProfileService
from farm_assistant.services.health import HealthService, ImageStorage, LlmClient
from farm_assistant.services.knowledge import (
    EmbeddingClient,
    KnowledgeRepository,
    KnowledgeService,
)
from farm_assistant.services.nutrition import (
    IngredientRepository,
    NutritionService,
    RationRepository,
)
from farm_assistant.services.users import UserRepository, UserService

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


def fixed_clock() -> datetime:
    return FIXED_NOW


def _stamp(row: dict[str, object]) -> dict[str, object]:
    stamp = FIXED_NOW.isoformat()
    return {**row, "created_at": stamp, "updated_at": stamp}


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests."""

    rows: dict[str, dict[str, object]] = field(default_factory=dict)

    def get_user(self, user_id: str) -> UserRecord | None:
        row = self.rows.get(user_id)
        return parse_user_row(row) if row else None

    def create_user(self, user_id: str, payload: dict[str, object]) -> UserRecord:
        self.rows[user_id] = _stamp({"id": user_id, **payload})
        return parse_user_row(self.rows[user_id])

    def update_user(self, user_id: str, payload: dict[str, object]) -> UserRecord:
        self.rows[user_id] = {**self.rows[user_id], **payload}
        return parse_user_row(self.rows[user_id])


@dataclass
class InMemoryFarmProfileRepository(FarmProfileRepository):
    """In-memory farm profile repository for tests."""

    rows: dict[str, dict[str, object]] = field(default_factory=dict)

    def create_profile(self, user_id: str, payload: dict[str, object]) -> FarmProfile:
        farm_id = str(uuid4())
        self.rows[farm_id] = _stamp({"id": farm_id, "user_id": user_id, **payload})
        return parse_farm_profile_row(self.rows[farm_id])

    def get_profile(self, farm_id: str) -> FarmProfile | None:
        row = self.rows.get(farm_id)
        return parse_farm_profile_row(row) if row else None

    def list_profiles(self, user_id: str) -> list[FarmProfile]:
        return [
            parse_farm_profile_row(row)
            for row in self.rows.values()
            if row["user_id"] == user_id
        ]

    def update_profile(self, farm_id: str, payload: dict[str, object]) -> FarmProfile:
        self.rows[farm_id] = {**self.rows[farm_id], **payload}
        return parse_farm_profile_row(self.rows[farm_id])

    def delete_profile(self, farm_id: str) -> None:
        self.rows.pop(farm_id, None)


@dataclass
class InMemoryIngredientRepository(IngredientRepository):
    """In-memory ingredient repository for tests."""

    rows: dict[str, dict[str, object]] = field(default_factory=dict)

    def create_ingredient(
        self, user_id: str, payload: dict[str, object]
    ) -> IngredientRecord:
        ingredient_id = str(uuid4())
        self.rows[ingredient_id] = _stamp(
            {"id": ingredient_id, "user_id": user_id, **payload}
        )
        return parse_ingredient_row(self.rows[ingredient_id])

    def get_ingredient(self, ingredient_id: str) -> IngredientRecord | None:
        row = self.rows.get(ingredient_id)
        return parse_ingredient_row(row) if row else None

    def list_ingredients(self, user_id: str) -> list[IngredientRecord]:
        owned = [
            parse_ingredient_row(row)
            for row in self.rows.values()
            if row["user_id"] == user_id
        ]
        return sorted(owned, key=lambda ingredient: ingredient.name)

    def list_owned_ingredients(
        self, user_id: str, ingredient_ids: list[str]
    ) -> list[IngredientRecord]:
        return [
            parse_ingredient_row(row)
            for row in self.rows.values()
            if row["user_id"] == user_id and row["id"] in ingredient_ids
        ]

    def update_ingredient(
        self, ingredient_id: str, payload: dict[str, object]
    ) -> IngredientRecord:
        self.rows[ingredient_id] = {**self.rows[ingredient_id], **payload}
        return parse_ingredient_row(self.rows[ingredient_id])

    def delete_ingredient(self, ingredient_id: str) -> None:
        self.rows.pop(ingredient_id, None)


@dataclass
class InMemoryRationRepository(RationRepository):
    """In-memory ration repository for tests."""

    records: dict[str, FeedRationRecord] = field(default_factory=dict)

    def create_ration(self, user_id: str, ration: Ration) -> FeedRationRecord:
        record = FeedRationRecord(
            id=str(uuid4()),
            user_id=user_id,
            ration=ration,
            created_at=FIXED_NOW,
            updated_at=FIXED_NOW,
        )
        self.records[record.id] = record
        return record

    def get_ration(self, ration_id: str) -> FeedRationRecord | None:
        return self.records.get(ration_id)

    def list_rations(self, user_id: str) -> list[FeedRationRecord]:
        owned = [r for r in self.records.values() if r.user_id == user_id]
        return sorted(owned, key=lambda r: r.ration.optimized_at, reverse=True)


@dataclass
class FakeEmbeddingClient(EmbeddingClient):
    """Fake embedding client returning a constant vector per text."""

    vector: list[float] = field(default_factory=lambda: [0.1, 0.2, 0.3])
    error: Exception | None = None
    calls: list[list[str]] = field(default_factory=list)

    async def embed(self, *, model: str, texts: list[str]) -> list[list[float]]:
        self.calls.append(texts)
        if self.error:
            raise self.error
        return [list(self.vector) for _ in texts]


@dataclass
class InMemoryKnowledgeRepository(KnowledgeRepository):
    """In-memory vector index returning canned matches."""

    matches: list[KnowledgeMatch] = field(default_factory=list)
    documents: list[KnowledgeDocument] = field(default_factory=list)
    upsert_calls: int = 0

    def match_chunks(self, embedding: list[float], limit: int) -> list[KnowledgeMatch]:
        return self.matches[:limit]

    def upsert_chunks(
        self, documents: list[KnowledgeDocument], embeddings: list[list[float]]
    ) -> None:
        self.upsert_calls += 1
        self.documents.extend(documents)


@dataclass
class FakeLlmClient(LlmClient):
    """Fake LLM client returning a fixed answer."""

    answer_text: str = (
        "Isolate the affected birds and check for respiratory symptoms daily."
    )
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def answer(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        instructions: str,
        prompt: str,
        image_data_url: str | None,
    ) -> str:
        self.calls.append({"prompt": prompt, "image_data_url": image_data_url})
        if self.error:
            raise self.error
        return self.answer_text


@dataclass
class FakeImageStorage(ImageStorage):
    """Fake image storage that records uploads."""

    uploads: list[tuple[str, str]] = field(default_factory=list)
    error: Exception | None = None

    def upload(self, path: str, content: bytes, content_type: str) -> str:
        if self.error:
            raise self.error
        self.uploads.append((path, content_type))
        return f"https://storage.example.com/{path}"


@dataclass
class FakeTokenVerifier(TokenVerifier):
    """Token verifier backed by a static token table."""

    tokens: dict[str, CallerContext] = field(
        default_factory=lambda: {
            "token-alice": CallerContext(user_id="alice", email="alice@example.com"),
            "token-bob": CallerContext(user_id="bob", email="bob@example.com"),
        }
    )

    def verify(self, token: str) -> CallerContext:
        return self.tokens.get(token, ANONYMOUS)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="test.service.key",
        openai_api_key="openai-key",
    )


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def farm_profile_repository() -> InMemoryFarmProfileRepository:
    return InMemoryFarmProfileRepository()


@pytest.fixture
def ingredient_repository() -> InMemoryIngredientRepository:
    return InMemoryIngredientRepository()


@pytest.fixture
def ration_repository() -> InMemoryRationRepository:
    return InMemoryRationRepository()


@pytest.fixture
def knowledge_repository() -> InMemoryKnowledgeRepository:
    return InMemoryKnowledgeRepository()


@pytest.fixture
def embedding_client() -> FakeEmbeddingClient:
    return FakeEmbeddingClient()


@pytest.fixture
def llm_client() -> FakeLlmClient:
    return FakeLlmClient()


@pytest.fixture
def image_storage() -> FakeImageStorage:
    return FakeImageStorage()


@pytest.fixture
def nutrition_service(
    ingredient_repository: InMemoryIngredientRepository,
    ration_repository: InMemoryRationRepository,
) -> NutritionService:
    return NutritionService(ingredient_repository, ration_repository, clock=fixed_clock)


@pytest.fixture
def knowledge_service(
    embedding_client: FakeEmbeddingClient,
    knowledge_repository: InMemoryKnowledgeRepository,
) -> KnowledgeService:
    return KnowledgeService(
        embedding_client=embedding_client,
        repository=knowledge_repository,
        embedding_model="text-embedding-3-small",
    )


@pytest.fixture
def health_service(
    llm_client: FakeLlmClient,
    knowledge_service: KnowledgeService,
    image_storage: FakeImageStorage,
) -> HealthService:
    return HealthService(
        llm_client=llm_client,
        knowledge_service=knowledge_service,
        image_storage=image_storage,
        model="gpt-5.2",
        reasoning_effort=None,
        store=False,
    )


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    user_repository: InMemoryUserRepository,
    farm_profile_repository: InMemoryFarmProfileRepository,
    nutrition_service: NutritionService,
    knowledge_service: KnowledgeService,
    health_service: HealthService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        token_verifier=FakeTokenVerifier(),
        user_service=UserService(user_repository),
        farm_profile_service=FarmProfileService(farm_profile_repository),
        nutrition_service=nutrition_service,
        knowledge_service=knowledge_service,
        health_service=health_service,
        close_resources=close_resources,
    )
