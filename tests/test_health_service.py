"""Tests for the health Q&A service."""

import asyncio
import base64

import pytest

from farm_assistant.domain.health import KnowledgeMatch
from farm_assistant.services.errors import UpstreamError
from farm_assistant.services.health import (
    FALLBACK_ANSWER,
    HealthService,
    _to_data_url,
    decode_image,
    score_answer,
)
from farm_assistant.services.knowledge import KnowledgeContext
from tests.conftest import (
    FakeImageStorage,
    FakeLlmClient,
    InMemoryKnowledgeRepository,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"rest"


def test_ask_returns_answer_with_sources(
    health_service: HealthService,
    knowledge_repository: InMemoryKnowledgeRepository,
    llm_client: FakeLlmClient,
) -> None:
    knowledge_repository.matches = [
        KnowledgeMatch(
            text="Newcastle disease spreads fast.", source="poultry.md", score=0.9
        )
    ]

    result = asyncio.run(health_service.ask("alice", "Why are my hens coughing?"))

    assert result.confidence == 0.9
    assert result.sources == ["poultry.md"]
    assert "Newcastle disease" in llm_client.calls[0]["prompt"]


def test_ask_without_context_scores_plain_answer(
    health_service: HealthService,
) -> None:
    result = asyncio.run(health_service.ask(None, "How often should I deworm goats?"))

    assert result.confidence == 0.8
    assert result.sources == []


def test_ask_falls_back_when_answer_is_empty(
    health_service: HealthService, llm_client: FakeLlmClient
) -> None:
    llm_client.answer_text = "Hmm."

    result = asyncio.run(health_service.ask("alice", "Is this mastitis?"))

    assert result.answer == FALLBACK_ANSWER
    assert result.sources == []
    assert result.confidence == 0.0


def test_ask_falls_back_below_confidence_floor(
    health_service: HealthService, llm_client: FakeLlmClient
) -> None:
    health_service.min_confidence = 0.7
    llm_client.answer_text = "Call a vet today."

    result = asyncio.run(health_service.ask("alice", "My calf will not stand"))

    assert result.answer == FALLBACK_ANSWER
    assert result.confidence == 0.6


def test_ask_uploads_image_and_forwards_it(
    health_service: HealthService,
    image_storage: FakeImageStorage,
    llm_client: FakeLlmClient,
) -> None:
    encoded = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()

    asyncio.run(health_service.ask("alice", "What is on this leaf?", encoded))

    [(path, content_type)] = image_storage.uploads
    assert path.startswith("uploads/alice/")
    assert path.endswith(".png")
    assert content_type == "image/png"
    assert llm_client.calls[0]["image_data_url"] == _to_data_url(PNG_BYTES)


def test_ask_continues_when_upload_fails(
    health_service: HealthService,
    image_storage: FakeImageStorage,
    llm_client: FakeLlmClient,
) -> None:
    image_storage.error = RuntimeError("bucket offline")
    encoded = base64.b64encode(PNG_BYTES).decode()

    result = asyncio.run(health_service.ask(None, "What is on this leaf?", encoded))

    assert result.answer == llm_client.answer_text
    assert llm_client.calls[0]["image_data_url"] is not None


def test_ask_raises_upstream_error_when_llm_fails(
    health_service: HealthService, llm_client: FakeLlmClient
) -> None:
    llm_client.error = RuntimeError("timeout")

    with pytest.raises(UpstreamError):
        asyncio.run(health_service.ask("alice", "Why is my maize yellow?"))


def test_score_answer_thresholds() -> None:
    empty = KnowledgeContext(text="", sources=[])

    assert score_answer("short", empty) is None
    assert score_answer("A short reply here.", empty).confidence == 0.6
    assert score_answer("x" * 60, empty).confidence == 0.8


def test_decode_image_rejects_garbage() -> None:
    assert decode_image("not base64 at all!") is None
    assert decode_image(base64.b64encode(PNG_BYTES).decode()) == PNG_BYTES


def test_to_data_url_defaults_to_jpeg() -> None:
    assert _to_data_url(b"unknown").startswith("data:image/jpeg;base64,")
