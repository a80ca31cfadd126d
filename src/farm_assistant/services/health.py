"""Agricultural health Q&A backed by an LLM with knowledge-base context."""

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from typing import Protocol
from uuid import uuid4

from farm_assistant.domain.health import RagAnswer
from farm_assistant.services.errors import UpstreamError
from farm_assistant.services.knowledge import KnowledgeContext, KnowledgeService

_logger = logging.getLogger(__name__)

FALLBACK_ANSWER = (
    "I cannot find a confident answer in my knowledge base. "
    "It is best to consult a certified veterinarian."
)
INSTRUCTIONS = (
    "You are an agricultural assistant helping farmers with crop, livestock "
    "and animal-health questions. Answer plainly and say when a veterinarian "
    "or agronomist should be consulted."
)

_DATA_URL_PREFIX = re.compile(r"^data:image/\w+;base64,")
_EXTENSIONS = {"image/jpeg": "jpg", "image/png": "png", "image/webp": "webp"}


class LlmClient(Protocol):
    """Interface for multimodal LLM completions."""

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
        """Return the model's text answer."""


class ImageStorage(Protocol):
    """Interface for storing uploaded images."""

    def upload(self, path: str, content: bytes, content_type: str) -> str:
        """Store the bytes and return a URL for them."""


@dataclass
class HealthService:
    """Service answering health questions with optional image input."""

    llm_client: LlmClient
    knowledge_service: KnowledgeService
    image_storage: ImageStorage
    model: str
    reasoning_effort: str | None
    store: bool
    min_confidence: float = 0.5

    async def ask(
        self, user_id: str | None, text_query: str, image_base64: str | None = None
    ) -> RagAnswer:
        """Answer a question, falling back to a referral when unsure."""
        owner = user_id or "anonymous"
        _logger.info(
            "Health question received",
            extra={
                "user_id": owner,
                "has_image": bool(image_base64),
                "query_length": len(text_query),
            },
        )

        image_data_url = None
        if image_base64:
            image_bytes = decode_image(image_base64)
            if image_bytes is not None:
                image_data_url = _to_data_url(image_bytes)
                self._upload_image(owner, image_bytes)

        context = await self.knowledge_service.get_context(text_query)
        try:
            answer = await self.llm_client.answer(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                instructions=INSTRUCTIONS,
                prompt=build_prompt(text_query, context),
                image_data_url=image_data_url,
            )
        except Exception as exc:
            _logger.exception("Health question failed", extra={"user_id": owner})
            raise UpstreamError(
                "An unexpected error occurred while processing your query. "
                "Please try again."
            ) from exc

        result = score_answer(answer, context)
        if result is None or result.confidence < self.min_confidence:
            _logger.info(
                "Low confidence health answer",
                extra={
                    "user_id": owner,
                    "confidence": result.confidence if result else 0.0,
                },
            )
            return RagAnswer(
                answer=FALLBACK_ANSWER,
                sources=[],
                confidence=result.confidence if result else 0.0,
            )
        _logger.info(
            "Health question answered",
            extra={
                "user_id": owner,
                "confidence": result.confidence,
                "answer_length": len(result.answer),
            },
        )
        return result

    def _upload_image(self, owner: str, image_bytes: bytes) -> None:
        """Store the image; failures are logged and the query continues."""
        mime_type = _detect_mime_type(image_bytes)
        path = f"uploads/{owner}/{uuid4()}.{_EXTENSIONS[mime_type]}"
        try:
            url = self.image_storage.upload(path, image_bytes, mime_type)
        except Exception:
            _logger.exception(
                "Failed to upload image, continuing with text-only query",
                extra={"user_id": owner},
            )
            return
        _logger.info("Image uploaded", extra={"user_id": owner, "image_url": url})


def build_prompt(text_query: str, context: KnowledgeContext) -> str:
    """Append retrieved context to the user's question."""
    if not context.text:
        return text_query
    return f"{text_query}\n\n{context.text}"


def score_answer(answer: str, context: KnowledgeContext) -> RagAnswer | None:
    """Attach a heuristic confidence to an LLM answer.

    Answers with sources score 0.9, short answers 0.6, everything else 0.8.
    Near-empty answers are treated as no answer.
    """
    answer = answer.strip()
    if len(answer) < 10:
        return None
    confidence = 0.8
    if context.sources:
        confidence = 0.9
    elif len(answer) < 50:
        confidence = 0.6
    return RagAnswer(answer=answer, sources=context.sources, confidence=confidence)


def decode_image(image_base64: str) -> bytes | None:
    """Decode a base64 image, accepting an optional data URL prefix."""
    payload = _DATA_URL_PREFIX.sub("", image_base64.strip())
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        _logger.warning("Ignoring undecodable image payload")
        return None


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
