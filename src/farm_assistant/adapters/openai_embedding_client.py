"""OpenAI embeddings client for the knowledge base."""

from dataclasses import dataclass

import httpx
from openai import AsyncOpenAI

from farm_assistant.services.knowledge import EmbeddingClient


@dataclass
class OpenAIEmbeddingClient(EmbeddingClient):
    """Embedding client backed by OpenAI embeddings API."""

    client: AsyncOpenAI

    @classmethod
    def create(
        cls, api_key: str, timeout_seconds: float = 30.0
    ) -> "OpenAIEmbeddingClient":
        """Create an OpenAI embedding client."""
        return cls(
            client=AsyncOpenAI(
                api_key=api_key,
                http_client=httpx.AsyncClient(timeout=timeout_seconds),
            )
        )

    async def embed(self, *, model: str, texts: list[str]) -> list[list[float]]:
        """Return one embedding per text, preserving input order."""
        if not texts:
            return []
        response = await self.client.embeddings.create(model=model, input=texts)
        ordered = sorted(response.data, key=lambda item: item.index)
        return [list(item.embedding) for item in ordered]

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.close()
