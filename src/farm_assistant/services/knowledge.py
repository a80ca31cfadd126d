"""Agricultural knowledge base retrieval and indexing."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol
from uuid import uuid4

from farm_assistant.domain.health import KnowledgeDocument, KnowledgeMatch

_logger = logging.getLogger(__name__)

CONTEXT_HEADER = "Relevant information from agricultural knowledge base:\n\n"
SUPPORTED_SUFFIXES = (".txt", ".md", ".json")
UPSERT_BATCH_SIZE = 100


class EmbeddingClient(Protocol):
    """Interface for turning text into embedding vectors."""

    async def embed(self, *, model: str, texts: list[str]) -> list[list[float]]:
        """Return one embedding per input text, in order."""


class KnowledgeRepository(Protocol):
    """Persistence interface for the vector index."""

    def match_chunks(self, embedding: list[float], limit: int) -> list[KnowledgeMatch]:
        """Return the chunks most similar to the embedding."""

    def upsert_chunks(
        self, documents: list[KnowledgeDocument], embeddings: list[list[float]]
    ) -> None:
        """Insert or replace indexed chunks."""


@dataclass(frozen=True)
class KnowledgeContext:
    """Retrieved context text and the sources it was built from."""

    text: str
    sources: list[str]


@dataclass
class KnowledgeService:
    """Vector search over the agricultural knowledge base."""

    embedding_client: EmbeddingClient
    repository: KnowledgeRepository
    embedding_model: str
    min_score: float = 0.7
    max_context_chars: int = 2000

    async def search(self, query: str, top_k: int = 5) -> list[KnowledgeMatch]:
        """Return similar chunks, or an empty list when the search fails."""
        try:
            [embedding] = await self.embedding_client.embed(
                model=self.embedding_model, texts=[query]
            )
            return self.repository.match_chunks(embedding, top_k)
        except Exception:
            _logger.exception("Knowledge search failed")
            return []

    async def get_context(self, query: str) -> KnowledgeContext:
        """Build a prompt context from matches above the score threshold."""
        matches = [
            match
            for match in await self.search(query, top_k=5)
            if match.score >= self.min_score
        ]
        if not matches:
            return KnowledgeContext(text="", sources=[])

        text = CONTEXT_HEADER
        sources: list[str] = []
        for match in matches:
            chunk = f"- {match.text}\n  (Source: {match.source})\n\n"
            if len(text) + len(chunk) > self.max_context_chars:
                break
            text += chunk
            if match.source not in sources:
                sources.append(match.source)
        return KnowledgeContext(text=text, sources=sources)

    async def seed_directory(self, input_dir: Path, chunk_size: int = 500) -> int:
        """Chunk, embed and index every supported file under ``input_dir``."""
        if not input_dir.is_dir():
            _logger.error("Knowledge directory not found: %s", input_dir)
            return 0

        documents: list[KnowledgeDocument] = []
        for path in sorted(input_dir.rglob("*")):
            if not path.is_file() or path.suffix.lower() not in SUPPORTED_SUFFIXES:
                continue
            file_documents = build_documents(path, chunk_size)
            _logger.info("Processed %s into %s chunks", path.name, len(file_documents))
            documents.extend(file_documents)

        for start in range(0, len(documents), UPSERT_BATCH_SIZE):
            batch = documents[start : start + UPSERT_BATCH_SIZE]
            embeddings = await self.embedding_client.embed(
                model=self.embedding_model,
                texts=[document.text for document in batch],
            )
            self.repository.upsert_chunks(batch, embeddings)
        return len(documents)


def chunk_text(text: str, chunk_size: int = 500, overlap: int = 50) -> list[str]:
    """Split text into word chunks of roughly ``chunk_size`` characters.

    Each new chunk starts with the last ``overlap`` words of the previous one.
    """
    chunks: list[str] = []
    current: list[str] = []
    length = 0
    for word in text.split():
        if length + len(word) + 1 > chunk_size and current:
            chunks.append(" ".join(current))
            carried = current[-overlap:] if overlap > 0 else []
            current = [*carried, word]
            length = len(" ".join(carried)) + len(word) + 1
        else:
            current.append(word)
            length += len(word) + 1
    if current:
        chunks.append(" ".join(current))
    return chunks


def build_documents(path: Path, chunk_size: int = 500) -> list[KnowledgeDocument]:
    """Read a file and turn it into indexable chunks."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        _logger.exception("Failed to read knowledge file %s", path)
        return []
    chunks = chunk_text(text, chunk_size)
    return [
        KnowledgeDocument(
            id=str(uuid4()),
            text=chunk,
            source=path.name,
            metadata={
                "chunk_index": index,
                "file_path": str(path),
                "total_chunks": len(chunks),
            },
        )
        for index, chunk in enumerate(chunks)
    ]
