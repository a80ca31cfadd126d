"""Supabase pgvector index for knowledge-base chunks."""

from dataclasses import dataclass

from supabase import Client

from farm_assistant.domain.health import KnowledgeDocument, KnowledgeMatch
from farm_assistant.services.knowledge import KnowledgeRepository


@dataclass
class SupabaseKnowledgeRepository(KnowledgeRepository):
    """Supabase implementation for vector search over knowledge chunks."""

    client: Client
    match_function: str = "match_knowledge_chunks"

    def match_chunks(self, embedding: list[float], limit: int) -> list[KnowledgeMatch]:
        """Call the similarity RPC and return matches best first."""
        response = self.client.rpc(
            self.match_function,
            {"query_embedding": embedding, "match_count": limit},
        ).execute()
        matches = [parse_match_row(row) for row in response.data or []]
        return sorted(matches, key=lambda match: match.score, reverse=True)

    def upsert_chunks(
        self, documents: list[KnowledgeDocument], embeddings: list[list[float]]
    ) -> None:
        """Insert or replace chunks with their embeddings."""
        if len(documents) != len(embeddings):
            raise ValueError("Each document needs exactly one embedding")
        if not documents:
            return
        rows = [
            {
                "id": document.id,
                "content": document.text,
                "source": document.source,
                "metadata": dict(document.metadata),
                "embedding": embedding,
            }
            for document, embedding in zip(documents, embeddings, strict=True)
        ]
        self.client.table("knowledge_chunks").upsert(rows).execute()


def parse_match_row(row: dict[str, object]) -> KnowledgeMatch:
    """Parse a similarity RPC row into a domain model."""
    metadata = row.get("metadata") or {}
    return KnowledgeMatch(
        text=str(row.get("content", "")),
        source=str(row.get("source") or metadata.get("source") or "Unknown"),
        score=float(row.get("similarity", 0.0)),
        metadata=dict(metadata),
    )
