"""Models for agricultural Q&A answers and knowledge retrieval."""

from dataclasses import dataclass, field

from pydantic import BaseModel, Field


class RagAnswer(BaseModel):
    """Answer returned to the caller for a health question."""

    answer: str
    sources: list[str] = Field(default_factory=list)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


@dataclass(frozen=True)
class KnowledgeMatch:
    """A knowledge-base chunk returned by vector similarity search."""

    text: str
    source: str
    score: float
    metadata: dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class KnowledgeDocument:
    """A chunk of a source document ready for indexing."""

    id: str
    text: str
    source: str
    metadata: dict[str, object] = field(default_factory=dict)
