"""Data models for the retrieval pipeline.

Pydantic v2 models for chunks, vector records, search candidates, ranked
sources and answers.  All models are frozen: a chunk never changes after
the chunker creates it, and a ranked source list must not be reordered
after the answer citing it has been generated.

Flow of objects through one request:

    ingest:  text -> Chunk[] -> VectorRecord[] -> (vector store)
    query:   text -> SearchCandidate[] -> RankedSource[] -> Answer
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field

DEFAULT_SOURCE_FILENAME = "pasted_text"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class EmbeddingMode(str, Enum):
    """Which side of a search an embedding is produced for."""

    DOCUMENT = "search_document"
    QUERY = "search_query"


class DistanceMetric(str, Enum):
    """Similarity metric a collection is created with."""

    COSINE = "cosine"
    DOT = "dot"
    EUCLID = "euclid"


class ReadinessState(str, Enum):
    """Lifecycle of :meth:`RAGPipeline.ensure_ready`."""

    UNINITIALIZED = "uninitialized"
    READY = "ready"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Ingestion side
# ---------------------------------------------------------------------------

class Document(BaseModel):
    """Raw text submitted for ingestion.  Discarded once chunked."""

    model_config = ConfigDict(frozen=True)

    text: str
    filename: str = DEFAULT_SOURCE_FILENAME


class Chunk(BaseModel):
    """A contiguous window of a document, the unit of embedding and retrieval.

    ``start`` and ``end`` are character offsets into the (possibly
    truncated) source document, so ``text == document[start:end]``.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique identifier (UUID4) shared with the vector record.")
    text: str = Field(description="The chunk's textual content.")
    start: int = Field(ge=0, description="Inclusive start offset in the source document.")
    end: int = Field(ge=0, description="Exclusive end offset in the source document.")
    chunk_index: int = Field(ge=0, description="0-based position in the document's chunk sequence.")
    source_filename: str = Field(default=DEFAULT_SOURCE_FILENAME)
    created_at: datetime = Field(default_factory=_utcnow)

    def to_payload(self) -> dict[str, Any]:
        """Return the metadata stored next to the chunk's vector."""
        return {
            "text": self.text,
            "source": self.source_filename,
            "start": self.start,
            "end": self.end,
            "chunk_index": self.chunk_index,
            "timestamp": self.created_at.isoformat(),
        }


class VectorRecord(BaseModel):
    """An (id, vector, payload) triple as persisted in the vector store."""

    model_config = ConfigDict(frozen=True)

    id: str
    vector: list[float]
    payload: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_chunk(cls, chunk: Chunk, vector: list[float]) -> VectorRecord:
        return cls(id=chunk.id, vector=vector, payload=chunk.to_payload())


class IngestionResult(BaseModel):
    """Summary of one :meth:`RAGPipeline.ingest` call."""

    model_config = ConfigDict(frozen=True)

    filename: str
    chunk_count: int = Field(ge=0)
    truncated: bool = False
    original_length: int = Field(default=0, ge=0)
    processing_time_ms: float = Field(default=0.0, ge=0.0)


# ---------------------------------------------------------------------------
# Query side
# ---------------------------------------------------------------------------

class SearchCandidate(BaseModel):
    """One hit from a vector similarity search."""

    model_config = ConfigDict(frozen=True)

    chunk_id: str
    score: float = 0.0
    payload: dict[str, Any] = Field(default_factory=dict)

    @property
    def text(self) -> str:
        return str(self.payload.get("text", ""))

    @property
    def source(self) -> str:
        return str(self.payload.get("source") or "Unknown")

    @property
    def start(self) -> int:
        return int(self.payload.get("start") or 0)

    @property
    def end(self) -> int:
        return int(self.payload.get("end") or 0)


class RerankResult(BaseModel):
    """One entry of a reranking provider's response."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0, description="Position of the document in the submitted list.")
    relevance_score: float


class RankedSource(BaseModel):
    """A source in its final position, as cited by the answer.

    ``rank`` is the bracketed index used in the answer text.  It is
    positional, not an identity: ``[2]`` means the second entry of the
    list the answer was synthesized from.
    """

    model_config = ConfigDict(frozen=True)

    rank: int = Field(ge=1)
    text: str
    source_filename: str = "Unknown"
    start: int = 0
    end: int = 0
    similarity_score: float = 0.0
    relevance_score: float | None = None

    @classmethod
    def from_candidate(
        cls,
        candidate: SearchCandidate,
        rank: int,
        relevance_score: float | None = None,
    ) -> RankedSource:
        return cls(
            rank=rank,
            text=candidate.text,
            source_filename=candidate.source,
            start=candidate.start,
            end=candidate.end,
            similarity_score=candidate.score,
            relevance_score=relevance_score,
        )


class Answer(BaseModel):
    """Response to one query: generated text plus the sources it cites."""

    model_config = ConfigDict(frozen=True)

    query: str
    text: str
    sources: list[RankedSource] = Field(default_factory=list)
    processing_time_ms: float = Field(default=0.0, ge=0.0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def chunk_count(self) -> int:
        return len(self.sources)


class HealthStatus(BaseModel):
    """Reachability of the vector store and its collection."""

    model_config = ConfigDict(frozen=True)

    status: str
    vector_store: str
    collection: str
    collection_exists: bool = False
    detail: str | None = None

    @property
    def healthy(self) -> bool:
        return self.status == "healthy"
