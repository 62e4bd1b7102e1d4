"""Shared pytest fixtures for the minirag test suite."""

from __future__ import annotations

import hashlib
import math
import struct
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from minirag.interfaces.embedding_provider import IEmbeddingProvider
from minirag.interfaces.llm_provider import ILLMProvider
from minirag.interfaces.rerank_provider import IRerankProvider
from minirag.interfaces.vector_store_provider import IVectorStoreProvider
from minirag.models.rag import (
    DistanceMetric,
    EmbeddingMode,
    SearchCandidate,
    VectorRecord,
)
from minirag.pipeline.orchestrator import RAGPipeline
from minirag.services.answer_synthesizer import AnswerSynthesizer
from minirag.services.chunker import TextChunker
from minirag.services.embedding_client import EmbeddingClient
from minirag.services.reranker import Reranker

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# In-memory provider doubles
# ---------------------------------------------------------------------------

EMBEDDING_DIM = 32


def hash_to_vector(text: str, dim: int = EMBEDDING_DIM) -> list[float]:
    """Generate a deterministic unit vector by hashing *text*.

    Same text always produces the same vector, so a query identical to a
    stored chunk's text is its nearest neighbour.
    """
    raw = hashlib.sha256(text.encode("utf-8")).digest()
    while len(raw) < dim * 4:
        raw += hashlib.sha256(raw).digest()
    # Signed ints rather than floats: every 4-byte pattern is a finite value.
    values = list(struct.unpack(f"<{dim}i", raw[: dim * 4]))
    magnitude = max(math.sqrt(sum(v * v for v in values)), 1e-10)
    return [v / magnitude for v in values]


class MockEmbeddingProvider(IEmbeddingProvider):
    """Deterministic hash embeddings that record every call."""

    def __init__(self, batch_limit: int = 96, dimension: int = EMBEDDING_DIM) -> None:
        self.batch_limit = batch_limit
        self.dimension = dimension
        self.calls: list[tuple[list[str], EmbeddingMode]] = []

    async def embed(self, texts: list[str], mode: EmbeddingMode) -> list[list[float]]:
        self.calls.append((list(texts), mode))
        return [hash_to_vector(t, self.dimension) for t in texts]

    def get_dimension(self) -> int:
        return self.dimension

    def get_batch_limit(self) -> int:
        return self.batch_limit

    def get_provider_name(self) -> str:
        return "mock-embedding"

    def is_available(self) -> bool:
        return True


class MockVectorStore(IVectorStoreProvider):
    """Dict-backed vector store ranking by dot product."""

    def __init__(self) -> None:
        self.collections: dict[str, dict[str, VectorRecord]] = {}
        self.ensure_calls = 0

    async def ensure_collection(
        self,
        name: str,
        dimension: int,
        metric: DistanceMetric = DistanceMetric.COSINE,
    ) -> bool:
        self.ensure_calls += 1
        if name in self.collections:
            return False
        self.collections[name] = {}
        return True

    async def collection_exists(self, name: str) -> bool:
        return name in self.collections

    async def upsert(self, collection_name: str, records: list[VectorRecord]) -> int:
        collection = self.collections[collection_name]
        for record in records:
            collection[record.id] = record
        return len(records)

    async def search(
        self,
        collection_name: str,
        query_vector: list[float],
        limit: int,
    ) -> list[SearchCandidate]:
        scored = [
            SearchCandidate(
                chunk_id=record.id,
                score=sum(a * b for a, b in zip(query_vector, record.vector)),
                payload=record.payload,
            )
            for record in self.collections.get(collection_name, {}).values()
        ]
        scored.sort(key=lambda c: c.score, reverse=True)
        return scored[:limit]

    def get_provider_name(self) -> str:
        return "mock-store"

    def is_available(self) -> bool:
        return True


@pytest.fixture
def mock_embedding_provider() -> MockEmbeddingProvider:
    return MockEmbeddingProvider()


@pytest.fixture
def mock_vector_store() -> MockVectorStore:
    return MockVectorStore()


@pytest.fixture
def mock_llm_provider() -> ILLMProvider:
    """Mock ILLMProvider whose ``complete`` returns a cited answer.

    Override with ``mock_llm_provider.complete.return_value = "..."`` or
    ``.side_effect`` for specific tests.
    """
    mock = MagicMock(spec=ILLMProvider)
    mock.get_provider_name.return_value = "mock-llm"
    mock.is_available.return_value = True
    mock.complete = AsyncMock(return_value="The answer is in the documents [1].")
    return mock


@pytest.fixture
def mock_rerank_provider() -> IRerankProvider:
    """Mock IRerankProvider; configure ``rerank`` per test."""
    mock = MagicMock(spec=IRerankProvider)
    mock.get_provider_name.return_value = "mock-rerank"
    mock.is_available.return_value = True
    mock.rerank = AsyncMock(return_value=[])
    return mock


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------


def make_candidate(index: int, score: float | None = None) -> SearchCandidate:
    """Build a search candidate whose text and offsets encode *index*."""
    return SearchCandidate(
        chunk_id=f"chunk-{index}",
        score=score if score is not None else 1.0 - index * 0.01,
        payload={
            "text": f"candidate text {index}",
            "source": "doc.txt",
            "start": index * 850,
            "end": index * 850 + 1000,
            "chunk_index": index,
        },
    )


@pytest.fixture
def sample_document() -> str:
    """A multi-paragraph document long enough to produce several small chunks."""
    paragraphs = [
        "Qdrant is a vector database that stores embeddings with payloads.",
        "Cohere provides embedding and reranking models over a REST API.",
        "Groq serves Llama 3 models behind an OpenAI-compatible endpoint.",
        "Chunks overlap so that sentences spanning a boundary stay retrievable.",
    ]
    return "\n\n".join(paragraphs * 3)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


@pytest.fixture
def pipeline_factory(mock_embedding_provider, mock_vector_store, mock_llm_provider):
    """Return a builder for a RAGPipeline over the in-memory doubles."""

    def _build(
        rerank_provider: IRerankProvider | None = None,
        chunk_size: int = 100,
        overlap: int = 20,
        max_document_chars: int = 100_000,
        top_k: int = 3,
        overfetch: int = 6,
        vector_store: IVectorStoreProvider | None = None,
    ) -> RAGPipeline:
        return RAGPipeline(
            chunker=TextChunker(chunk_size=chunk_size, overlap=overlap, max_chunks=90),
            embedding_client=EmbeddingClient(mock_embedding_provider, batch_size=8),
            vector_store=vector_store or mock_vector_store,
            reranker=Reranker(rerank_provider),
            synthesizer=AnswerSynthesizer(mock_llm_provider),
            collection_name="test_docs",
            top_k=top_k,
            overfetch=overfetch,
            max_document_chars=max_document_chars,
        )

    return _build
