"""Unit tests for the ChromaDB vector store provider.

Runs against a real PersistentClient in a temporary directory; the
static helpers are tested directly.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from minirag.models.rag import DistanceMetric, VectorRecord
from minirag.providers.vector_store.chromadb_provider import ChromaDBProvider
from minirag.utils.errors import StorageError


def _record(record_id: str, vector: list[float], text: str) -> VectorRecord:
    return VectorRecord(
        id=record_id,
        vector=vector,
        payload={
            "text": text,
            "source": "notes.txt",
            "start": 10,
            "end": 20,
            "chunk_index": 1,
            "timestamp": "2024-01-01T00:00:00+00:00",
        },
    )


@pytest.fixture
def provider(tmp_path) -> ChromaDBProvider:
    return ChromaDBProvider(persist_directory=str(tmp_path / "chroma"))


class TestChromaDBProvider:
    @pytest.mark.asyncio
    async def test_ensure_collection_idempotent(self, provider: ChromaDBProvider) -> None:
        assert await provider.ensure_collection("docs", 3) is True
        assert await provider.ensure_collection("docs", 3) is False
        assert await provider.collection_exists("docs") is True

    @pytest.mark.asyncio
    async def test_search_returns_payload_and_similarity_order(
        self, provider: ChromaDBProvider
    ) -> None:
        await provider.ensure_collection("docs", 3, DistanceMetric.COSINE)
        await provider.upsert(
            "docs",
            [
                _record("a", [1.0, 0.0, 0.0], "alpha"),
                _record("b", [0.0, 1.0, 0.0], "beta"),
                _record("c", [0.9, 0.1, 0.0], "gamma"),
            ],
        )

        candidates = await provider.search("docs", [1.0, 0.0, 0.0], limit=2)

        assert [c.chunk_id for c in candidates] == ["a", "c"]
        assert candidates[0].text == "alpha"
        assert candidates[0].source == "notes.txt"
        assert (candidates[0].start, candidates[0].end) == (10, 20)
        assert candidates[0].score == pytest.approx(1.0, abs=1e-4)

    @pytest.mark.asyncio
    async def test_limit_larger_than_collection(self, provider: ChromaDBProvider) -> None:
        await provider.ensure_collection("docs", 2)
        await provider.upsert("docs", [_record("a", [1.0, 0.0], "only")])

        assert len(await provider.search("docs", [1.0, 0.0], limit=16)) == 1

    @pytest.mark.asyncio
    async def test_empty_collection_returns_nothing(self, provider: ChromaDBProvider) -> None:
        await provider.ensure_collection("docs", 2)
        assert await provider.search("docs", [1.0, 0.0], limit=5) == []

    @pytest.mark.asyncio
    async def test_missing_collection_raises_storage_error(
        self, provider: ChromaDBProvider
    ) -> None:
        with pytest.raises(StorageError):
            await provider.upsert("missing", [_record("a", [1.0], "x")])

    @pytest.mark.asyncio
    async def test_list_failure_wrapped(self, provider: ChromaDBProvider) -> None:
        provider._client = MagicMock()
        provider._client.list_collections.side_effect = RuntimeError("disk full")

        with pytest.raises(StorageError, match="disk full"):
            await provider.collection_exists("docs")

    def test_is_available(self, provider: ChromaDBProvider) -> None:
        assert provider.is_available() is True
        assert provider.get_provider_name() == "chromadb"


class TestHelpers:
    def test_payload_to_metadata_drops_text_and_non_scalars(self) -> None:
        meta = ChromaDBProvider._payload_to_metadata(
            {"text": "body", "source": "a.txt", "start": 0, "tags": ["x"], "score": 0.5}
        )
        assert meta == {"source": "a.txt", "start": 0, "score": 0.5}

    @pytest.mark.parametrize(
        ("distance", "space", "expected"),
        [(0.25, "cosine", 0.75), (0.25, "ip", 0.75), (4.0, "l2", -4.0)],
    )
    def test_distance_to_score(self, distance: float, space: str, expected: float) -> None:
        assert ChromaDBProvider._distance_to_score(distance, space) == expected
