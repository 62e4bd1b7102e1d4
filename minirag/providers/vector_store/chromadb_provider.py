"""ChromaDB vector store provider adapter.

Wraps ``chromadb.PersistentClient`` to implement :class:`IVectorStoreProvider`.
Fully local and file-backed, so a corpus can be built without running a
Qdrant server.  Chunk text is stored as the Chroma document; the remaining
payload keys go into the metadata dict and are merged back on search.
"""

from __future__ import annotations

import os
from typing import Any

# Set before chromadb is imported; some versions read it at import time.
os.environ.setdefault("ANONYMIZED_TELEMETRY", "False")

import chromadb
import structlog

from minirag.interfaces.vector_store_provider import IVectorStoreProvider
from minirag.models.rag import DistanceMetric, SearchCandidate, VectorRecord
from minirag.utils.errors import StorageError

logger = structlog.get_logger(logger_name=__name__)

_HNSW_SPACES: dict[DistanceMetric, str] = {
    DistanceMetric.COSINE: "cosine",
    DistanceMetric.DOT: "ip",
    DistanceMetric.EUCLID: "l2",
}


class ChromaDBProvider(IVectorStoreProvider):
    """Vector store provider backed by ChromaDB with local persistence."""

    def __init__(self, persist_directory: str = "./data/chromadb") -> None:
        self._persist_directory = persist_directory
        self._client = chromadb.PersistentClient(
            path=persist_directory,
            settings=chromadb.config.Settings(anonymized_telemetry=False),
        )

    async def ensure_collection(
        self,
        name: str,
        dimension: int,
        metric: DistanceMetric = DistanceMetric.COSINE,
    ) -> bool:
        # Chroma collections are untyped; dimension is fixed by the first upsert.
        if await self.collection_exists(name):
            return False

        metadata = {"hnsw:space": _HNSW_SPACES[metric]}
        try:
            # Vectors are always supplied; no Chroma-side embedding model.
            self._client.create_collection(name=name, metadata=metadata, embedding_function=None)
        except Exception as exc:
            raise StorageError(
                message=f"ChromaDB create_collection '{name}' failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.info("chromadb_collection_created", collection=name, dimension=dimension, metric=metric.value)
        return True

    async def collection_exists(self, name: str) -> bool:
        try:
            # list_collections returns names or Collection objects depending on version.
            names = {getattr(c, "name", c) for c in self._client.list_collections()}
        except Exception as exc:
            raise StorageError(
                message=f"ChromaDB list_collections failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        return name in names

    async def upsert(self, collection_name: str, records: list[VectorRecord]) -> int:
        if not records:
            return 0

        collection = self._get_collection(collection_name)
        try:
            collection.upsert(
                ids=[r.id for r in records],
                embeddings=[r.vector for r in records],
                documents=[str(r.payload.get("text", "")) for r in records],
                metadatas=[self._payload_to_metadata(r.payload) for r in records],
            )
        except Exception as exc:
            raise StorageError(
                message=f"ChromaDB upsert of {len(records)} records failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.info("chromadb_upsert", collection=collection_name, count=len(records))
        return len(records)

    async def search(
        self,
        collection_name: str,
        query_vector: list[float],
        limit: int,
    ) -> list[SearchCandidate]:
        collection = self._get_collection(collection_name)
        try:
            count = collection.count()
            if count == 0:
                return []
            results = collection.query(
                query_embeddings=[query_vector],
                n_results=min(limit, count),
                include=["documents", "metadatas", "distances"],
            )
        except Exception as exc:
            raise StorageError(
                message=f"ChromaDB query failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        ids = results["ids"][0] if results["ids"] else []
        documents = results["documents"][0] if results.get("documents") else [""] * len(ids)
        metadatas = results["metadatas"][0] if results.get("metadatas") else [{}] * len(ids)
        distances = results["distances"][0] if results.get("distances") else [0.0] * len(ids)
        space = (collection.metadata or {}).get("hnsw:space", "cosine")

        candidates: list[SearchCandidate] = []
        for chunk_id, doc_text, meta, distance in zip(ids, documents, metadatas, distances, strict=True):
            payload: dict[str, Any] = dict(meta or {})
            payload["text"] = doc_text or ""
            candidates.append(
                SearchCandidate(
                    chunk_id=str(chunk_id),
                    score=self._distance_to_score(float(distance), space),
                    payload=payload,
                )
            )

        candidates.sort(key=lambda c: c.score, reverse=True)
        logger.debug("chromadb_search", collection=collection_name, limit=limit, results=len(candidates))
        return candidates

    def get_provider_name(self) -> str:
        return "chromadb"

    def is_available(self) -> bool:
        try:
            self._client.heartbeat()
            return True
        except Exception:  # noqa: BLE001
            return False

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_collection(self, name: str):  # noqa: ANN202
        try:
            return self._client.get_collection(name=name, embedding_function=None)
        except Exception as exc:
            raise StorageError(
                message=f"ChromaDB collection '{name}' is not available: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    @staticmethod
    def _payload_to_metadata(payload: dict[str, Any]) -> dict[str, Any]:
        """Drop the text (stored as the document) and non-scalar values."""
        return {
            key: value
            for key, value in payload.items()
            if key != "text" and isinstance(value, (str, int, float, bool))
        }

    @staticmethod
    def _distance_to_score(distance: float, space: str) -> float:
        """Convert a Chroma distance into a higher-is-better similarity."""
        if space in ("cosine", "ip"):
            return 1.0 - distance
        return -distance
