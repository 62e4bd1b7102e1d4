"""Qdrant vector store provider adapter.

Wraps ``qdrant_client.AsyncQdrantClient`` to implement
:class:`IVectorStoreProvider`.  Pass ``location=":memory:"`` for the
in-process store qdrant-client ships with (used by the test suite).
"""

from __future__ import annotations

import structlog
from qdrant_client import AsyncQdrantClient, models

from minirag.interfaces.vector_store_provider import IVectorStoreProvider
from minirag.models.rag import DistanceMetric, SearchCandidate, VectorRecord
from minirag.utils.errors import StorageError

logger = structlog.get_logger(logger_name=__name__)

_DISTANCES: dict[DistanceMetric, models.Distance] = {
    DistanceMetric.COSINE: models.Distance.COSINE,
    DistanceMetric.DOT: models.Distance.DOT,
    DistanceMetric.EUCLID: models.Distance.EUCLID,
}


class QdrantProvider(IVectorStoreProvider):
    """Vector store provider backed by a Qdrant server or local instance.

    Parameters
    ----------
    url:
        Qdrant HTTP endpoint, e.g. ``http://localhost:6333``.
    api_key:
        Qdrant Cloud API key; empty for unauthenticated servers.
    location:
        Alternative to *url*; ``":memory:"`` runs Qdrant in-process.
    wait:
        Passed to every upsert.  ``True`` returns only after the points
        are indexed, so a document is searchable as soon as ingestion
        reports success.
    timeout:
        Request timeout in seconds.
    """

    def __init__(
        self,
        url: str | None = None,
        api_key: str | None = None,
        location: str | None = None,
        wait: bool = True,
        timeout: float = 30.0,
    ) -> None:
        if location:
            self._client = AsyncQdrantClient(location=location)
        else:
            self._client = AsyncQdrantClient(
                url=url,
                api_key=api_key or None,
                timeout=int(timeout),
            )
        self._endpoint = location or url or ""
        self._wait = wait

    async def ensure_collection(
        self,
        name: str,
        dimension: int,
        metric: DistanceMetric = DistanceMetric.COSINE,
    ) -> bool:
        if await self.collection_exists(name):
            return False
        try:
            await self._client.create_collection(
                collection_name=name,
                vectors_config=models.VectorParams(size=dimension, distance=_DISTANCES[metric]),
            )
        except Exception as exc:
            raise StorageError(
                message=f"Qdrant create_collection '{name}' failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.info("qdrant_collection_created", collection=name, dimension=dimension, metric=metric.value)
        return True

    async def collection_exists(self, name: str) -> bool:
        try:
            return await self._client.collection_exists(collection_name=name)
        except Exception as exc:
            raise StorageError(
                message=f"Qdrant collection_exists '{name}' failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    async def upsert(self, collection_name: str, records: list[VectorRecord]) -> int:
        if not records:
            return 0

        points = [
            models.PointStruct(id=record.id, vector=record.vector, payload=record.payload)
            for record in records
        ]
        try:
            await self._client.upsert(
                collection_name=collection_name,
                points=points,
                wait=self._wait,
            )
        except Exception as exc:
            raise StorageError(
                message=f"Qdrant upsert of {len(points)} points failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.info("qdrant_upsert", collection=collection_name, count=len(points), wait=self._wait)
        return len(points)

    async def search(
        self,
        collection_name: str,
        query_vector: list[float],
        limit: int,
    ) -> list[SearchCandidate]:
        try:
            response = await self._client.query_points(
                collection_name=collection_name,
                query=query_vector,
                limit=limit,
                with_payload=True,
            )
        except Exception as exc:
            raise StorageError(
                message=f"Qdrant search failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        candidates = [
            SearchCandidate(
                chunk_id=str(point.id),
                score=float(point.score),
                payload=dict(point.payload or {}),
            )
            for point in response.points
        ]
        logger.debug(
            "qdrant_search",
            collection=collection_name,
            limit=limit,
            results=len(candidates),
            top_score=candidates[0].score if candidates else 0.0,
        )
        return candidates

    def get_provider_name(self) -> str:
        return "qdrant"

    def is_available(self) -> bool:
        return bool(self._endpoint)

    async def close(self) -> None:
        await self._client.close()
