"""Abstract base class for vector-store service providers.

Defines the gateway the pipeline uses to persist (id, vector, payload)
records and to run nearest-neighbour search over them.  The store is the
only durable owner of chunk data; nothing above this interface caches it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from minirag.models.rag import DistanceMetric, SearchCandidate, VectorRecord


# Concrete implementations: QdrantProvider, ChromaDBProvider
# Located in: minirag/providers/vector_store/
class IVectorStoreProvider(ABC):
    """Contract for vector stores used by the retrieval pipeline.

    All methods are async so network-backed stores do not block the event
    loop.  Concurrent upserts and searches against one collection must be
    safe without caller-side locking.
    """

    @abstractmethod
    async def ensure_collection(
        self,
        name: str,
        dimension: int,
        metric: DistanceMetric = DistanceMetric.COSINE,
    ) -> bool:
        """Create collection *name* unless it already exists.

        Returns
        -------
        bool
            ``True`` if the collection was created by this call, ``False``
            if it already existed.

        Raises
        ------
        minirag.utils.errors.StorageError
            If the existence check or creation fails.
        """

    @abstractmethod
    async def collection_exists(self, name: str) -> bool:
        """Return ``True`` if collection *name* exists.

        Raises
        ------
        minirag.utils.errors.StorageError
            If the store cannot be reached.
        """

    @abstractmethod
    async def upsert(self, collection_name: str, records: list[VectorRecord]) -> int:
        """Insert or overwrite *records* by id.

        Returns
        -------
        int
            Number of records written.

        Raises
        ------
        minirag.utils.errors.StorageError
            If any part of the write fails.  Partial failure is never
            reported as success.
        """

    @abstractmethod
    async def search(
        self,
        collection_name: str,
        query_vector: list[float],
        limit: int,
    ) -> list[SearchCandidate]:
        """Return up to *limit* candidates ordered by descending similarity.

        Raises
        ------
        minirag.utils.errors.StorageError
            If the query fails.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"qdrant"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured."""
