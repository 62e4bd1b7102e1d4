"""Query-side candidate retrieval: embed the query, search the store."""

from __future__ import annotations

import structlog

from minirag.interfaces.vector_store_provider import IVectorStoreProvider
from minirag.models.rag import SearchCandidate
from minirag.services.embedding_client import EmbeddingClient

logger = structlog.get_logger(logger_name=__name__)


class Retriever:
    """Produces an over-fetched candidate pool for the reranker.

    Vector similarity is only a coarse filter, so the retriever asks the
    store for more candidates than the final answer will cite and leaves
    the final selection to :class:`~minirag.services.reranker.Reranker`.
    """

    def __init__(
        self,
        embedding_client: EmbeddingClient,
        vector_store: IVectorStoreProvider,
        collection_name: str,
    ) -> None:
        self._embedding_client = embedding_client
        self._vector_store = vector_store
        self._collection_name = collection_name

    async def retrieve(self, query: str, overfetch: int) -> list[SearchCandidate]:
        """Return up to *overfetch* candidates for *query*, best first.

        Raises
        ------
        minirag.utils.errors.EmbeddingError
            If the query cannot be embedded.
        minirag.utils.errors.StorageError
            If the search fails.
        """
        if overfetch < 1:
            raise ValueError(f"overfetch must be >= 1, got {overfetch}")

        query_vector = await self._embedding_client.embed_query(query)
        candidates = await self._vector_store.search(
            self._collection_name, query_vector, overfetch
        )
        logger.info(
            "retrieval_complete",
            collection=self._collection_name,
            requested=overfetch,
            returned=len(candidates),
            top_score=candidates[0].score if candidates else 0.0,
        )
        return candidates
