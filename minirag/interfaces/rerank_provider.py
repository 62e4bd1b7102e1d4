"""Abstract base class for relevance-reranking providers.

A reranker scores (query, document) pairs jointly, which is more precise
than comparing independently produced embeddings.  The pipeline treats it
as optional: :class:`~minirag.services.reranker.Reranker` falls back to
similarity order whenever a provider is missing or fails.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from minirag.models.rag import RerankResult


# Concrete implementation: CohereRerankProvider (minirag/providers/rerank/)
class IRerankProvider(ABC):
    """Contract for cross-encoder style relevance scoring."""

    @abstractmethod
    async def rerank(
        self,
        query: str,
        documents: list[str],
        top_n: int,
    ) -> list[RerankResult]:
        """Score *documents* against *query*.

        Returns
        -------
        list[RerankResult]
            At most *top_n* entries, most relevant first.  ``index`` refers
            to the position in *documents*.

        Raises
        ------
        minirag.utils.errors.RerankError
            If the API call fails or the response cannot be parsed.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"cohere_rerank"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if credentials are configured."""
