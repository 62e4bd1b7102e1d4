"""Abstract base class for text-embedding service providers.

Defines the contract for turning text into fixed-dimension vectors.
Implementations wrap Cohere's embed API or any OpenAI-compatible
embeddings endpoint.  Batching across the provider's per-call ceiling is
the job of :class:`~minirag.services.embedding_client.EmbeddingClient`;
a provider only ever receives one batch at a time.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from minirag.models.rag import EmbeddingMode


# Concrete implementations:
#   CohereEmbeddingProvider  -- embed-english-v3.0, 1024 dims, 96 texts per call
#   OpenAIEmbeddingProvider  -- OpenAI-compatible /embeddings endpoint
# Located in: minirag/providers/embedding/
class IEmbeddingProvider(ABC):
    """Contract for embedding services used by ingestion and retrieval."""

    @abstractmethod
    async def embed(self, texts: list[str], mode: EmbeddingMode) -> list[list[float]]:
        """Generate embedding vectors for a single batch of texts.

        Parameters
        ----------
        texts:
            At most :meth:`get_batch_limit` strings.
        mode:
            ``DOCUMENT`` when indexing chunks, ``QUERY`` when embedding a
            search query.  Providers whose API distinguishes the two must
            forward it.

        Returns
        -------
        list[list[float]]
            Vectors corresponding positionally to *texts*.

        Raises
        ------
        minirag.utils.errors.EmbeddingError
            If the API call fails or the response cannot be parsed.
        """

    @abstractmethod
    def get_dimension(self) -> int:
        """Return the dimensionality of the produced vectors."""

    @abstractmethod
    def get_batch_limit(self) -> int:
        """Return the maximum number of texts accepted per call."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"cohere_embedding"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if credentials are configured."""
