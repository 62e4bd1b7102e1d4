"""Batching front-end for an :class:`IEmbeddingProvider`.

Splits an arbitrary list of texts into consecutive provider-sized batches,
runs them with bounded concurrency, and reassembles the vectors in input
order.  Either every text gets a vector or the call raises: a document
with only some chunks embedded cannot be stored without leaving the rest
silently unsearchable.
"""

from __future__ import annotations

import structlog

from minirag.interfaces.embedding_provider import IEmbeddingProvider
from minirag.models.rag import EmbeddingMode
from minirag.utils.concurrency import throttled_gather
from minirag.utils.errors import EmbeddingError

logger = structlog.get_logger(logger_name=__name__)


class EmbeddingClient:
    """Order-preserving, all-or-nothing batch embedding.

    Parameters
    ----------
    provider:
        The embedding backend.
    batch_size:
        Texts per provider call.  Clamped to the provider's own
        :meth:`~IEmbeddingProvider.get_batch_limit`.
    max_concurrency:
        Upper bound on provider calls in flight for one :meth:`embed`.
    """

    def __init__(
        self,
        provider: IEmbeddingProvider,
        batch_size: int = 96,
        max_concurrency: int = 4,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self._provider = provider
        self._batch_size = min(batch_size, provider.get_batch_limit())
        self._max_concurrency = max_concurrency

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @property
    def dimension(self) -> int:
        return self._provider.get_dimension()

    @property
    def provider_name(self) -> str:
        return self._provider.get_provider_name()

    async def embed(self, texts: list[str], mode: EmbeddingMode) -> list[list[float]]:
        """Embed *texts*, returning one vector per input in the same order.

        Raises
        ------
        EmbeddingError
            If any batch fails or returns the wrong number of vectors.
        """
        if not texts:
            return []

        batches = [
            texts[i : i + self._batch_size] for i in range(0, len(texts), self._batch_size)
        ]
        logger.info(
            "embedding_started",
            provider=self.provider_name,
            mode=mode.value,
            texts=len(texts),
            batches=len(batches),
        )

        results = await throttled_gather(
            [self._embed_batch(batch, mode, n) for n, batch in enumerate(batches)],
            limit=self._max_concurrency,
            return_exceptions=True,
        )

        vectors: list[list[float]] = []
        for batch_number, result in enumerate(results):
            if isinstance(result, BaseException):
                logger.error(
                    "embedding_batch_failed",
                    provider=self.provider_name,
                    batch=batch_number + 1,
                    batches=len(batches),
                    error=str(result),
                )
                if isinstance(result, EmbeddingError):
                    raise result
                if isinstance(result, Exception):
                    raise EmbeddingError(
                        message=f"Embedding batch {batch_number + 1}/{len(batches)} failed: {result}",
                        provider_name=self.provider_name,
                    ) from result
                raise result
            vectors.extend(result)

        return vectors

    async def embed_query(self, text: str) -> list[float]:
        """Embed a single search query in ``QUERY`` mode."""
        vectors = await self.embed([text], EmbeddingMode.QUERY)
        return vectors[0]

    async def _embed_batch(
        self, batch: list[str], mode: EmbeddingMode, batch_number: int
    ) -> list[list[float]]:
        vectors = await self._provider.embed(batch, mode)
        if len(vectors) != len(batch):
            raise EmbeddingError(
                message=(
                    f"Provider returned {len(vectors)} vectors for a batch of {len(batch)} "
                    f"(batch {batch_number + 1})"
                ),
                provider_name=self.provider_name,
            )
        logger.debug(
            "embedding_batch_complete",
            batch=batch_number + 1,
            batch_size=len(batch),
        )
        return vectors
