"""Cohere embedding provider adapter.

Calls Cohere's ``/embed`` endpoint with ``input_type`` set from the
:class:`EmbeddingMode`, which is how Cohere v3 models distinguish indexed
passages from search queries.  ``embed-english-v3.0`` returns 1024-dim
vectors and accepts at most 96 texts per request.
"""

from __future__ import annotations

import httpx
import structlog

from minirag.interfaces.embedding_provider import IEmbeddingProvider
from minirag.models.rag import EmbeddingMode
from minirag.providers.cohere_client import CohereClient
from minirag.utils.errors import EmbeddingError

logger = structlog.get_logger(logger_name=__name__)

COHERE_BATCH_LIMIT = 96

_MODEL_DIMENSIONS: dict[str, int] = {
    "embed-english-v3.0": 1024,
    "embed-multilingual-v3.0": 1024,
    "embed-english-light-v3.0": 384,
    "embed-multilingual-light-v3.0": 384,
}


class CohereEmbeddingProvider(IEmbeddingProvider):
    """Embedding provider backed by Cohere's embed API."""

    def __init__(
        self,
        client: CohereClient,
        model: str = "embed-english-v3.0",
        dimension: int | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._dimension = dimension or _MODEL_DIMENSIONS.get(model, 1024)

    async def embed(self, texts: list[str], mode: EmbeddingMode) -> list[list[float]]:
        if not texts:
            return []
        if len(texts) > COHERE_BATCH_LIMIT:
            raise EmbeddingError(
                message=f"batch of {len(texts)} exceeds Cohere limit of {COHERE_BATCH_LIMIT}",
                provider_name=self.get_provider_name(),
            )

        try:
            data = await self._client.post(
                "embed",
                {
                    "texts": texts,
                    "model": self._model,
                    "input_type": mode.value,
                    "truncate": "END",
                },
            )
        except httpx.HTTPStatusError as exc:
            raise EmbeddingError(
                message=f"Cohere embed API returned {exc.response.status_code}: {exc.response.text[:200]}",
                provider_name=self.get_provider_name(),
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise EmbeddingError(
                message=f"Cohere embed request failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        embeddings = data.get("embeddings")
        # embedding_types requests return {"embeddings": {"float": [...]}}
        if isinstance(embeddings, dict):
            embeddings = embeddings.get("float")
        if not isinstance(embeddings, list) or len(embeddings) != len(texts):
            raise EmbeddingError(
                message=(
                    f"Cohere returned {len(embeddings) if isinstance(embeddings, list) else 'no'} "
                    f"embeddings for {len(texts)} texts"
                ),
                provider_name=self.get_provider_name(),
            )

        logger.debug(
            "cohere_embedding_batch",
            model=self._model,
            mode=mode.value,
            batch_size=len(texts),
        )
        return [list(map(float, vector)) for vector in embeddings]

    def get_dimension(self) -> int:
        return self._dimension

    def get_batch_limit(self) -> int:
        return COHERE_BATCH_LIMIT

    def get_provider_name(self) -> str:
        return "cohere_embedding"

    def is_available(self) -> bool:
        return self._client.has_credentials
