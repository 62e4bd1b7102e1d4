"""OpenAI-compatible embedding provider adapter.

Wraps the ``openai`` async client to implement :class:`IEmbeddingProvider`.
Works with OpenAI itself and with OpenAI-compatible hosts (TogetherAI,
Fireworks, a local Ollama) via a custom ``base_url``.

The embeddings API has no query/document distinction, so the
:class:`EmbeddingMode` is accepted and logged but not sent.
"""

from __future__ import annotations

import openai
import structlog

from minirag.interfaces.embedding_provider import IEmbeddingProvider
from minirag.models.rag import EmbeddingMode
from minirag.utils.errors import EmbeddingError

logger = structlog.get_logger(logger_name=__name__)

_OPENAI_BATCH_LIMIT = 2048

# Models that accept a ``dimensions`` argument and can be shortened to
# match an existing collection.
_RESIZABLE_MODELS = frozenset({"text-embedding-3-small", "text-embedding-3-large"})

_MODEL_DIMENSIONS: dict[str, int] = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
    "BAAI/bge-large-en-v1.5": 1024,
    "BAAI/bge-base-en-v1.5": 768,
    "nomic-embed-text": 768,
}


class OpenAIEmbeddingProvider(IEmbeddingProvider):
    """Embedding provider backed by an OpenAI-compatible embeddings API.

    When *dimension* is given and the model supports shortening, vectors
    are requested at that size so they fit a collection created for
    another provider (e.g. 1024 for a Cohere-built corpus).
    """

    def __init__(
        self,
        api_key: str,
        model: str = "",
        base_url: str = "",
        dimension: int | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._api_key = api_key
        client_kwargs: dict = {"api_key": api_key, "timeout": timeout}
        if base_url:
            client_kwargs["base_url"] = base_url

        self._client = openai.AsyncOpenAI(**client_kwargs)
        self._model = model or "text-embedding-3-small"
        self._request_dimensions = dimension if self._model in _RESIZABLE_MODELS else None
        self._dimension = dimension or _MODEL_DIMENSIONS.get(self._model, 1024)
        self._provider_label = (
            "openai-compatible_embedding" if base_url else "openai_embedding"
        )

    async def embed(self, texts: list[str], mode: EmbeddingMode) -> list[list[float]]:
        if not texts:
            return []

        kwargs: dict = {"input": texts, "model": self._model}
        if self._request_dimensions:
            kwargs["dimensions"] = self._request_dimensions

        try:
            response = await self._client.embeddings.create(**kwargs)
        except openai.APIError as exc:
            raise EmbeddingError(
                message=f"{self._provider_label} API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        # The API may return items out of order; ``index`` is authoritative.
        items = sorted(response.data, key=lambda item: item.index)
        vectors = [list(item.embedding) for item in items]
        if len(vectors) != len(texts):
            raise EmbeddingError(
                message=f"{self._provider_label} returned {len(vectors)} embeddings for {len(texts)} texts",
                provider_name=self.get_provider_name(),
            )

        logger.debug(
            "openai_embedding_batch",
            model=self._model,
            mode=mode.value,
            batch_size=len(texts),
            tokens=response.usage.total_tokens if response.usage else None,
        )
        return vectors

    def get_dimension(self) -> int:
        return self._dimension

    def get_batch_limit(self) -> int:
        return _OPENAI_BATCH_LIMIT

    def get_provider_name(self) -> str:
        return self._provider_label

    def is_available(self) -> bool:
        """Return ``True`` if an API key is configured."""
        return bool(self._api_key)
