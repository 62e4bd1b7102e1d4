"""Unit tests for the OpenAI-compatible embedding provider."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import openai
import pytest

from minirag.models.rag import EmbeddingMode
from minirag.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider
from minirag.utils.errors import EmbeddingError

_PATCH_TARGET = "minirag.providers.embedding.openai_embedding_provider.openai.AsyncOpenAI"


def _response(vectors: list[list[float]], order: list[int] | None = None) -> MagicMock:
    order = order or list(range(len(vectors)))
    response = MagicMock()
    response.data = [MagicMock(index=i, embedding=vectors[i]) for i in order]
    response.usage = MagicMock(total_tokens=12)
    return response


class TestOpenAIEmbeddingProvider:
    def test_is_available_with_key(self) -> None:
        assert OpenAIEmbeddingProvider(api_key="sk-test").is_available() is True

    def test_is_available_without_key(self) -> None:
        assert OpenAIEmbeddingProvider(api_key="").is_available() is False

    def test_dimension_defaults_to_model(self) -> None:
        provider = OpenAIEmbeddingProvider(api_key="sk-test", model="text-embedding-3-small")
        assert provider.get_dimension() == 1536

    def test_provider_label(self) -> None:
        assert OpenAIEmbeddingProvider(api_key="k").get_provider_name() == "openai_embedding"
        compatible = OpenAIEmbeddingProvider(api_key="k", base_url="https://api.together.xyz/v1")
        assert compatible.get_provider_name() == "openai-compatible_embedding"

    @pytest.mark.asyncio
    async def test_embed_requests_dimensions_and_sorts_by_index(self) -> None:
        mock_client = AsyncMock()
        mock_client.embeddings.create = AsyncMock(
            return_value=_response([[0.1], [0.2], [0.3]], order=[2, 0, 1])
        )

        with patch(_PATCH_TARGET, return_value=mock_client):
            provider = OpenAIEmbeddingProvider(
                api_key="sk-test", model="text-embedding-3-small", dimension=1024
            )
            vectors = await provider.embed(["a", "b", "c"], EmbeddingMode.DOCUMENT)

        assert vectors == [[0.1], [0.2], [0.3]]
        kwargs = mock_client.embeddings.create.call_args.kwargs
        assert kwargs["dimensions"] == 1024
        assert kwargs["input"] == ["a", "b", "c"]
        assert provider.get_dimension() == 1024

    @pytest.mark.asyncio
    async def test_fixed_size_model_gets_no_dimensions_argument(self) -> None:
        mock_client = AsyncMock()
        mock_client.embeddings.create = AsyncMock(return_value=_response([[0.5]]))

        with patch(_PATCH_TARGET, return_value=mock_client):
            provider = OpenAIEmbeddingProvider(api_key="k", model="text-embedding-ada-002")
            await provider.embed(["a"], EmbeddingMode.QUERY)

        assert "dimensions" not in mock_client.embeddings.create.call_args.kwargs

    @pytest.mark.asyncio
    async def test_api_error_becomes_embedding_error(self) -> None:
        mock_client = AsyncMock()
        mock_client.embeddings.create = AsyncMock(
            side_effect=openai.APIError(message="Rate limit", request=MagicMock(), body=None)
        )

        with patch(_PATCH_TARGET, return_value=mock_client):
            provider = OpenAIEmbeddingProvider(api_key="sk-test")
            with pytest.raises(EmbeddingError, match="Rate limit"):
                await provider.embed(["test"], EmbeddingMode.DOCUMENT)

    @pytest.mark.asyncio
    async def test_count_mismatch(self) -> None:
        mock_client = AsyncMock()
        mock_client.embeddings.create = AsyncMock(return_value=_response([[0.1]]))

        with patch(_PATCH_TARGET, return_value=mock_client):
            provider = OpenAIEmbeddingProvider(api_key="sk-test")
            with pytest.raises(EmbeddingError):
                await provider.embed(["a", "b"], EmbeddingMode.DOCUMENT)
