"""Embedding provider adapters."""

from minirag.providers.embedding.cohere_embedding_provider import CohereEmbeddingProvider
from minirag.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider

__all__ = ["CohereEmbeddingProvider", "OpenAIEmbeddingProvider"]
