"""Rerank provider adapters."""

from minirag.providers.rerank.cohere_rerank_provider import CohereRerankProvider

__all__ = ["CohereRerankProvider"]
