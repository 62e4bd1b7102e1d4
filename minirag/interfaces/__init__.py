"""Interfaces for every external service the pipeline talks to.

Business logic depends only on these abstract classes.  Concrete adapters
live in ``minirag/providers/`` and are chosen in ``minirag/main.py``;
tests inject in-memory doubles instead.

    Interface              ->  Concrete implementations
    ------------------------------------------------------------
    IEmbeddingProvider     ->  CohereEmbeddingProvider, OpenAIEmbeddingProvider
    IVectorStoreProvider   ->  QdrantProvider, ChromaDBProvider
    ILLMProvider           ->  OpenAILLMProvider
    IRerankProvider        ->  CohereRerankProvider
"""

from minirag.interfaces.embedding_provider import IEmbeddingProvider
from minirag.interfaces.llm_provider import ILLMProvider
from minirag.interfaces.rerank_provider import IRerankProvider
from minirag.interfaces.vector_store_provider import IVectorStoreProvider

__all__ = [
    "IEmbeddingProvider",
    "ILLMProvider",
    "IRerankProvider",
    "IVectorStoreProvider",
]
