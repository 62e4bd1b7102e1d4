"""minirag composition root.

Builds every provider and service from :class:`Settings` and wires them
into a :class:`RAGPipeline`.  This is the only module that knows which
concrete providers exist; everything else depends on the interfaces in
:mod:`minirag.interfaces`.

Typical use from a script or the CLI::

    async with pipeline_session() as pipeline:
        await pipeline.ensure_ready()
        answer = await pipeline.query("What is chunk overlap?")
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import structlog

from minirag.config import get_settings
from minirag.config.settings import Settings
from minirag.interfaces.embedding_provider import IEmbeddingProvider
from minirag.interfaces.llm_provider import ILLMProvider
from minirag.interfaces.rerank_provider import IRerankProvider
from minirag.interfaces.vector_store_provider import IVectorStoreProvider
from minirag.pipeline.orchestrator import RAGPipeline
from minirag.providers.cohere_client import CohereClient
from minirag.providers.embedding.cohere_embedding_provider import CohereEmbeddingProvider
from minirag.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider
from minirag.providers.llm.openai_provider import OpenAILLMProvider
from minirag.providers.rerank.cohere_rerank_provider import CohereRerankProvider
from minirag.services.answer_synthesizer import AnswerSynthesizer
from minirag.services.chunker import TextChunker
from minirag.services.embedding_client import EmbeddingClient
from minirag.services.reranker import Reranker
from minirag.utils.errors import ConfigurationError
from minirag.utils.logging import configure_logging

logger = structlog.get_logger(logger_name=__name__)


# ---------------------------------------------------------------------------
# Provider factories
# ---------------------------------------------------------------------------


def _build_embedding_provider(s: Settings, cohere: CohereClient) -> IEmbeddingProvider:
    """Select the embedding provider named by ``embedding_provider``.

    Raises
    ------
    ConfigurationError
        If the provider is unknown or has no API key.
    """
    name = s.embedding_provider.lower()
    if name == "cohere":
        if not cohere.has_credentials:
            raise ConfigurationError(
                message="COHERE_API_KEY is required for the cohere embedding provider",
                provider_name="cohere_embedding",
            )
        return CohereEmbeddingProvider(
            client=cohere,
            model=s.cohere_embed_model,
            dimension=s.embedding_dimension,
        )
    if name == "openai":
        if not s.openai_api_key:
            raise ConfigurationError(
                message="OPENAI_API_KEY is required for the openai embedding provider",
                provider_name="openai_embedding",
            )
        return OpenAIEmbeddingProvider(
            api_key=s.openai_api_key,
            model=s.openai_embedding_model,
            base_url=s.openai_base_url,
            dimension=s.embedding_dimension,
            timeout=s.provider_timeout_seconds,
        )
    raise ConfigurationError(message=f"Unknown embedding provider: {s.embedding_provider!r}")


def _build_vector_store(s: Settings) -> IVectorStoreProvider:
    """Select the vector store named by ``vector_store_provider``.

    ChromaDB is imported lazily so a Qdrant-only deployment never loads it.
    """
    name = s.vector_store_provider.lower()
    if name == "qdrant":
        from minirag.providers.vector_store.qdrant_provider import QdrantProvider

        return QdrantProvider(
            url=s.qdrant_url,
            api_key=s.qdrant_api_key,
            wait=s.upsert_wait,
            timeout=s.provider_timeout_seconds,
        )
    if name == "chromadb":
        from minirag.providers.vector_store.chromadb_provider import ChromaDBProvider

        return ChromaDBProvider(persist_directory=s.chromadb_persist_dir)
    raise ConfigurationError(message=f"Unknown vector store provider: {s.vector_store_provider!r}")


def _build_llm_provider(s: Settings) -> ILLMProvider:
    """Build the completion provider (Groq via the OpenAI-compatible API)."""
    provider = OpenAILLMProvider(
        api_key=s.groq_api_key,
        model=s.llm_model,
        base_url=s.llm_base_url,
        timeout=s.provider_timeout_seconds,
    )
    if not provider.is_available():
        # Ingestion still works; queries will return the fallback answer.
        logger.warning("llm_provider_not_configured", provider=provider.get_provider_name())
    return provider


def _build_rerank_provider(s: Settings, cohere: CohereClient) -> IRerankProvider | None:
    """Return the Cohere reranker, or ``None`` when disabled or unconfigured."""
    if not s.rerank_enabled:
        return None
    if not cohere.has_credentials:
        logger.warning("rerank_disabled_no_credentials")
        return None
    return CohereRerankProvider(client=cohere, model=s.cohere_rerank_model)


# ---------------------------------------------------------------------------
# Pipeline assembly
# ---------------------------------------------------------------------------


def build_pipeline(
    http_client: httpx.AsyncClient,
    custom_settings: Settings | None = None,
    vector_store: IVectorStoreProvider | None = None,
) -> RAGPipeline:
    """Construct a :class:`RAGPipeline` with injected dependencies.

    Parameters
    ----------
    http_client:
        Shared client for the Cohere REST calls.  The caller owns it and
        must close it; :func:`pipeline_session` does that for you.
    custom_settings:
        Application settings.  Uses :func:`get_settings` if not provided.
    vector_store:
        Overrides the store selected by settings (tests, embedded use).
    """
    s = custom_settings or get_settings()
    cohere = CohereClient(
        api_key=s.cohere_api_key, http_client=http_client, base_url=s.cohere_base_url
    )

    embedding_provider = _build_embedding_provider(s, cohere)
    store = vector_store or _build_vector_store(s)
    rerank_provider = _build_rerank_provider(s, cohere)
    llm = _build_llm_provider(s)

    logger.info(
        "pipeline_built",
        embedding=embedding_provider.get_provider_name(),
        vector_store=store.get_provider_name(),
        rerank=rerank_provider.get_provider_name() if rerank_provider else None,
        llm=llm.get_provider_name(),
        collection=s.collection_name,
    )

    return RAGPipeline(
        chunker=TextChunker(
            chunk_size=s.chunk_size,
            overlap=s.chunk_overlap,
            max_chunks=s.max_chunks,
        ),
        embedding_client=EmbeddingClient(
            embedding_provider,
            batch_size=s.embed_batch_size,
            max_concurrency=s.embed_max_concurrency,
        ),
        vector_store=store,
        reranker=Reranker(rerank_provider),
        synthesizer=AnswerSynthesizer(
            llm,
            temperature=s.llm_temperature,
            max_tokens=s.llm_max_tokens,
        ),
        collection_name=s.collection_name,
        distance_metric=s.distance_metric,
        top_k=s.rag_top_k,
        overfetch=s.rag_overfetch,
        max_document_chars=s.max_document_chars,
    )


@asynccontextmanager
async def pipeline_session(
    custom_settings: Settings | None = None,
) -> AsyncIterator[RAGPipeline]:
    """Build a pipeline and release its network clients on exit."""
    s = custom_settings or get_settings()
    configure_logging(log_level=s.log_level, app_env=s.app_env)

    async with httpx.AsyncClient(timeout=s.provider_timeout_seconds) as http:
        store = _build_vector_store(s)
        try:
            yield build_pipeline(http, s, vector_store=store)
        finally:
            close = getattr(store, "close", None)
            if close is not None:
                await close()
