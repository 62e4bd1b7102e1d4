"""Ingestion and query orchestration for the retrieval pipeline.

:class:`RAGPipeline` wires the chunker, embedding client, vector store,
retriever, reranker and synthesizer into the two public flows:

    ingest:  text -> chunks -> vectors -> records -> upsert
    query:   text -> candidates -> ranked sources -> answer

All collaborators are injected; the pipeline never constructs a provider.
The only state it holds is the readiness of the target collection, which
is established once by :meth:`ensure_ready` before any other operation.
"""

from __future__ import annotations

import time

import structlog

from minirag.interfaces.vector_store_provider import IVectorStoreProvider
from minirag.models.rag import (
    DEFAULT_SOURCE_FILENAME,
    Answer,
    DistanceMetric,
    Document,
    EmbeddingMode,
    HealthStatus,
    IngestionResult,
    ReadinessState,
    VectorRecord,
)
from minirag.services.answer_synthesizer import AnswerSynthesizer
from minirag.services.chunker import TextChunker
from minirag.services.embedding_client import EmbeddingClient
from minirag.services.reranker import Reranker
from minirag.services.retriever import Retriever
from minirag.utils.errors import ConfigurationError, InputError, MiniRAGError
from minirag.utils.logging import get_logger


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RAGPipeline:
    """Retrieval-augmented question answering over ingested documents.

    Parameters
    ----------
    chunker, embedding_client, vector_store, reranker, synthesizer:
        Injected collaborators.
    collection_name:
        Collection every record is written to and searched in.
    distance_metric:
        Metric used if :meth:`ensure_ready` has to create the collection.
    top_k:
        Number of sources an answer is synthesized from.
    overfetch:
        Number of search candidates handed to the reranker.
    max_document_chars:
        Documents longer than this are truncated before chunking.
    """

    def __init__(
        self,
        chunker: TextChunker,
        embedding_client: EmbeddingClient,
        vector_store: IVectorStoreProvider,
        reranker: Reranker,
        synthesizer: AnswerSynthesizer,
        collection_name: str = "mini_rag_docs",
        distance_metric: DistanceMetric = DistanceMetric.COSINE,
        top_k: int = 5,
        overfetch: int = 16,
        max_document_chars: int = 100_000,
    ) -> None:
        if top_k < 1:
            raise ValueError(f"top_k must be >= 1, got {top_k}")
        if overfetch < top_k:
            raise ValueError(f"overfetch ({overfetch}) must be >= top_k ({top_k})")

        self._chunker = chunker
        self._embedding_client = embedding_client
        self._vector_store = vector_store
        self._reranker = reranker
        self._synthesizer = synthesizer
        self._collection_name = collection_name
        self._distance_metric = distance_metric
        self._top_k = top_k
        self._overfetch = overfetch
        self._max_document_chars = max_document_chars
        self._retriever = Retriever(embedding_client, vector_store, collection_name)
        self._state = ReadinessState.UNINITIALIZED
        self._logger: structlog.BoundLogger = get_logger(__name__)

    @property
    def state(self) -> ReadinessState:
        return self._state

    @property
    def collection_name(self) -> str:
        return self._collection_name

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def ensure_ready(self) -> None:
        """Make sure the target collection exists.

        Idempotent once it succeeds.  A failure leaves the pipeline in
        ``FAILED`` and raises; calling again retries.

        Raises
        ------
        ConfigurationError
            If the collection cannot be checked or created.
        """
        if self._state == ReadinessState.READY:
            return

        try:
            created = await self._vector_store.ensure_collection(
                self._collection_name,
                self._embedding_client.dimension,
                self._distance_metric,
            )
        except MiniRAGError as exc:
            self._state = ReadinessState.FAILED
            self._logger.error(
                "pipeline_init_failed",
                collection=self._collection_name,
                vector_store=self._vector_store.get_provider_name(),
                error=str(exc),
            )
            raise ConfigurationError(
                message=f"Vector store collection '{self._collection_name}' is not available: {exc}",
                provider_name=self._vector_store.get_provider_name(),
            ) from exc

        self._state = ReadinessState.READY
        self._logger.info(
            "pipeline_ready",
            collection=self._collection_name,
            created=created,
            dimension=self._embedding_client.dimension,
            metric=self._distance_metric.value,
        )

    def _require_ready(self) -> None:
        if self._state != ReadinessState.READY:
            raise ConfigurationError(
                message=f"Pipeline is not ready (state: {self._state.value}); call ensure_ready() first"
            )

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    async def ingest(self, text: str, filename: str | None = None) -> IngestionResult:
        """Ingest *text* under *filename* (``pasted_text`` when omitted)."""
        return await self.ingest_document(
            Document(text=text, filename=filename or DEFAULT_SOURCE_FILENAME)
        )

    async def ingest_document(self, document: Document) -> IngestionResult:
        """Chunk, embed and store *document*.

        Either every chunk is stored or the call raises; there is no
        partial success.

        Raises
        ------
        InputError
            If the document text is empty or whitespace only.
        ConfigurationError
            If :meth:`ensure_ready` has not succeeded.
        EmbeddingError, StorageError
            If a provider call fails.
        """
        text = document.text
        if not text.strip():
            raise InputError("No text provided")
        self._require_ready()

        started = time.perf_counter()
        source = document.filename
        original_length = len(text)
        truncated = original_length > self._max_document_chars
        if truncated:
            text = text[: self._max_document_chars]
            self._logger.warning(
                "document_truncated",
                source=source,
                original_length=original_length,
                max_chars=self._max_document_chars,
            )

        chunks = self._chunker.chunk(text, source)
        vectors = await self._embedding_client.embed(
            [chunk.text for chunk in chunks], EmbeddingMode.DOCUMENT
        )
        records = [VectorRecord.from_chunk(chunk, vector) for chunk, vector in zip(chunks, vectors)]
        written = await self._vector_store.upsert(self._collection_name, records)

        result = IngestionResult(
            filename=source,
            chunk_count=written,
            truncated=truncated,
            original_length=original_length,
            processing_time_ms=_elapsed_ms(started),
        )
        self._logger.info(
            "document_ingested",
            source=source,
            chunks=result.chunk_count,
            truncated=truncated,
            processing_time_ms=result.processing_time_ms,
        )
        return result

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    async def query(self, text: str) -> Answer:
        """Answer *text* from the ingested documents.

        Reranking and synthesis failures degrade (similarity order, fixed
        apology) instead of raising.

        Raises
        ------
        InputError
            If *text* is empty or whitespace only.
        ConfigurationError
            If :meth:`ensure_ready` has not succeeded.
        EmbeddingError, StorageError
            If the query cannot be embedded or searched.
        """
        if not text or not text.strip():
            raise InputError("No query provided")
        self._require_ready()

        started = time.perf_counter()
        candidates = await self._retriever.retrieve(text, self._overfetch)
        sources = await self._reranker.rerank(text, candidates, self._top_k)
        answer_text = await self._synthesizer.synthesize(text, sources)

        answer = Answer(
            query=text,
            text=answer_text,
            sources=sources,
            processing_time_ms=_elapsed_ms(started),
        )
        self._logger.info(
            "query_answered",
            candidates=len(candidates),
            sources=answer.chunk_count,
            processing_time_ms=answer.processing_time_ms,
        )
        return answer

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    async def health(self) -> HealthStatus:
        """Report whether the vector store and collection are reachable."""
        store = self._vector_store.get_provider_name()
        try:
            exists = await self._vector_store.collection_exists(self._collection_name)
        except MiniRAGError as exc:
            self._logger.warning("health_check_failed", vector_store=store, error=str(exc))
            return HealthStatus(
                status="unhealthy",
                vector_store=store,
                collection=self._collection_name,
                detail=str(exc),
            )

        return HealthStatus(
            status="healthy" if exists else "degraded",
            vector_store=store,
            collection=self._collection_name,
            collection_exists=exists,
            detail=None if exists else "collection does not exist",
        )
