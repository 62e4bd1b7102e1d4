"""Pydantic models shared across the pipeline."""

from minirag.models.evaluation import (
    CategoryStats,
    EvalCase,
    EvalCaseResult,
    EvalOutcome,
    EvalReport,
    Grade,
)
from minirag.models.rag import (
    DEFAULT_SOURCE_FILENAME,
    Answer,
    Chunk,
    DistanceMetric,
    Document,
    EmbeddingMode,
    HealthStatus,
    IngestionResult,
    RankedSource,
    ReadinessState,
    RerankResult,
    SearchCandidate,
    VectorRecord,
)

__all__ = [
    "DEFAULT_SOURCE_FILENAME",
    "Answer",
    "CategoryStats",
    "Chunk",
    "DistanceMetric",
    "Document",
    "EmbeddingMode",
    "EvalCase",
    "EvalCaseResult",
    "EvalOutcome",
    "EvalReport",
    "Grade",
    "HealthStatus",
    "IngestionResult",
    "RankedSource",
    "ReadinessState",
    "RerankResult",
    "SearchCandidate",
    "VectorRecord",
]
