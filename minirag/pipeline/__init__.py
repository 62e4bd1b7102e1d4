"""Pipeline orchestration for minirag ingestion and querying."""

from minirag.pipeline.orchestrator import RAGPipeline

__all__ = ["RAGPipeline"]
