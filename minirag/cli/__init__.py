# =============================================================================
# minirag/cli/__init__.py - CLI Module Overview
# =============================================================================
#
# Standalone command-line tools for the minirag pipeline. Each submodule is
# a self-contained argparse utility runnable via `python -m minirag.cli.<module>`
# or through the console scripts declared in pyproject.toml.
#
#   1. INGESTION (ingest.py)
#      Chunks, embeds and stores plain-text documents. Also reports the
#      health of the vector store connection.
#
#   2. QUESTION ANSWERING (ask.py)
#      Runs one question through retrieval, reranking and synthesis and
#      prints the cited answer with its ranked sources.
#
#   3. EVALUATION (evaluate.py)
#      Runs a YAML question set through the pipeline and grades each
#      answer by expected-keyword coverage.
#
# Every tool builds its pipeline through minirag.main.pipeline_session,
# which owns the shared HTTP client and vector store lifetime.
# =============================================================================

"""CLI tools for the minirag pipeline.

- ``python -m minirag.cli.ingest`` - ingest documents, check store health.
- ``python -m minirag.cli.ask`` - answer a question with citations.
- ``python -m minirag.cli.evaluate`` - grade the pipeline on a question set.
"""
