# =============================================================================
# minirag/cli/ingest.py - Document Ingestion Command
# =============================================================================
#
# Adds documents to the minirag vector store collection so they can be
# queried with `python -m minirag.cli.ask`.
#
# Supported subcommands:
#
#   file    - Ingest one or more UTF-8 text files (filename kept for citations)
#   text    - Ingest text given on the command line or piped on stdin
#   health  - Check that the vector store and collection are reachable
#
# Every document goes through the same pipeline:
#   1. Reject empty / whitespace-only input
#   2. Truncate anything past MAX_DOCUMENT_CHARS (default 100 000)
#   3. Split into overlapping 1000-character windows
#   4. Embed all windows (Cohere embed-english-v3.0 by default)
#   5. Upsert vectors + metadata into the collection (Qdrant by default)
#
# Usage examples:
#   python -m minirag.cli.ingest file notes.txt handbook.md
#   python -m minirag.cli.ingest text "Qdrant stores vectors." --name snippet
#   cat report.txt | python -m minirag.cli.ingest text --name report.txt
#   python -m minirag.cli.ingest health
# =============================================================================

"""Standalone CLI for ingesting documents into the minirag collection.

Usage::

    python -m minirag.cli.ingest file /path/to/doc.txt
    python -m minirag.cli.ingest text "Some text" --name pasted_text
    python -m minirag.cli.ingest health
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from minirag.config.settings import Settings
from minirag.main import pipeline_session
from minirag.models.rag import DEFAULT_SOURCE_FILENAME
from minirag.pipeline.orchestrator import RAGPipeline
from minirag.utils.errors import InputError, MiniRAGError, describe_error


def read_document(path: Path) -> str:
    """Read *path* as UTF-8 text.

    Raises
    ------
    InputError
        If the file is missing or not valid UTF-8.
    """
    try:
        return path.read_bytes().decode("utf-8")
    except FileNotFoundError as exc:
        raise InputError(f"File not found: {path}") from exc
    except UnicodeDecodeError as exc:
        raise InputError(f"{path.name} is not valid UTF-8 text") from exc


def _print_result(result) -> None:  # noqa: ANN001
    print(f"Ingested {result.filename}:")
    print(f"  Chunks created: {result.chunk_count}")
    if result.truncated:
        print(f"  Truncated:      yes (original length {result.original_length:,} chars)")
    print(f"  Time:           {result.processing_time_ms:.0f}ms")


# ---------------------------------------------------------------------------
# Subcommand handlers
# ---------------------------------------------------------------------------


async def _handle_file(args: argparse.Namespace, pipeline: RAGPipeline) -> int:
    """Ingest each file in turn; keep going past a bad one."""
    failures = 0
    for raw_path in args.files:
        path = Path(raw_path)
        try:
            text = read_document(path)
            result = await pipeline.ingest(text, filename=path.name)
        except MiniRAGError as exc:
            print(f"Error ingesting {path}: {describe_error(exc)}", file=sys.stderr)
            failures += 1
            continue
        _print_result(result)
    return 1 if failures else 0


async def _handle_text(args: argparse.Namespace, pipeline: RAGPipeline) -> int:
    text = args.text if args.text is not None else sys.stdin.read()
    try:
        result = await pipeline.ingest(text, filename=args.name)
    except MiniRAGError as exc:
        print(f"Error: {describe_error(exc)}", file=sys.stderr)
        return 1
    _print_result(result)
    return 0


async def _handle_health(pipeline: RAGPipeline) -> int:
    status = await pipeline.health()
    print(f"Status:       {status.status}")
    print(f"Vector store: {status.vector_store}")
    print(f"Collection:   {status.collection} (exists: {status.collection_exists})")
    if status.detail:
        print(f"Detail:       {status.detail}")
    return 0 if status.healthy else 1


async def _run(args: argparse.Namespace, app_settings: Settings) -> int:
    async with pipeline_session(app_settings) as pipeline:
        if args.command == "health":
            return await _handle_health(pipeline)

        try:
            await pipeline.ensure_ready()
        except MiniRAGError as exc:
            print(f"Error: {describe_error(exc)}", file=sys.stderr)
            return 1

        if args.command == "file":
            return await _handle_file(args, pipeline)
        return await _handle_text(args, pipeline)


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ingestion CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m minirag.cli.ingest",
        description="Add documents to the minirag vector store collection.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Ingestion commands")

    # -- file --
    file_parser = subparsers.add_parser("file", help="Ingest UTF-8 text files")
    file_parser.add_argument("files", nargs="+", help="Paths to the text files")

    # -- text --
    text_parser = subparsers.add_parser("text", help="Ingest text from the command line or stdin")
    text_parser.add_argument("text", nargs="?", default=None, help="Text to ingest (default: stdin)")
    text_parser.add_argument(
        "--name",
        default=DEFAULT_SOURCE_FILENAME,
        help=f"Source name shown in citations (default: {DEFAULT_SOURCE_FILENAME})",
    )

    # -- health --
    subparsers.add_parser("health", help="Check vector store and collection reachability")

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for the ingestion tool.  Returns the exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    try:
        app_settings = Settings()
    except ValueError as exc:
        # pydantic's ValidationError subclasses ValueError.
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    try:
        return asyncio.run(_run(args, app_settings))
    except MiniRAGError as exc:
        print(f"Error: {describe_error(exc)}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
