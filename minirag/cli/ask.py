# =============================================================================
# minirag/cli/ask.py - Question Answering Command
# =============================================================================
#
# Asks a question against everything ingested into the collection and
# prints the generated answer followed by its numbered sources.  The
# bracketed markers in the answer ([1], [2], ...) index the source list.
#
# Usage examples:
#   python -m minirag.cli.ask "How does the chunking work?"
#   python -m minirag.cli.ask "What models are used?" --json
# =============================================================================

"""Standalone CLI for querying the minirag collection.

Usage::

    python -m minirag.cli.ask "your question"
    python -m minirag.cli.ask "your question" --json
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from minirag.config.settings import Settings
from minirag.main import pipeline_session
from minirag.models.rag import Answer
from minirag.utils.errors import MiniRAGError, describe_error

_PREVIEW_CHARS = 160


def format_answer(answer: Answer) -> str:
    """Render *answer* and its sources for a terminal."""
    lines = [answer.text, ""]
    if answer.sources:
        lines.append("Sources:")
        for source in answer.sources:
            preview = " ".join(source.text.split())
            if len(preview) > _PREVIEW_CHARS:
                preview = preview[:_PREVIEW_CHARS].rstrip() + "..."
            score = (
                f"relevance {source.relevance_score:.3f}"
                if source.relevance_score is not None
                else f"similarity {source.similarity_score:.3f}"
            )
            lines.append(
                f"  [{source.rank}] {source.source_filename} "
                f"(chars {source.start}-{source.end}, {score})"
            )
            lines.append(f"      {preview}")
        lines.append("")
    lines.append(f"{answer.chunk_count} sources, {answer.processing_time_ms:.0f}ms")
    return "\n".join(lines)


async def _run(args: argparse.Namespace, app_settings: Settings) -> int:
    async with pipeline_session(app_settings) as pipeline:
        try:
            await pipeline.ensure_ready()
            answer = await pipeline.query(args.question)
        except MiniRAGError as exc:
            print(f"Error: {describe_error(exc)}", file=sys.stderr)
            return 1

    if args.json:
        print(answer.model_dump_json(indent=2))
    else:
        print(format_answer(answer))
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m minirag.cli.ask",
        description="Ask a question about the ingested documents.",
    )
    parser.add_argument("question", help="The question to answer")
    parser.add_argument("--json", action="store_true", help="Print the answer as JSON")
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for the ask tool.  Returns the exit code."""
    args = _build_parser().parse_args(argv)

    try:
        app_settings = Settings()
    except ValueError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    try:
        return asyncio.run(_run(args, app_settings))
    except MiniRAGError as exc:
        print(f"Error: {describe_error(exc)}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
