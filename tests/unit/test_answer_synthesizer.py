"""Unit tests for AnswerSynthesizer and citation marker validation."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from minirag.models.rag import RankedSource
from minirag.services.answer_synthesizer import (
    FALLBACK_ANSWER,
    NO_CONTEXT_ANSWER,
    AnswerSynthesizer,
    build_context,
)
from minirag.services.citations import find_citations, strip_invalid_citations
from minirag.utils.errors import CompletionError


def _sources(n: int) -> list[RankedSource]:
    return [RankedSource(rank=i, text=f"fact number {i}") for i in range(1, n + 1)]


# ======================================================================
# Context and prompt
# ======================================================================


class TestBuildContext:
    def test_numbered_blocks_separated_by_blank_lines(self) -> None:
        assert build_context(_sources(2)) == "[1] fact number 1\n\n[2] fact number 2"


class TestSynthesize:
    @pytest.mark.asyncio
    async def test_prompt_contains_context_and_question(self, mock_llm_provider) -> None:
        synthesizer = AnswerSynthesizer(mock_llm_provider, temperature=0.1, max_tokens=512)

        text = await synthesizer.synthesize("What is fact 1?", _sources(2))

        assert text == "The answer is in the documents [1]."
        kwargs = mock_llm_provider.complete.call_args.kwargs
        assert "inline citations [1], [2]" in kwargs["system_prompt"]
        assert "[1] fact number 1" in kwargs["user_prompt"]
        assert "Question: What is fact 1?" in kwargs["user_prompt"]
        assert kwargs["user_prompt"].endswith("Answer:")
        assert kwargs["temperature"] == 0.1
        assert kwargs["max_tokens"] == 512

    @pytest.mark.asyncio
    async def test_provider_failure_returns_fallback(self, mock_llm_provider) -> None:
        mock_llm_provider.complete = AsyncMock(side_effect=CompletionError("down"))

        text = await AnswerSynthesizer(mock_llm_provider).synthesize("q", _sources(1))

        assert text == FALLBACK_ANSWER

    @pytest.mark.asyncio
    async def test_no_sources_skips_provider(self, mock_llm_provider) -> None:
        text = await AnswerSynthesizer(mock_llm_provider).synthesize("q", [])

        assert text == NO_CONTEXT_ANSWER
        mock_llm_provider.complete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_out_of_range_citations_removed(self, mock_llm_provider) -> None:
        mock_llm_provider.complete.return_value = "Alpha [1] and beta [4]."

        text = await AnswerSynthesizer(mock_llm_provider).synthesize("q", _sources(2))

        assert text == "Alpha [1] and beta."


# ======================================================================
# Citation markers
# ======================================================================


class TestCitations:
    def test_find_citations_in_order(self) -> None:
        assert find_citations("See [2] and [1, 3], again [2].") == [2, 1, 3]

    def test_valid_markers_untouched(self) -> None:
        text = "One [1], two [2]."
        assert strip_invalid_citations(text, 2) == (text, [])

    def test_group_keeps_valid_members(self) -> None:
        cleaned, dropped = strip_invalid_citations("Both [2, 9] agree.", 3)
        assert cleaned == "Both [2] agree."
        assert dropped == [9]

    def test_zero_is_invalid(self) -> None:
        cleaned, dropped = strip_invalid_citations("Nothing [0] here.", 3)
        assert cleaned == "Nothing here."
        assert dropped == [0]

    def test_non_numeric_brackets_ignored(self) -> None:
        text = "A list [a] and [note]."
        assert strip_invalid_citations(text, 1) == (text, [])

    def test_adjacent_marker_removed(self) -> None:
        cleaned, dropped = strip_invalid_citations("Stored [1][9] twice.", 2)
        assert cleaned == "Stored [1] twice."
        assert dropped == [9]

    def test_code_block_indentation_preserved(self) -> None:
        text = "Use this [1]:\n\n    def f():\n        return 1\n\nSee [7]."

        cleaned, dropped = strip_invalid_citations(text, 2)

        assert cleaned == "Use this [1]:\n\n    def f():\n        return 1\n\nSee."
        assert dropped == [7]

    def test_other_spacing_untouched(self) -> None:
        cleaned, _ = strip_invalid_citations("Columns:  a  |  b [5] .", 1)
        assert cleaned == "Columns:  a  |  b ."

    def test_subscripts_are_not_citations(self) -> None:
        text = "Per the list [1], indices start at arr[0] and grid[3][12]."

        assert find_citations(text) == [1]
        assert strip_invalid_citations(text, 1) == (text, [])

    @pytest.mark.asyncio
    async def test_synthesized_subscript_survives(self, mock_llm_provider) -> None:
        mock_llm_provider.complete.return_value = "Per the list [1], indices start at arr[0]."

        text = await AnswerSynthesizer(mock_llm_provider).synthesize("q", _sources(1))

        assert text == "Per the list [1], indices start at arr[0]."
