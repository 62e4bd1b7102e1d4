"""Grounded answer generation over a ranked source list.

Builds a numbered context block from the sources, asks the completion
provider for an answer that cites them inline, then drops any citation
marker that does not point into the list.  A provider failure yields a
fixed apology rather than an exception so the caller still receives the
sources that were found.
"""

from __future__ import annotations

import structlog

from minirag.interfaces.llm_provider import ILLMProvider
from minirag.models.rag import RankedSource
from minirag.services.citations import strip_invalid_citations

logger = structlog.get_logger(logger_name=__name__)

FALLBACK_ANSWER = "Sorry, I encountered an error while generating the answer."
NO_CONTEXT_ANSWER = (
    "I couldn't find any relevant information in the uploaded documents "
    "to answer this question."
)

_SYSTEM_PROMPT = (
    "You are a helpful AI assistant. Answer the user's question based on the "
    "provided context. Use inline citations [1], [2], etc. to reference the "
    "source chunks. If the context doesn't contain enough information to "
    "answer the question, say so clearly."
)

_USER_TEMPLATE = """Context:
{context}

Question: {query}

Answer:"""


def build_context(sources: list[RankedSource]) -> str:
    """Render *sources* as ``[i] text`` blocks separated by blank lines.

    ``i`` is the 1-based list position, which is what citation markers in
    the answer refer to.
    """
    return "\n\n".join(f"[{i}] {source.text}" for i, source in enumerate(sources, start=1))


class AnswerSynthesizer:
    """Generates a cited answer from a query and its ranked sources."""

    def __init__(
        self,
        llm: ILLMProvider,
        temperature: float = 0.1,
        max_tokens: int = 1024,
    ) -> None:
        self._llm = llm
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def synthesize(self, query: str, sources: list[RankedSource]) -> str:
        """Return answer text for *query*; never raises for provider errors."""
        if not sources:
            logger.info("synthesis_skipped_no_sources", query_length=len(query))
            return NO_CONTEXT_ANSWER

        user_prompt = _USER_TEMPLATE.format(context=build_context(sources), query=query)
        try:
            text = await self._llm.complete(
                system_prompt=_SYSTEM_PROMPT,
                user_prompt=user_prompt,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "answer_generation_failed",
                provider=self._llm.get_provider_name(),
                error=str(exc),
            )
            return FALLBACK_ANSWER

        cleaned, _ = strip_invalid_citations(text, len(sources))
        logger.info(
            "answer_generated",
            provider=self._llm.get_provider_name(),
            sources=len(sources),
            answer_length=len(cleaned),
        )
        return cleaned
