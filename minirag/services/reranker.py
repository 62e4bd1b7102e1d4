"""Second-pass relevance ordering with a similarity-order fallback.

Reranking only improves accuracy; it must never cost availability.  Any
failure of the rerank provider, including a malformed response, degrades
to the vector store's own ordering and the query carries on.
"""

from __future__ import annotations

import structlog

from minirag.interfaces.rerank_provider import IRerankProvider
from minirag.models.rag import RankedSource, RerankResult, SearchCandidate
from minirag.utils.errors import RerankError

logger = structlog.get_logger(logger_name=__name__)


class Reranker:
    """Turns search candidates into a ranked, truncated source list.

    Parameters
    ----------
    provider:
        Relevance-scoring backend.  ``None`` means reranking is disabled
        and every call takes the fallback path.
    """

    def __init__(self, provider: IRerankProvider | None = None) -> None:
        self._provider = provider

    @property
    def enabled(self) -> bool:
        return self._provider is not None

    async def rerank(
        self,
        query: str,
        candidates: list[SearchCandidate],
        top_k: int,
    ) -> list[RankedSource]:
        """Return at most *top_k* sources with ``rank`` 1..N.

        Never raises for provider problems; see :meth:`fallback`.
        """
        if top_k < 1 or not candidates:
            return []
        if self._provider is None:
            return self.fallback(candidates, top_k)

        try:
            results = await self._provider.rerank(
                query, [c.text for c in candidates], top_k
            )
            ranked = self._apply(candidates, results, top_k)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "rerank_failed_using_similarity_order",
                provider=self._provider.get_provider_name(),
                candidates=len(candidates),
                error=str(exc),
            )
            return self.fallback(candidates, top_k)

        logger.info(
            "rerank_complete",
            provider=self._provider.get_provider_name(),
            candidates=len(candidates),
            returned=len(ranked),
        )
        return ranked

    @staticmethod
    def fallback(candidates: list[SearchCandidate], top_k: int) -> list[RankedSource]:
        """First *top_k* candidates in similarity order, without relevance scores."""
        return [
            RankedSource.from_candidate(candidate, rank=position)
            for position, candidate in enumerate(candidates[:top_k], start=1)
        ]

    @staticmethod
    def _apply(
        candidates: list[SearchCandidate],
        results: list[RerankResult],
        top_k: int,
    ) -> list[RankedSource]:
        seen: set[int] = set()
        ranked: list[RankedSource] = []
        for result in results:
            if result.index >= len(candidates):
                raise RerankError(
                    message=f"rerank index {result.index} out of range for {len(candidates)} candidates"
                )
            if result.index in seen:
                continue
            seen.add(result.index)
            ranked.append(
                RankedSource.from_candidate(
                    candidates[result.index],
                    rank=len(ranked) + 1,
                    relevance_score=result.relevance_score,
                )
            )
            if len(ranked) == top_k:
                break
        if not ranked:
            raise RerankError(message="rerank provider returned no results")
        return ranked
