"""Cohere rerank provider adapter.

Posts the query and candidate texts to Cohere's ``/rerank`` endpoint and
returns ``(index, relevance_score)`` pairs, most relevant first.
"""

from __future__ import annotations

import httpx
import structlog

from minirag.interfaces.rerank_provider import IRerankProvider
from minirag.models.rag import RerankResult
from minirag.providers.cohere_client import CohereClient
from minirag.utils.errors import RerankError

logger = structlog.get_logger(logger_name=__name__)


class CohereRerankProvider(IRerankProvider):
    """Rerank provider backed by ``rerank-english-v3.0``."""

    def __init__(self, client: CohereClient, model: str = "rerank-english-v3.0") -> None:
        self._client = client
        self._model = model

    async def rerank(
        self,
        query: str,
        documents: list[str],
        top_n: int,
    ) -> list[RerankResult]:
        if not documents:
            return []

        try:
            data = await self._client.post(
                "rerank",
                {
                    "query": query,
                    "documents": documents,
                    "top_n": min(top_n, len(documents)),
                    "model": self._model,
                },
            )
            results = [
                RerankResult(index=item["index"], relevance_score=item["relevance_score"])
                for item in data.get("results", [])
            ]
        except httpx.HTTPStatusError as exc:
            raise RerankError(
                message=f"Cohere rerank API returned {exc.response.status_code}",
                provider_name=self.get_provider_name(),
            ) from exc
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as exc:
            raise RerankError(
                message=f"Cohere rerank request failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.debug(
            "cohere_rerank",
            model=self._model,
            documents=len(documents),
            results=len(results),
        )
        return results

    def get_provider_name(self) -> str:
        return "cohere_rerank"

    def is_available(self) -> bool:
        return self._client.has_credentials
