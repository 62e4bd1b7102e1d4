"""Thin async JSON client for Cohere's REST API.

Shared by :class:`CohereEmbeddingProvider` and :class:`CohereRerankProvider`
so both use one ``httpx.AsyncClient`` and one auth header.  Errors are left
as ``httpx`` exceptions; each provider wraps them in its own error type.
"""

from __future__ import annotations

from typing import Any

import httpx

_USER_AGENT = "minirag/0.1.0"


class CohereClient:
    """Posts JSON bodies to ``{base_url}/{path}`` with bearer auth."""

    def __init__(
        self,
        api_key: str,
        http_client: httpx.AsyncClient,
        base_url: str = "https://api.cohere.com/v1",
    ) -> None:
        self._api_key = api_key
        self._http = http_client
        self._base_url = base_url.rstrip("/")

    @property
    def has_credentials(self) -> bool:
        return bool(self._api_key)

    async def post(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        """POST *body* and return the decoded JSON object.

        Raises
        ------
        httpx.HTTPError
            On transport failures and non-2xx responses.
        ValueError
            If the response body is not a JSON object.
        """
        response = await self._http.post(
            f"{self._base_url}/{path.lstrip('/')}",
            json=body,
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Accept": "application/json",
                "User-Agent": _USER_AGENT,
            },
        )
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        return data
