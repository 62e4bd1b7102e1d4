"""OpenAI-compatible LLM provider adapter.

Wraps the ``openai`` async client to implement :class:`ILLMProvider`.
Groq, TogetherAI, Fireworks and a local Ollama all expose the same chat
completions API, so one adapter pointed at a different ``base_url``
covers them.  The default configuration targets Groq's
``llama3-8b-8192``.
"""

from __future__ import annotations

from urllib.parse import urlparse

import openai
import structlog

from minirag.interfaces.llm_provider import ILLMProvider
from minirag.utils.errors import CompletionError

logger = structlog.get_logger(logger_name=__name__)


class OpenAILLMProvider(ILLMProvider):
    """LLM provider backed by an OpenAI-compatible chat completions API."""

    def __init__(
        self,
        api_key: str,
        model: str = "llama3-8b-8192",
        base_url: str = "",
        timeout: float = 30.0,
    ) -> None:
        self._api_key = api_key
        self._timeout = timeout
        client_kwargs: dict = {
            "api_key": api_key,
            "timeout": openai.Timeout(timeout, connect=5.0),
        }
        if base_url:
            client_kwargs["base_url"] = base_url

        self._client = openai.AsyncOpenAI(**client_kwargs)
        self._model = model
        self._provider_label = self._label_for(base_url)

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.1,
        max_tokens: int = 1024,
    ) -> str:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_prompt})

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.APITimeoutError as exc:
            raise CompletionError(
                message=f"{self._provider_label} timed out after {self._timeout:g}s",
                provider_name=self.get_provider_name(),
            ) from exc
        except openai.APIError as exc:
            raise CompletionError(
                message=f"{self._provider_label} API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise CompletionError(
                message=f"{self._provider_label} returned empty response",
                provider_name=self.get_provider_name(),
            )

        logger.info(
            "llm_completion",
            model=self._model,
            provider=self._provider_label,
            tokens=response.usage.total_tokens if response.usage else None,
        )
        return content

    def get_provider_name(self) -> str:
        return self._provider_label

    def is_available(self) -> bool:
        return bool(self._api_key)

    @staticmethod
    def _label_for(base_url: str) -> str:
        if not base_url:
            return "openai"
        host = urlparse(base_url).hostname or ""
        if host.endswith("groq.com"):
            return "groq"
        return "openai-compatible"
