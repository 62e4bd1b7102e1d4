"""Abstract base class for text-completion providers."""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementation: OpenAILLMProvider (minirag/providers/llm/),
# which talks to Groq or any other OpenAI-compatible chat endpoint.
class ILLMProvider(ABC):
    """Contract for single-turn prompt completion."""

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.1,
        max_tokens: int = 1024,
    ) -> str:
        """Generate a completion for one system + user prompt pair.

        Raises
        ------
        minirag.utils.errors.CompletionError
            If the API call fails or returns no content.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"groq"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if credentials are configured."""
