"""LLM provider adapters."""

from minirag.providers.llm.openai_provider import OpenAILLMProvider

__all__ = ["OpenAILLMProvider"]
