"""Custom exception hierarchy for minirag.

All application exceptions inherit from :class:`MiniRAGError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "cohere", "qdrant", "groq") caused the failure.
Every class is tagged with an :class:`ErrorKind` so callers branch on the
type of failure instead of inspecting message text.

The hierarchy is organized by pipeline stage:

    MiniRAGError  (base -- catch-all for any minirag error)
    +-- InputError               (empty / unreadable input, rejected up front)
    +-- ConfigurationError       (startup / collection setup / missing config)
    +-- ProviderError            (any external provider call failure)
        +-- EmbeddingError       (embedding API)
        +-- StorageError         (vector store)
        +-- CompletionError      (answer generation LLM)
        +-- RerankError          (relevance reranking API)
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Classification tag carried by every :class:`MiniRAGError`."""

    INPUT = "input"
    CONFIGURATION = "configuration"
    EMBEDDING = "embedding"
    STORAGE = "storage"
    COMPLETION = "completion"
    RERANK = "rerank"
    UNKNOWN = "unknown"


class MiniRAGError(Exception):
    """Base exception for all minirag errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[cohere] Embedding API error``.
    """

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Boundary errors
# ---------------------------------------------------------------------------

class InputError(MiniRAGError):
    """Raised when caller input is rejected before any provider work."""

    kind = ErrorKind.INPUT

    def __init__(
        self,
        message: str = "Invalid input",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(MiniRAGError):
    """Raised when configuration is invalid or the collection cannot be prepared."""

    kind = ErrorKind.CONFIGURATION

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# External service / provider errors
# ---------------------------------------------------------------------------

class ProviderError(MiniRAGError):
    """Raised when an external provider call fails."""

    def __init__(
        self,
        message: str = "External provider call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class EmbeddingError(ProviderError):
    """Raised when the embedding API fails or returns a malformed response."""

    kind = ErrorKind.EMBEDDING

    def __init__(
        self,
        message: str = "Embedding request failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class StorageError(ProviderError):
    """Raised when a vector-store operation fails."""

    kind = ErrorKind.STORAGE

    def __init__(
        self,
        message: str = "Vector store operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class CompletionError(ProviderError):
    """Raised when an LLM completion call fails or returns no content."""

    kind = ErrorKind.COMPLETION

    def __init__(
        self,
        message: str = "LLM completion failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class RerankError(ProviderError):
    """Raised when the reranking API fails or returns an unusable response."""

    kind = ErrorKind.RERANK

    def __init__(
        self,
        message: str = "Reranking request failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# User-facing descriptions
# ---------------------------------------------------------------------------

_USER_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.STORAGE: "Database connection error. Please check your vector store configuration.",
    ErrorKind.EMBEDDING: "Embedding service error. Please check your embedding provider API key.",
    ErrorKind.COMPLETION: "Answer generation failed. Please check your LLM provider configuration.",
    ErrorKind.CONFIGURATION: "Service is not configured correctly. Please check your settings.",
}


def error_kind(exc: BaseException) -> ErrorKind:
    """Return the :class:`ErrorKind` of *exc* (``UNKNOWN`` for foreign exceptions)."""
    if isinstance(exc, MiniRAGError):
        return exc.kind
    if isinstance(exc, MemoryError):
        return ErrorKind.INPUT
    return ErrorKind.UNKNOWN


def describe_error(exc: BaseException, default: str = "Failed to process request") -> str:
    """Map *exc* to the short message shown to an end user.

    Input errors pass their own message through since it already describes
    what was wrong with the request (empty text, too large, bad encoding).
    """
    kind = error_kind(exc)
    if kind is ErrorKind.INPUT:
        if isinstance(exc, MiniRAGError):
            return exc.message
        return "Document too large. Please try with a smaller document."
    return _USER_MESSAGES.get(kind, default)
