"""Utility modules for minirag.

- **errors** -- Exception hierarchy rooted at MiniRAGError; every class is
  tagged with an ErrorKind so callers never classify failures by message.
- **logging** -- structlog setup with console output in development and
  JSON in production.
- **concurrency** -- bounded ``asyncio.gather`` used for parallel embedding
  batches.
"""

from minirag.utils.concurrency import throttled_gather
from minirag.utils.errors import (
    CompletionError,
    ConfigurationError,
    EmbeddingError,
    ErrorKind,
    InputError,
    MiniRAGError,
    ProviderError,
    RerankError,
    StorageError,
    describe_error,
    error_kind,
)
from minirag.utils.logging import configure_logging, get_logger

__all__ = [
    "CompletionError",
    "ConfigurationError",
    "EmbeddingError",
    "ErrorKind",
    "InputError",
    "MiniRAGError",
    "ProviderError",
    "RerankError",
    "StorageError",
    "configure_logging",
    "describe_error",
    "error_kind",
    "get_logger",
    "throttled_gather",
]
