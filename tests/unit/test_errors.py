"""Unit tests for the error hierarchy and user-facing error descriptions."""

from __future__ import annotations

import pytest

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


class TestHierarchy:
    @pytest.mark.parametrize(
        ("cls", "kind"),
        [
            (InputError, ErrorKind.INPUT),
            (ConfigurationError, ErrorKind.CONFIGURATION),
            (EmbeddingError, ErrorKind.EMBEDDING),
            (StorageError, ErrorKind.STORAGE),
            (CompletionError, ErrorKind.COMPLETION),
            (RerankError, ErrorKind.RERANK),
        ],
    )
    def test_kinds(self, cls: type[MiniRAGError], kind: ErrorKind) -> None:
        assert error_kind(cls("x")) is kind

    @pytest.mark.parametrize("cls", [EmbeddingError, StorageError, CompletionError, RerankError])
    def test_provider_errors_share_base(self, cls: type[MiniRAGError]) -> None:
        assert issubclass(cls, ProviderError)

    def test_str_prefixes_provider(self) -> None:
        assert str(StorageError("timeout", provider_name="qdrant")) == "[qdrant] timeout"
        assert str(InputError("No text provided")) == "No text provided"

    def test_foreign_exception_is_unknown(self) -> None:
        assert error_kind(RuntimeError("x")) is ErrorKind.UNKNOWN


class TestDescribeError:
    def test_input_error_passes_message_through(self) -> None:
        assert describe_error(InputError("No text provided")) == "No text provided"

    def test_memory_error_is_size_problem(self) -> None:
        assert "too large" in describe_error(MemoryError())

    def test_storage_error(self) -> None:
        message = describe_error(StorageError("connection refused", provider_name="qdrant"))
        assert message.startswith("Database connection error")

    def test_embedding_error(self) -> None:
        assert describe_error(EmbeddingError("401")).startswith("Embedding service error")

    def test_unknown_uses_default(self) -> None:
        assert describe_error(KeyError("x")) == "Failed to process request"
        assert describe_error(KeyError("x"), default="Failed to process query") == (
            "Failed to process query"
        )
