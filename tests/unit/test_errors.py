"""Unit tests for the exception hierarchy."""

from __future__ import annotations

import pytest

from protege.utils.errors import (
    ConfigurationError,
    DimensionMismatchError,
    EmbeddingUnavailableError,
    ErrorKind,
    InputValidationError,
    PersistenceError,
    ProtegeError,
    SourceMaterialNotFoundError,
    SourceUnavailableError,
    UnexpectedPipelineError,
    error_for_kind,
)


def test_default_messages() -> None:
    assert EmbeddingUnavailableError().message == (
        "Failed to generate embeddings. Please try again later."
    )
    assert PersistenceError().message == "Failed to store source material. Please try again."


def test_str_prefixes_provider() -> None:
    err = SourceUnavailableError("Timed out", provider_name="web_scraper")
    assert str(err) == "[web_scraper] Timed out"
    assert err.message == "Timed out"


def test_not_found_is_a_source_unavailable() -> None:
    err = SourceMaterialNotFoundError()
    assert isinstance(err, SourceUnavailableError)
    assert err.kind is ErrorKind.SOURCE_UNAVAILABLE


@pytest.mark.parametrize(
    ("kind", "cls"),
    [
        (ErrorKind.INPUT_VALIDATION, InputValidationError),
        (ErrorKind.SOURCE_UNAVAILABLE, SourceUnavailableError),
        (ErrorKind.EMBEDDING_UNAVAILABLE, EmbeddingUnavailableError),
        (ErrorKind.PERSISTENCE_FAILURE, PersistenceError),
        (ErrorKind.DIMENSION_MISMATCH, DimensionMismatchError),
        (ErrorKind.CONFIGURATION, ConfigurationError),
        (ErrorKind.UNEXPECTED, UnexpectedPipelineError),
    ],
)
def test_error_for_kind(kind: ErrorKind, cls: type[ProtegeError]) -> None:
    err = error_for_kind(kind, "msg")
    assert type(err) is cls
    assert err.kind is kind
    assert err.message == "msg"


def test_error_for_kind_rebuilds_named_subclass() -> None:
    err = error_for_kind(
        ErrorKind.SOURCE_UNAVAILABLE,
        error_type="SourceMaterialNotFoundError",
        provider_name="sqlite_source_store",
    )
    assert type(err) is SourceMaterialNotFoundError
    assert err.message == "No source material was found for this session."
    assert err.provider_name == "sqlite_source_store"


def test_error_for_kind_ignores_mismatched_or_unknown_type() -> None:
    mismatched = error_for_kind(
        ErrorKind.PERSISTENCE_FAILURE, "x", error_type="InputValidationError"
    )
    assert type(mismatched) is PersistenceError
    unknown = error_for_kind(ErrorKind.UNEXPECTED, error_type="KeyError")
    assert type(unknown) is UnexpectedPipelineError
