"""Custom exception hierarchy for Protégé.

All application exceptions inherit from :class:`ProtegeError`, which carries
a user-facing ``message`` and an optional ``provider_name`` so error handlers
can tell which external service (e.g. "openai_embedding", "web_scraper",
"sqlite_source_store") caused the failure.

Every subclass is tagged with an :class:`ErrorKind`.  The pipelines use the
kind to build a structured failure instead of letting the exception escape:

    ProtegeError                 (base -- catch-all)
    +-- InputValidationError     (bad URL / host / upload / query)
    +-- SourceUnavailableError   (fetch, parse or empty content)
    |   +-- SourceMaterialNotFoundError  (no record for a session id)
    +-- EmbeddingUnavailableError (embedding service failed after retry)
    +-- PersistenceError         (store read/write failure)
    +-- DimensionMismatchError   (vectors of unequal length -- a bug upstream)
    +-- ConfigurationError       (missing provider / credentials)
    +-- UnexpectedPipelineError  (anything else caught at a pipeline boundary)

Messages are short and non-technical; the underlying cause is chained with
``raise ... from exc`` and logged, never shown to the user.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Broad failure classes surfaced to callers of the pipelines."""

    INPUT_VALIDATION = "input_validation"
    SOURCE_UNAVAILABLE = "source_unavailable"
    EMBEDDING_UNAVAILABLE = "embedding_unavailable"
    PERSISTENCE_FAILURE = "persistence_failure"
    DIMENSION_MISMATCH = "dimension_mismatch"
    CONFIGURATION = "configuration"
    UNEXPECTED = "unexpected"


class ProtegeError(Exception):
    """Base exception for all Protégé errors.

    The ``__str__`` method prefixes the provider name in brackets for
    structured log output, e.g. ``[web_scraper] Request timed out``.
    """

    kind: ErrorKind = ErrorKind.UNEXPECTED
    default_message: str = "An unexpected error occurred. Please try again."

    def __init__(
        self,
        message: str | None = None,
        provider_name: str | None = None,
    ) -> None:
        self._message = message or self.default_message
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
# Caller input
# ---------------------------------------------------------------------------

class InputValidationError(ProtegeError):
    """Raised before any network or parsing work when the input is unusable."""

    kind = ErrorKind.INPUT_VALIDATION
    default_message = "The provided input is not valid."


# ---------------------------------------------------------------------------
# Source acquisition
# ---------------------------------------------------------------------------

class SourceUnavailableError(ProtegeError):
    """Raised when a source cannot be fetched, parsed, or yields no text."""

    kind = ErrorKind.SOURCE_UNAVAILABLE
    default_message = "The source could not be read. Please try a different source."


class SourceMaterialNotFoundError(SourceUnavailableError):
    """Raised when no stored source material exists for a session id."""

    default_message = "No source material was found for this session."


# ---------------------------------------------------------------------------
# External services
# ---------------------------------------------------------------------------

class EmbeddingUnavailableError(ProtegeError):
    """Raised when the embedding service fails, including after the retry."""

    kind = ErrorKind.EMBEDDING_UNAVAILABLE
    default_message = "Failed to generate embeddings. Please try again later."


class PersistenceError(ProtegeError):
    """Raised when the source-material store cannot read or write a record."""

    kind = ErrorKind.PERSISTENCE_FAILURE
    default_message = "Failed to store source material. Please try again."


# ---------------------------------------------------------------------------
# Programming / configuration errors
# ---------------------------------------------------------------------------

class DimensionMismatchError(ProtegeError, ValueError):
    """Raised when two vectors of unequal length are compared.

    Indicates embeddings produced by different models (or model versions)
    ended up in the same comparison.  Treated as a bug, not a user-facing
    condition: the retrieval pipeline lets it propagate.
    """

    kind = ErrorKind.DIMENSION_MISMATCH
    default_message = "Embedding dimensions do not match."


class ConfigurationError(ProtegeError):
    """Raised when configuration is invalid or a required provider is missing."""

    kind = ErrorKind.CONFIGURATION
    default_message = "Invalid or missing configuration."


class UnexpectedPipelineError(ProtegeError):
    """Wraps an unclassified failure caught at a pipeline boundary."""

    kind = ErrorKind.UNEXPECTED


_ERRORS_BY_KIND: dict[ErrorKind, type[ProtegeError]] = {
    ErrorKind.INPUT_VALIDATION: InputValidationError,
    ErrorKind.SOURCE_UNAVAILABLE: SourceUnavailableError,
    ErrorKind.EMBEDDING_UNAVAILABLE: EmbeddingUnavailableError,
    ErrorKind.PERSISTENCE_FAILURE: PersistenceError,
    ErrorKind.DIMENSION_MISMATCH: DimensionMismatchError,
    ErrorKind.CONFIGURATION: ConfigurationError,
    ErrorKind.UNEXPECTED: UnexpectedPipelineError,
}


_ERRORS_BY_NAME: dict[str, type[ProtegeError]] = {
    cls.__name__: cls
    for cls in (*_ERRORS_BY_KIND.values(), SourceMaterialNotFoundError)
}


def error_for_kind(
    kind: ErrorKind,
    message: str | None = None,
    *,
    provider_name: str | None = None,
    error_type: str | None = None,
) -> ProtegeError:
    """Build the exception for *kind*.

    *error_type* names a concrete subclass (e.g. ``"SourceMaterialNotFoundError"``)
    to rebuild instead of the kind's base class.  Unknown names, or names
    whose kind differs from *kind*, fall back to the base class.
    """
    cls = _ERRORS_BY_NAME.get(error_type or "")
    if cls is None or cls.kind is not kind:
        cls = _ERRORS_BY_KIND[kind]
    return cls(message=message, provider_name=provider_name)
