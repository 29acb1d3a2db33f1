"""Utility modules for Protégé.

- **errors** -- Exception hierarchy rooted at ProtegeError; every subclass
  carries an ErrorKind the pipelines turn into a structured failure.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **concurrency** -- fixed-delay retry and semaphore-bounded gather.
- **text_normalizer** -- whitespace collapsing and length capping for
  extracted source text.
- **url_validation** -- coarse scheme/host guard for scrape targets.
"""

from protege.utils.concurrency import bounded_gather, call_with_retry
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
)
from protege.utils.logging import configure_logging, get_logger, pipeline_context
from protege.utils.text_normalizer import cap_length, collapse_whitespace
from protege.utils.url_validation import validate_source_url

__all__ = [
    "ConfigurationError",
    "DimensionMismatchError",
    "EmbeddingUnavailableError",
    "ErrorKind",
    "InputValidationError",
    "PersistenceError",
    "ProtegeError",
    "SourceMaterialNotFoundError",
    "SourceUnavailableError",
    "UnexpectedPipelineError",
    "bounded_gather",
    "call_with_retry",
    "cap_length",
    "collapse_whitespace",
    "configure_logging",
    "get_logger",
    "pipeline_context",
    "validate_source_url",
]
