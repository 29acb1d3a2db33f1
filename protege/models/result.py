"""Discriminated result type shared by the ingestion and retrieval pipelines.

Neither pipeline lets a classified failure escape as an exception.  Callers
get a :class:`Result` that holds either a value or a
:class:`PipelineFailure`, never both; ``unwrap()`` converts back to the
matching exception class for callers that prefer to raise.
"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from protege.models.pipeline import IngestionStage
from protege.utils.errors import ErrorKind, ProtegeError, error_for_kind

_T = TypeVar("_T")


class PipelineFailure(BaseModel):
    """A classified, user-presentable failure."""

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    message: str = Field(description="Short, non-technical message safe to show users.")
    stage: Optional[IngestionStage] = Field(
        default=None,
        description="Ingestion stage that failed; None for retrieval failures.",
    )
    provider_name: Optional[str] = Field(
        default=None,
        description="External service that raised the failure, when known.",
    )
    error_type: Optional[str] = Field(
        default=None,
        description="Concrete exception class name, e.g. SourceMaterialNotFoundError.",
    )

    @classmethod
    def from_error(
        cls,
        error: ProtegeError,
        stage: Optional[IngestionStage] = None,
    ) -> "PipelineFailure":
        return cls(
            kind=error.kind,
            message=error.message,
            stage=stage,
            provider_name=error.provider_name,
            error_type=type(error).__name__,
        )

    def to_exception(self) -> ProtegeError:
        """Rebuild the exception this failure was created from."""
        return error_for_kind(
            self.kind,
            self.message,
            provider_name=self.provider_name,
            error_type=self.error_type,
        )


class Result(BaseModel, Generic[_T]):
    """Either ``value`` (success) or ``error`` (failure)."""

    model_config = ConfigDict(frozen=True)

    value: Optional[_T] = None
    error: Optional[PipelineFailure] = None

    @model_validator(mode="after")
    def _exclusive(self) -> "Result[_T]":
        if self.error is not None and self.value is not None:
            raise ValueError("a Result cannot carry both a value and an error")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: _T) -> "Result[_T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: PipelineFailure) -> "Result[_T]":
        return cls(error=error)

    def unwrap(self) -> _T:
        """Return the value, or raise the exception matching the failure kind."""
        if self.error is not None:
            raise self.error.to_exception()
        return self.value  # type: ignore[return-value]


class IngestionOutput(BaseModel):
    """Success payload of an ingestion run."""

    model_config = ConfigDict(frozen=True)

    session_id: str
    # Normalised text, handed on for downstream concept extraction.
    source_text: Optional[str] = None
