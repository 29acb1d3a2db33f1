"""Unit tests for source material models and the pipeline Result type."""

from __future__ import annotations

from datetime import timezone

import pytest
from pydantic import ValidationError

from protege.models.pipeline import IngestionStage
from protege.models.result import IngestionOutput, PipelineFailure, Result
from protege.models.source import Chunk, SimilarityResult, SourceMaterial, SourceType
from protege.utils.errors import (
    EmbeddingUnavailableError,
    ErrorKind,
    SourceMaterialNotFoundError,
    SourceUnavailableError,
)


class TestChunk:
    def test_rejects_empty_text(self) -> None:
        with pytest.raises(ValidationError):
            Chunk(text="", embedding=[0.1], index=0)

    def test_rejects_empty_embedding(self) -> None:
        with pytest.raises(ValidationError):
            Chunk(text="x", embedding=[], index=0)

    def test_rejects_negative_index(self) -> None:
        with pytest.raises(ValidationError):
            Chunk(text="x", embedding=[0.1], index=-1)

    def test_is_frozen(self) -> None:
        chunk = Chunk(text="x", embedding=[0.1], index=0)
        with pytest.raises(ValidationError):
            chunk.text = "y"  # type: ignore[misc]


class TestSourceMaterial:
    def test_defaults(self) -> None:
        record = SourceMaterial(session_id="s1", topic="Cells")
        assert record.source_type is SourceType.NONE
        assert record.chunks == []
        assert record.jargon_words == []
        assert record.created_at.tzinfo == timezone.utc
        assert record.embedding_dimension == 0

    def test_chunk_indices_must_match_positions(self) -> None:
        with pytest.raises(ValidationError):
            SourceMaterial(
                session_id="s1",
                topic="Cells",
                chunks=[
                    Chunk(text="a", embedding=[0.1], index=0),
                    Chunk(text="b", embedding=[0.1], index=2),
                ],
            )

    def test_json_round_trip_preserves_order(self) -> None:
        record = SourceMaterial(
            session_id="s1",
            topic="Cells",
            source_type=SourceType.URL,
            source_url="https://example.com",
            chunks=[Chunk(text=t, embedding=[0.1, 0.2], index=i) for i, t in enumerate("abc")],
            jargon_words=["mitochondria"],
        )
        restored = SourceMaterial.model_validate_json(record.model_dump_json())
        assert restored == record
        assert restored.embedding_dimension == 2


class TestSimilarityResult:
    def test_similarity_bounds(self) -> None:
        with pytest.raises(ValidationError):
            SimilarityResult(text="x", similarity=1.5, index=0)


class TestResult:
    def test_success(self) -> None:
        result = Result.success(IngestionOutput(session_id="abc"))
        assert result.ok
        assert result.error is None
        assert result.unwrap().session_id == "abc"

    def test_failure_unwrap_raises_matching_exception(self) -> None:
        failure = PipelineFailure.from_error(
            EmbeddingUnavailableError(), stage=IngestionStage.EMBEDDING
        )
        result = Result.failure(failure)
        assert not result.ok
        assert result.error.stage is IngestionStage.EMBEDDING
        with pytest.raises(EmbeddingUnavailableError) as exc_info:
            result.unwrap()
        assert exc_info.value.message == "Failed to generate embeddings. Please try again later."

    def test_failure_keeps_kind_of_subclass(self) -> None:
        failure = PipelineFailure.from_error(SourceUnavailableError("gone"))
        assert failure.kind is ErrorKind.SOURCE_UNAVAILABLE
        assert failure.message == "gone"
        assert failure.stage is None

    def test_unwrap_rebuilds_subclass_and_provider(self) -> None:
        failure = PipelineFailure.from_error(
            SourceMaterialNotFoundError(provider_name="sqlite_source_store")
        )
        assert failure.error_type == "SourceMaterialNotFoundError"
        assert failure.provider_name == "sqlite_source_store"

        with pytest.raises(SourceMaterialNotFoundError) as exc_info:
            Result.failure(failure).unwrap()
        assert exc_info.value.provider_name == "sqlite_source_store"
        assert str(exc_info.value) == (
            "[sqlite_source_store] No source material was found for this session."
        )

    def test_failure_survives_json_round_trip(self) -> None:
        failure = PipelineFailure.from_error(
            SourceUnavailableError("Timed out", provider_name="web_scraper"),
            stage=IngestionStage.FETCHING,
        )
        restored = PipelineFailure.model_validate_json(failure.model_dump_json())
        err = restored.to_exception()
        assert type(err) is SourceUnavailableError
        assert err.provider_name == "web_scraper"

    def test_value_and_error_are_exclusive(self) -> None:
        failure = PipelineFailure(kind=ErrorKind.UNEXPECTED, message="boom")
        with pytest.raises(ValidationError):
            Result(value="x", error=failure)

    def test_empty_list_is_a_success(self) -> None:
        result = Result.success([])
        assert result.ok
        assert result.unwrap() == []
