"""Unit tests for cosine similarity and top-K ranking."""

from __future__ import annotations

import math

import pytest

from protege.models.source import Chunk
from protege.services.retrieval.similarity import cosine_similarity, rank_chunks
from protege.utils.errors import DimensionMismatchError, ErrorKind


def _angle_vector(degrees: float) -> list[float]:
    radians = math.radians(degrees)
    return [math.cos(radians), math.sin(radians)]


class TestCosineSimilarity:
    def test_identical_vectors_score_one(self) -> None:
        assert cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]) == pytest.approx(1.0)

    def test_orthogonal_vectors_score_zero(self) -> None:
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)

    def test_opposite_vectors_clamp_to_zero(self) -> None:
        assert cosine_similarity([1.0, 0.0], [-1.0, 0.0]) == 0.0

    def test_scale_invariant(self) -> None:
        assert cosine_similarity([1.0, 1.0], [5.0, 5.0]) == pytest.approx(1.0)

    def test_sixty_degrees(self) -> None:
        assert cosine_similarity(_angle_vector(0), _angle_vector(60)) == pytest.approx(0.5)

    def test_empty_vector_scores_zero(self) -> None:
        assert cosine_similarity([], [1.0]) == 0.0
        assert cosine_similarity(None, [1.0]) == 0.0

    def test_zero_magnitude_scores_zero(self) -> None:
        assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0

    def test_dimension_mismatch_raises(self) -> None:
        with pytest.raises(DimensionMismatchError) as exc_info:
            cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0])
        assert exc_info.value.kind is ErrorKind.DIMENSION_MISMATCH
        assert isinstance(exc_info.value, ValueError)

    def test_returns_builtin_float(self) -> None:
        assert type(cosine_similarity([1.0, 2.0], [2.0, 1.0])) is float


class TestRankChunks:
    @pytest.fixture()
    def chunks(self) -> list[Chunk]:
        # Chunk i points 15*i degrees away from the x axis.
        return [
            Chunk(text=f"chunk {i}", embedding=_angle_vector(15 * i), index=i) for i in range(7)
        ]

    def test_top_k_in_descending_order(self, chunks: list[Chunk]) -> None:
        results = rank_chunks(_angle_vector(44), chunks, top_k=5)
        assert [r.index for r in results] == [3, 2, 4, 1, 5]
        scores = [r.similarity for r in results]
        assert scores == sorted(scores, reverse=True)

    def test_fewer_chunks_than_k(self, chunks: list[Chunk]) -> None:
        assert len(rank_chunks(_angle_vector(0), chunks[:3], top_k=5)) == 3

    def test_ties_keep_stored_order(self) -> None:
        same = [Chunk(text=f"t{i}", embedding=[1.0, 0.0], index=i) for i in range(4)]
        results = rank_chunks([1.0, 0.0], same, top_k=3)
        assert [r.index for r in results] == [0, 1, 2]

    def test_min_similarity_filters(self, chunks: list[Chunk]) -> None:
        results = rank_chunks(_angle_vector(0), chunks, top_k=7, min_similarity=0.8)
        # cos(30) ~ 0.866 passes, cos(45) ~ 0.707 does not.
        assert [r.index for r in results] == [0, 1, 2]

    def test_no_chunks(self) -> None:
        assert rank_chunks([1.0], [], top_k=5) == []

    def test_mismatched_stored_vector_raises(self, chunks: list[Chunk]) -> None:
        with pytest.raises(DimensionMismatchError):
            rank_chunks([1.0, 0.0, 0.0], chunks)
