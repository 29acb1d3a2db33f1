"""Cosine similarity scoring and top-K chunk ranking.

Scores are clamped to ``[0, 1]``: negative similarity (vectors pointing
away from each other) is treated as "unrelated", not as a signal.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from protege.models.source import Chunk, SimilarityResult
from protege.utils.errors import DimensionMismatchError


def cosine_similarity(a: Sequence[float] | None, b: Sequence[float] | None) -> float:
    """Return the cosine similarity of *a* and *b*, clamped to ``[0, 1]``.

    Empty (or ``None``) vectors and zero-magnitude vectors score ``0.0``.

    Raises
    ------
    DimensionMismatchError
        If both vectors are non-empty and their lengths differ.
    """
    if not a or not b:
        return 0.0
    if len(a) != len(b):
        raise DimensionMismatchError(
            f"Embedding dimensions do not match ({len(a)} != {len(b)})."
        )

    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    norm_product = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if norm_product == 0.0:
        return 0.0

    score = float(np.dot(va, vb)) / norm_product
    return min(1.0, max(0.0, score))


def rank_chunks(
    query_vector: Sequence[float],
    chunks: Sequence[Chunk],
    top_k: int = 5,
    min_similarity: float | None = None,
) -> list[SimilarityResult]:
    """Score every chunk against *query_vector* and return the best *top_k*.

    Ties keep the chunks' stored order.  When *min_similarity* is set,
    chunks scoring below it are dropped before the cut.
    """
    if top_k <= 0 or not chunks:
        return []

    scored = [
        SimilarityResult(
            text=chunk.text,
            similarity=cosine_similarity(query_vector, chunk.embedding),
            index=chunk.index,
        )
        for chunk in chunks
    ]
    scored.sort(key=lambda result: result.similarity, reverse=True)

    if min_similarity is not None:
        scored = [result for result in scored if result.similarity >= min_similarity]
    return scored[:top_k]
