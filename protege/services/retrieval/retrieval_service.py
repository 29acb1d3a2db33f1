"""Retrieval pipeline: explanation in, best-matching source chunks out.

For each learner turn the explanation is embedded once (one retry), the
session's stored chunks are loaded, and every chunk is scored by cosine
similarity.  The top-K chunks feed the tutoring model's fact-checking
context.

When a cache is configured and the caller supplies a ``turn_id``, the
ranked chunks are memoised per ``(session_id, turn_id)`` so repeated work
for the same turn never pays for a second embedding call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from protege.models.result import PipelineFailure, Result
from protege.models.source import SimilarityResult
from protege.services.embedding import embed_with_retry
from protege.services.retrieval.similarity import rank_chunks
from protege.utils.errors import (
    DimensionMismatchError,
    InputValidationError,
    ProtegeError,
    SourceMaterialNotFoundError,
    UnexpectedPipelineError,
)
from protege.utils.logging import pipeline_context

if TYPE_CHECKING:
    from protege.interfaces.embedding_provider import IEmbeddingProvider
    from protege.interfaces.source_store import ISourceMaterialStore
    from protege.interfaces.turn_cache import ITurnCache

logger = structlog.get_logger(logger_name=__name__)

_EMPTY_QUERY_MESSAGE = "Please provide an explanation to compare against the source."


class RetrievalService:
    """Ranks a session's stored chunks against a learner's explanation.

    Parameters
    ----------
    embedding_provider:
        Must be the same model that embedded the stored chunks.
    store:
        Read-only access to the session's source material.
    top_k:
        Maximum number of chunks returned.
    min_similarity:
        Optional score floor; ``None`` returns the top-K regardless of score.
    embedding_retry_delay:
        Seconds before the single retry of a failed embedding call.
    cache:
        Optional per-turn memo for ranked results.
    """

    def __init__(
        self,
        embedding_provider: IEmbeddingProvider,
        store: ISourceMaterialStore,
        *,
        top_k: int = 5,
        min_similarity: float | None = None,
        embedding_retry_delay: float = 1.0,
        cache: ITurnCache | None = None,
    ) -> None:
        self._embedding_provider = embedding_provider
        self._store = store
        self._top_k = top_k
        self._min_similarity = min_similarity
        self._embedding_retry_delay = embedding_retry_delay
        self._cache = cache

    async def retrieve(
        self,
        session_id: str,
        query_text: str,
        turn_id: str | None = None,
    ) -> Result[list[SimilarityResult]]:
        """Return up to ``top_k`` chunks ordered by descending similarity.

        Raises
        ------
        DimensionMismatchError
            If the query vector and the stored vectors differ in length.
            This signals a model mismatch and is not converted to a failure.
        """
        with pipeline_context(pipeline="retrieval", session_id=session_id, turn_id=turn_id):
            return await self._retrieve(session_id, query_text, turn_id)

    async def _retrieve(
        self,
        session_id: str,
        query_text: str,
        turn_id: str | None,
    ) -> Result[list[SimilarityResult]]:
        try:
            if not query_text or not query_text.strip():
                raise InputValidationError(_EMPTY_QUERY_MESSAGE)

            memoised = self._turn_cache(turn_id)
            if memoised is not None:
                cached = await memoised.get(session_id, turn_id)  # type: ignore[arg-type]
                if cached is not None:
                    return Result.success(cached)

            query_vector = await embed_with_retry(
                self._embedding_provider,
                query_text,
                retry_delay=self._embedding_retry_delay,
                session_id=session_id,
            )

            record = await self._store.find_by_session_id(session_id)
            if record is None:
                raise SourceMaterialNotFoundError()

            results = rank_chunks(
                query_vector,
                record.chunks,
                top_k=self._top_k,
                min_similarity=self._min_similarity,
            )
        except DimensionMismatchError:
            logger.error("retrieval_dimension_mismatch")
            raise
        except ProtegeError as exc:
            logger.warning("retrieval_failed", kind=exc.kind.value, error=str(exc))
            return Result.failure(PipelineFailure.from_error(exc))
        except Exception:
            logger.exception("retrieval_unexpected_error")
            return Result.failure(PipelineFailure.from_error(UnexpectedPipelineError()))

        if memoised is not None:
            await memoised.put(session_id, turn_id, results)  # type: ignore[arg-type]

        logger.info(
            "retrieval_complete",
            chunk_count=len(record.chunks),
            returned=len(results),
            top_similarity=results[0].similarity if results else None,
        )
        return Result.success(results)

    def _turn_cache(self, turn_id: str | None) -> ITurnCache | None:
        if turn_id is None:
            return None
        return self._cache
