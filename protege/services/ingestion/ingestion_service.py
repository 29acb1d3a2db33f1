"""Orchestrator for source material ingestion.

Pipeline stages: **validate -> fetch -> extract text -> chunk -> embed ->
persist**.

The :class:`IngestionService` coordinates the source processors, the
chunker, the jargon extractor, the embedding provider and the source store
without any of them knowing about each other.  Each public ``ingest_*``
method follows the same flow:

    1. Validate the caller's input (URL guard / upload size and encoding)
    2. Source processor -- fetch the page or decode the PDF into text
    3. Normalise -- trim, reject empty text, cap the length
    4. TextChunker -- split into overlapping character windows
    5. IEmbeddingProvider -- embed every chunk (one retry per chunk)
    6. JargonExtractor -- frequency-ranked technical terms
    7. ISourceMaterialStore -- write exactly one record for a new session

Nothing escapes as an exception: every run ends in a
:class:`~protege.models.result.Result` carrying either the new session id
or a classified failure tagged with the stage it happened in.  A failed
run never writes a partial record.
"""

from __future__ import annotations

import time
import uuid
from typing import TYPE_CHECKING, Awaitable, Callable

import structlog

from protege.models.pipeline import IngestionStage
from protege.models.result import IngestionOutput, PipelineFailure, Result
from protege.models.source import Chunk, SourceMaterial, SourceType
from protege.services.embedding import embed_with_retry
from protege.services.ingestion.chunker import TextChunker
from protege.services.ingestion.jargon import JargonExtractor
from protege.services.ingestion.source_processors.article_processor import (
    ArticleProcessor,
)
from protege.services.ingestion.source_processors.pdf_processor import PDFProcessor
from protege.utils.concurrency import bounded_gather
from protege.utils.errors import (
    ConfigurationError,
    InputValidationError,
    PersistenceError,
    ProtegeError,
    SourceUnavailableError,
    UnexpectedPipelineError,
)
from protege.utils.logging import pipeline_context
from protege.utils.text_normalizer import cap_length
from protege.utils.url_validation import validate_source_url

if TYPE_CHECKING:
    from protege.interfaces.article_provider import IArticleProvider
    from protege.interfaces.embedding_provider import IEmbeddingProvider
    from protege.interfaces.pdf_extractor import IPdfTextExtractor
    from protege.interfaces.source_store import ISourceMaterialStore

logger = structlog.get_logger(logger_name=__name__)

_EMPTY_SOURCE_MESSAGE = "The source contains no readable text."
_NO_CHUNKS_MESSAGE = "The source text could not be split into chunks."
_EMPTY_TOPIC_MESSAGE = "Please provide a topic."


class _StageTracker:
    """Records the current stage of one run and logs each transition."""

    def __init__(self) -> None:
        self.stage = IngestionStage.VALIDATING
        self._started = time.monotonic()

    def advance(self, stage: IngestionStage) -> None:
        self.stage = stage
        logger.debug("ingestion_stage", stage=stage.value)

    @property
    def elapsed_ms(self) -> int:
        return int((time.monotonic() - self._started) * 1000)


class IngestionService:
    """Turns a URL or PDF upload into one stored, embedded source record.

    Parameters
    ----------
    chunker:
        Splits normalised text into overlapping windows.
    jargon_extractor:
        Picks frequency-ranked technical terms from the normalised text.
    embedding_provider:
        Generates one vector per chunk.
    store:
        Persists the finished :class:`SourceMaterial` record.
    article_scraper:
        Page fetcher used by :meth:`ingest_url`.
    pdf_extractor:
        Page-text backend used by :meth:`ingest_pdf`.
    max_source_chars:
        Normalised text beyond this length is dropped before chunking.
    max_pdf_base64_chars:
        Size cap on the encoded PDF payload.
    max_jargon_words:
        Number of jargon terms stored with the record.
    embedding_retry_delay:
        Seconds to wait before the single retry of a failed embedding call.
    embedding_concurrency:
        Chunk embedding calls in flight at once; 1 embeds strictly in order.
    """

    def __init__(
        self,
        chunker: TextChunker,
        jargon_extractor: JargonExtractor,
        embedding_provider: IEmbeddingProvider,
        store: ISourceMaterialStore,
        article_scraper: IArticleProvider | None = None,
        pdf_extractor: IPdfTextExtractor | None = None,
        *,
        max_source_chars: int = 50_000,
        max_pdf_base64_chars: int = int(1.37 * 1024 * 1024),
        max_jargon_words: int = 30,
        embedding_retry_delay: float = 1.0,
        embedding_concurrency: int = 1,
    ) -> None:
        self._chunker = chunker
        self._jargon_extractor = jargon_extractor
        self._embedding_provider = embedding_provider
        self._store = store
        self._article_scraper = article_scraper
        self._pdf_extractor = pdf_extractor
        self._max_source_chars = max_source_chars
        self._max_jargon_words = max_jargon_words
        self._embedding_retry_delay = embedding_retry_delay
        self._embedding_concurrency = max(1, embedding_concurrency)
        self._article_processor = ArticleProcessor()
        self._pdf_processor = PDFProcessor(max_base64_chars=max_pdf_base64_chars)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def ingest_url(
        self,
        topic: str,
        source_url: str,
        user_id: str | None = None,
    ) -> Result[IngestionOutput]:
        """Scrape *source_url* and store its chunks for a new session."""

        async def _acquire(tracker: _StageTracker) -> tuple[str, str | None]:
            url = validate_source_url(source_url)
            if self._article_scraper is None:
                raise ConfigurationError("No article scraper is configured.")
            tracker.advance(IngestionStage.FETCHING)
            text = await self._article_processor.process_url(url, self._article_scraper)
            tracker.advance(IngestionStage.EXTRACTING_TEXT)
            return text, url

        return await self._run(topic, user_id, SourceType.URL, _acquire)

    async def ingest_pdf(
        self,
        topic: str,
        pdf_base64: str,
        user_id: str | None = None,
    ) -> Result[IngestionOutput]:
        """Decode an uploaded PDF and store its chunks for a new session."""

        async def _acquire(tracker: _StageTracker) -> tuple[str, str | None]:
            pdf_bytes = self._pdf_processor.decode(pdf_base64)
            if self._pdf_extractor is None:
                raise ConfigurationError("No PDF extractor is configured.")
            tracker.advance(IngestionStage.EXTRACTING_TEXT)
            text = self._pdf_processor.extract_text(pdf_bytes, self._pdf_extractor)
            return text, None

        return await self._run(topic, user_id, SourceType.PDF, _acquire)

    async def create_manual_session(
        self,
        topic: str,
        user_id: str | None = None,
    ) -> Result[IngestionOutput]:
        """Store an empty record for a session taught without source material."""
        with pipeline_context(
            pipeline="ingestion", source_type=SourceType.NONE.value, user_id=user_id
        ):
            return await self._create_manual(topic, user_id)

    async def _create_manual(self, topic: str, user_id: str | None) -> Result[IngestionOutput]:
        tracker = _StageTracker()
        try:
            clean_topic = self._validate_topic(topic)
            tracker.advance(IngestionStage.PERSISTING)
            session_id = await self._persist(
                SourceMaterial(
                    session_id=self._new_session_id(),
                    topic=clean_topic,
                    source_type=SourceType.NONE,
                    user_id=user_id,
                )
            )
        except ProtegeError as exc:
            return self._fail(tracker, exc)
        except Exception as exc:
            return self._fail_unexpected(tracker, exc)

        tracker.advance(IngestionStage.DONE)
        logger.info("manual_session_created", session_id=session_id)
        return Result.success(IngestionOutput(session_id=session_id))

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    async def _run(
        self,
        topic: str,
        user_id: str | None,
        source_type: SourceType,
        acquire: Callable[[_StageTracker], Awaitable[tuple[str, str | None]]],
    ) -> Result[IngestionOutput]:
        with pipeline_context(
            pipeline="ingestion", source_type=source_type.value, user_id=user_id
        ):
            return await self._run_stages(topic, user_id, source_type, acquire)

    async def _run_stages(
        self,
        topic: str,
        user_id: str | None,
        source_type: SourceType,
        acquire: Callable[[_StageTracker], Awaitable[tuple[str, str | None]]],
    ) -> Result[IngestionOutput]:
        tracker = _StageTracker()
        try:
            clean_topic = self._validate_topic(topic)
            raw_text, source_url = await acquire(tracker)
            text = self._normalise(raw_text)

            tracker.advance(IngestionStage.CHUNKING)
            pieces = self._chunker.chunk(text)
            if not pieces:
                raise SourceUnavailableError(_NO_CHUNKS_MESSAGE)

            tracker.advance(IngestionStage.EMBEDDING)
            vectors = await self._embed_chunks(pieces)
            chunks = [
                Chunk(text=piece, embedding=vector, index=position)
                for position, (piece, vector) in enumerate(zip(pieces, vectors))
            ]
            jargon = self._jargon_extractor.extract(text, self._max_jargon_words)

            tracker.advance(IngestionStage.PERSISTING)
            session_id = await self._persist(
                SourceMaterial(
                    session_id=self._new_session_id(),
                    topic=clean_topic,
                    source_type=source_type,
                    source_url=source_url,
                    user_id=user_id,
                    chunks=chunks,
                    jargon_words=jargon,
                )
            )
        except ProtegeError as exc:
            return self._fail(tracker, exc)
        except Exception as exc:
            return self._fail_unexpected(tracker, exc)

        tracker.advance(IngestionStage.DONE)
        logger.info(
            "ingestion_complete",
            session_id=session_id,
            chunk_count=len(chunks),
            jargon_count=len(jargon),
            source_chars=len(text),
            elapsed_ms=tracker.elapsed_ms,
        )
        return Result.success(IngestionOutput(session_id=session_id, source_text=text))

    def _normalise(self, raw_text: str) -> str:
        text = (raw_text or "").strip()
        if not text:
            raise SourceUnavailableError(_EMPTY_SOURCE_MESSAGE)
        capped = cap_length(text, self._max_source_chars)
        if len(capped) < len(text):
            logger.info("source_text_truncated", original_chars=len(text), kept_chars=len(capped))
        return capped

    async def _embed_chunks(self, pieces: list[str]) -> list[list[float]]:
        """Embed every chunk, preserving order; any exhausted chunk aborts."""
        if self._embedding_concurrency == 1:
            vectors: list[list[float]] = []
            for position, piece in enumerate(pieces):
                vectors.append(await self._embed_one(position, piece))
            return vectors

        results = await bounded_gather(
            [self._embed_one(position, piece) for position, piece in enumerate(pieces)],
            limit=self._embedding_concurrency,
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return list(results)  # type: ignore[arg-type]

    async def _embed_one(self, position: int, piece: str) -> list[float]:
        return await embed_with_retry(
            self._embedding_provider,
            piece,
            retry_delay=self._embedding_retry_delay,
            chunk_index=position,
        )

    async def _persist(self, record: SourceMaterial) -> str:
        try:
            await self._store.insert(record)
        except ProtegeError:
            raise
        except Exception as exc:
            raise PersistenceError(provider_name=self._store.get_provider_name()) from exc
        return record.session_id

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_topic(topic: str) -> str:
        clean = (topic or "").strip()
        if not clean:
            raise InputValidationError(_EMPTY_TOPIC_MESSAGE)
        return clean

    @staticmethod
    def _new_session_id() -> str:
        return str(uuid.uuid4())

    @staticmethod
    def _fail(
        tracker: _StageTracker,
        exc: ProtegeError,
    ) -> Result[IngestionOutput]:
        failed_stage = tracker.stage
        tracker.advance(IngestionStage.ERROR)
        logger.warning(
            "ingestion_failed",
            stage=failed_stage.value,
            kind=exc.kind.value,
            error=str(exc),
            elapsed_ms=tracker.elapsed_ms,
        )
        return Result.failure(PipelineFailure.from_error(exc, stage=failed_stage))

    @staticmethod
    def _fail_unexpected(
        tracker: _StageTracker,
        exc: Exception,
    ) -> Result[IngestionOutput]:
        failed_stage = tracker.stage
        tracker.advance(IngestionStage.ERROR)
        logger.exception("ingestion_unexpected_error", stage=failed_stage.value)
        return Result.failure(
            PipelineFailure.from_error(UnexpectedPipelineError(), stage=failed_stage)
        )
