"""Integration tests for the retrieval pipeline."""

from __future__ import annotations

import math

import pytest

from protege.interfaces.embedding_provider import IEmbeddingProvider
from protege.models.source import Chunk, SourceMaterial, SourceType
from protege.providers.cache.turn_result_cache import TurnResultCache
from protege.providers.storage.memory_source_store import InMemorySourceMaterialStore
from protege.services.retrieval.retrieval_service import RetrievalService
from protege.utils.errors import (
    DimensionMismatchError,
    ErrorKind,
    SourceMaterialNotFoundError,
)
from tests.conftest import (
    MockEmbeddingProvider,
    StaticArticleProvider,
    make_ingestion_service,
)


def _angle_vector(degrees: float) -> list[float]:
    radians = math.radians(degrees)
    return [math.cos(radians), math.sin(radians)]


class AngleEmbeddingProvider(IEmbeddingProvider):
    """Embeds ``"angle:<degrees>"`` queries as 2-d unit vectors."""

    def __init__(self, failures: int = 0) -> None:
        self._failures = failures
        self.calls = 0

    async def embed(self, texts: list[str]) -> list[list[float]]:
        return [await self.embed_single(t) for t in texts]

    async def embed_single(self, text: str) -> list[float]:
        self.calls += 1
        if self.calls <= self._failures:
            raise TimeoutError("embedding timed out")
        return _angle_vector(float(text.split(":", 1)[1]))

    def get_dimension(self) -> int:
        return 2

    def get_provider_name(self) -> str:
        return "angle-embedding"

    def is_available(self) -> bool:
        return True


@pytest.fixture
async def angle_store() -> InMemorySourceMaterialStore:
    """A session whose seven chunks sit 15 degrees apart."""
    store = InMemorySourceMaterialStore()
    await store.insert(
        SourceMaterial(
            session_id="session-angles",
            topic="Vectors",
            source_type=SourceType.URL,
            chunks=[
                Chunk(text=f"chunk {i}", embedding=_angle_vector(15 * i), index=i)
                for i in range(7)
            ],
        )
    )
    return store


def _service(embedder: IEmbeddingProvider, store, **kwargs) -> RetrievalService:
    return RetrievalService(embedder, store, embedding_retry_delay=0.0, **kwargs)


class TestRetrieve:
    @pytest.mark.asyncio
    async def test_returns_top_five_by_similarity(
        self, angle_store: InMemorySourceMaterialStore
    ) -> None:
        result = await _service(AngleEmbeddingProvider(), angle_store).retrieve(
            "session-angles", "angle:44"
        )

        hits = result.unwrap()
        assert [h.index for h in hits] == [3, 2, 4, 1, 5]
        assert [h.text for h in hits][0] == "chunk 3"
        assert all(0.0 <= h.similarity <= 1.0 for h in hits)

    @pytest.mark.asyncio
    async def test_min_similarity_threshold(
        self, angle_store: InMemorySourceMaterialStore
    ) -> None:
        service = _service(AngleEmbeddingProvider(), angle_store, top_k=7, min_similarity=0.9)
        hits = (await service.retrieve("session-angles", "angle:0")).unwrap()
        assert [h.index for h in hits] == [0, 1]

    @pytest.mark.asyncio
    async def test_embedding_retried_once(self, angle_store: InMemorySourceMaterialStore) -> None:
        embedder = AngleEmbeddingProvider(failures=1)
        result = await _service(embedder, angle_store).retrieve("session-angles", "angle:0")
        assert result.ok
        assert embedder.calls == 2

    @pytest.mark.asyncio
    async def test_embedding_failure_after_retry(
        self, angle_store: InMemorySourceMaterialStore
    ) -> None:
        embedder = AngleEmbeddingProvider(failures=2)
        result = await _service(embedder, angle_store).retrieve("session-angles", "angle:0")
        assert result.error.kind is ErrorKind.EMBEDDING_UNAVAILABLE
        assert result.error.stage is None
        assert embedder.calls == 2

    @pytest.mark.asyncio
    async def test_missing_session(self, angle_store: InMemorySourceMaterialStore) -> None:
        result = await _service(AngleEmbeddingProvider(), angle_store).retrieve(
            "no-such-session", "angle:0"
        )
        assert result.error.kind is ErrorKind.SOURCE_UNAVAILABLE
        assert result.error.message == "No source material was found for this session."
        with pytest.raises(SourceMaterialNotFoundError):
            result.unwrap()

    @pytest.mark.asyncio
    async def test_blank_query_is_rejected_before_embedding(
        self, angle_store: InMemorySourceMaterialStore
    ) -> None:
        embedder = AngleEmbeddingProvider()
        result = await _service(embedder, angle_store).retrieve("session-angles", "   ")
        assert result.error.kind is ErrorKind.INPUT_VALIDATION
        assert embedder.calls == 0

    @pytest.mark.asyncio
    async def test_session_without_chunks_returns_empty(self) -> None:
        store = InMemorySourceMaterialStore()
        await store.insert(SourceMaterial(session_id="manual", topic="Gravity"))
        result = await _service(AngleEmbeddingProvider(), store).retrieve("manual", "angle:0")
        assert result.ok
        assert result.unwrap() == []

    @pytest.mark.asyncio
    async def test_dimension_mismatch_propagates(self) -> None:
        store = InMemorySourceMaterialStore()
        await store.insert(
            SourceMaterial(
                session_id="three-d",
                topic="Vectors",
                chunks=[Chunk(text="x", embedding=[1.0, 0.0, 0.0], index=0)],
            )
        )
        with pytest.raises(DimensionMismatchError):
            await _service(AngleEmbeddingProvider(), store).retrieve("three-d", "angle:0")


class TestPerTurnCache:
    @pytest.mark.asyncio
    async def test_same_turn_embeds_once(self, angle_store: InMemorySourceMaterialStore) -> None:
        embedder = AngleEmbeddingProvider()
        service = _service(embedder, angle_store, cache=TurnResultCache())

        first = await service.retrieve("session-angles", "angle:44", turn_id="turn-1")
        second = await service.retrieve("session-angles", "angle:44", turn_id="turn-1")

        assert first.unwrap() == second.unwrap()
        assert embedder.calls == 1

    @pytest.mark.asyncio
    async def test_new_turn_recomputes(self, angle_store: InMemorySourceMaterialStore) -> None:
        embedder = AngleEmbeddingProvider()
        service = _service(embedder, angle_store, cache=TurnResultCache())

        await service.retrieve("session-angles", "angle:44", turn_id="turn-1")
        second = await service.retrieve("session-angles", "angle:0", turn_id="turn-2")

        assert second.unwrap()[0].index == 0
        assert embedder.calls == 2

    @pytest.mark.asyncio
    async def test_no_turn_id_skips_cache(self, angle_store: InMemorySourceMaterialStore) -> None:
        embedder = AngleEmbeddingProvider()
        service = _service(embedder, angle_store, cache=TurnResultCache())
        await service.retrieve("session-angles", "angle:44")
        await service.retrieve("session-angles", "angle:44")
        assert embedder.calls == 2


class TestIngestThenRetrieve:
    @pytest.mark.asyncio
    async def test_query_matching_a_chunk_ranks_it_first(self, long_source_text: str) -> None:
        store = InMemorySourceMaterialStore()
        embedder = MockEmbeddingProvider()
        ingestion = make_ingestion_service(
            embedder, store, article_scraper=StaticArticleProvider(long_source_text)
        )
        result = await ingestion.ingest_url("Leaves", "https://example.com")
        session_id = result.unwrap().session_id
        record = await store.find_by_session_id(session_id)
        target = record.chunks[2]

        retrieval = RetrievalService(embedder, store, top_k=3, embedding_retry_delay=0.0)
        hits = (await retrieval.retrieve(session_id, target.text)).unwrap()

        assert len(hits) == 3
        assert hits[0].text == target.text
        assert hits[0].similarity == pytest.approx(1.0)
