"""Shared pytest fixtures for the Protégé test suite."""

from __future__ import annotations

import hashlib
import math
import struct

import pytest

from protege.interfaces.article_provider import ArticleContent, IArticleProvider
from protege.interfaces.embedding_provider import IEmbeddingProvider
from protege.interfaces.pdf_extractor import IPdfTextExtractor
from protege.providers.storage.memory_source_store import InMemorySourceMaterialStore
from protege.services.ingestion.chunker import TextChunker
from protege.services.ingestion.ingestion_service import IngestionService
from protege.services.ingestion.jargon import JargonExtractor
from protege.utils.errors import SourceUnavailableError

# ---------------------------------------------------------------------------
# Deterministic embeddings
# ---------------------------------------------------------------------------

_EMBEDDING_DIM = 16


def _hash_to_vector(text: str, dim: int = _EMBEDDING_DIM) -> list[float]:
    """Map *text* to a deterministic unit vector via SHA-256."""
    digest = hashlib.sha256(text.encode("utf-8")).digest()
    raw = [struct.unpack_from("B", digest, i % len(digest))[0] / 255.0 for i in range(dim)]
    norm = math.sqrt(sum(v * v for v in raw)) or 1.0
    return [v / norm for v in raw]


class MockEmbeddingProvider(IEmbeddingProvider):
    """In-memory deterministic embedding provider for tests."""

    def __init__(self, dim: int = _EMBEDDING_DIM) -> None:
        self._dim = dim
        self.calls: list[str] = []

    async def embed(self, texts: list[str]) -> list[list[float]]:
        return [await self.embed_single(t) for t in texts]

    async def embed_single(self, text: str) -> list[float]:
        self.calls.append(text)
        return _hash_to_vector(text, self._dim)

    def get_dimension(self) -> int:
        return self._dim

    def get_provider_name(self) -> str:
        return "mock-embedding"

    def is_available(self) -> bool:
        return True


class FlakyEmbeddingProvider(MockEmbeddingProvider):
    """Fails *failures* consecutive calls for a text, then succeeds once."""

    def __init__(self, failures: int = 1, fail_on: str | None = None) -> None:
        super().__init__()
        self._failures = failures
        self._fail_on = fail_on
        self._seen: dict[str, int] = {}

    async def embed_single(self, text: str) -> list[float]:
        self.calls.append(text)
        if self._fail_on is None or self._fail_on in text:
            count = self._seen.get(text, 0)
            self._seen[text] = count + 1
            if count < self._failures:
                raise ConnectionError("embedding backend unavailable")
            self._seen.pop(text, None)
        return _hash_to_vector(text, self._dim)


class StaticArticleProvider(IArticleProvider):
    """Returns fixed text for every URL and records what was requested."""

    def __init__(self, text: str = "", title: str = "Test page") -> None:
        self._text = text
        self._title = title
        self.requested: list[str] = []

    async def extract_content(self, url: str) -> ArticleContent:
        self.requested.append(url)
        if not self._text:
            raise SourceUnavailableError(provider_name="static")
        return ArticleContent(title=self._title, text=self._text, url=url)

    def get_provider_name(self) -> str:
        return "static_article"


class StaticPdfExtractor(IPdfTextExtractor):
    """Returns fixed pages regardless of the bytes given."""

    def __init__(self, pages: list[str]) -> None:
        self._pages = pages
        self.received: list[bytes] = []

    def extract_pages(self, data: bytes) -> list[str]:
        self.received.append(data)
        return list(self._pages)

    def get_provider_name(self) -> str:
        return "static_pdf"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_embedding_provider() -> MockEmbeddingProvider:
    return MockEmbeddingProvider()


@pytest.fixture
def memory_store() -> InMemorySourceMaterialStore:
    return InMemorySourceMaterialStore()


@pytest.fixture
def long_source_text() -> str:
    """~6000 characters of prose with sentence boundaries and jargon."""
    sentences = [
        "Photosynthesis converts light energy into chemical energy inside chloroplasts.",
        "The thylakoid membranes host the light-dependent reactions of the process.",
        "Chlorophyll absorbs mostly blue and red wavelengths of visible light.",
        "The Calvin cycle fixes carbon dioxide using the enzyme RuBisCO.",
        "Stomatal conductance limits how much carbon dioxide reaches the mesophyll.",
        "Photorespiration competes with carbon fixation when oxygen levels are high.",
    ]
    paragraph = " ".join(sentences)
    return " ".join([paragraph] * 13)


def make_ingestion_service(
    embedding_provider: IEmbeddingProvider,
    store: InMemorySourceMaterialStore,
    article_scraper: IArticleProvider | None = None,
    pdf_extractor: IPdfTextExtractor | None = None,
    **overrides: object,
) -> IngestionService:
    """Build an IngestionService with zero retry delay."""
    options: dict[str, object] = {
        "max_source_chars": 50_000,
        "max_jargon_words": 30,
        "embedding_retry_delay": 0.0,
        "embedding_concurrency": 1,
    }
    options.update(overrides)
    return IngestionService(
        chunker=TextChunker(chunk_size=1000, overlap=200),
        jargon_extractor=JargonExtractor(max_words=30),
        embedding_provider=embedding_provider,
        store=store,
        article_scraper=article_scraper,
        pdf_extractor=pdf_extractor,
        **options,  # type: ignore[arg-type]
    )
