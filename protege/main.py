"""Service assembly for the Protégé retrieval core.

Builds every provider and both pipeline services from :class:`Settings`.
This is the one place that knows which concrete adapter backs each
interface; the services themselves only see the interfaces.

Typical use from an application entry point::

    services = await build_services()
    result = await services.ingestion.ingest_url("Photosynthesis", url)
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from protege.config.loader import load_settings
from protege.config.settings import Settings
from protege.interfaces.article_provider import IArticleProvider
from protege.interfaces.embedding_provider import IEmbeddingProvider
from protege.interfaces.source_store import ISourceMaterialStore
from protege.interfaces.turn_cache import ITurnCache
from protege.providers.article.web_scraper_provider import WebScraperProvider
from protege.providers.cache.turn_result_cache import TurnResultCache
from protege.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider
from protege.providers.pdf.pymupdf_provider import PyMuPDFTextExtractor
from protege.providers.storage.memory_source_store import InMemorySourceMaterialStore
from protege.providers.storage.sqlite_source_store import SQLiteSourceMaterialStore
from protege.services.ingestion.chunker import TextChunker
from protege.services.ingestion.ingestion_service import IngestionService
from protege.services.ingestion.jargon import JargonExtractor
from protege.services.retrieval.retrieval_service import RetrievalService
from protege.utils.errors import ConfigurationError
from protege.utils.logging import configure_logging, get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

_STORE_BACKENDS = ("sqlite", "memory")


@dataclass(frozen=True)
class ProtegeServices:
    """Everything an application needs to ingest and retrieve.

    Call :meth:`aclose` on shutdown to release the scraper's HTTP client.
    """

    settings: Settings
    embedding_provider: IEmbeddingProvider
    store: ISourceMaterialStore
    ingestion: IngestionService
    retrieval: RetrievalService
    article_scraper: WebScraperProvider

    async def aclose(self) -> None:
        await self.article_scraper.aclose()
        _logger.info("services_closed")


# ---------------------------------------------------------------------------
# Provider selection
# ---------------------------------------------------------------------------


def build_embedding_provider(app_settings: Settings) -> IEmbeddingProvider:
    """Return the configured embedding provider.

    Raises
    ------
    ConfigurationError
        If no API key is configured.  Both pipelines need embeddings, so
        there is no degraded mode.
    """
    provider = OpenAIEmbeddingProvider(settings=app_settings)
    if not provider.is_available():
        raise ConfigurationError("OPENAI_API_KEY is not set; embeddings are unavailable.")
    return provider


def build_source_store(app_settings: Settings) -> ISourceMaterialStore:
    backend = app_settings.source_store.lower()
    if backend == "sqlite":
        return SQLiteSourceMaterialStore(db_path=app_settings.source_db_path)
    if backend == "memory":
        return InMemorySourceMaterialStore()
    raise ConfigurationError(
        f"Unknown source_store {app_settings.source_store!r}; "
        f"expected one of {', '.join(_STORE_BACKENDS)}."
    )


def build_article_scraper(app_settings: Settings) -> WebScraperProvider:
    """Return a scraper that owns its HTTP client; the caller must close it."""
    return WebScraperProvider(
        timeout=app_settings.fetch_timeout,
        user_agent=app_settings.fetch_user_agent,
        max_redirects=app_settings.fetch_max_redirects,
    )


def build_ingestion_service(
    app_settings: Settings,
    embedding_provider: IEmbeddingProvider,
    store: ISourceMaterialStore,
    article_scraper: IArticleProvider | None = None,
) -> IngestionService:
    scraper = article_scraper or build_article_scraper(app_settings)
    return IngestionService(
        chunker=TextChunker(
            chunk_size=app_settings.chunk_size,
            overlap=app_settings.chunk_overlap,
        ),
        jargon_extractor=JargonExtractor(max_words=app_settings.max_jargon_words),
        embedding_provider=embedding_provider,
        store=store,
        article_scraper=scraper,
        pdf_extractor=PyMuPDFTextExtractor(),
        max_source_chars=app_settings.max_source_chars,
        max_pdf_base64_chars=app_settings.max_pdf_base64_chars,
        max_jargon_words=app_settings.max_jargon_words,
        embedding_retry_delay=app_settings.embedding_retry_delay,
        embedding_concurrency=app_settings.embedding_concurrency,
    )


def build_retrieval_service(
    app_settings: Settings,
    embedding_provider: IEmbeddingProvider,
    store: ISourceMaterialStore,
    cache: ITurnCache | None = None,
) -> RetrievalService:
    return RetrievalService(
        embedding_provider=embedding_provider,
        store=store,
        top_k=app_settings.retrieval_top_k,
        min_similarity=app_settings.retrieval_min_similarity,
        embedding_retry_delay=app_settings.embedding_retry_delay,
        cache=cache
        or TurnResultCache(
            max_turns=app_settings.retrieval_cache_size,
            ttl=app_settings.retrieval_cache_ttl,
        ),
    )


# ---------------------------------------------------------------------------
# Full assembly
# ---------------------------------------------------------------------------


async def build_services(custom_settings: Settings | None = None) -> ProtegeServices:
    """Construct and initialise every provider and service.

    Parameters
    ----------
    custom_settings:
        Application settings.  Loaded from ``config/config.yaml`` and the
        environment when not provided.
    """
    s = custom_settings or load_settings()

    configure_logging(
        log_level=s.log_level,
        json_output=(s.app_env == "production"),
    )

    embedding_provider = build_embedding_provider(s)
    store = build_source_store(s)
    if isinstance(store, SQLiteSourceMaterialStore):
        await store.initialize()

    scraper = build_article_scraper(s)
    services = ProtegeServices(
        settings=s,
        embedding_provider=embedding_provider,
        store=store,
        ingestion=build_ingestion_service(s, embedding_provider, store, scraper),
        retrieval=build_retrieval_service(s, embedding_provider, store),
        article_scraper=scraper,
    )
    _logger.info(
        "services_ready",
        embedding_provider=embedding_provider.get_provider_name(),
        store=store.get_provider_name(),
        app_env=s.app_env,
    )
    return services
