"""Public interface definitions for every external dependency.

The ingestion and retrieval services talk to the outside world only through
the abstract base classes in this package.  Concrete adapters live in
``protege/providers/`` and are wired together in ``protege/main.py``.

CONCRETE PROVIDER MAP:
    Interface               →  Concrete implementations (in protege/providers/)
    ─────────────────────────────────────────────────────────────────
    IEmbeddingProvider      →  OpenAIEmbeddingProvider
    IArticleProvider        →  WebScraperProvider
    IPdfTextExtractor       →  PyMuPDFTextExtractor
    ISourceMaterialStore    →  SQLiteSourceMaterialStore,
                               InMemorySourceMaterialStore
    ITurnCache              →  TurnResultCache
"""

from protege.interfaces.article_provider import ArticleContent, IArticleProvider
from protege.interfaces.embedding_provider import IEmbeddingProvider
from protege.interfaces.pdf_extractor import IPdfTextExtractor
from protege.interfaces.source_store import ISourceMaterialStore
from protege.interfaces.turn_cache import ITurnCache

__all__ = [
    "ArticleContent",
    "IArticleProvider",
    "IEmbeddingProvider",
    "IPdfTextExtractor",
    "ISourceMaterialStore",
    "ITurnCache",
]
