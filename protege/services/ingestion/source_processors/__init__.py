"""Source processors -- one per supported input format."""

from protege.services.ingestion.source_processors.article_processor import ArticleProcessor
from protege.services.ingestion.source_processors.pdf_processor import PDFProcessor

__all__ = ["ArticleProcessor", "PDFProcessor"]
