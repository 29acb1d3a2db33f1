"""Source material ingestion: processors, chunking, jargon, orchestration."""

from protege.services.ingestion.chunker import TextChunker, chunk_text
from protege.services.ingestion.ingestion_service import IngestionService
from protege.services.ingestion.jargon import JargonExtractor, extract_jargon

__all__ = [
    "IngestionService",
    "JargonExtractor",
    "TextChunker",
    "chunk_text",
    "extract_jargon",
]
