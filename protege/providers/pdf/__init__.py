"""PDF text extractors."""

from protege.providers.pdf.pymupdf_provider import PyMuPDFTextExtractor

__all__ = ["PyMuPDFTextExtractor"]
