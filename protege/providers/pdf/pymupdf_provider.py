"""PDF text extraction via PyMuPDF.

Opens the document from an in-memory byte stream and reads the plain text
of each page in order.
"""

from __future__ import annotations

import fitz  # PyMuPDF
import structlog

from protege.interfaces.pdf_extractor import IPdfTextExtractor
from protege.utils.errors import SourceUnavailableError

logger = structlog.get_logger(logger_name=__name__)

_UNREADABLE_MESSAGE = "Could not read the PDF. Please make sure the file is a valid PDF."


class PyMuPDFTextExtractor(IPdfTextExtractor):
    """Page-by-page text extraction backed by ``fitz``."""

    def extract_pages(self, data: bytes) -> list[str]:
        if not data:
            raise SourceUnavailableError(
                message=_UNREADABLE_MESSAGE,
                provider_name=self.get_provider_name(),
            )
        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as exc:
            # fitz raises its own FileDataError / RuntimeError family here.
            logger.warning("pdf_open_failed", error=str(exc)[:200])
            raise SourceUnavailableError(
                message=_UNREADABLE_MESSAGE,
                provider_name=self.get_provider_name(),
            ) from exc

        try:
            pages = [page.get_text("text") for page in doc]
        finally:
            doc.close()

        logger.debug("pdf_pages_extracted", page_count=len(pages))
        return pages

    def get_provider_name(self) -> str:
        return "pymupdf"
