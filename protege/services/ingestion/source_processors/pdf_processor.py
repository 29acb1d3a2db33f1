"""Source processor for base64-encoded PDF uploads.

Accepts the payload exactly as a browser upload delivers it (optionally as
a ``data:application/pdf;base64,...`` URL), enforces the upload size cap,
decodes it strictly and extracts the text of every page through an
:class:`IPdfTextExtractor`.

The cap is applied to the *encoded* payload: 1 MB of binary is roughly
1.37 MB of base64, so the default limit is ``int(1.37 * 1024 * 1024)``
characters.
"""

from __future__ import annotations

import base64
import binascii
import re

import structlog

from protege.interfaces.pdf_extractor import IPdfTextExtractor
from protege.utils.errors import InputValidationError, SourceUnavailableError
from protege.utils.text_normalizer import collapse_whitespace

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_MAX_BASE64_CHARS = int(1.37 * 1024 * 1024)

_DATA_URL_PREFIX = re.compile(r"^data:[^,]*;base64,", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")

_TOO_LARGE_MESSAGE = "PDF file is too large. Maximum size is 1MB."
_INVALID_DATA_MESSAGE = "Invalid PDF data. Please try uploading again."
_NO_TEXT_MESSAGE = (
    "No text could be extracted from the PDF. Scanned documents are not supported."
)


class PDFProcessor:
    """Decodes a base64 PDF payload and returns its collapsed page text.

    Parameters
    ----------
    max_base64_chars:
        Upper bound on the encoded payload length.
    """

    def __init__(self, max_base64_chars: int = DEFAULT_MAX_BASE64_CHARS) -> None:
        self._max_base64_chars = max_base64_chars

    def decode(self, payload: str) -> bytes:
        """Validate and decode *payload* into raw PDF bytes.

        Raises
        ------
        InputValidationError
            If the payload is empty, over the size cap or not valid base64.
        """
        if not payload or not payload.strip():
            raise InputValidationError(_INVALID_DATA_MESSAGE)
        if len(payload) > self._max_base64_chars:
            raise InputValidationError(_TOO_LARGE_MESSAGE)

        body = _DATA_URL_PREFIX.sub("", payload.strip(), count=1)
        body = _WHITESPACE.sub("", body)
        try:
            data = base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise InputValidationError(_INVALID_DATA_MESSAGE) from exc

        if not data:
            raise InputValidationError(_INVALID_DATA_MESSAGE)
        return data

    def process_base64(self, payload: str, extractor: IPdfTextExtractor) -> str:
        """Return the whitespace-collapsed text of the PDF in *payload*."""
        return self.extract_text(self.decode(payload), extractor)

    def extract_text(self, data: bytes, extractor: IPdfTextExtractor) -> str:
        """Return the whitespace-collapsed text of already-decoded PDF bytes."""
        pages = extractor.extract_pages(data)
        text = collapse_whitespace("\n".join(pages))
        if not text:
            logger.warning("pdf_no_text", page_count=len(pages))
            raise SourceUnavailableError(
                message=_NO_TEXT_MESSAGE,
                provider_name=extractor.get_provider_name(),
            )
        logger.info("pdf_processed", page_count=len(pages), chars=len(text), bytes=len(data))
        return text
