"""Abstract base class for PDF text extraction.

Implementations receive raw PDF bytes (already decoded from base64) and
return the text of each page in reading order.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class IPdfTextExtractor(ABC):
    """Contract for PDF-to-text backends."""

    @abstractmethod
    def extract_pages(self, data: bytes) -> list[str]:
        """Return the text of every page in *data*, in page order.

        Raises
        ------
        protege.utils.errors.SourceUnavailableError
            If the bytes are not a readable PDF.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this extractor."""
