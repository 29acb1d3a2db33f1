"""Abstract base class for web-page text providers.

Defines the contract for fetching a page and reducing it to readable text.
The ingestion service only sees this interface; the HTTP client, redirect
policy and HTML parsing all live in the concrete adapter.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ArticleContent:
    """Readable content extracted from a web page.

    Attributes
    ----------
    title:
        The page title, or an empty string when the page has none.
    text:
        Visible body text with markup stripped and whitespace collapsed.
    url:
        The final URL the content was read from (after redirects).
    """

    title: str
    text: str
    url: str = ""


class IArticleProvider(ABC):
    """Contract for services that turn a public URL into readable text."""

    @abstractmethod
    async def extract_content(self, url: str) -> ArticleContent:
        """Fetch *url* and extract its readable text.

        Parameters
        ----------
        url:
            An already-validated public HTTP(S) URL.

        Raises
        ------
        protege.utils.errors.SourceUnavailableError
            If the page cannot be fetched (timeout, non-2xx, network error).
        protege.utils.errors.InputValidationError
            If a redirect points at a disallowed host.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
