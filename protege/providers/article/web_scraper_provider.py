"""Web scraper article provider using httpx and BeautifulSoup.

Fetches raw HTML with httpx and reduces it to the visible text of the
page's main content element.  Redirects are followed by hand so every hop
can be checked against the same host guard as the requested URL.
"""

from __future__ import annotations

import asyncio

import httpx
import structlog
from bs4 import BeautifulSoup

from protege.interfaces.article_provider import ArticleContent, IArticleProvider
from protege.utils.errors import SourceUnavailableError
from protege.utils.text_normalizer import collapse_whitespace
from protege.utils.url_validation import validate_source_url

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_TIMEOUT = 30.0
_DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; AI-Protege/1.0)"
_DEFAULT_MAX_REDIRECTS = 5

# Tried in order; the first match is the content root.
_CONTENT_SELECTORS = ("main", "article", '[role="main"]', ".content", "#content")
_STRIPPED_TAGS = ("script", "style", "noscript")

_TIMEOUT_MESSAGE = "The website took too long to respond. Please try a different URL."
_UNREACHABLE_MESSAGE = "Could not access the URL. Please check the URL and try again."
_TOO_MANY_REDIRECTS = "The URL redirected too many times. Please try a different URL."


def extract_readable_text(html: str) -> tuple[str, str]:
    """Return ``(title, text)`` for *html*.

    ``script``, ``style`` and ``noscript`` elements are removed, then the
    visible text of the first matching content selector (falling back to
    ``<body>`` and finally the whole document) is whitespace-collapsed.
    """
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(list(_STRIPPED_TAGS)):
        tag.decompose()

    title = ""
    if soup.title is not None and soup.title.string:
        title = soup.title.string.strip()

    root = None
    for selector in _CONTENT_SELECTORS:
        root = soup.select_one(selector)
        if root is not None:
            break
    if root is None:
        root = soup.body or soup

    return title, collapse_whitespace(root.get_text(" "))


class WebScraperProvider(IArticleProvider):
    """Article extraction backed by httpx + BeautifulSoup.

    Parameters
    ----------
    http_client:
        Optional pre-built client (tests pass one with a mock transport).
        It must not follow redirects itself.
    timeout:
        Total deadline in seconds for the whole fetch, redirects included.
    user_agent:
        Value sent in the ``User-Agent`` header.
    max_redirects:
        Redirect hops followed before giving up.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        *,
        timeout: float = _DEFAULT_TIMEOUT,
        user_agent: str = _DEFAULT_USER_AGENT,
        max_redirects: int = _DEFAULT_MAX_REDIRECTS,
    ) -> None:
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=False,
        )
        self._timeout = timeout
        self._headers = {
            "User-Agent": user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        }
        self._max_redirects = max_redirects

    # ------------------------------------------------------------------
    # IArticleProvider implementation
    # ------------------------------------------------------------------

    async def extract_content(self, url: str) -> ArticleContent:
        """Fetch *url* and extract its readable text."""
        try:
            response = await asyncio.wait_for(self._fetch(url), timeout=self._timeout)
            response.raise_for_status()
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            logger.warning("scrape_timeout", url=url, timeout_s=self._timeout)
            raise SourceUnavailableError(
                message=_TIMEOUT_MESSAGE,
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPStatusError as exc:
            logger.warning("scrape_http_status", url=url, status=exc.response.status_code)
            raise SourceUnavailableError(
                message=_UNREACHABLE_MESSAGE,
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("scrape_http_error", url=url, error=str(exc)[:200])
            raise SourceUnavailableError(
                message=_UNREACHABLE_MESSAGE,
                provider_name=self.get_provider_name(),
            ) from exc

        title, text = extract_readable_text(response.text)
        logger.info(
            "article_extracted",
            url=str(response.url),
            title=title,
            text_length=len(text),
        )
        return ArticleContent(title=title, text=text, url=str(response.url))

    def get_provider_name(self) -> str:
        return "web_scraper"

    async def aclose(self) -> None:
        """Close the underlying client if this provider created it."""
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _fetch(self, url: str) -> httpx.Response:
        """GET *url*, following redirects and re-validating each target.

        Raises ``InputValidationError`` (via the URL guard) when a redirect
        points at a blocked host.
        """
        current = url
        for hop in range(self._max_redirects + 1):
            response = await self._client.get(current, headers=self._headers)
            if not response.is_redirect:
                return response

            location = response.headers.get("location", "")
            target = str(response.url.join(location))
            await response.aclose()
            current = validate_source_url(target)
            logger.debug("scrape_redirect", hop=hop + 1, target=current)

        raise SourceUnavailableError(
            message=_TOO_MANY_REDIRECTS,
            provider_name=self.get_provider_name(),
        )
