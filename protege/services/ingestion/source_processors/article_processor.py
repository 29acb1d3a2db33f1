"""Source processor for web pages.

Delegates fetching and HTML reduction to an :class:`IArticleProvider` and
returns the page text ready for normalisation.
"""

from __future__ import annotations

import structlog

from protege.interfaces.article_provider import IArticleProvider
from protege.utils.errors import SourceUnavailableError
from protege.utils.text_normalizer import collapse_whitespace

logger = structlog.get_logger(logger_name=__name__)

_NO_CONTENT_MESSAGE = "No readable content found on the page. Please try a different URL."


class ArticleProcessor:
    """Turns a validated URL into whitespace-collapsed page text."""

    async def process_url(self, url: str, scraper: IArticleProvider) -> str:
        content = await scraper.extract_content(url)
        text = collapse_whitespace(content.text)
        if not text:
            logger.warning("article_empty", url=url)
            raise SourceUnavailableError(
                message=_NO_CONTENT_MESSAGE,
                provider_name=scraper.get_provider_name(),
            )
        logger.info("article_processed", url=url, title=content.title, chars=len(text))
        return text
