"""Web page text providers."""

from protege.providers.article.web_scraper_provider import (
    WebScraperProvider,
    extract_readable_text,
)

__all__ = ["WebScraperProvider", "extract_readable_text"]
