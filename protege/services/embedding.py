"""Embedding calls shared by the ingestion and retrieval pipelines.

Every embedding request gets exactly one retry after a fixed delay.  Any
failure that survives the retry is reported as
:class:`~protege.utils.errors.EmbeddingUnavailableError` whatever the
provider actually raised.
"""

from __future__ import annotations

import structlog

from protege.interfaces.embedding_provider import IEmbeddingProvider
from protege.utils.concurrency import call_with_retry
from protege.utils.errors import EmbeddingUnavailableError

logger = structlog.get_logger(logger_name=__name__)

EMBEDDING_ATTEMPTS = 2


async def embed_with_retry(
    provider: IEmbeddingProvider,
    text: str,
    *,
    retry_delay: float = 1.0,
    **log_context: object,
) -> list[float]:
    """Embed *text*, retrying once after *retry_delay* seconds."""
    try:
        vector = await call_with_retry(
            lambda: provider.embed_single(text),
            attempts=EMBEDDING_ATTEMPTS,
            delay=retry_delay,
            event="embedding_retry",
            logger=logger,
            provider=provider.get_provider_name(),
            **log_context,
        )
    except EmbeddingUnavailableError:
        raise
    except Exception as exc:
        logger.error(
            "embedding_failed",
            provider=provider.get_provider_name(),
            error=str(exc)[:200],
            **log_context,
        )
        raise EmbeddingUnavailableError(provider_name=provider.get_provider_name()) from exc

    if not vector:
        raise EmbeddingUnavailableError(provider_name=provider.get_provider_name())
    return list(vector)
