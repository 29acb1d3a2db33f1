"""Process-local turn memo backed by ``cachetools.TTLCache``."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from cachetools import TTLCache

from protege.interfaces.turn_cache import ITurnCache

if TYPE_CHECKING:
    from protege.models.source import SimilarityResult

logger = structlog.get_logger(logger_name=__name__)


class TurnResultCache(ITurnCache):
    """Keeps ranked chunks for recent turns.

    Entries are stored as tuples so a caller mutating the returned list
    cannot change what the next lookup for the same turn sees.  The oldest
    turns are evicted once ``max_turns`` is reached, and every entry expires
    after ``ttl`` seconds.
    """

    def __init__(self, max_turns: int = 512, ttl: int = 3600) -> None:
        self._turns: TTLCache[tuple[str, str], tuple[SimilarityResult, ...]] = TTLCache(
            maxsize=max_turns, ttl=ttl
        )

    async def get(self, session_id: str, turn_id: str) -> list[SimilarityResult] | None:
        hit = self._turns.get((session_id, turn_id))
        if hit is None:
            return None
        logger.debug("turn_cache_hit", session_id=session_id, turn_id=turn_id)
        return list(hit)

    async def put(
        self,
        session_id: str,
        turn_id: str,
        results: list[SimilarityResult],
    ) -> None:
        self._turns[(session_id, turn_id)] = tuple(results)

    def __len__(self) -> int:
        return len(self._turns)
