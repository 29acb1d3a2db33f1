"""Abstract base class for the per-turn retrieval memo.

A learner turn may ask for supporting chunks more than once (a retry of
the tutoring call, a follow-up tool call).  The retrieval service keeps the
ranked chunks for each ``(session_id, turn_id)`` pair behind this contract
so the same turn never pays for a second embedding call.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from protege.models.source import SimilarityResult


class ITurnCache(ABC):
    """Contract for memoising ranked chunks per conversation turn."""

    @abstractmethod
    async def get(self, session_id: str, turn_id: str) -> list[SimilarityResult] | None:
        """Return the ranked chunks stored for this turn, or ``None``."""

    @abstractmethod
    async def put(
        self,
        session_id: str,
        turn_id: str,
        results: list[SimilarityResult],
    ) -> None:
        """Remember *results* as the answer for this turn."""
