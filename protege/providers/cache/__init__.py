"""Cache providers."""

from protege.providers.cache.turn_result_cache import TurnResultCache

__all__ = ["TurnResultCache"]
