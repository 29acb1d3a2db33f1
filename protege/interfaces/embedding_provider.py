"""Abstract base class for text-embedding service providers.

Defines the contract for turning text into fixed-length vectors.  Both the
ingestion pipeline (chunk vectors) and the retrieval pipeline (query
vectors) depend on this interface only, so the backend can be swapped in
``protege/main.py`` without touching either service.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations:
#   OpenAIEmbeddingProvider - text-embedding-3-small or any OpenAI-compatible API
# Located in: protege/providers/embedding/
class IEmbeddingProvider(ABC):
    """Contract for text-embedding services used by both pipelines.

    Every vector returned by one provider instance must have the same
    length; retrieval refuses to compare vectors of differing length.
    """

    @abstractmethod
    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for a batch of texts.

        Parameters
        ----------
        texts:
            One or more text strings to embed.

        Returns
        -------
        list[list[float]]
            Embedding vectors corresponding positionally to *texts*.

        Raises
        ------
        protege.utils.errors.EmbeddingUnavailableError
            If the embedding API call fails.
        """

    @abstractmethod
    async def embed_single(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text string.

        Parameters
        ----------
        text:
            The text string to embed (a chunk or a learner's query).
        """

    @abstractmethod
    def get_dimension(self) -> int:
        """Return the dimensionality of the embedding vectors."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this embedding provider."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured (credentials present)."""
