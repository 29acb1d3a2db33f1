"""Abstract base class for source-material persistence.

One :class:`~protege.models.source.SourceMaterial` record is written per
session.  Ingestion writes it once; retrieval only ever reads it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from protege.models.source import SourceMaterial


# Concrete implementations:
#   InMemorySourceMaterialStore - process-local dict, used in tests
#   SQLiteSourceMaterialStore   - aiosqlite-backed, default
# Located in: protege/providers/storage/
class ISourceMaterialStore(ABC):
    """Contract for the per-session source material store."""

    @abstractmethod
    async def insert(self, record: SourceMaterial) -> None:
        """Persist *record* under its ``session_id``.

        Raises
        ------
        protege.utils.errors.PersistenceError
            If the write fails or a record already exists for the session.
        """

    @abstractmethod
    async def find_by_session_id(self, session_id: str) -> SourceMaterial | None:
        """Return the record for *session_id*, or ``None`` if there is none."""

    @abstractmethod
    async def delete(self, session_id: str) -> bool:
        """Remove the record for *session_id*; return ``True`` if one existed."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this store."""
