"""Process-local source material store.

Keeps records in a plain dict.  Used by tests and by the ``memory`` store
setting for throwaway sessions; nothing survives a restart.
"""

from __future__ import annotations

import structlog

from protege.interfaces.source_store import ISourceMaterialStore
from protege.models.source import SourceMaterial
from protege.utils.errors import PersistenceError

logger = structlog.get_logger(logger_name=__name__)


class InMemorySourceMaterialStore(ISourceMaterialStore):
    """Dict-backed :class:`ISourceMaterialStore`."""

    def __init__(self) -> None:
        self._records: dict[str, SourceMaterial] = {}

    async def insert(self, record: SourceMaterial) -> None:
        if record.session_id in self._records:
            raise PersistenceError(provider_name=self.get_provider_name())
        self._records[record.session_id] = record
        logger.debug("source_material_stored", session_id=record.session_id)

    async def find_by_session_id(self, session_id: str) -> SourceMaterial | None:
        return self._records.get(session_id)

    async def delete(self, session_id: str) -> bool:
        return self._records.pop(session_id, None) is not None

    def get_provider_name(self) -> str:
        return "memory_source_store"

    def __len__(self) -> int:
        return len(self._records)
