"""Source material stores."""

from protege.providers.storage.memory_source_store import InMemorySourceMaterialStore
from protege.providers.storage.sqlite_source_store import SQLiteSourceMaterialStore

__all__ = ["InMemorySourceMaterialStore", "SQLiteSourceMaterialStore"]
