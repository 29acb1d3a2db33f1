"""SQLite-backed source material store.

Persists one row per session in a local SQLite database at
``data/source_material.db``.  The full record (chunks, vectors, jargon) is
stored as a JSON document next to a few indexed columns.  Uses
``aiosqlite`` for async I/O.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

import aiosqlite
import structlog
from pydantic import ValidationError

from protege.interfaces.source_store import ISourceMaterialStore
from protege.models.source import SourceMaterial
from protege.utils.errors import PersistenceError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/source_material.db")

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS source_material (
    session_id   TEXT PRIMARY KEY,
    topic        TEXT NOT NULL,
    source_type  TEXT NOT NULL,
    user_id      TEXT,
    record_json  TEXT NOT NULL,
    created_at   TEXT NOT NULL
);
"""

_CREATE_INDICES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_source_material_user ON source_material(user_id);",
]

_INSERT_SQL = """\
INSERT INTO source_material (session_id, topic, source_type, user_id, record_json, created_at)
VALUES (?, ?, ?, ?, ?, ?);
"""

_SELECT_SQL = "SELECT record_json FROM source_material WHERE session_id = ?;"
_DELETE_SQL = "DELETE FROM source_material WHERE session_id = ?;"


class SQLiteSourceMaterialStore(ISourceMaterialStore):
    """SQLite-backed source material persistence."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    async def initialize(self) -> None:
        """Create the table and indices if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_CREATE_TABLE_SQL)
                for idx_sql in _CREATE_INDICES_SQL:
                    await db.execute(idx_sql)
                await db.commit()
        except sqlite3.Error as exc:
            raise PersistenceError(
                message="Failed to initialise the source material store.",
                provider_name=self.get_provider_name(),
            ) from exc
        logger.info("source_store_initialized", path=str(self._db_path))

    async def insert(self, record: SourceMaterial) -> None:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(
                    _INSERT_SQL,
                    (
                        record.session_id,
                        record.topic,
                        record.source_type.value,
                        record.user_id,
                        record.model_dump_json(),
                        record.created_at.isoformat(),
                    ),
                )
                await db.commit()
        except sqlite3.IntegrityError as exc:
            logger.error("source_material_duplicate", session_id=record.session_id)
            raise PersistenceError(provider_name=self.get_provider_name()) from exc
        except sqlite3.Error as exc:
            logger.error(
                "source_material_insert_failed",
                session_id=record.session_id,
                error=str(exc)[:200],
            )
            raise PersistenceError(provider_name=self.get_provider_name()) from exc

        logger.info(
            "source_material_stored",
            session_id=record.session_id,
            chunk_count=len(record.chunks),
        )

    async def find_by_session_id(self, session_id: str) -> SourceMaterial | None:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute(_SELECT_SQL, (session_id,))
                row = await cursor.fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError(
                message="Failed to load source material. Please try again.",
                provider_name=self.get_provider_name(),
            ) from exc

        if row is None:
            return None
        try:
            return SourceMaterial.model_validate_json(row[0])
        except ValidationError as exc:
            logger.error("source_material_corrupt", session_id=session_id)
            raise PersistenceError(
                message="Stored source material is unreadable.",
                provider_name=self.get_provider_name(),
            ) from exc

    async def delete(self, session_id: str) -> bool:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute(_DELETE_SQL, (session_id,))
                await db.commit()
                deleted = cursor.rowcount > 0
        except sqlite3.Error as exc:
            raise PersistenceError(
                message="Failed to delete source material.",
                provider_name=self.get_provider_name(),
            ) from exc
        return deleted

    def get_provider_name(self) -> str:
        return "sqlite_source_store"
