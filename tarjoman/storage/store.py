"""
Persistent store.

The single entry point for durable state: settings, translation history
and custom languages. Wraps a ``RecordStorage`` backend and owns its
connection lifecycle.

The connection is opened lazily on first use and reused for the life of
the process. Concurrent first callers share one opening task, so the
backend is opened exactly once. If opening fails, the failure is kept and
re-raised to every later caller; there is no automatic retry.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from tarjoman.core.errors import StorageUnavailable
from tarjoman.core.models import HistoryRecord, LanguageDescriptor, Setting
from tarjoman.storage.base import MISSING, Collections, RecordStorage

logger = logging.getLogger(__name__)


class PersistentStore:
    """
    Settings, history and custom languages over one storage backend.

    Usage:
        store = PersistentStore(SQLiteRecordStorage("./data/tarjoman.db"))

        await store.put_setting("theme", "dark")
        theme = await store.get_setting("theme", default="system")

        await store.append_history(record)
        records = await store.list_history()  # newest first
    """

    def __init__(self, backend: RecordStorage):
        self.backend = backend
        self._opening: asyncio.Future[None] | None = None

    # =========================================================================
    # Connection
    # =========================================================================

    async def _open_backend(self) -> None:
        try:
            await self.backend.open()
        except StorageUnavailable:
            raise
        except Exception as e:
            raise StorageUnavailable("Local storage is unavailable.") from e

    async def connect(self) -> RecordStorage:
        """
        Open the backend once and return it.

        The first caller starts the opening task; concurrent callers await
        the same task rather than opening a second connection.
        """
        if self._opening is None:
            self._opening = asyncio.ensure_future(self._open_backend())
        try:
            await asyncio.shield(self._opening)
        except StorageUnavailable as e:
            logger.error(f"Storage unavailable: {e.context or e}")
            raise
        return self.backend

    @property
    def is_connected(self) -> bool:
        return (
            self._opening is not None
            and self._opening.done()
            and not self._opening.cancelled()
            and self._opening.exception() is None
        )

    async def close(self) -> None:
        """Close the backend. Only called at process exit."""
        if self.is_connected:
            await self.backend.close()
        self._opening = None

    # =========================================================================
    # Settings
    # =========================================================================

    async def put_setting(self, key: str, value: Any) -> None:
        """Insert or overwrite a setting."""
        backend = await self.connect()
        setting = Setting(key=key, value=value)
        await backend.put(Collections.SETTINGS, key, setting.model_dump(mode="json"))

    async def get_setting(self, key: str, default: Any = MISSING) -> Any:
        """Get a setting's value, or ``default`` if it was never stored."""
        backend = await self.connect()
        record = await backend.get(Collections.SETTINGS, key)
        if record is None:
            return default
        return Setting.model_validate(record).value

    async def delete_setting(self, key: str) -> None:
        backend = await self.connect()
        await backend.delete(Collections.SETTINGS, key)

    # =========================================================================
    # History
    # =========================================================================

    async def append_history(self, record: HistoryRecord) -> None:
        """Insert a history record. Raises ``DuplicateKey`` if the id exists."""
        backend = await self.connect()
        await backend.insert(Collections.HISTORY, record.id, record.to_record())

    async def list_history(self) -> list[HistoryRecord]:
        """All history records, newest first."""
        backend = await self.connect()
        records = []
        for record in await backend.all(Collections.HISTORY):
            try:
                records.append(HistoryRecord.model_validate(record))
            except ValueError as e:
                logger.warning(f"Skipping invalid stored history record {record!r}: {e}")
        records.sort(key=lambda r: r.id, reverse=True)
        return records

    async def delete_history(self, record_id: int) -> None:
        """Delete one record. Deleting an unknown id is not an error."""
        backend = await self.connect()
        await backend.delete(Collections.HISTORY, record_id)

    async def clear_history(self) -> None:
        backend = await self.connect()
        await backend.clear(Collections.HISTORY)

    # =========================================================================
    # Custom Languages
    # =========================================================================

    async def put_language(self, descriptor: LanguageDescriptor) -> None:
        """Insert or replace a custom language, keyed by code."""
        backend = await self.connect()
        await backend.put(Collections.LANGUAGES, descriptor.code, descriptor.to_record())

    async def list_custom_languages(self) -> list[LanguageDescriptor]:
        backend = await self.connect()
        languages = []
        for record in await backend.all(Collections.LANGUAGES):
            try:
                languages.append(LanguageDescriptor.model_validate(record))
            except ValueError as e:
                logger.warning(f"Skipping invalid stored language {record!r}: {e}")
        return languages


# =============================================================================
# Module-level store
# =============================================================================


_store: PersistentStore | None = None


def get_store() -> PersistentStore:
    """Get or create the process-wide store, backed by SQLite."""
    global _store
    if _store is None:
        from tarjoman.config import get_settings
        from tarjoman.storage.local import SQLiteRecordStorage

        _store = PersistentStore(SQLiteRecordStorage(get_settings().database_path))
    return _store


def set_store(store: PersistentStore | None) -> None:
    """Replace the process-wide store (None resets it)."""
    global _store
    _store = store
