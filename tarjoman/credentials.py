"""
API key pool and round-robin rotation.

The pool and the last-used index are both plain settings, so rotation
picks up where it left off after a restart. Removing a key resets the
index so the next call starts again at the first key instead of pointing
at a shifted slot.
"""

from __future__ import annotations

import logging

from tarjoman.config import get_settings
from tarjoman.storage.store import PersistentStore

logger = logging.getLogger(__name__)


class CredentialRotator:
    """
    Round-robin selection over the configured API keys.

    Two concurrent ``next_credential()`` calls may read the same index and
    hand out the same key; fairness is best-effort.
    """

    def __init__(
        self,
        store: PersistentStore,
        pool_key: str | None = None,
        cursor_key: str | None = None,
    ):
        settings = get_settings()
        self.store = store
        self.pool_key = pool_key or settings.api_keys_setting
        self.cursor_key = cursor_key or settings.key_index_setting

    async def list_credentials(self) -> list[str]:
        keys = await self.store.get_setting(self.pool_key, default=None)
        return list(keys or [])

    async def next_credential(self) -> str | None:
        """Return the next key in rotation, or None if none are configured."""
        keys = await self.list_credentials()
        if not keys:
            return None

        cursor = await self.store.get_setting(self.cursor_key, default=-1)
        if not isinstance(cursor, int):
            cursor = -1
        next_index = (cursor + 1) % len(keys)
        await self.store.put_setting(self.cursor_key, next_index)
        return keys[next_index]

    async def add_credential(self, value: str) -> list[str]:
        """Append a key to the pool. Returns the updated pool."""
        key = value.strip()
        if not key:
            raise ValueError("API key cannot be empty.")

        keys = await self.list_credentials()
        if key in keys:
            raise ValueError("This API key has already been added.")

        keys.append(key)
        await self.store.put_setting(self.pool_key, keys)
        logger.info(f"API key added ({len(keys)} configured)")
        return keys

    async def remove_credential(self, index: int) -> list[str]:
        """Remove the key at ``index`` and restart rotation from the first key."""
        keys = await self.list_credentials()
        if not 0 <= index < len(keys):
            raise IndexError(f"No API key at index {index}")

        keys.pop(index)
        await self.store.put_setting(self.pool_key, keys)
        await self.store.put_setting(self.cursor_key, -1)
        logger.info(f"API key removed ({len(keys)} configured)")
        return keys
