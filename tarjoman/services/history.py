"""
Translation history.
"""

from __future__ import annotations

from tarjoman.core.models import HistoryRecord
from tarjoman.storage.store import PersistentStore


class HistoryService:
    """Browse, search and prune stored translations."""

    def __init__(self, store: PersistentStore):
        self.store = store

    async def list_all(self) -> list[HistoryRecord]:
        return await self.store.list_history()

    async def search(self, term: str = "") -> list[HistoryRecord]:
        """Records whose source or target text contains ``term``, newest first."""
        records = await self.store.list_history()
        if not term.strip():
            return records
        return [r for r in records if r.matches(term)]

    async def delete(self, record_id: int) -> None:
        await self.store.delete_history(record_id)

    async def clear(self) -> None:
        await self.store.clear_history()
