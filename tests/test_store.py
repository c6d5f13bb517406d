"""
Tests for the persistent store and its storage backends.
"""

import asyncio

import pytest

from tarjoman.core.errors import DuplicateKey, StorageUnavailable
from tarjoman.core.models import HistoryRecord, LanguageDescriptor, TextDirection
from tarjoman.storage import (
    MISSING,
    Collections,
    InMemoryRecordStorage,
    PersistentStore,
    SQLiteRecordStorage,
)


def make_record(record_id: int, text: str = "hello") -> HistoryRecord:
    return HistoryRecord(
        id=record_id,
        source_lang="en",
        target_lang="fa",
        source_text=text,
        target_text=f"{text} (fa)",
    )


class SlowOpenStorage(InMemoryRecordStorage):
    """Yields to the event loop while opening."""

    async def open(self) -> None:
        await asyncio.sleep(0.01)
        await super().open()


class BrokenStorage(InMemoryRecordStorage):
    """Storage whose open always fails."""

    def __init__(self):
        super().__init__()
        self.attempts = 0

    async def open(self) -> None:
        self.attempts += 1
        raise OSError("disk gone")


@pytest.fixture(params=["memory", "sqlite"])
def any_store(request, tmp_path):
    """The same store contract over both backends."""
    if request.param == "memory":
        return PersistentStore(InMemoryRecordStorage())
    return PersistentStore(SQLiteRecordStorage(tmp_path / "tarjoman.db"))


# =============================================================================
# Settings
# =============================================================================


class TestSettings:
    @pytest.mark.asyncio
    async def test_missing_setting_returns_sentinel(self, any_store):
        assert await any_store.get_setting("nope") is MISSING
        assert await any_store.get_setting("nope", default=None) is None

    @pytest.mark.asyncio
    async def test_last_write_wins(self, any_store):
        await any_store.put_setting("theme", "light")
        await any_store.put_setting("theme", "dark")

        assert await any_store.get_setting("theme") == "dark"

    @pytest.mark.asyncio
    async def test_structured_values(self, any_store):
        await any_store.put_setting("apiKeys", ["a", "b"])
        await any_store.put_setting("lastKeyIndex", -1)

        assert await any_store.get_setting("apiKeys") == ["a", "b"]
        assert await any_store.get_setting("lastKeyIndex") == -1

    @pytest.mark.asyncio
    async def test_stored_value_is_a_copy(self, store):
        keys = ["a"]
        await store.put_setting("apiKeys", keys)
        keys.append("b")

        assert await store.get_setting("apiKeys") == ["a"]

    @pytest.mark.asyncio
    async def test_stored_as_key_value_record(self, backend, store):
        await store.put_setting("apiKeys", ["a"])

        record = await backend.get(Collections.SETTINGS, "apiKeys")

        assert record == {"key": "apiKeys", "value": ["a"]}

    @pytest.mark.asyncio
    async def test_delete_setting(self, any_store):
        await any_store.put_setting("theme", "dark")
        await any_store.delete_setting("theme")
        await any_store.delete_setting("theme")

        assert await any_store.get_setting("theme", default="system") == "system"


# =============================================================================
# History
# =============================================================================


class TestHistory:
    @pytest.mark.asyncio
    async def test_newest_first(self, any_store):
        for record_id in (100, 300, 200):
            await any_store.append_history(make_record(record_id))

        records = await any_store.list_history()

        assert [r.id for r in records] == [300, 200, 100]

    @pytest.mark.asyncio
    async def test_duplicate_id_rejected(self, any_store):
        await any_store.append_history(make_record(1, "first"))

        with pytest.raises(DuplicateKey):
            await any_store.append_history(make_record(1, "second"))

        records = await any_store.list_history()
        assert len(records) == 1
        assert records[0].source_text == "first"

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, any_store):
        await any_store.append_history(make_record(1))
        await any_store.append_history(make_record(2))

        await any_store.delete_history(1)
        await any_store.delete_history(1)
        await any_store.delete_history(999)

        assert [r.id for r in await any_store.list_history()] == [2]

    @pytest.mark.asyncio
    async def test_clear(self, any_store):
        await any_store.append_history(make_record(1))
        await any_store.append_history(make_record(2))

        await any_store.clear_history()

        assert await any_store.list_history() == []

    @pytest.mark.asyncio
    async def test_invalid_stored_record_skipped(self, any_store, caplog):
        await any_store.append_history(make_record(1))
        backend = await any_store.connect()
        await backend.insert(Collections.HISTORY, 2, {"id": 2, "sourceLang": "en"})

        assert [r.id for r in await any_store.list_history()] == [1]
        assert "Skipping invalid stored history record" in caplog.text

    @pytest.mark.asyncio
    async def test_record_round_trips_all_fields(self, any_store):
        record = make_record(42, "سلام")
        await any_store.append_history(record)

        assert await any_store.list_history() == [record]


# =============================================================================
# Custom Languages
# =============================================================================


class TestCustomLanguages:
    @pytest.mark.asyncio
    async def test_upsert_by_code(self, any_store):
        await any_store.put_language(
            LanguageDescriptor(code="it", name="Italiano", english_name="Italian")
        )
        await any_store.put_language(
            LanguageDescriptor(code="it", name="ایتالیایی", english_name="Italian")
        )

        languages = await any_store.list_custom_languages()

        assert len(languages) == 1
        assert languages[0].name == "ایتالیایی"

    @pytest.mark.asyncio
    async def test_direction_persisted(self, any_store):
        await any_store.put_language(
            LanguageDescriptor(code="he", name="عبری", english_name="Hebrew", dir="rtl")
        )

        [hebrew] = await any_store.list_custom_languages()

        assert hebrew.dir == TextDirection.RTL
        assert hebrew.is_rtl

    @pytest.mark.asyncio
    async def test_collections_are_independent(self, any_store):
        await any_store.put_setting("it", "a setting")
        await any_store.put_language(LanguageDescriptor(code="it", name="ایتالیایی"))
        await any_store.clear_history()

        assert await any_store.get_setting("it") == "a setting"
        assert len(await any_store.list_custom_languages()) == 1


# =============================================================================
# Connection lifecycle
# =============================================================================


class TestConnection:
    @pytest.mark.asyncio
    async def test_opens_lazily(self, backend, store):
        assert backend.open_count == 0
        assert not store.is_connected

        await store.get_setting("anything")

        assert backend.open_count == 1
        assert store.is_connected

    @pytest.mark.asyncio
    async def test_concurrent_first_use_opens_once(self):
        backend = SlowOpenStorage()
        store = PersistentStore(backend)

        await asyncio.gather(
            store.get_setting("a"),
            store.put_setting("b", 1),
            store.list_history(),
            store.list_custom_languages(),
        )

        assert backend.open_count == 1

    @pytest.mark.asyncio
    async def test_reused_after_open(self, backend, store):
        for _ in range(5):
            await store.get_setting("a")

        assert backend.open_count == 1

    @pytest.mark.asyncio
    async def test_open_failure_is_not_retried(self):
        backend = BrokenStorage()
        store = PersistentStore(backend)

        with pytest.raises(StorageUnavailable):
            await store.get_setting("a")
        with pytest.raises(StorageUnavailable):
            await store.list_history()

        assert backend.attempts == 1
        assert not store.is_connected

    @pytest.mark.asyncio
    async def test_sqlite_unreachable_path(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        store = PersistentStore(SQLiteRecordStorage(blocker / "tarjoman.db"))

        with pytest.raises(StorageUnavailable):
            await store.put_setting("theme", "dark")

    @pytest.mark.asyncio
    async def test_sqlite_survives_restart(self, tmp_path):
        path = tmp_path / "tarjoman.db"

        first = PersistentStore(SQLiteRecordStorage(path))
        await first.put_setting("apiKeys", ["k1"])
        await first.append_history(make_record(7))
        await first.put_language(LanguageDescriptor(code="it", name="ایتالیایی"))
        await first.close()

        second = PersistentStore(SQLiteRecordStorage(path))
        assert await second.get_setting("apiKeys") == ["k1"]
        assert [r.id for r in await second.list_history()] == [7]
        assert [lang.code for lang in await second.list_custom_languages()] == ["it"]
        await second.close()
