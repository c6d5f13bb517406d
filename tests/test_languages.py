"""
Tests for the language catalog and the cached registry.
"""

import asyncio

import pytest

from tarjoman.core.models import LanguageDescriptor
from tarjoman.i18n.languages import AUTO_DETECT, BUILTIN_LANGUAGES, normalize_language_code
from tarjoman.i18n.registry import LanguageRegistry, RegistryState
from tarjoman.storage import InMemoryRecordStorage, PersistentStore

ITALIAN = {"code": "it", "name": "ایتالیایی", "englishName": "Italian", "dir": "ltr"}


class GatedStorage(InMemoryRecordStorage):
    """Holds full-collection reads until the gate opens."""

    def __init__(self):
        super().__init__()
        self.gate = asyncio.Event()

    async def all(self, collection):
        await self.gate.wait()
        return await super().all(collection)


# =============================================================================
# Built-in catalog
# =============================================================================


class TestBuiltinCatalog:
    def test_codes_unique(self):
        codes = [lang.code for lang in BUILTIN_LANGUAGES]
        assert len(codes) == len(set(codes))

    def test_includes_auto_detect(self):
        assert BUILTIN_LANGUAGES[0].code == AUTO_DETECT

    def test_rtl_languages(self):
        rtl = {lang.code for lang in BUILTIN_LANGUAGES if lang.is_rtl}
        assert rtl == {"fa", "ar"}

    def test_normalize(self):
        assert normalize_language_code(" Farsi ") == "fa"
        assert normalize_language_code("FR") == "fr"
        assert normalize_language_code("it") == "it"


# =============================================================================
# Merge
# =============================================================================


class TestMerge:
    @pytest.mark.asyncio
    async def test_builtins_only(self, registry):
        languages = await registry.get_all_languages()

        assert [lang.code for lang in languages] == [lang.code for lang in BUILTIN_LANGUAGES]

    @pytest.mark.asyncio
    async def test_custom_overrides_builtin(self, store, registry):
        await store.put_language(
            LanguageDescriptor(code="fr", name="Français", english_name="French")
        )

        languages = await registry.get_all_languages()
        french = [lang for lang in languages if lang.code == "fr"]

        assert len(french) == 1
        assert french[0].name == "Français"
        assert len(languages) == len(BUILTIN_LANGUAGES)

    @pytest.mark.asyncio
    async def test_custom_appended(self, store, registry):
        await store.put_language(LanguageDescriptor.model_validate(ITALIAN))

        languages = await registry.get_all_languages()

        assert languages[-1].code == "it"
        assert (await registry.get_language_names())["it"] == "ایتالیایی"

    @pytest.mark.asyncio
    async def test_lookup_helpers(self, store, registry):
        await store.put_language(
            LanguageDescriptor(code="he", name="عبری", english_name="Hebrew", dir="rtl")
        )

        assert (await registry.get_language("he")).english_name == "Hebrew"
        assert await registry.get_language("xx") is None
        assert await registry.rtl_codes() == {"fa", "ar", "he"}
        assert AUTO_DETECT not in {lang.code for lang in await registry.translatable_languages()}


# =============================================================================
# Cache
# =============================================================================


class TestCache:
    @pytest.mark.asyncio
    async def test_starts_empty(self, registry):
        assert registry.state == RegistryState.EMPTY

    @pytest.mark.asyncio
    async def test_same_object_while_loaded(self, registry):
        first = await registry.get_all_languages()
        second = await registry.get_all_languages()

        assert registry.state == RegistryState.LOADED
        assert first is second
        assert await registry.get_language_names() is await registry.get_language_names()

    @pytest.mark.asyncio
    async def test_does_not_reread_store_while_loaded(self, store, registry):
        await registry.get_all_languages()
        # Written behind the registry's back: not visible until invalidated
        await store.put_language(LanguageDescriptor.model_validate(ITALIAN))

        assert not await registry.is_known("it")

        registry.invalidate()
        assert await registry.is_known("it")

    @pytest.mark.asyncio
    async def test_register_invalidates(self, registry):
        before = await registry.get_all_languages()
        assert "it" not in {lang.code for lang in before}

        assert await registry.register_language(ITALIAN)
        assert registry.state == RegistryState.EMPTY

        after = await registry.get_all_languages()
        assert "it" in {lang.code for lang in after}
        assert (await registry.get_language_names())["it"] == "ایتالیایی"

    @pytest.mark.asyncio
    async def test_register_persists(self, store, registry):
        await registry.register_language(LanguageDescriptor.model_validate(ITALIAN))

        assert [lang.code for lang in await store.list_custom_languages()] == ["it"]

    @pytest.mark.asyncio
    async def test_rebuild_racing_with_write_is_not_cached(self):
        backend = GatedStorage()
        store = PersistentStore(backend)
        registry = LanguageRegistry(store)

        pending = asyncio.ensure_future(registry.get_all_languages())
        await asyncio.sleep(0)
        registry.invalidate()
        backend.gate.set()
        await pending

        assert registry.state == RegistryState.EMPTY


# =============================================================================
# Invalid descriptors
# =============================================================================


class TestRegisterValidation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "descriptor",
        [
            None,
            {},
            {"code": "it"},
            {"name": "ایتالیایی"},
            {"code": "", "name": "ایتالیایی"},
            {"code": "it", "name": "   "},
        ],
    )
    async def test_invalid_descriptor_ignored(self, store, registry, descriptor, caplog):
        await registry.get_all_languages()

        assert await registry.register_language(descriptor) is False

        assert await store.list_custom_languages() == []
        assert registry.state == RegistryState.LOADED
        assert "Invalid language object" in caplog.text
