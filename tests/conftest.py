"""
Shared fixtures.
"""

from typing import Any

import httpx
import pytest

from tarjoman.credentials import CredentialRotator
from tarjoman.i18n.registry import LanguageRegistry
from tarjoman.i18n.translator import Translator
from tarjoman.storage.local import InMemoryRecordStorage
from tarjoman.storage.store import PersistentStore, set_store

from helpers import ENDPOINT


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _reset_singletons():
    """Keep module-level singletons from leaking between tests."""
    yield
    set_store(None)


@pytest.fixture
def backend():
    return InMemoryRecordStorage()


@pytest.fixture
def store(backend):
    """Fresh store over in-memory storage."""
    return PersistentStore(backend)


@pytest.fixture
def rotator(store):
    return CredentialRotator(store, pool_key="apiKeys", cursor_key="lastKeyIndex")


@pytest.fixture
def registry(store):
    return LanguageRegistry(store)


@pytest.fixture
def make_translator(rotator, registry):
    """Build a translator talking to a mock transport."""

    def _make(transport: httpx.AsyncBaseTransport, **kwargs: Any) -> Translator:
        return Translator(
            rotator,
            registry,
            endpoint=ENDPOINT,
            transport=transport,
            **kwargs,
        )

    return _make
