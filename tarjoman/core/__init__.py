"""
Core module - data models, errors and shared utilities.

This module contains:
- models: Settings, history records, language descriptors, translation results
- errors: Exception taxonomy surfaced to callers
- utils: Shared utility functions
"""

from tarjoman.core.models import (
    Setting,
    HistoryRecord,
    LanguageDescriptor,
    TextDirection,
    TranslationResult,
    Preferences,
    Theme,
)

from tarjoman.core.errors import (
    TarjomanError,
    StorageUnavailable,
    DuplicateKey,
    NoCredential,
    NetworkFailure,
    RemoteRejected,
    MalformedResponse,
    UnparsableResult,
)

from tarjoman.core.utils import generate_history_id

__all__ = [
    # Models
    "Setting",
    "HistoryRecord",
    "LanguageDescriptor",
    "TextDirection",
    "TranslationResult",
    "Preferences",
    "Theme",
    # Errors
    "TarjomanError",
    "StorageUnavailable",
    "DuplicateKey",
    "NoCredential",
    "NetworkFailure",
    "RemoteRejected",
    "MalformedResponse",
    "UnparsableResult",
    # Utils
    "generate_history_id",
]
