"""
Shared utility functions.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone

_last_history_id = 0


def generate_history_id() -> int:
    """
    Generate a history record id from the current time.

    Milliseconds since epoch, bumped past the previous id when two records
    are created within the same millisecond so ids stay unique and
    increasing within a process.
    """
    global _last_history_id
    candidate = time.time_ns() // 1_000_000
    if candidate <= _last_history_id:
        candidate = _last_history_id + 1
    _last_history_id = candidate
    return candidate


def history_timestamp(record_id: int) -> datetime:
    """Creation time of a history record, recovered from its id."""
    return datetime.fromtimestamp(record_id / 1000, tz=timezone.utc)


def mask_secret(value: str, visible: int = 4) -> str:
    """Mask all but the last few characters of a credential."""
    if len(value) <= visible:
        return "*" * len(value)
    return "*" * (len(value) - visible) + value[-visible:]
