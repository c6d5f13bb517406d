"""
Error taxonomy for the translation client.

Every failure the core can surface has its own exception type so callers
can handle each kind explicitly. Messages are short and safe to show to a
user; the details needed for diagnosis go into ``context`` and the log.
"""

from __future__ import annotations

from typing import Any


class TarjomanError(Exception):
    """
    Base class for all errors raised by the core.

    Args:
        message: Short, human-readable message
        **context: Extra diagnostic details (never shown to the user)
    """

    kind = "error"

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for logging or API responses."""
        return {
            "error": self.kind,
            "message": self.message,
            "context": self.context,
        }


# =============================================================================
# Storage
# =============================================================================


class StorageUnavailable(TarjomanError):
    """The persistence layer cannot be reached. Fatal for the session."""

    kind = "storage_unavailable"


class DuplicateKey(TarjomanError):
    """A record with the same key already exists."""

    kind = "duplicate_key"


# =============================================================================
# Translation
# =============================================================================


class NoCredential(TarjomanError):
    """No API key has been configured."""

    kind = "no_credential"


class NetworkFailure(TarjomanError):
    """The remote endpoint could not be reached."""

    kind = "network_failure"


class RemoteRejected(TarjomanError):
    """The remote endpoint answered with a non-success status."""

    kind = "remote_rejected"

    def __init__(self, message: str, status_code: int, **context: Any):
        super().__init__(message, status_code=status_code, **context)
        self.status_code = status_code


class MalformedResponse(TarjomanError):
    """The response envelope or its payload is missing expected fields."""

    kind = "malformed_response"


class UnparsableResult(TarjomanError):
    """The model output is not valid JSON."""

    kind = "unparsable_result"
