"""
HTTP status -> user-facing message.

Used by the translator to turn a rejected request into something short
and actionable. The server's own detail is logged, not shown.
"""

from __future__ import annotations

ERROR_MESSAGES: dict[int, str] = {
    400: "The request was invalid. Please check the text and try again.",
    401: "The API key is not valid. Please check it in settings.",
    403: "The API key does not have permission to use this model.",
    404: "The translation model could not be found.",
    429: "Too many requests. Please wait a moment and try again.",
    500: "The translation service had an internal error. Please try again later.",
    503: "The translation service is temporarily unavailable. Please try again later.",
}

SERVER_ERROR_MESSAGE = "The translation service is having problems. Please try again later."
DEFAULT_ERROR_MESSAGE = "An unexpected error occurred while contacting the translation service."


def get_error_message(status_code: int) -> str:
    """Get a short message for an HTTP status code."""
    if status_code in ERROR_MESSAGES:
        return ERROR_MESSAGES[status_code]
    if 500 <= status_code < 600:
        return SERVER_ERROR_MESSAGE
    return DEFAULT_ERROR_MESSAGE
