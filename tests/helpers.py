"""
Test helpers for faking the Gemini endpoint.
"""

import json
from typing import Any, Callable

import httpx

ENDPOINT = "https://gemini.test/v1beta/models/test-model:generateContent"


def gemini_envelope(text: str) -> dict[str, Any]:
    """A successful generateContent response wrapping ``text``."""
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def model_answer(**fields: Any) -> str:
    return json.dumps(fields, ensure_ascii=False)


class RecordingTransport(httpx.MockTransport):
    """Mock transport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)


def respond_with(text: str) -> RecordingTransport:
    """Transport that answers every call with ``text`` as the model output."""
    return RecordingTransport(lambda request: httpx.Response(200, json=gemini_envelope(text)))


def never_called() -> RecordingTransport:
    """Transport that fails the test if any request is made."""

    def fail(request: httpx.Request) -> httpx.Response:
        raise AssertionError(f"Unexpected request to {request.url}")

    return RecordingTransport(fail)
