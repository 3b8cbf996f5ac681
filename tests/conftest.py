"""Shared test fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest

from genai_kit.gemini._context import (
    ENV_ACCESS_TOKEN,
    ENV_API_KEY,
    ENV_MODEL,
    ENV_PROJECT_ID,
    ENV_REGION,
)


class MockResponse:
    """Mimics ``requests.Response`` for testing send / stream_lines / stream_text."""

    def __init__(
        self,
        json_data: Any = None,
        status_code: int = 200,
        text: str = "",
        lines: list[str] | None = None,
        chunks: list[str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.status_code = status_code
        self._json_data = json_data
        self.text = text or (json.dumps(json_data) if json_data is not None else "")
        self.ok = 200 <= status_code < 300
        self._lines = lines or []
        self._chunks = chunks or []
        self.headers: dict[str, str] = headers or {}
        self.encoding: str | None = None
        self.closed = False

    def json(self) -> Any:
        if self._json_data is None:
            raise ValueError("No JSON")
        return self._json_data

    def iter_lines(self, **_kwargs: object) -> list[str]:
        return self._lines

    def iter_content(self, **_kwargs: object) -> list[str]:
        return self._chunks

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> MockResponse:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's Google credentials out of every test."""
    for name in (ENV_API_KEY, ENV_ACCESS_TOKEN, ENV_MODEL, ENV_PROJECT_ID, ENV_REGION):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mock_session() -> MagicMock:
    """A stand-in ``requests.Session``; set ``request.return_value`` per test."""
    return MagicMock()


class Recorder:
    """Collects the requests seen by an ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def mock_client(recorder: Recorder) -> Callable[..., httpx.AsyncClient]:
    """Build an ``httpx.AsyncClient`` that answers every request with ``handler``."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        def _record(request: httpx.Request) -> httpx.Response:
            recorder.requests.append(request)
            return handler(request)

        return httpx.AsyncClient(transport=httpx.MockTransport(_record))

    return _make


def candidate_json(text: str, finish_reason: str = "STOP", **extra: Any) -> dict[str, Any]:
    """A one-candidate generateContent answer with ``text``."""
    return {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": text}]},
                "finishReason": finish_reason,
                **extra,
            }
        ]
    }
