"""Thin HTTP helpers around ``requests``."""

from __future__ import annotations

import contextlib
from collections.abc import Iterator
from typing import Any

import requests

from genai_kit.gemini._exceptions import RateLimitError, TransportError

DEFAULT_TIMEOUT = 60
DEFAULT_STREAM_TIMEOUT = 120
USER_AGENT = "genai-kit/0.1.0"


def _raise_for_status(r: requests.Response) -> None:
    if not r.ok:
        try:
            body: dict[str, Any] | str = r.json()
        except ValueError:
            body = r.text
        if r.status_code == 429:
            raw_retry = r.headers.get("Retry-After")
            retry_after: float | None = None
            if raw_retry is not None:
                with contextlib.suppress(ValueError, TypeError):
                    retry_after = float(raw_retry)
            raise RateLimitError(r.status_code, body, retry_after, raw=r.text)
        raise TransportError(r.status_code, body, raw=r.text)


def send(
    session: requests.Session,
    method: str,
    url: str,
    headers: dict[str, str],
    body: str | None = None,
    timeout: float | None = None,
) -> str:
    """Send a request and return the response text, raising on HTTP errors."""
    r = session.request(
        method,
        url,
        headers=headers,
        data=body.encode("utf-8") if body is not None else None,
        timeout=timeout or DEFAULT_TIMEOUT,
    )
    _raise_for_status(r)
    return r.text


def stream_lines(
    session: requests.Session,
    url: str,
    headers: dict[str, str],
    body: str,
    timeout: float | None = None,
) -> Iterator[str]:
    """POST and yield the response body line by line as it arrives.

    Closing the iterator closes the underlying connection.
    """
    with session.request(
        "POST",
        url,
        headers=headers,
        data=body.encode("utf-8"),
        stream=True,
        timeout=timeout or DEFAULT_STREAM_TIMEOUT,
    ) as r:
        _raise_for_status(r)
        r.encoding = r.encoding or "utf-8"
        yield from r.iter_lines(decode_unicode=True)


def stream_text(
    session: requests.Session,
    url: str,
    headers: dict[str, str],
    body: str,
    timeout: float | None = None,
) -> Iterator[str]:
    """POST and yield decoded chunks of the response body as they arrive."""
    with session.request(
        "POST",
        url,
        headers=headers,
        data=body.encode("utf-8"),
        stream=True,
        timeout=timeout or DEFAULT_STREAM_TIMEOUT,
    ) as r:
        _raise_for_status(r)
        r.encoding = r.encoding or "utf-8"
        for chunk in r.iter_content(chunk_size=None, decode_unicode=True):
            if chunk:
                yield chunk
