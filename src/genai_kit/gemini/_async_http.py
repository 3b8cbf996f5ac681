"""Async HTTP helpers using ``httpx``."""

from __future__ import annotations

import contextlib
from collections.abc import AsyncIterator
from typing import Any

import httpx

from genai_kit.gemini._exceptions import RateLimitError, TransportError
from genai_kit.gemini._http import DEFAULT_STREAM_TIMEOUT, DEFAULT_TIMEOUT


def _raise_for_status_httpx(r: httpx.Response) -> None:
    if r.is_success:
        return
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


async def async_send(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    headers: dict[str, str],
    body: str | None = None,
    timeout: float | None = None,
) -> str:
    """Send a request asynchronously and return the response text."""
    r = await client.request(
        method,
        url,
        headers=headers,
        content=body.encode("utf-8") if body is not None else None,
        timeout=timeout or DEFAULT_TIMEOUT,
    )
    _raise_for_status_httpx(r)
    return r.text


async def async_stream_lines(
    client: httpx.AsyncClient,
    url: str,
    headers: dict[str, str],
    body: str,
    timeout: float | None = None,
) -> AsyncIterator[str]:
    """POST and yield the response body line by line as it arrives."""
    async with client.stream(
        "POST",
        url,
        headers=headers,
        content=body.encode("utf-8"),
        timeout=timeout or DEFAULT_STREAM_TIMEOUT,
    ) as r:
        if not r.is_success:
            await r.aread()
            _raise_for_status_httpx(r)
        async for line in r.aiter_lines():
            yield line


async def async_stream_text(
    client: httpx.AsyncClient,
    url: str,
    headers: dict[str, str],
    body: str,
    timeout: float | None = None,
) -> AsyncIterator[str]:
    """POST and yield decoded chunks of the response body as they arrive."""
    async with client.stream(
        "POST",
        url,
        headers=headers,
        content=body.encode("utf-8"),
        timeout=timeout or DEFAULT_STREAM_TIMEOUT,
    ) as r:
        if not r.is_success:
            await r.aread()
            _raise_for_status_httpx(r)
        async for chunk in r.aiter_text():
            if chunk:
                yield chunk
