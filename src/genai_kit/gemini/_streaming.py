"""Lazy reassembly of streamed responses, with cooperative cancellation."""

from __future__ import annotations

import contextlib
import logging
import threading
from collections.abc import AsyncGenerator, AsyncIterator, Generator, Iterator
from enum import StrEnum

from genai_kit.gemini._codec import JsonArrayDecoder, StreamFrame, decode_sse_line, from_wire

logger = logging.getLogger(__name__)


class StreamMode(StrEnum):
    ARRAY = "array"
    SSE = "sse"


class CancellationToken:
    """Signals a stream to stop at its next chunk boundary.

    Safe to set from another thread or task; streams only read it.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


def _is_cancelled(token: CancellationToken | None) -> bool:
    return token is not None and token.cancelled


class _FrameDecoder:
    """Turns transport pieces (lines or text chunks) into stream frames."""

    def __init__(self, mode: StreamMode) -> None:
        self._mode = mode
        self._array = JsonArrayDecoder() if mode is StreamMode.ARRAY else None

    def decode(self, piece: str) -> list[StreamFrame]:
        if self._array is not None:
            return self._array.feed(piece)
        frame = decode_sse_line(piece)
        return [frame] if frame is not None else []

    def finish(self) -> None:
        if self._array is not None:
            self._array.close()


def stream_responses[T](
    source: Generator[str, None, None],
    mode: StreamMode,
    cls: type[T],
    cancel: CancellationToken | None = None,
) -> Iterator[T]:
    """Yield typed responses from ``source`` as each frame completes.

    Cancellation ends the sequence quietly and closes ``source``.
    """
    decoder = _FrameDecoder(mode)
    with contextlib.closing(source):
        for piece in source:
            for frame in decoder.decode(piece):
                if _is_cancelled(cancel):
                    logger.debug("Stream cancelled by caller")
                    return
                if frame.error is not None:
                    raise frame.error
                yield from_wire(frame.value, cls)
            if _is_cancelled(cancel):
                logger.debug("Stream cancelled by caller")
                return
        decoder.finish()


async def astream_responses[T](
    source: AsyncGenerator[str, None],
    mode: StreamMode,
    cls: type[T],
    cancel: CancellationToken | None = None,
) -> AsyncIterator[T]:
    """Async counterpart of :func:`stream_responses`."""
    decoder = _FrameDecoder(mode)
    async with contextlib.aclosing(source):
        async for piece in source:
            for frame in decoder.decode(piece):
                if _is_cancelled(cancel):
                    logger.debug("Stream cancelled by caller")
                    return
                if frame.error is not None:
                    raise frame.error
                yield from_wire(frame.value, cls)
            if _is_cancelled(cancel):
                logger.debug("Stream cancelled by caller")
                return
        decoder.finish()
