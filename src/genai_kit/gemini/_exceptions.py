"""Exceptions raised by the Gemini client."""

from __future__ import annotations

from typing import Any


class GenAIError(Exception):
    """Base class for every error raised by this package."""


class InvalidArgumentError(GenAIError, ValueError):
    """Raised when a required input is missing; never reaches the network."""


class UnsupportedOperationError(GenAIError):
    """Raised when the model, credential or feature combination forbids an operation."""


class TransportError(GenAIError):
    """Raised when the API answers with a non-success HTTP status.

    ``body`` is the parsed JSON error when the server sent one; ``raw`` is
    always the response text as received.
    """

    def __init__(self, status_code: int, body: dict[str, Any] | str, raw: str = "") -> None:
        self.status_code = status_code
        self.body = body
        self.raw = raw
        super().__init__(f"HTTP {status_code}: {body}")


class RateLimitError(TransportError):
    """Raised on HTTP 429, with the optional ``retry_after`` sent by the server."""

    def __init__(
        self,
        status_code: int,
        body: dict[str, Any] | str,
        retry_after: float | None = None,
        raw: str = "",
    ) -> None:
        super().__init__(status_code, body, raw)
        self.retry_after = retry_after


class DeserializationError(GenAIError):
    """Raised when a response body does not match the expected shape."""

    def __init__(self, message: str, raw: str = "") -> None:
        self.raw = raw
        super().__init__(message)


class StreamDecodingError(GenAIError):
    """Raised when a malformed frame is met in a streamed response."""

    def __init__(self, message: str, raw: str = "") -> None:
        self.raw = raw
        super().__init__(message)
