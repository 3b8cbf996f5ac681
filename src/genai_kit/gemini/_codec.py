"""JSON codec for the DTOs in :mod:`genai_kit.gemini._types`.

Serialization walks dataclass fields and emits camelCase keys, skipping
``None``. Deserialization is driven by the dataclass type hints, so a body
that does not fit the declared shape fails with :class:`DeserializationError`
instead of producing a half-filled object.

Two incremental decoders cover the streamed bodies: :class:`JsonArrayDecoder`
for a top-level JSON array delivered in chunks, and :func:`decode_sse_line`
for ``data:`` framed event streams.
"""

from __future__ import annotations

import dataclasses
import enum
import functools
import json
import types
import typing
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, TypeAliasType, get_type_hints

from genai_kit.gemini._exceptions import DeserializationError, StreamDecodingError
from genai_kit.gemini._types import JsonValue

_SSE_DATA_PREFIX = "data:"


class _ShapeError(ValueError):
    pass


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(word[:1].upper() + word[1:] for word in rest)


@functools.cache
def _field_specs(cls: type) -> tuple[tuple[str, str, Any], ...]:
    hints = get_type_hints(cls)
    return tuple((f.name, _camel(f.name), hints[f.name]) for f in dataclasses.fields(cls))


# --- Serialization ---


def to_wire(value: Any) -> Any:
    """Convert a DTO (or a container of DTOs) to plain JSON-compatible data."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        out: dict[str, Any] = {}
        for name, key, _ in _field_specs(type(value)):
            field_value = getattr(value, name)
            if field_value is None:
                continue
            out[key] = to_wire(field_value)
        return out
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [to_wire(v) for v in value]
    if isinstance(value, dict):
        return {str(k): to_wire(v) for k, v in value.items()}
    return value


def serialize(value: Any) -> str:
    """Serialize a DTO to UTF-8 JSON text, omitting absent optional fields."""
    return json.dumps(to_wire(value), ensure_ascii=False)


# --- Deserialization ---


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", str(tp))


def _convert_variant(data: Any, members: list[Any], path: str) -> Any:
    # Tagged unions: the first field of each variant is its wire discriminant.
    if not isinstance(data, dict):
        raise _ShapeError(f"{path}: expected an object, got {type(data).__name__}")
    for member in members:
        if dataclasses.is_dataclass(member):
            discriminant = _field_specs(member)[0][1]
            if discriminant in data:
                return _convert(data, member, path)
    names = ", ".join(_type_name(m) for m in members)
    raise _ShapeError(f"{path}: object matches none of {names}")


def _convert(data: Any, tp: Any, path: str) -> Any:
    if tp is Any or tp is JsonValue:
        return data
    if isinstance(tp, TypeAliasType):
        tp = tp.__value__

    origin = typing.get_origin(tp)

    if origin is types.UnionType or origin is typing.Union:
        args = typing.get_args(tp)
        if data is None and type(None) in args:
            return None
        members = [a for a in args if a is not type(None)]
        if len(members) == 1:
            return _convert(data, members[0], path)
        return _convert_variant(data, members, path)

    if data is None:
        raise _ShapeError(f"{path}: expected {_type_name(tp)}, got null")

    if origin is tuple or origin is list:
        if not isinstance(data, list):
            raise _ShapeError(f"{path}: expected an array, got {type(data).__name__}")
        item_type = typing.get_args(tp)[0]
        items = [_convert(v, item_type, f"{path}[{i}]") for i, v in enumerate(data)]
        return tuple(items) if origin is tuple else items

    if origin is dict:
        if not isinstance(data, dict):
            raise _ShapeError(f"{path}: expected an object, got {type(data).__name__}")
        value_type = typing.get_args(tp)[1]
        return {k: _convert(v, value_type, f"{path}.{k}") for k, v in data.items()}

    if dataclasses.is_dataclass(tp):
        if not isinstance(data, dict):
            raise _ShapeError(f"{path}: expected an object, got {type(data).__name__}")
        kwargs: dict[str, Any] = {}
        for name, key, hint in _field_specs(tp):
            if key in data:
                kwargs[name] = _convert(data[key], hint, f"{path}.{key}")
        try:
            return tp(**kwargs)
        except TypeError as exc:
            raise _ShapeError(f"{path}: {exc}") from exc

    if isinstance(tp, type) and issubclass(tp, enum.Enum):
        try:
            return tp(data)
        except ValueError as exc:
            raise _ShapeError(f"{path}: {exc}") from exc

    if tp is bool:
        if not isinstance(data, bool):
            raise _ShapeError(f"{path}: expected a boolean, got {type(data).__name__}")
        return data

    if tp is int:
        # int64 values may arrive as decimal strings
        if isinstance(data, str) and data.lstrip("-").isdigit():
            return int(data)
        if isinstance(data, bool) or not isinstance(data, int):
            raise _ShapeError(f"{path}: expected an integer, got {type(data).__name__}")
        return data

    if tp is float:
        if isinstance(data, bool) or not isinstance(data, (int, float)):
            raise _ShapeError(f"{path}: expected a number, got {type(data).__name__}")
        return data

    if tp is str:
        if not isinstance(data, str):
            raise _ShapeError(f"{path}: expected a string, got {type(data).__name__}")
        return data

    raise _ShapeError(f"{path}: unsupported type {_type_name(tp)}")


def from_wire[T](data: Any, cls: type[T]) -> T:
    """Build a DTO from already-parsed JSON data."""
    try:
        return _convert(data, cls, cls.__name__)
    except _ShapeError as exc:
        raise DeserializationError(str(exc), raw=json.dumps(data, default=str)) from exc


def _loads(text: str | bytes) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raw = text.decode("utf-8", "replace") if isinstance(text, bytes) else text
        raise DeserializationError(f"Response is not valid JSON: {exc}", raw=raw) from exc


def deserialize[T](text: str | bytes, cls: type[T]) -> T:
    """Parse JSON text into ``cls``, raising DeserializationError on a shape mismatch."""
    data = _loads(text)
    try:
        return _convert(data, cls, cls.__name__)
    except _ShapeError as exc:
        raw = text.decode("utf-8", "replace") if isinstance(text, bytes) else text
        raise DeserializationError(str(exc), raw=raw) from exc


def deserialize_list[T](text: str | bytes, cls: type[T]) -> list[T]:
    """Parse a JSON array whose elements are ``cls``."""
    data = _loads(text)
    try:
        return _convert(data, list[cls], cls.__name__)  # type: ignore[valid-type]
    except _ShapeError as exc:
        raw = text.decode("utf-8", "replace") if isinstance(text, bytes) else text
        raise DeserializationError(str(exc), raw=raw) from exc


# --- Stream framing ---


@dataclass(frozen=True, slots=True)
class StreamFrame:
    """One unit of streamed wire data: an array element or an SSE ``data:`` line."""

    raw: str
    value: Any = None
    error: StreamDecodingError | None = None


def decode_sse_line(line: str) -> StreamFrame | None:
    """Decode one event-stream line.

    Returns ``None`` for blank lines and lines without the ``data:`` prefix.
    Other SSE fields are not interpreted. Malformed JSON raises
    :class:`StreamDecodingError`.
    """
    if not line.strip() or not line.startswith(_SSE_DATA_PREFIX):
        return None
    payload = line[len(_SSE_DATA_PREFIX) :].strip()
    try:
        value = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise StreamDecodingError(f"Malformed event-stream payload: {exc}", raw=payload) from exc
    return StreamFrame(raw=payload, value=value)


def iter_sse(text: str) -> Iterator[Any]:
    """Decode a complete event-stream body into its JSON payloads."""
    for line in text.splitlines():
        frame = decode_sse_line(line)
        if frame is not None:
            yield frame.value


class JsonArrayDecoder:
    """Incremental decoder for a top-level JSON array.

    ``feed`` returns a :class:`StreamFrame` for every element completed by the
    new chunk. Element boundaries are found structurally, so a malformed
    element becomes a frame carrying an error and decoding continues with the
    next one.
    """

    def __init__(self) -> None:
        self._buf = ""
        self._pos = 0
        self._started = False
        self._done = False
        self._elem_start = -1
        self._depth = 0
        self._in_string = False
        self._escape = False

    @property
    def done(self) -> bool:
        return self._done

    def _emit(self, text: str) -> StreamFrame:
        self._elem_start = -1
        self._depth = 0
        raw = text.strip()
        try:
            return StreamFrame(raw=raw, value=json.loads(raw))
        except json.JSONDecodeError as exc:
            return StreamFrame(
                raw=raw,
                error=StreamDecodingError(f"Malformed array element: {exc}", raw=raw),
            )

    def feed(self, chunk: str) -> list[StreamFrame]:
        buf = self._buf + chunk
        frames: list[StreamFrame] = []
        i = self._pos
        while i < len(buf) and not self._done:
            ch = buf[i]
            if not self._started:
                if not ch.isspace():
                    if ch != "[":
                        raise StreamDecodingError("Expected a JSON array", raw=buf[i : i + 200])
                    self._started = True
                i += 1
                continue

            if self._elem_start < 0:
                if ch.isspace() or ch == ",":
                    i += 1
                    continue
                if ch == "]":
                    self._done = True
                    i += 1
                    continue
                self._elem_start = i

            if self._in_string:
                if self._escape:
                    self._escape = False
                elif ch == "\\":
                    self._escape = True
                elif ch == '"':
                    self._in_string = False
            elif ch == '"':
                self._in_string = True
            elif ch in "{[":
                self._depth += 1
            elif ch in "}]" and self._depth > 0:
                self._depth -= 1
                if self._depth == 0:
                    frames.append(self._emit(buf[self._elem_start : i + 1]))
            elif ch == "]":
                # closes the outer array right after a scalar element
                frames.append(self._emit(buf[self._elem_start : i]))
                self._done = True
            elif ch == "," and self._depth == 0:
                frames.append(self._emit(buf[self._elem_start : i]))
            i += 1

        # keep only the unfinished element in the buffer
        cut = self._elem_start if self._elem_start >= 0 else i
        self._buf = buf[cut:]
        self._pos = i - cut
        if self._elem_start >= 0:
            self._elem_start = 0
        return frames

    def close(self) -> None:
        """Raise StreamDecodingError when the array was never closed."""
        if not self._done:
            raise StreamDecodingError(
                "Stream ended before the JSON array was closed", raw=self._buf[:200]
            )
