"""Concrete Body implementations and body extraction.

Each body can be consumed once. Cloning produces an independent copy: for
in-memory payloads the bytes are shared (they are immutable), so a clone
can still be taken after the body was sent; for streams the source
iterator is teed so both sides read the full payload, and a consumed
stream cannot be cloned.

extract_body() coerces the values accepted as ``init.body`` into a Body,
attaching the content type the fetch API derives for that representation.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable, Iterator, Mapping
from functools import partial
from typing import Any
from urllib.parse import urlencode

from unixfetch._errors import FetchError
from unixfetch._types import Body

TEXT_CONTENT_TYPE = "text/plain;charset=UTF-8"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded;charset=UTF-8"

_READ_CHUNK_SIZE = 64 * 1024


class BodyUsedError(FetchError, TypeError):
    """A body was read or cloned after it had already been consumed."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"{kind} body used already")


class BytesBody:
    """In-memory payload with a determinate length."""

    __slots__ = ("_content_type", "_data", "_used")

    def __init__(self, data: bytes, content_type: str | None = None) -> None:
        self._data = bytes(data)
        self._content_type = content_type
        self._used = False

    @property
    def body_used(self) -> bool:
        return self._used

    def has_content(self) -> bool:
        return True

    def total_bytes(self) -> int | None:
        return len(self._data)

    def content_type(self) -> str | None:
        return self._content_type

    def clone(self) -> BytesBody:
        """Copy the payload. Works after read(); the bytes are kept."""
        return BytesBody(self._data, self._content_type)

    def read(self) -> bytes:
        """Consume the body and return its bytes."""
        if self._used:
            raise BodyUsedError(type(self).__name__)
        self._used = True
        return self._data

    def iter_bytes(self) -> Iterator[bytes]:
        return iter((self.read(),))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self._data)} bytes, used={self._used})"


class FormBody(BytesBody):
    """URL-encoded form payload (``application/x-www-form-urlencoded``)."""

    __slots__ = ("_fields",)

    def __init__(self, fields: Iterable[tuple[str, Any]]) -> None:
        self._fields = tuple((str(k), str(v)) for k, v in fields)
        super().__init__(urlencode(self._fields).encode("ascii"), FORM_CONTENT_TYPE)

    @property
    def fields(self) -> tuple[tuple[str, str], ...]:
        return self._fields

    def clone(self) -> FormBody:
        return FormBody(self._fields)


class StreamBody:
    """Payload read from a file-like object or an iterable of chunks.

    The length is indeterminate, so no Content-Length is derived for it.
    str chunks are encoded as UTF-8.
    """

    __slots__ = ("_chunks", "_content_type", "_used")

    def __init__(
        self,
        source: Iterable[bytes | str] | Any,
        content_type: str | None = None,
    ) -> None:
        self._chunks: Iterator[bytes] = _iter_source(source)
        self._content_type = content_type
        self._used = False

    @property
    def body_used(self) -> bool:
        return self._used

    def has_content(self) -> bool:
        return True

    def total_bytes(self) -> int | None:
        return None

    def content_type(self) -> str | None:
        return self._content_type

    def clone(self) -> StreamBody:
        """Tee the source so this body and the clone read independently."""
        if self._used:
            raise BodyUsedError(type(self).__name__)
        self._chunks, other = itertools.tee(self._chunks)
        return StreamBody(other, self._content_type)

    def iter_bytes(self) -> Iterator[bytes]:
        """Consume the body chunk by chunk."""
        if self._used:
            raise BodyUsedError(type(self).__name__)
        self._used = True
        return self._chunks

    def read(self) -> bytes:
        """Consume the body and return all of its bytes."""
        return b"".join(self.iter_bytes())

    def __repr__(self) -> str:
        return f"StreamBody(used={self._used})"


def _iter_source(source: Any) -> Iterator[bytes]:
    if hasattr(source, "read"):
        chunks: Iterable[bytes | str] = iter(partial(source.read, _READ_CHUNK_SIZE), b"")
        chunks = itertools.takewhile(lambda chunk: chunk != "", chunks)
    else:
        chunks = source
    for chunk in chunks:
        yield chunk.encode("utf-8") if isinstance(chunk, str) else bytes(chunk)


def _is_pair_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and all(
        isinstance(item, tuple) and len(item) == 2 for item in value
    )


def extract_body(value: Any) -> Body | None:
    """Coerce a caller-supplied payload into a Body.

    | value                            | Body       | content type      |
    |----------------------------------|------------|-------------------|
    | None                             | None       |                   |
    | Body                             | itself     | its own           |
    | str                              | BytesBody  | text/plain        |
    | bytes, bytearray, memoryview     | BytesBody  | None              |
    | mapping or list of (k, v) pairs  | FormBody   | form-urlencoded   |
    | file-like or iterable of chunks  | StreamBody | None              |

    Raises:
        TypeError: If the value cannot be used as a request body.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return BytesBody(value.encode("utf-8"), TEXT_CONTENT_TYPE)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return BytesBody(bytes(value))
    if isinstance(value, Body):
        return value
    if isinstance(value, Mapping):
        return FormBody(value.items())
    if _is_pair_sequence(value) and value:
        return FormBody(value)
    if hasattr(value, "read") or isinstance(value, Iterable):
        return StreamBody(value)
    msg = f"unsupported body type: {type(value).__name__}"
    raise TypeError(msg)
