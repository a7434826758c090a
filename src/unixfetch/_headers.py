"""Headers — ordered, case-insensitive, multi-valued header container.

Names compare case-insensitively but keep the casing they were first
inserted with. Each name maps to one or more values in insertion order,
which keeps multi-valued headers such as Set-Cookie intact.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

import re2

from unixfetch._errors import FetchError

# RFC 7230 token characters.
_TOKEN = re2.compile(r"^[!#$%&'*+.^_`|~0-9A-Za-z-]+$")
_INVALID_VALUE = re2.compile(r"[^\t\x20-\x7e\x80-\xff]")

type HeadersInit = (
    Headers
    | Mapping[str, str | Iterable[str]]
    | Iterable[tuple[str, str]]
    | None
)


class InvalidHeaderError(FetchError, TypeError):
    """A header name is not a token or a value contains forbidden bytes."""

    def __init__(self, name: str, value: str | None = None) -> None:
        self.name = name
        self.value = value
        if value is None:
            msg = f"{name!r} is not a legal HTTP header name"
        else:
            msg = f"{value!r} is not a legal HTTP header value for {name!r}"
        super().__init__(msg)


def _validate_name(name: str) -> str:
    name = str(name)
    if not _TOKEN.search(name):
        raise InvalidHeaderError(name)
    return name


def _validate_value(name: str, value: Any) -> str:
    value = str(value).strip(" \t")
    if _INVALID_VALUE.search(value):
        raise InvalidHeaderError(name, value)
    return value


class Headers:
    """Ordered case-insensitive header multimap.

    Accepts another Headers (copied, never aliased), a mapping of name to
    value or list of values, or an iterable of (name, value) pairs.

    >>> h = Headers({"Content-Type": "text/plain"})
    >>> h.has("content-type")
    True
    >>> h.append("Set-Cookie", "a=1")
    >>> h.append("set-cookie", "b=2")
    >>> h.raw()
    {'Content-Type': ['text/plain'], 'Set-Cookie': ['a=1', 'b=2']}
    """

    __slots__ = ("_entries",)

    def __init__(self, init: HeadersInit = None) -> None:
        # lowercased name -> (first-seen name, values)
        self._entries: dict[str, tuple[str, list[str]]] = {}

        if init is None:
            return
        if isinstance(init, Headers):
            for key, (name, values) in init._entries.items():
                self._entries[key] = (name, list(values))
            return
        if isinstance(init, Mapping):
            for name, value in init.items():
                if isinstance(value, (list, tuple)):
                    for v in value:
                        self.append(name, v)
                else:
                    self.append(name, value)
            return
        if isinstance(init, (str, bytes)):
            msg = f"cannot build Headers from {type(init).__name__}"
            raise TypeError(msg)

        for pair in init:
            if len(pair) != 2:
                msg = "each header pair must contain exactly a name and a value"
                raise TypeError(msg)
            name, value = pair
            self.append(name, value)

    # ── Capability surface ─────────────────────────────────────────────────

    def has(self, name: str) -> bool:
        """Check if a header is present (case-insensitive)."""
        return _validate_name(name).lower() in self._entries

    def get(self, name: str) -> str | None:
        """Get all values for a header joined with ", ", or None."""
        entry = self._entries.get(_validate_name(name).lower())
        if entry is None:
            return None
        return ", ".join(entry[1])

    def get_all(self, name: str) -> list[str]:
        """Get the individual values for a header, in insertion order."""
        entry = self._entries.get(_validate_name(name).lower())
        return list(entry[1]) if entry is not None else []

    def set(self, name: str, value: Any) -> None:
        """Replace every value of a header, keeping its first-seen casing."""
        name = _validate_name(name)
        value = _validate_value(name, value)
        key = name.lower()
        existing = self._entries.get(key)
        self._entries[key] = (existing[0] if existing else name, [value])

    def append(self, name: str, value: Any) -> None:
        """Add a value to a header, keeping any earlier values."""
        name = _validate_name(name)
        value = _validate_value(name, value)
        key = name.lower()
        existing = self._entries.get(key)
        if existing is None:
            self._entries[key] = (name, [value])
        else:
            existing[1].append(value)

    def delete(self, name: str) -> None:
        """Remove a header. Missing names are ignored."""
        self._entries.pop(_validate_name(name).lower(), None)

    def items(self) -> Iterator[tuple[str, str]]:
        """Iterate (name, joined value) pairs in first-insertion order."""
        for name, values in self._entries.values():
            yield name, ", ".join(values)

    def raw(self) -> dict[str, list[str]]:
        """Export as {first-seen name: [values]} for a transport."""
        return {name: list(values) for name, values in self._entries.values()}

    # ── Python protocol support ────────────────────────────────────────────

    def __contains__(self, name: object) -> bool:
        """Same as has(); non-str keys are never present."""
        return isinstance(name, str) and self.has(name)

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Headers):
            return NotImplemented
        return self.raw() == other.raw()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Headers({self.raw()!r})"
