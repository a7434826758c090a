"""Core protocols and type aliases for unixfetch.

The request core consumes two collaborators only through narrow ports:
- Body is the payload port (presence, length, independent re-readability)
- Agent is an opaque transport handle, passed through untouched
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

# Opaque transport-agent reference. The core never inspects it; its presence
# only suppresses the ``Connection: close`` default.
type Agent = Any


@runtime_checkable
class Body(Protocol):
    """Request payload capability.

    Implementations own the bytes. The request core asks four questions
    and never reads the payload itself.

    total_bytes() returning None means the length is indeterminate (an open
    stream); the transport then falls back to chunked framing.
    """

    def has_content(self) -> bool: ...

    def total_bytes(self) -> int | None: ...

    def clone(self) -> Body: ...

    def content_type(self) -> str | None: ...
