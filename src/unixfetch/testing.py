"""Test utilities for unixfetch.

Provides an in-memory transport that records the descriptors it is handed,
and a helper for building indeterminate-length bodies. These are NOT a
transport; they exist to exercise the request core without a network.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from unixfetch._body import StreamBody
from unixfetch._options import build_dispatch_options
from unixfetch._redirect import next_request

if TYPE_CHECKING:
    from unixfetch._options import DispatchDescriptor
    from unixfetch._request import Request


def chunks(*parts: bytes | str) -> StreamBody:
    """Build a stream body of unknown length from literal chunks.

    >>> body = chunks(b"he", "llo")
    >>> body.total_bytes() is None, body.read()
    (True, b'hello')
    """
    return StreamBody(iter(parts))


@dataclass(slots=True)
class RecordingTransport:
    """Records every descriptor it would have dispatched.

    ``redirects`` maps a request URL to the (status, location) the fake
    server answers with; any other URL answers 200. Sending reads the
    request body, as a real transport writing it to the wire would, and
    records the bytes in ``payloads``.

    >>> from unixfetch import Request
    >>> transport = RecordingTransport({"http://a.test/old": (301, "/new")})
    >>> [d.path for d in transport.fetch(Request("http://a.test/old"))]
    ['/old', '/new']
    """

    redirects: dict[str, tuple[int, str | None]] = field(default_factory=dict)
    sent: list[DispatchDescriptor] = field(default_factory=list)
    payloads: list[bytes | None] = field(default_factory=list)

    def send(self, request: Request) -> DispatchDescriptor:
        descriptor = build_dispatch_options(request)
        body = request.body
        self.payloads.append(b"".join(body.iter_bytes()) if body is not None else None)
        self.sent.append(descriptor)
        return descriptor

    def fetch(self, request: Request) -> list[DispatchDescriptor]:
        """Send a request and follow redirects; return this chain's descriptors."""
        start = len(self.sent)
        current: Request | None = request
        while current is not None:
            self.send(current)
            status, location = self.redirects.get(current.url, (200, None))
            current = next_request(current, status, location)
        return self.sent[start:]
