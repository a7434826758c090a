"""Options builder — Request → DispatchDescriptor.

Applies every protocol default and validation rule in one pure pass. Step
numbers refer to the HTTP fetch algorithm (main fetch, HTTP-network-or-cache
fetch); their order matters because later steps read headers written by
earlier ones.

The descriptor is the only thing handed to a transport. For socket-addressed
requests host and port are dropped so address resolution uses socket_path
alone.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any

from unixfetch import __version__
from unixfetch._errors import FetchError

if TYPE_CHECKING:
    from unixfetch._request import Request
    from unixfetch._types import Agent

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = f"unixfetch/{__version__} (+https://pypi.org/project/unixfetch/)"

# brotli and raw deflate are deliberately not advertised.
DEFAULT_ACCEPT_ENCODING = "gzip,deflate"

_SUPPORTED_PROTOCOLS = frozenset({"http:", "https:"})
_EMPTY_BODY_METHODS = frozenset({"POST", "PUT"})


class InvalidURLError(FetchError, TypeError):
    """The request URL is not absolute (missing protocol or hostname)."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Only absolute URLs are supported, got {url!r}")


class UnsupportedProtocolError(FetchError, TypeError):
    """The request URL uses a scheme other than http: or https:."""

    def __init__(self, protocol: str) -> None:
        self.protocol = protocol
        super().__init__(f"Only HTTP(S) protocols are supported, got {protocol!r}")


@dataclass(frozen=True, slots=True)
class DispatchDescriptor:
    """Fully resolved, transport-ready request description.

    URL fields mirror StructuredURL. headers maps each name (first-seen
    casing) to its values in insertion order.
    """

    method: str
    headers: dict[str, list[str]]
    href: str
    protocol: str
    hostname: str
    pathname: str | None = None
    path: str | None = None
    search: str | None = None
    query: str | None = None
    hash: str | None = None
    auth: str | None = None
    host: str | None = None
    port: int | None = None
    socket_path: str | None = None
    agent: Agent = None

    def as_kwargs(self) -> dict[str, Any]:
        """Plain dict of the fields that are set, for a transport call."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values["headers"] = {name: list(v) for name, v in self.headers.items()}
        return {k: v for k, v in values.items() if v is not None}


def build_dispatch_options(request: Request) -> DispatchDescriptor:
    """Convert a Request into a DispatchDescriptor.

    Pure: the request, its headers and its URL are never modified, and two
    calls on the same request produce equal descriptors.

    Raises:
        InvalidURLError: URL lacks protocol or hostname.
        UnsupportedProtocolError: scheme is not http: or https:.
    """
    url = request.parsed_url
    # Request.headers is already a copy.
    headers = request.headers

    # main fetch step 1.3
    if not headers.has("Accept"):
        headers.set("Accept", "*/*")

    # basic fetch
    if not url.protocol or not url.hostname:
        raise InvalidURLError(url.href)

    if url.protocol.lower() not in _SUPPORTED_PROTOCOLS:
        raise UnsupportedProtocolError(url.protocol)

    # HTTP-network-or-cache fetch steps 2.4-2.7
    content_length: str | None = None
    if request.body is None:
        if request.method.upper() in _EMPTY_BODY_METHODS:
            content_length = "0"
    else:
        total = request.body.total_bytes()
        if total is not None:
            content_length = str(total)
    if content_length is not None:
        headers.set("Content-Length", content_length)

    # HTTP-network-or-cache fetch step 2.11
    if not headers.has("User-Agent"):
        headers.set("User-Agent", DEFAULT_USER_AGENT)

    # HTTP-network-or-cache fetch step 2.15
    if request.compress:
        headers.set("Accept-Encoding", DEFAULT_ACCEPT_ENCODING)

    if not headers.has("Connection") and request.agent is None:
        headers.set("Connection", "close")

    # HTTP-network fetch step 4.2: chunked framing is the transport's job.

    host, port = url.host, url.port
    if url.socket_path is not None:
        host, port = None, None

    descriptor = DispatchDescriptor(
        method=request.method,
        headers=headers.raw(),
        href=url.href,
        protocol=url.protocol,
        hostname=url.hostname,
        pathname=url.pathname,
        path=url.path,
        search=url.search,
        query=url.query,
        hash=url.hash,
        auth=url.auth,
        host=host,
        port=port,
        socket_path=url.socket_path,
        agent=request.agent,
    )
    logger.debug(
        "dispatch %s %s via %s",
        descriptor.method,
        descriptor.path,
        descriptor.socket_path or descriptor.host,
    )
    return descriptor
