"""URL normalization with unix-socket addressing.

Requests can be sent over a unix domain socket (or named pipe) instead of
TCP. The target is written as::

    PROTOCOL://unix:SOCKET:PATH
    unix:SOCKET:PATH            (PROTOCOL defaults to http:)

PROTOCOL is ``http:`` or ``https:``, SOCKET is the socket path (for example
``/var/run/docker.sock``) and PATH is the request path (``/v2/keys``).

Normalization is two-stage: the socket convention is detected and rewritten
first, then ordinary parsing is delegated to ``urllib.parse``. The general
path never sees the convention.

The socket-path capture is greedy: a socket path that itself contains a
colon is split at the *last* colon in the string.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from urllib.parse import urljoin, urlsplit, urlunsplit

import re2

logger = logging.getLogger(__name__)

_UNIX_PREFIX = "unix:"
_SOCKET_URL = re2.compile(r"^(https?:)//unix:(.+):(.*)")

# Stand-in host so the stdlib parser accepts a socket URL; consumers use
# socket_path instead.
PLACEHOLDER_HOST = "127.0.0.1"


@dataclass(frozen=True, slots=True)
class StructuredURL:
    """Decomposed request target.

    Field names follow the classic URL-object layout: ``protocol`` keeps the
    trailing colon, ``search`` keeps the leading ``?`` and ``path`` is
    ``pathname`` plus ``search``.

    When socket_path is set, host and port are None; hostname carries the
    placeholder address.
    """

    href: str
    protocol: str | None = None
    auth: str | None = None
    host: str | None = None
    hostname: str | None = None
    port: int | None = None
    pathname: str | None = None
    search: str | None = None
    query: str | None = None
    hash: str | None = None
    path: str | None = None
    socket_path: str | None = None

    @property
    def is_socket(self) -> bool:
        """True when the target is addressed through socket_path."""
        return self.socket_path is not None

    def __str__(self) -> str:
        return self.href


def normalize_url(raw: str) -> StructuredURL:
    """Parse a request target, recognizing unix-socket addressing.

    Never raises: malformed targets come back without protocol or hostname
    and are rejected later, when dispatch options are built.

    >>> url = normalize_url("unix:/tmp/app.sock:/status")
    >>> url.protocol, url.socket_path, url.pathname, url.host
    ('http:', '/tmp/app.sock', '/status', None)
    """
    if raw.startswith(_UNIX_PREFIX):
        raw = "http://" + raw

    match = _SOCKET_URL.match(raw)
    if match is None:
        return _parse(raw)

    protocol, socket_path, request_path = match.group(1), match.group(2), match.group(3)
    logger.debug("socket-addressed url: socket=%s path=%r", socket_path, request_path)
    return _socket_url(protocol, socket_path, request_path)


def resolve_url(base: StructuredURL, location: str) -> StructuredURL:
    """Resolve a (possibly relative) location against a base URL.

    A relative location against a socket-addressed base stays on the same
    socket; an absolute location is normalized on its own.
    """
    if not base.is_socket:
        return normalize_url(urljoin(base.href, location))

    if location.startswith(_UNIX_PREFIX) or urlsplit(location).scheme:
        return normalize_url(location)

    placeholder = f"{base.protocol}//{PLACEHOLDER_HOST}{base.path or '/'}"
    joined = urlsplit(urljoin(placeholder, location))
    if joined.netloc != PLACEHOLDER_HOST:
        # Network-path reference ("//other.host/x") leaves the socket.
        return normalize_url(urlunsplit(joined))
    request_path = urlunsplit(("", "", joined.path, joined.query, joined.fragment))
    return _socket_url(base.protocol or "http:", base.socket_path or "", request_path)


def _socket_url(protocol: str, socket_path: str, request_path: str) -> StructuredURL:
    parsed = _parse(f"{protocol}//{PLACEHOLDER_HOST}{request_path}")
    href = f"{protocol}//unix:{socket_path}:{parsed.path or ''}{parsed.hash or ''}"
    return replace(
        parsed,
        href=href,
        protocol=protocol,
        host=None,
        port=None,
        socket_path=socket_path,
    )


def _parse(raw: str) -> StructuredURL:
    """Standard URL parsing on top of urllib.parse.urlsplit.

    Lowercases protocol and hostname, and defaults an empty pathname to
    ``/`` when the URL has an authority component.
    """
    try:
        parts = urlsplit(raw)
    except ValueError:
        # e.g. an unbalanced IPv6 bracket
        return StructuredURL(href=raw)

    try:
        port = parts.port
    except ValueError:
        port = None

    netloc = parts.netloc
    auth, _, hostinfo = netloc.rpartition("@")
    hostinfo = hostinfo.lower()

    pathname = parts.path or ("/" if netloc else None)
    search = f"?{parts.query}" if parts.query else None
    path = None
    if pathname is not None or search is not None:
        path = (pathname or "") + (search or "")

    netloc = f"{auth}@{hostinfo}" if auth else hostinfo
    href = urlunsplit((parts.scheme, netloc, pathname or "", parts.query, parts.fragment))

    return StructuredURL(
        href=href,
        protocol=f"{parts.scheme}:" if parts.scheme else None,
        auth=auth or None,
        host=hostinfo or None,
        hostname=parts.hostname or None,
        port=port,
        pathname=pathname,
        search=search,
        query=parts.query or None,
        hash=f"#{parts.fragment}" if parts.fragment else None,
        path=path,
    )
