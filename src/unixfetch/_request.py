"""Request — immutable outbound request value object.

Combines the normalized URL, method, headers, redirect policy, body and
the client-only controls (follow limit, compression, redirect counter,
transport agent, timeout, size limit).

Construction sources, in order of precedence for every field:
  init option → source Request's value → default

INV: GET and HEAD requests never carry a body.
INV: headers are copied at construction and at clone time, never aliased.
INV: counter is never advanced here; a redirect driver produces a new
     Request per hop (see unixfetch._redirect).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from unixfetch._body import extract_body
from unixfetch._config import (
    DEFAULT_FOLLOW,
    ConfigParseError,
    RedirectPolicy,
    RequestInit,
    parse_request_init,
)
from unixfetch._errors import FetchError
from unixfetch._headers import Headers
from unixfetch._url import StructuredURL, normalize_url

if TYPE_CHECKING:
    from unixfetch._headers import HeadersInit
    from unixfetch._types import Agent, Body

_BODYLESS_METHODS = frozenset({"GET", "HEAD"})

# Marks "keep the current body" in Request.with_changes().
_KEEP: Any = object()


class InvalidBodyForMethodError(FetchError, TypeError):
    """A GET or HEAD request was given a body."""

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Request with {method} method cannot have body")


@dataclass(frozen=True, slots=True, init=False, eq=False)
class Request:
    """An outbound HTTP request.

    ``input`` is a URL string, a URL-like object with an ``href`` attribute,
    a StructuredURL, or an existing Request. ``init`` is a RequestInit or a
    mapping in the shape accepted by parse_request_init().

    >>> req = Request("http://example.com/items", {"method": "post", "body": "hi"})
    >>> req.method, req.headers.get("content-type")
    ('POST', 'text/plain;charset=UTF-8')

    Raises:
        InvalidBodyForMethodError: GET/HEAD combined with a body.
        ConfigParseError: ``init`` is a malformed mapping.
        ValueError: redirect, follow, counter, size or timeout out of range.
    """

    method: str
    parsed_url: StructuredURL
    redirect: RedirectPolicy
    follow: int
    compress: bool
    counter: int
    agent: Agent
    body: Body | None
    timeout: float
    size: int
    _headers: Headers = field(repr=False)

    def __init__(
        self,
        input: str | StructuredURL | Request | Any,
        init: RequestInit | Mapping[str, Any] | None = None,
    ) -> None:
        init = _coerce_init(init)
        source = input if isinstance(input, Request) else None

        if source is not None:
            parsed_url = source.parsed_url
        elif isinstance(input, StructuredURL):
            parsed_url = input
        else:
            href = getattr(input, "href", None)
            parsed_url = normalize_url(href if href else str(input))

        method = (init.method or (source.method if source else None) or "GET").upper()

        inherits_body = source is not None and source.body is not None
        if (init.body is not None or inherits_body) and method in _BODYLESS_METHODS:
            raise InvalidBodyForMethodError(method)

        body: Body | None = None
        if init.body is not None:
            body = extract_body(init.body)
        elif source is not None and source.body is not None:
            body = source.body.clone()

        headers_init: HeadersInit = init.headers
        if headers_init is None and source is not None:
            headers_init = source._headers
        headers = Headers(headers_init)

        if init.body is not None and body is not None:
            content_type = body.content_type()
            if content_type is not None and not headers.has("Content-Type"):
                headers.append("Content-Type", content_type)

        redirect = RedirectPolicy(_pick(init.redirect, source, "redirect", RedirectPolicy.FOLLOW))
        follow = _non_negative("follow", _pick(init.follow, source, "follow", DEFAULT_FOLLOW))
        counter = _non_negative("counter", _pick(init.counter, source, "counter", 0))
        size = _non_negative("size", _pick(init.size, source, "size", 0))
        timeout = _non_negative_number("timeout", _pick(init.timeout, source, "timeout", 0))

        object.__setattr__(self, "method", method)
        object.__setattr__(self, "parsed_url", parsed_url)
        object.__setattr__(self, "redirect", redirect)
        object.__setattr__(self, "follow", follow)
        object.__setattr__(self, "compress", bool(_pick(init.compress, source, "compress", True)))
        object.__setattr__(self, "counter", counter)
        object.__setattr__(self, "agent", _pick(init.agent, source, "agent", None))
        object.__setattr__(self, "body", body)
        object.__setattr__(self, "timeout", timeout)
        object.__setattr__(self, "size", size)
        object.__setattr__(self, "_headers", headers)

    @classmethod
    def from_config(cls, data: dict[str, Any]) -> Request:
        """Build a Request from a config dict with a ``url`` key.

        Raises:
            ConfigParseError: If ``url`` is missing or the options are malformed.
        """
        if not isinstance(data, dict):
            msg = f"expected dict, got {type(data).__name__}"
            raise ConfigParseError(msg)
        options = dict(data)
        url = options.pop("url", None)
        if not isinstance(url, str) or not url:
            msg = "request config missing required field 'url'"
            raise ConfigParseError(msg)
        return cls(url, parse_request_init(options))

    @property
    def url(self) -> str:
        """The formatted request target."""
        return self.parsed_url.href

    @property
    def headers(self) -> Headers:
        """A copy of the request headers.

        Changing the copy does not change the request; build a new Request
        with the modified headers instead.
        """
        return Headers(self._headers)

    def clone(self) -> Request:
        """Copy this request. The body is re-materialized, not shared."""
        return Request(self)

    def with_changes(
        self,
        *,
        url: str | StructuredURL | None = None,
        method: str | None = None,
        headers: HeadersInit = None,
        body: Any = _KEEP,
        counter: int | None = None,
    ) -> Request:
        """Clone with overrides. Pass ``body=None`` to drop the body."""
        if body is _KEEP:
            body = self.body.clone() if self.body is not None else None
        init = RequestInit(
            method=method or self.method,
            headers=headers if headers is not None else self._headers,
            body=body,
            redirect=self.redirect,
            follow=self.follow,
            compress=self.compress,
            counter=counter if counter is not None else self.counter,
            agent=self.agent,
            timeout=self.timeout,
            size=self.size,
        )
        return Request(url if url is not None else self.parsed_url, init)


def _coerce_init(init: RequestInit | Mapping[str, Any] | None) -> RequestInit:
    if init is None:
        return RequestInit()
    if isinstance(init, RequestInit):
        return init
    if isinstance(init, Mapping):
        return parse_request_init(dict(init))
    msg = f"init must be a RequestInit or a mapping, got {type(init).__name__}"
    raise TypeError(msg)


def _pick(value: Any, source: Request | None, name: str, default: Any) -> Any:
    if value is not None:
        return value
    if source is not None:
        return getattr(source, name)
    return default


def _non_negative(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        msg = f"{name} must be a non-negative integer, got {value!r}"
        raise ValueError(msg)
    return value


def _non_negative_number(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        msg = f"{name} must be a non-negative number, got {value!r}"
        raise ValueError(msg)
    return value

