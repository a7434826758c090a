"""Redirect step — the per-hop rule for a redirect-following driver.

The driver owns the loop and the network; this module only decides what
the next Request looks like for one 3xx response:

- 303, or 301/302 answering a POST, switches to GET and drops the body
  along with its Content-Length and Content-Type headers
- every other redirect replays method and body, so the body must be
  re-readable (a determinate length)
- the new request carries counter + 1; the follow limit caps the chain
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from unixfetch._config import RedirectPolicy
from unixfetch._errors import FetchError
from unixfetch._url import resolve_url

if TYPE_CHECKING:
    from unixfetch._request import Request

logger = logging.getLogger(__name__)

REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})

_BODY_HEADERS = ("Content-Length", "Content-Type")


class RedirectError(FetchError):
    """A redirect response could not be followed.

    ``reason`` is a short machine-readable code: ``no-redirect``,
    ``missing-location``, ``max-redirect`` or ``unsupported-redirect``.
    """

    def __init__(self, reason: str, url: str, message: str) -> None:
        self.reason = reason
        self.url = url
        super().__init__(message)


class MaxRedirectsError(RedirectError):
    """The redirect chain exceeded the request's follow limit."""

    def __init__(self, url: str, follow: int) -> None:
        self.follow = follow
        super().__init__("max-redirect", url, f"maximum redirect reached at: {url}")


def is_redirect(status: int) -> bool:
    return status in REDIRECT_STATUSES


def next_request(request: Request, status: int, location: str | None) -> Request | None:
    """Build the request for the next hop of a redirect chain.

    Returns None when the response is not a redirect or the request's
    redirect policy is ``manual``; the caller then handles the response
    itself.

    Raises:
        RedirectError: policy is ``error``, Location is missing, or a
            streamed body would have to be replayed.
        MaxRedirectsError: the follow limit is reached.
    """
    if not is_redirect(status):
        return None

    url = request.url
    if request.redirect is RedirectPolicy.ERROR:
        msg = f"redirect mode is set to error: {url}"
        raise RedirectError("no-redirect", url, msg)
    if request.redirect is RedirectPolicy.MANUAL:
        return None

    if not location:
        msg = f"redirect response {status} from {url} has no Location header"
        raise RedirectError("missing-location", url, msg)

    if request.counter >= request.follow:
        raise MaxRedirectsError(url, request.follow)

    target = resolve_url(request.parsed_url, location)
    method = request.method
    headers = request.headers

    rewrite_to_get = (status == 303 and method != "HEAD") or (
        status in (301, 302) and method == "POST"
    )
    if rewrite_to_get:
        for name in _BODY_HEADERS:
            headers.delete(name)
        follow_up = request.with_changes(
            url=target,
            method="GET",
            headers=headers,
            body=None,
            counter=request.counter + 1,
        )
    else:
        if request.body is not None and request.body.total_bytes() is None:
            msg = "Cannot follow redirect with body being a readable stream"
            raise RedirectError("unsupported-redirect", url, msg)
        follow_up = request.with_changes(url=target, counter=request.counter + 1)

    logger.debug(
        "redirect %d %s -> %s %s (hop %d/%d)",
        status,
        url,
        follow_up.method,
        follow_up.url,
        follow_up.counter,
        follow_up.follow,
    )
    return follow_up
