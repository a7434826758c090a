"""unixfetch — fetch-style Request model with unix-socket addressing.

All public types are exported from this module for flat imports:

    from unixfetch import Request, build_dispatch_options, normalize_url
"""

__version__ = "0.1.0"

# Body implementations — see unixfetch._body for details
from unixfetch._body import (
    FORM_CONTENT_TYPE,
    TEXT_CONTENT_TYPE,
    BodyUsedError,
    BytesBody,
    FormBody,
    StreamBody,
    extract_body,
)

# Config types — see unixfetch._config for details
from unixfetch._config import (
    DEFAULT_FOLLOW,
    ConfigParseError,
    RedirectPolicy,
    RequestInit,
    load_request_init,
    parse_request_init,
)
from unixfetch._errors import FetchError
from unixfetch._headers import Headers, InvalidHeaderError

# Options builder
from unixfetch._options import (
    DEFAULT_ACCEPT_ENCODING,
    DEFAULT_USER_AGENT,
    DispatchDescriptor,
    InvalidURLError,
    UnsupportedProtocolError,
    build_dispatch_options,
)

# Redirects
from unixfetch._redirect import (
    REDIRECT_STATUSES,
    MaxRedirectsError,
    RedirectError,
    is_redirect,
    next_request,
)

# Request
from unixfetch._request import InvalidBodyForMethodError, Request
from unixfetch._types import Agent, Body

# URLs
from unixfetch._url import StructuredURL, normalize_url, resolve_url

__all__ = [
    # Protocols
    "Agent",
    "Body",
    # URLs
    "StructuredURL",
    "normalize_url",
    "resolve_url",
    # Headers
    "Headers",
    "InvalidHeaderError",
    # Bodies
    "BytesBody",
    "FormBody",
    "StreamBody",
    "BodyUsedError",
    "extract_body",
    "TEXT_CONTENT_TYPE",
    "FORM_CONTENT_TYPE",
    # Request
    "Request",
    "RequestInit",
    "RedirectPolicy",
    "InvalidBodyForMethodError",
    "DEFAULT_FOLLOW",
    # Options builder
    "DispatchDescriptor",
    "build_dispatch_options",
    "InvalidURLError",
    "UnsupportedProtocolError",
    "DEFAULT_USER_AGENT",
    "DEFAULT_ACCEPT_ENCODING",
    # Redirects
    "next_request",
    "is_redirect",
    "RedirectError",
    "MaxRedirectsError",
    "REDIRECT_STATUSES",
    # Config
    "ConfigParseError",
    "parse_request_init",
    "load_request_init",
    # Errors
    "FetchError",
]
