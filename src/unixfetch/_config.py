"""Init options and config parsing for Request construction.

RequestInit is the typed form of the fetch ``init`` record. Every field
defaults to None, meaning "not given": Request falls back to the source
request's value, then to the documented default.

Config-driven construction path:
  dict / YAML → parse_request_init() → RequestInit → Request(url, init)

| Key        | Type                          | Default   |
|------------|-------------------------------|-----------|
| method     | str                           | GET       |
| headers    | mapping, pair list, Headers   | empty     |
| body       | see extract_body()            | None      |
| redirect   | follow / error / manual       | follow    |
| follow     | int >= 0                      | 20        |
| compress   | bool                          | True      |
| counter    | int >= 0                      | 0         |
| agent      | any (opaque)                  | None      |
| timeout    | number >= 0 (seconds)         | 0 (none)  |
| size       | int >= 0 (bytes)              | 0 (none)  |
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, fields
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

if TYPE_CHECKING:
    from unixfetch._headers import HeadersInit
    from unixfetch._types import Agent

DEFAULT_FOLLOW = 20


class RedirectPolicy(enum.StrEnum):
    """How 3xx responses are treated."""

    FOLLOW = "follow"
    ERROR = "error"
    MANUAL = "manual"


@dataclass(frozen=True, slots=True)
class RequestInit:
    """Options record for Request construction. None means "not given"."""

    method: str | None = None
    headers: HeadersInit = None
    body: Any = None
    redirect: RedirectPolicy | str | None = None
    follow: int | None = None
    compress: bool | None = None
    counter: int | None = None
    agent: Agent = None
    timeout: float | None = None
    size: int | None = None


_INIT_KEYS = frozenset(f.name for f in fields(RequestInit))


class ConfigParseError(ValueError):
    """Error parsing a config dict into RequestInit."""


def parse_request_init(data: dict[str, Any]) -> RequestInit:
    """Parse a dict into a RequestInit.

    Values are type-checked here; range checks (negative counts, unknown
    redirect policy) are reported the same way so a bad config fails
    before any Request is built.

    Raises:
        ConfigParseError: If the dict is malformed.
    """
    if not isinstance(data, dict):
        msg = f"expected dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    unknown = sorted(set(data) - _INIT_KEYS)
    if unknown:
        msg = f"unknown request option(s): {unknown}"
        raise ConfigParseError(msg)

    method = data.get("method")
    if method is not None and (not isinstance(method, str) or not method):
        msg = f"'method' must be a non-empty string, got {method!r}"
        raise ConfigParseError(msg)

    headers = data.get("headers")
    if isinstance(headers, (str, bytes)):
        msg = f"'headers' must be a mapping or a list of pairs, got {type(headers).__name__}"
        raise ConfigParseError(msg)

    redirect = data.get("redirect")
    if redirect is not None:
        try:
            redirect = RedirectPolicy(redirect)
        except ValueError:
            expected = [p.value for p in RedirectPolicy]
            msg = f"'redirect' must be one of {expected}, got {redirect!r}"
            raise ConfigParseError(msg) from None

    compress = data.get("compress")
    if compress is not None and not isinstance(compress, bool):
        msg = f"'compress' must be a bool, got {type(compress).__name__}"
        raise ConfigParseError(msg)

    timeout = data.get("timeout")
    if timeout is not None and (
        isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout < 0
    ):
        msg = f"'timeout' must be a non-negative number, got {timeout!r}"
        raise ConfigParseError(msg)

    return RequestInit(
        method=method,
        headers=headers,
        body=data.get("body"),
        redirect=redirect,
        follow=_parse_count(data, "follow"),
        compress=compress,
        counter=_parse_count(data, "counter"),
        agent=data.get("agent"),
        timeout=timeout,
        size=_parse_count(data, "size"),
    )


def load_request_init(path: str | Path) -> RequestInit:
    """Load a RequestInit from a YAML file.

    Raises:
        ConfigParseError: If the file is not valid YAML or the document
            is malformed.
    """
    with Path(path).open() as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            msg = f"invalid YAML in {path}: {e}"
            raise ConfigParseError(msg) from e
    return parse_request_init(data if data is not None else {})


def _parse_count(data: dict[str, Any], key: str) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        msg = f"{key!r} must be a non-negative integer, got {value!r}"
        raise ConfigParseError(msg)
    return value
