"""Base error type for unixfetch.

Concrete errors live beside the code that raises them; everything derives
from FetchError so callers can catch the whole family at once. Errors that
signal a caller programming mistake also derive from TypeError, matching
how the fetch API reports them.
"""

from __future__ import annotations


class FetchError(Exception):
    """Base class for errors raised by unixfetch."""
