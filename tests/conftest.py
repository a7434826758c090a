"""Shared fixtures for unixfetch tests."""

from __future__ import annotations

import pytest

from unixfetch import Request


class FakeAgent:
    """Stand-in for a pooling transport agent; identity is all that matters."""

    def __repr__(self) -> str:
        return "FakeAgent()"


@pytest.fixture
def agent() -> FakeAgent:
    return FakeAgent()


@pytest.fixture
def get_request() -> Request:
    return Request("http://example.com/")


@pytest.fixture
def socket_request() -> Request:
    return Request("unix:/var/run/docker.sock:/v1.41/info")
