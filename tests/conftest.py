"""
pytest configuration and fixtures.
"""

import asyncio

import pytest

from txtweb.resolver import DNSLookupError, NotFoundError


class FakeResolver:
    """In-memory TXT resolver.

    Names missing from ``records`` raise NotFoundError; names in
    ``errors`` raise the given exception.
    """

    def __init__(self, records=None, errors=None):
        self.records = dict(records or {})
        self.errors = dict(errors or {})
        self.queries = []

    async def lookup_txt(self, name):
        self.queries.append(name)
        if name in self.errors:
            raise self.errors[name]
        if name in self.records:
            return list(self.records[name])
        raise NotFoundError(name)


class BlockingResolver:
    """Resolver whose lookups hang until cancelled."""

    def __init__(self):
        self.started = asyncio.Event()
        self.cancelled = asyncio.Event()

    async def lookup_txt(self, name):
        self.started.set()
        try:
            await asyncio.Future()
        except asyncio.CancelledError:
            self.cancelled.set()
            raise


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def fake_resolver():
    """Resolver serving a plain two-line site at example.com."""
    return FakeResolver({"_txtweb.example.com": ["hello", "world"]})


@pytest.fixture
def servfail():
    return DNSLookupError("_txtweb.example.com", "server answered SERVFAIL")
