"""Pytest configuration and fixtures."""

import time

import pytest
from typing import AsyncGenerator
from httpx import ASGITransport, AsyncClient

from config import Config
from linkshort.database.memory import InMemoryLinkStore
from linkshort.service import LinkShortenerService
from linkshort.shortcode import ShortCodeGenerator
from linkshort.common.logging_config import setup_logging
from web_app import create_app


class SequenceGenerator(ShortCodeGenerator):
    """Generator returning a fixed sequence of codes, for deterministic tests."""

    def __init__(self, codes):
        super().__init__()
        self.codes = list(codes)
        self.calls = 0

    def generate(self) -> str:
        code = self.codes[min(self.calls, len(self.codes) - 1)]
        self.calls += 1
        return code


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
async def test_store(logger) -> AsyncGenerator[InMemoryLinkStore, None]:
    """Create connected in-memory store."""
    store = InMemoryLinkStore(logger=logger)
    await store.connect()

    yield store

    await store.close()


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator()


@pytest.fixture
def service(test_store, short_code_generator, logger) -> LinkShortenerService:
    """Create service instance."""
    return LinkShortenerService(
        store=test_store,
        short_code_generator=short_code_generator,
        logger=logger,
    )


@pytest.fixture
def config():
    return Config(database_url="memory://")


@pytest.fixture
def app(service, config):
    """Create test FastAPI app."""
    return create_app(service_instance=service, config=config)


@pytest.fixture
async def client(app):
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "http://stackoverflow.com/questions/123456",
    ]


@pytest.fixture
def sequence_generator():
    """Factory for generators that return the given codes in order."""
    return SequenceGenerator


@pytest.fixture
def new_york_local_time(monkeypatch):
    """Run the test with the process-local timezone set to America/New_York."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset() is not available on this platform")

    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    if time.tzname[0] != "EST":
        monkeypatch.undo()
        time.tzset()
        pytest.skip("system zone database has no America/New_York")

    yield

    monkeypatch.undo()
    time.tzset()
