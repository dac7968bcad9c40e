"""
Test Configuration and Fixtures

Provides the in-memory service fakes and app/client fixtures shared by the
unit and API suites.
"""

import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

# Set test environment variables before importing app.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("LOG_FORMAT", "text")


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "api: API endpoint tests")


def pytest_collection_modifyitems(config, items):
    """
    Auto-assign tier markers so we can run `pytest -m unit` / `pytest -m api`.

    Convention:
    - tests/api/** => api
    - everything else => unit
    """
    for item in items:
        if item.get_closest_marker("api") or item.get_closest_marker("unit"):
            continue
        path = str(getattr(item, "fspath", "")).replace("\\", "/")
        if "/tests/api/" in path:
            item.add_marker(pytest.mark.api)
        else:
            item.add_marker(pytest.mark.unit)


# =============================================================================
# SERVICE FAKES
# =============================================================================


@pytest.fixture
def fake_clock():
    """Deterministic clock fixed at 2026-01-01T00:00:00Z."""
    from tests.support.clock import FakeClock

    return FakeClock.fixed()


@pytest.fixture
def document_store():
    from tests.support.document_store import InMemoryDocumentStore

    return InMemoryDocumentStore()


@pytest.fixture
def identity():
    from tests.support.identity import FakeIdentityProvider

    return FakeIdentityProvider()


@pytest.fixture
def settings():
    from buildvest.config import Settings

    return Settings(environment="test")


@pytest.fixture
def services(settings, document_store, identity, fake_clock):
    from buildvest.api.services import Services

    return Services(settings=settings, store=document_store, identity=identity, clock=fake_clock)


# =============================================================================
# APP / CLIENT FIXTURES
# =============================================================================


@pytest.fixture
def app(services):
    """FastAPI application wired to the in-memory fakes."""
    from buildvest.api.main import create_app

    return create_app(services=services)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest_asyncio.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
