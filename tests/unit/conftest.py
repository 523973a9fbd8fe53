"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from unittest.mock import MagicMock

import pytest
import structlog

from nscache_engine.facade import NamespacedCache
from nscache_infra.store.memory_store import InMemoryStoreClient
from tests.mocks.mock_settings import make_settings
from tests.mocks.mock_store import FakeClock, make_memory_store


@pytest.fixture
def mock_settings() -> MagicMock:
    """Return a MagicMock Settings with sensible defaults."""
    return make_settings()


@pytest.fixture
def clock() -> FakeClock:
    """Return a fake clock fixed at a known epoch."""
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> InMemoryStoreClient:
    """Return an empty in-memory store sharing the fake clock."""
    return make_memory_store(clock)


@pytest.fixture
def cache(store: InMemoryStoreClient, clock: FakeClock) -> NamespacedCache:
    """Return a cache for namespace 'tenantA' without the key index."""
    return NamespacedCache(store, "tenantA", lifetime=3600, clock=clock)


@pytest.fixture
def indexed_cache(store: InMemoryStoreClient, clock: FakeClock) -> NamespacedCache:
    """Return a cache for namespace 'tenantA' with the key index enabled."""
    return NamespacedCache(store, "tenantA", lifetime=3600, store_cache_info=True, clock=clock)


@pytest.fixture(autouse=True, scope="session")
def _structlog_via_stdlib() -> Generator[None, None, None]:
    """Send structlog events through stdlib logging so they never hit captured stdout."""
    structlog.configure(
        processors=[structlog.stdlib.add_log_level, structlog.processors.KeyValueRenderer()],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def _reset_logging() -> Generator[None, None, None]:
    """Restore root logger handlers and drop bound context after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers = original_handlers
    root.level = original_level
    structlog.contextvars.clear_contextvars()
