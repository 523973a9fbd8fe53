"""Integration test fixtures: real memcached and redis on localhost."""

from __future__ import annotations

import logging
import socket
import time
from collections.abc import Generator

import pytest

from nscache_core.interfaces.store import StoreClient
from nscache_infra.store.factory import create_store_client
from tests.mocks.mock_settings import make_real_settings

# ---------------------------------------------------------------------------
# Service health checks (with retry for CI container start-up)
# ---------------------------------------------------------------------------


def _tcp_reachable(
    host: str,
    port: int,
    timeout: float = 1.0,
    retries: int = 5,
    delay: float = 1.0,
) -> bool:
    """Check if a TCP service is reachable, retrying on failure."""
    for attempt in range(retries):
        try:
            with socket.create_connection((host, port), timeout=timeout):
                return True
        except OSError:
            if attempt < retries - 1:
                time.sleep(delay)
    return False


_memcached_up = _tcp_reachable("localhost", 11211)
_redis_up = _tcp_reachable("localhost", 6379, retries=2)

require_memcached = pytest.mark.skipif(
    not _memcached_up,
    reason="memcached not reachable on localhost:11211, run `docker run -p 11211:11211 memcached`",
)
require_redis = pytest.mark.skipif(
    not _redis_up,
    reason="Redis not reachable on localhost:6379",
)


# ---------------------------------------------------------------------------
# Store fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def memcache_store() -> Generator[StoreClient, None, None]:
    """Function-scoped memcached store, flushed before and after each test."""
    if not _memcached_up:
        pytest.skip("memcached not available")

    store = create_store_client(make_real_settings())
    store.flush_all()
    yield store
    store.flush_all()


@pytest.fixture
def redis_store() -> Generator[StoreClient, None, None]:
    """Function-scoped redis store on test DB 1, flushed before and after each test."""
    if not _redis_up:
        pytest.skip("Redis not available")

    settings = make_real_settings(store_backend="redis", redis_url="redis://localhost:6379/1")
    store = create_store_client(settings)
    store.flush_all()
    yield store
    store.flush_all()


# ---------------------------------------------------------------------------
# Logging cleanup
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_logging() -> Generator[None, None, None]:
    """Save and restore root logger handlers."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers = original_handlers
    root.level = original_level
