"""Factory functions for creating store clients from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from pymemcache import serde
from pymemcache.client.base import Client, PooledClient
from pymemcache.client.hash import HashClient
from pymemcache.exceptions import MemcacheError

from nscache_core.exceptions import CacheInitializationError
from nscache_core.interfaces.store import StoreClient

if TYPE_CHECKING:
    from nscache_core.config.settings import Settings
    from nscache_core.models.server import ServerConfig

logger = structlog.get_logger()


def probe_server(server: ServerConfig, timeout: float) -> None:
    """Check that a memcached server answers ``version``.

    Raises:
        CacheInitializationError: if the server cannot be reached.
    """
    probe = Client((server.host, server.port), connect_timeout=timeout, timeout=timeout)
    try:
        probe.version()
    except (MemcacheError, OSError) as e:
        msg = f"Unable to connect to the memcache server ({server.address})."
        raise CacheInitializationError(msg) from e
    finally:
        probe.close()


def create_memcache_client(settings: Settings) -> StoreClient:
    """Connect to the configured memcached pool.

    Every server is probed first, so an unreachable one fails startup
    instead of the first cache call.
    """
    from nscache_infra.store.memcache_store import MemcacheStoreClient

    pool = settings.server_pool()
    for server in pool:
        probe_server(server, settings.timeout)

    # Settings keeps the pool uniform, so the first server speaks for all
    persistent = pool[0].persistent
    client: Client | PooledClient | HashClient
    if len(pool) == 1:
        client_cls = PooledClient if settings.use_pooling else Client
        client = client_cls(
            (pool[0].host, pool[0].port),
            serde=serde.pickle_serde,
            connect_timeout=settings.timeout,
            timeout=settings.timeout,
            default_noreply=False,
        )
    else:
        client = HashClient(
            [(server.host, server.port) for server in pool],
            serde=serde.pickle_serde,
            connect_timeout=settings.timeout,
            timeout=settings.timeout,
            use_pooling=settings.use_pooling,
            default_noreply=False,
        )

    logger.info(
        "memcache_connected",
        servers=[server.address for server in pool],
        persistent=persistent,
        pooled=settings.use_pooling,
    )
    return MemcacheStoreClient(client, persistent=persistent)


def create_redis_client(settings: Settings) -> StoreClient:
    """Connect to Redis at ``settings.redis_url`` and check it answers PING."""
    from redis import Redis
    from redis.exceptions import RedisError

    from nscache_infra.store.redis_store import RedisStoreClient

    redis = Redis.from_url(
        settings.redis_url,
        socket_connect_timeout=settings.timeout,
        socket_timeout=settings.timeout,
    )
    try:
        redis.ping()
    except RedisError as e:
        msg = f"Unable to connect to the redis server ({settings.redis_url})."
        raise CacheInitializationError(msg) from e

    logger.info("redis_connected", url=settings.redis_url)
    return RedisStoreClient(redis)


def create_store_client(settings: Settings) -> StoreClient:
    """Create a store client based on settings.

    Returns ``InMemoryStoreClient`` when ``settings.store_backend == "memory"``,
    ``RedisStoreClient`` for ``"redis"``, otherwise a ``MemcacheStoreClient``
    connected to the configured servers.
    """
    if settings.store_backend == "memory":
        from nscache_infra.store.memory_store import InMemoryStoreClient

        return InMemoryStoreClient()

    if settings.store_backend == "redis":
        return create_redis_client(settings)

    return create_memcache_client(settings)
