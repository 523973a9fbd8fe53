"""Store client implementations."""

from nscache_infra.store.factory import create_store_client
from nscache_infra.store.memcache_store import MemcacheStoreClient
from nscache_infra.store.memory_store import InMemoryStoreClient
from nscache_infra.store.redis_store import RedisStoreClient

__all__ = [
    "InMemoryStoreClient",
    "MemcacheStoreClient",
    "RedisStoreClient",
    "create_store_client",
]
