"""Namespaced cache facade over a primitive key-value store."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from enum import StrEnum
from typing import TYPE_CHECKING, Any

import structlog

from nscache_core.constants import DEFAULT_LIFETIME_SECONDS, NOT_FOUND
from nscache_core.exceptions import CacheInitializationError, UnsupportedOperationError
from nscache_core.interfaces.store import StoreClient
from nscache_engine.codec import NamespaceCodec
from nscache_engine.metadata import MetadataTracker

if TYPE_CHECKING:
    from nscache_core.config.settings import Settings
    from nscache_core.models.metadata import CacheMetadata

logger = structlog.get_logger()


class CleanMode(StrEnum):
    """Scope of a ``clean`` call."""

    ALL = "all"  # flush the whole store, every namespace
    OLD = "old"  # prune index entries and metadata of expired values
    NAMESPACE = "namespace"  # remove every indexed key of this namespace


class NamespacedCache:
    """Cache scoped to one namespace of a shared store.

    Writes are best-effort and not atomic: ``set`` writes metadata, then the
    index entry, then the value; ``remove`` undoes them in the same order. A
    crash in between can leave metadata or an index entry without a value,
    and readers treat those as misses.
    """

    def __init__(
        self,
        store: StoreClient,
        prefix: str,
        *,
        lifetime: int = DEFAULT_LIFETIME_SECONDS,
        store_cache_info: bool = False,
        codec: NamespaceCodec | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize with an injected store client and a non-empty namespace.

        Raises:
            CacheInitializationError: if ``prefix`` is empty or ``store`` does
                not implement ``StoreClient``.
        """
        if not isinstance(prefix, str) or not prefix:
            msg = "You must set the prefix to be able to use NamespacedCache"
            raise CacheInitializationError(msg)
        if not isinstance(store, StoreClient):
            msg = f"{type(store).__name__} does not implement the StoreClient interface"
            raise CacheInitializationError(msg)

        self._store = store
        self._prefix = prefix
        self._lifetime = lifetime
        self._codec = codec or NamespaceCodec()
        self._tracker = MetadataTracker(
            store,
            prefix,
            codec=self._codec,
            index_enabled=store_cache_info,
            clock=clock,
        )

    @classmethod
    def from_settings(cls, settings: Settings, store: StoreClient | None = None) -> NamespacedCache:
        """Build a cache from settings, connecting to the store unless one is supplied."""
        if not settings.prefix:
            msg = "You must set the prefix to be able to use NamespacedCache"
            raise CacheInitializationError(msg)
        if store is None:
            from nscache_infra.store.factory import create_store_client

            store = create_store_client(settings)
        return cls(
            store,
            settings.prefix,
            lifetime=settings.lifetime,
            store_cache_info=settings.store_cache_info,
        )

    @property
    def namespace(self) -> str:
        """The namespace every key is scoped under."""
        return self._prefix

    @property
    def lifetime(self) -> int:
        """Default TTL in seconds."""
        return self._lifetime

    @property
    def tracker(self) -> MetadataTracker:
        """The metadata tracker for this namespace."""
        return self._tracker

    def get(self, key: str, default: Any = None) -> Any:  # noqa: ANN401
        """Return the cached value, or ``default`` on a miss."""
        value = self._store.get(self._codec.encode(self._prefix, key))
        return default if value is NOT_FOUND else value

    def has(self, key: str) -> bool:
        """Return True if ``key`` currently holds a value."""
        return self._store.get(self._codec.encode(self._prefix, key)) is not NOT_FOUND

    def set(self, key: str, value: Any, ttl: int | None = None) -> bool:  # noqa: ANN401
        """Store ``value`` under ``key`` for ``ttl`` seconds (default lifetime).

        The store has no upsert, so a replace is tried first and a plain set
        only when nothing was there to replace.
        """
        ttl = self._lifetime if ttl is None else ttl
        if self._codec.is_reserved(key):
            logger.debug("cache_reserved_key_escaped", namespace=self._prefix, key=key)

        meta = self._tracker.record_metadata(key, ttl)
        self._tracker.index_key(key)

        physical = self._codec.encode(self._prefix, key)
        if self._store.replace(physical, value, 0, meta.timeout):
            logger.debug("cache_set", namespace=self._prefix, key=key, ttl=ttl, op="replace")
            return True

        stored = self._store.set(physical, value, 0, meta.timeout)
        if stored:
            logger.debug("cache_set", namespace=self._prefix, key=key, ttl=ttl, op="set")
        else:
            logger.warning("cache_set_failed", namespace=self._prefix, key=key)
        return stored

    def remove(self, key: str) -> bool:
        """Delete ``key`` and its metadata; False if no value was deleted."""
        self._tracker.delete_metadata(key)
        self._tracker.deindex_key(key)
        removed = self._store.delete(self._codec.encode(self._prefix, key), 0)
        logger.debug("cache_remove", namespace=self._prefix, key=key, removed=removed)
        return removed

    def get_many(self, keys: Iterable[str]) -> dict[str, Any]:
        """Return a mapping of the requested keys that hold a value, in request order."""
        values: dict[str, Any] = {}
        for key in keys:
            value = self._store.get(self._codec.encode(self._prefix, key))
            if value is not NOT_FOUND:
                values[key] = value
        return values

    def clean(self, mode: CleanMode | str = CleanMode.ALL) -> bool:
        """Clean the cache.

        ``ALL`` flushes the entire store, across every namespace sharing it.
        ``NAMESPACE`` and ``OLD`` work from the key index and need
        ``store_cache_info`` enabled.

        Raises:
            UnsupportedOperationError: for a partial mode without the key index.
            ValueError: for an unknown mode.
        """
        mode = CleanMode(mode)
        if mode is CleanMode.ALL:
            flushed = self._store.flush_all()
            logger.info("cache_clean", namespace=self._prefix, mode=mode.value, flushed=flushed)
            return flushed

        if not self._tracker.enabled:
            msg = f"clean(mode={mode.value!r}) needs store_cache_info to enumerate keys"
            raise UnsupportedOperationError(msg)

        if mode is CleanMode.NAMESPACE:
            keys = self._tracker.read_index()
            for key in keys:
                self._tracker.delete_metadata(key)
                self._store.delete(self._codec.encode(self._prefix, key), 0)
            self._tracker.drop_index()
            logger.info("cache_clean", namespace=self._prefix, mode=mode.value, removed=len(keys))
            return True

        stale = [key for key in self._tracker.read_index() if not self.has(key)]
        for key in stale:
            self._tracker.delete_metadata(key)
            self._tracker.deindex_key(key)
        logger.info("cache_clean", namespace=self._prefix, mode=mode.value, pruned=len(stale))
        return True

    def remove_pattern(self, pattern: str) -> None:
        """Not supported by a namespaced memcache store.

        Raises:
            UnsupportedOperationError: always.
        """
        msg = f"NamespacedCache.remove_pattern({pattern!r}) is not supported"
        raise UnsupportedOperationError(msg)

    def get_metadata(self, key: str) -> CacheMetadata | None:
        """Return the metadata record for ``key``, if any."""
        return self._tracker.read_metadata(key)

    def get_last_modified(self, key: str) -> int:
        """Unix time ``key`` was last written, 0 if unknown."""
        meta = self._tracker.read_metadata(key)
        return meta.last_modified if meta else 0

    def get_timeout(self, key: str) -> int:
        """Unix time ``key`` expires, 0 if unknown."""
        meta = self._tracker.read_metadata(key)
        return meta.timeout if meta else 0

    def get_cache_info(self) -> list[str]:
        """Return the namespace key index, sorted."""
        return sorted(self._tracker.read_index())
