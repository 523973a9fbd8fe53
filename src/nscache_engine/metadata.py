"""Per-key metadata records and the optional namespace key index."""

from __future__ import annotations

import time
from collections.abc import Callable

import structlog
from pydantic import ValidationError

from nscache_core.constants import NO_EXPIRY, NOT_FOUND
from nscache_core.interfaces.store import StoreClient
from nscache_core.models.metadata import CacheMetadata
from nscache_engine.codec import NamespaceCodec

logger = structlog.get_logger()


class MetadataTracker:
    """Maintain freshness bookkeeping for one namespace.

    The store cannot enumerate keys, so when ``index_enabled`` is set the
    tracker keeps the list of logical keys under the namespace's reserved
    index key. The index never expires and is advisory: if the store evicts
    it, reads fall back to an empty set.
    """

    def __init__(
        self,
        store: StoreClient,
        namespace: str,
        *,
        codec: NamespaceCodec | None = None,
        index_enabled: bool = False,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize with a store, namespace, and key-index flag."""
        self._store = store
        self._namespace = namespace
        self._codec = codec or NamespaceCodec()
        self._index_enabled = index_enabled
        self._clock = clock

    @property
    def enabled(self) -> bool:
        """Whether the key index is maintained."""
        return self._index_enabled

    # --- Per-key metadata ---

    def record_metadata(self, key: str, ttl: int) -> CacheMetadata:
        """Write ``{lastModified: now, timeout: now + ttl}`` expiring with the value."""
        now = int(self._clock())
        meta = CacheMetadata(last_modified=now, timeout=now + ttl)
        self._store.set(
            self._codec.encode_metadata(self._namespace, key),
            meta.to_record(),
            0,
            meta.timeout,
        )
        return meta

    def read_metadata(self, key: str) -> CacheMetadata | None:
        """Return the metadata for ``key``; None if absent or malformed."""
        raw = self._store.get(self._codec.encode_metadata(self._namespace, key))
        if raw is NOT_FOUND or not isinstance(raw, dict):
            return None
        try:
            return CacheMetadata.model_validate(raw)
        except ValidationError:
            logger.debug("metadata_malformed", namespace=self._namespace, key=key)
            return None

    def delete_metadata(self, key: str) -> bool:
        """Delete the metadata record for ``key``."""
        return self._store.delete(self._codec.encode_metadata(self._namespace, key), 0)

    # --- Key index ---

    def read_index(self) -> set[str]:
        """Return the indexed logical keys; empty if absent or malformed."""
        return set(self._load_index())

    def index_key(self, key: str) -> None:
        """Add ``key`` to the index when the index is enabled."""
        if not self._index_enabled:
            return
        keys = self._load_index()
        if key in keys:
            return
        keys.append(key)
        self._save_index(keys)

    def deindex_key(self, key: str) -> None:
        """Remove ``key`` from the index when enabled; no-op if absent."""
        if not self._index_enabled:
            return
        keys = self._load_index()
        if key not in keys:
            return
        keys.remove(key)
        self._save_index(keys)

    def drop_index(self) -> bool:
        """Delete the whole index entry."""
        return self._store.delete(self._codec.encode_index(self._namespace), 0)

    def _load_index(self) -> list[str]:
        raw = self._store.get(self._codec.encode_index(self._namespace))
        if not isinstance(raw, (list, tuple, set, frozenset)):
            return []
        # Keep insertion order, drop anything that isn't a key
        return list(dict.fromkeys(k for k in raw if isinstance(k, str)))

    def _save_index(self, keys: list[str]) -> None:
        self._store.set(self._codec.encode_index(self._namespace), keys, 0, NO_EXPIRY)
