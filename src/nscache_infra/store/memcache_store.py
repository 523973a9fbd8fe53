"""pymemcache-backed implementation of StoreClient."""

from __future__ import annotations

import hashlib
from typing import Any

import structlog
from pymemcache.client.base import Client, PooledClient
from pymemcache.client.hash import HashClient
from pymemcache.exceptions import MemcacheError

from nscache_core.constants import HASHED_KEY_PREFIX, MEMCACHE_MAX_KEY_LENGTH, NOT_FOUND

logger = structlog.get_logger()

_STORE_ERRORS = (MemcacheError, OSError)


def wire_key(key: str) -> str:
    """Return a key memcached accepts, hashing ones it would reject.

    memcached keys are limited to 250 bytes of printable ASCII without
    whitespace. Anything else is replaced by ``sha256:<hex>``.
    """
    raw = key.encode("utf-8")
    if len(raw) <= MEMCACHE_MAX_KEY_LENGTH and all(33 <= b <= 126 for b in raw):
        return key
    return f"{HASHED_KEY_PREFIX}{hashlib.sha256(raw).hexdigest()}"


class MemcacheStoreClient:
    """Store adapter over a pymemcache ``Client``, ``PooledClient`` or ``HashClient``.

    Transport failures are logged and reported as a miss (reads) or
    ``False`` (writes); nothing is retried here.
    """

    def __init__(
        self,
        client: Client | PooledClient | HashClient,
        *,
        persistent: bool = True,
    ) -> None:
        """Initialize with a configured pymemcache client."""
        self._client = client
        self._persistent = persistent

    def _release(self) -> None:
        if not self._persistent:
            self._client.close()

    def get(self, key: str) -> Any:  # noqa: ANN401
        """Retrieve a value, or NOT_FOUND."""
        try:
            return self._client.get(wire_key(key), default=NOT_FOUND)
        except _STORE_ERRORS as e:
            logger.warning("store_read_failed", key=key, error=str(e))
            return NOT_FOUND
        finally:
            self._release()

    def set(self, key: str, value: Any, flags: int = 0, expires_at: float = 0) -> bool:  # noqa: ANN401
        """Store a value unconditionally."""
        try:
            return bool(
                self._client.set(
                    wire_key(key),
                    value,
                    expire=int(expires_at),
                    noreply=False,
                    flags=flags or None,
                )
            )
        except _STORE_ERRORS as e:
            logger.warning("store_write_failed", op="set", key=key, error=str(e))
            return False
        finally:
            self._release()

    def replace(self, key: str, value: Any, flags: int = 0, expires_at: float = 0) -> bool:  # noqa: ANN401
        """Store a value only if the key already exists."""
        try:
            return bool(
                self._client.replace(
                    wire_key(key),
                    value,
                    expire=int(expires_at),
                    noreply=False,
                    flags=flags or None,
                )
            )
        except _STORE_ERRORS as e:
            logger.warning("store_write_failed", op="replace", key=key, error=str(e))
            return False
        finally:
            self._release()

    def delete(self, key: str, delay: int = 0) -> bool:
        """Delete a key; memcached no longer supports delayed deletes, so delay is ignored."""
        try:
            return bool(self._client.delete(wire_key(key), noreply=False))
        except _STORE_ERRORS as e:
            logger.warning("store_write_failed", op="delete", key=key, error=str(e))
            return False
        finally:
            self._release()

    def flush_all(self) -> bool:
        """Invalidate every item on every server."""
        try:
            result = self._client.flush_all(noreply=False)
            # HashClient answers with one result per server
            if isinstance(result, list):
                return bool(result) and all(result)
            return bool(result)
        except _STORE_ERRORS as e:
            logger.warning("store_write_failed", op="flush_all", error=str(e))
            return False
        finally:
            self._release()

    def close(self) -> None:
        """Close open connections."""
        self._client.close()
