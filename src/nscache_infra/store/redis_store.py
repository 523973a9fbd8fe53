"""Redis-backed implementation of StoreClient."""

from __future__ import annotations

import pickle
from typing import Any

import structlog
from redis import Redis
from redis.exceptions import RedisError

from nscache_core.constants import NO_EXPIRY, NOT_FOUND

logger = structlog.get_logger()

_DECODE_ERRORS = (
    pickle.UnpicklingError,
    EOFError,
    ValueError,
    TypeError,
    AttributeError,
    ImportError,
)


class RedisStoreClient:
    """Store adapter over a synchronous redis-py client.

    Values are pickled, and a payload that does not unpickle reads as a
    miss. Replace maps to ``SET ... XX`` and absolute expiry to ``EXAT``;
    ``flush_all`` flushes the selected database only.
    """

    def __init__(self, redis: Redis) -> None:  # type: ignore[type-arg]
        """Initialize with a redis-py client (``decode_responses`` must be off)."""
        self._redis = redis

    def get(self, key: str) -> Any:  # noqa: ANN401
        """Retrieve a value, or NOT_FOUND."""
        try:
            raw = self._redis.get(key)
        except RedisError as e:
            logger.warning("store_read_failed", key=key, error=str(e))
            return NOT_FOUND
        if raw is None:
            return NOT_FOUND
        try:
            return pickle.loads(raw)  # noqa: S301
        except _DECODE_ERRORS as e:
            logger.warning("store_read_failed", key=key, error=str(e))
            return NOT_FOUND

    def set(self, key: str, value: Any, flags: int = 0, expires_at: float = 0) -> bool:  # noqa: ANN401
        """Store a value unconditionally."""
        return self._write("set", key, value, expires_at, only_existing=False)

    def replace(self, key: str, value: Any, flags: int = 0, expires_at: float = 0) -> bool:  # noqa: ANN401
        """Store a value only if the key already exists."""
        return self._write("replace", key, value, expires_at, only_existing=True)

    def delete(self, key: str, delay: int = 0) -> bool:
        """Delete a key, returning whether it existed."""
        try:
            return bool(self._redis.delete(key))
        except RedisError as e:
            logger.warning("store_write_failed", op="delete", key=key, error=str(e))
            return False

    def flush_all(self) -> bool:
        """Flush the selected database."""
        try:
            return bool(self._redis.flushdb())
        except RedisError as e:
            logger.warning("store_write_failed", op="flush_all", error=str(e))
            return False

    def _write(
        self,
        op: str,
        key: str,
        value: Any,  # noqa: ANN401
        expires_at: float,
        *,
        only_existing: bool,
    ) -> bool:
        exat = None if expires_at == NO_EXPIRY else int(expires_at)
        try:
            result = self._redis.set(
                name=key,
                value=pickle.dumps(value),
                exat=exat,
                xx=only_existing,
            )
        except RedisError as e:
            logger.warning("store_write_failed", op=op, key=key, error=str(e))
            return False
        return bool(result)
