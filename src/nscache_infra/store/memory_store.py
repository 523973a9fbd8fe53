"""In-process implementation of StoreClient."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Any

from nscache_core.constants import NO_EXPIRY, NOT_FOUND


class InMemoryStoreClient:
    """Dict-backed store with absolute expiry, for local runs and tests."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        """Initialize with an optional clock (unix seconds)."""
        self._clock = clock
        self._items: dict[str, tuple[Any, int, float]] = {}
        self._lock = threading.Lock()

    def _live(self, key: str) -> tuple[Any, int, float] | None:
        """Return the entry for ``key`` if present and unexpired; caller holds the lock."""
        entry = self._items.get(key)
        if entry is None:
            return None
        expires_at = entry[2]
        if expires_at != NO_EXPIRY and self._clock() >= expires_at:
            del self._items[key]
            return None
        return entry

    def get(self, key: str) -> Any:  # noqa: ANN401
        """Retrieve a value, or NOT_FOUND."""
        with self._lock:
            entry = self._live(key)
        if entry is None:
            return NOT_FOUND
        return entry[0]

    def set(self, key: str, value: Any, flags: int = 0, expires_at: float = 0) -> bool:  # noqa: ANN401
        """Store a value unconditionally."""
        with self._lock:
            self._items[key] = (value, flags, expires_at)
        return True

    def replace(self, key: str, value: Any, flags: int = 0, expires_at: float = 0) -> bool:  # noqa: ANN401
        """Store a value only if the key is live."""
        with self._lock:
            if self._live(key) is None:
                return False
            self._items[key] = (value, flags, expires_at)
        return True

    def delete(self, key: str, delay: int = 0) -> bool:
        """Delete a key, returning whether it held a live value."""
        with self._lock:
            if self._live(key) is None:
                return False
            del self._items[key]
        return True

    def flush_all(self) -> bool:
        """Drop every item."""
        with self._lock:
            self._items.clear()
        return True

    def __len__(self) -> int:
        with self._lock:
            return sum(1 for key in list(self._items) if self._live(key) is not None)
