"""Abstract key-value store interface."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class StoreClient(Protocol):
    """Primitive memcache-like store the namespaced cache is built on.

    ``expires_at`` is an absolute unix timestamp; ``0`` means never expire.
    Reads return ``NOT_FOUND`` on a miss so stored falsy values stay visible.
    """

    def get(self, key: str) -> Any:  # noqa: ANN401
        """Retrieve a value, or ``NOT_FOUND`` if missing/expired."""
        ...

    def set(self, key: str, value: Any, flags: int = 0, expires_at: float = 0) -> bool:  # noqa: ANN401
        """Store a value unconditionally."""
        ...

    def replace(self, key: str, value: Any, flags: int = 0, expires_at: float = 0) -> bool:  # noqa: ANN401
        """Store a value only if the key already holds one."""
        ...

    def delete(self, key: str, delay: int = 0) -> bool:
        """Delete a key; False if nothing was deleted."""
        ...

    def flush_all(self) -> bool:
        """Invalidate every item in the store."""
        ...
