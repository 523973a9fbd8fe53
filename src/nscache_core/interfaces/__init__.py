"""Public interface re-exports for nscache_core."""

from nscache_core.interfaces.store import StoreClient

__all__ = [
    "StoreClient",
]
