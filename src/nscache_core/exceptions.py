"""Custom exception hierarchy for nscache."""

from __future__ import annotations


class NSCacheError(Exception):
    """Base exception for all nscache errors."""


class CacheInitializationError(NSCacheError):
    """Raised when the cache cannot be built (missing prefix, bad store, unreachable server)."""


class UnsupportedOperationError(NSCacheError):
    """Raised for operations the namespaced store cannot perform."""


class InvalidKeyError(NSCacheError, ValueError):
    """Raised when a namespace or logical key is not a usable string."""
