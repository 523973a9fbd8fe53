"""Shared constants and sentinels for nscache."""

from __future__ import annotations

from typing import Final


class _NotFound:
    """Sentinel type returned by store clients when a key holds no value."""

    _instance: _NotFound | None = None

    def __new__(cls) -> _NotFound:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_FOUND"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND: Final = _NotFound()

# Reserved control key bodies inside a namespace
METADATA_MARKER = "_metadata"
KEY_SEPARATOR = ":"

# Escape prefix for ordinary keys that start with the reserved marker character
RESERVED_LEAD = "_"

DEFAULT_LIFETIME_SECONDS = 86400
DEFAULT_MEMCACHE_PORT = 11211
DEFAULT_CONNECT_TIMEOUT_SECONDS = 1.0

# memcached protocol limit on key length (bytes)
MEMCACHE_MAX_KEY_LENGTH = 250
HASHED_KEY_PREFIX = "sha256:"

# Expiry value understood by the store as "never expire"
NO_EXPIRY = 0
