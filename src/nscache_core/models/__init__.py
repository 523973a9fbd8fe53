"""Domain models for nscache."""

from nscache_core.models.metadata import CacheMetadata
from nscache_core.models.server import ServerConfig

__all__ = [
    "CacheMetadata",
    "ServerConfig",
]
