"""Backing store server configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field

from nscache_core.constants import DEFAULT_MEMCACHE_PORT


class ServerConfig(BaseModel):
    """A single memcached server in a pool."""

    host: str = Field(description="Server hostname or IP address")
    port: int = Field(default=DEFAULT_MEMCACHE_PORT, ge=1, le=65535, description="Server port")
    persistent: bool = Field(
        default=True, description="Keep the socket open between operations"
    )

    @property
    def address(self) -> str:
        """Return ``host:port`` for logs and error messages."""
        return f"{self.host}:{self.port}"
