"""Application settings using pydantic-settings."""

from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from nscache_core.constants import (
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    DEFAULT_LIFETIME_SECONDS,
    DEFAULT_MEMCACHE_PORT,
)
from nscache_core.models.server import ServerConfig


class Settings(BaseSettings):
    """Central configuration for nscache."""

    model_config = SettingsConfigDict(env_prefix="NSC_", env_file=".env")

    # --- Namespace ---
    prefix: str = Field(
        default="",
        description="Namespace scoping every key of this cache (required)",
    )

    # --- Store ---
    store_backend: Literal["memcache", "redis", "memory"] = Field(
        default="memcache",
        description="Backing store: 'memcache' cluster, 'redis' server, or in-process 'memory'",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL (store_backend=redis)",
    )
    servers: list[ServerConfig] = Field(
        default_factory=list,
        description="memcached server pool; overrides host/port when non-empty",
    )
    host: str = Field(
        default="localhost",
        description="Single memcached server hostname",
    )
    port: int = Field(
        default=DEFAULT_MEMCACHE_PORT,
        ge=1,
        le=65535,
        description="Single memcached server port",
    )
    persistent: bool = Field(
        default=True,
        description="Keep the connection open between operations",
    )
    timeout: float = Field(
        default=DEFAULT_CONNECT_TIMEOUT_SECONDS,
        gt=0,
        description="Connect and request timeout in seconds",
    )
    use_pooling: bool = Field(
        default=False,
        description="Use pymemcache connection pooling for concurrent callers",
    )

    # --- Cache ---
    lifetime: int = Field(
        default=DEFAULT_LIFETIME_SECONDS,
        ge=0,
        description="Default TTL in seconds for set() without an explicit ttl",
    )
    store_cache_info: bool = Field(
        default=False,
        description="Maintain a per-namespace key index (one extra write per set/remove)",
    )

    # --- Logging ---
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root log level (case-insensitive)",
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        description="Log renderer",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        """Accept lowercase level names from the environment."""
        return value.upper() if isinstance(value, str) else value

    @model_validator(mode="after")
    def validate_server_pool(self) -> Settings:
        """Reject pools that mix persistent and non-persistent servers.

        A hashed pool shares one client, so connections are either kept
        open for every server or closed after each call.
        """
        if len({server.persistent for server in self.servers}) > 1:
            msg = "servers must all share the same persistent flag"
            raise ValueError(msg)
        return self

    def server_pool(self) -> list[ServerConfig]:
        """Return configured servers, falling back to the single host/port."""
        if self.servers:
            return list(self.servers)
        return [ServerConfig(host=self.host, port=self.port, persistent=self.persistent)]
