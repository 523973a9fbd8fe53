"""Observability: structured logging."""

from nscache_engine.observability.logging import configure_logging

__all__ = ["configure_logging"]
