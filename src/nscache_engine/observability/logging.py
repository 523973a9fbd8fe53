"""Logging setup for nscache processes.

structlog events and stdlib records from the store transports share one
stderr handler, so cache output on stdout stays clean. Every line carries
the store backend and, once a prefix is configured, the cache namespace.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars, merge_contextvars

if TYPE_CHECKING:
    from nscache_core.config.settings import Settings

# Client libraries that log per request at DEBUG
TRANSPORT_LOGGERS = ("pymemcache", "redis")


def configure_logging(settings: Settings) -> None:
    """Install the root handler and bind the cache context.

    ``settings.log_level`` is already a validated level name. Transport
    loggers never go below WARNING, so ``-v`` shows cache events without
    a line per memcached command.
    """
    level = logging.getLevelNamesMapping()[settings.log_level]

    pre_chain: list[structlog.types.Processor] = [
        merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if settings.log_format == "json":
        render: list[structlog.types.Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        render = [structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *render],
            foreign_pre_chain=pre_chain,
        )
    )
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for name in TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    clear_contextvars()
    bind_contextvars(backend=settings.store_backend)
    if settings.prefix:
        bind_contextvars(namespace=settings.prefix)
