"""Structured logging configuration using structlog.

Console output in development, one JSON object per line elsewhere. Entries
emitted while serving a request carry the request_id bound by the request
middleware and, once the caller is resolved, its profile_id.

Usage:
    from marketplace_api.logging_config import setup_logging, get_logger
    setup_logging(log_level="DEBUG", json_logs=False)
    logger = get_logger(__name__)
    logger.info("payment.job_paid", job_id=7, amount=Decimal("200.00"))
"""

from __future__ import annotations

import logging
import sys
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger

# Loggers that stay at WARNING unless explicitly asked for.
_QUIET_LOGGERS = ("uvicorn.access", "aiosqlite", "asyncio")


def _money_as_text(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    """Render Decimal values (balances, prices, totals) as plain strings."""
    for key, value in event_dict.items():
        if isinstance(value, Decimal):
            event_dict[key] = str(value)
    return event_dict


def setup_logging(
    log_level: str = "DEBUG",
    json_logs: bool = False,
    echo_sql: bool = False,
) -> None:
    """Configure structlog on top of the stdlib root logger.

    Args:
        log_level: Standard Python log level name.
        json_logs: Render JSON instead of colored console lines.
        echo_sql: Keep sqlalchemy.engine at INFO so emitted SQL is visible.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _money_as_text,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    renderer: structlog.types.Processor
    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.DEBUG))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if echo_sql else logging.WARNING
    )


def bind_caller(profile_id: int) -> None:
    """Attach the calling profile to every log entry for the rest of the request."""
    structlog.contextvars.bind_contextvars(profile_id=profile_id)


def get_logger(name: str | None = None, **initial_values: Any) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, optionally pre-bound with key/value pairs."""
    return structlog.get_logger(name, **initial_values)
