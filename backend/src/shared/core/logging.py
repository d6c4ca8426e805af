"""
Logging Configuration

Structured logging setup using structlog.

Log Output:
===========
Development:
    2024-01-15 10:30:00 [info     ] Bundle routed                  item_id=42 status=pending

Production (JSON):
    {"timestamp": "2024-01-15T10:30:00", "level": "info", "event": "Bundle routed", "item_id": 42}

Usage:
======
    from src.shared.core.logging import logger, get_logger, log_context

    logger.info("Bundle routed", item_id=item.id, status=item.status.value)

    ingest_logger = get_logger("ingestion")
    ingest_logger.warning("Asset skipped", url=asset_url, error=str(e))

    # Bind values to every subsequent log line of the current request
    log_context(request_id=request_id, user_id=user_id)
"""

import logging
import sys
from typing import Any

import structlog
from structlog.typing import Processor

from src.config.settings import settings


def setup_logging() -> None:
    """
    Configure structured logging for the application.

    Development gets coloured console output, every other environment
    gets JSON lines. Called once when this module is imported.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.LOG_LEVEL.upper()),
    )

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.is_development:
        processors: list[Processor] = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name, defaults to module name if not specified

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def log_context(**kwargs: Any) -> None:
    """
    Add context variables to all subsequent log calls.

    Context lives in contextvars, so it is scoped to the current task.

    Args:
        **kwargs: Key-value pairs to add to log context
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_log_context() -> None:
    """Clear all context variables bound with log_context()."""
    structlog.contextvars.clear_contextvars()


# Initialize logging on module import
setup_logging()

# Default logger instance for convenient import
logger = get_logger("playhub")
