"""
Core Module

Provides core functionality shared across the application:
- Structured logging
- Typed exceptions

Usage:
======
    from src.shared.core.logging import logger, get_logger
    from src.shared.core.exceptions import PlayhubException, NotFoundError

    logger.info("Starting import", user_id=user_id)
"""

from src.shared.core.logging import (
    logger,
    get_logger,
    log_context,
    clear_log_context,
)
from src.shared.core.exceptions import (
    ErrorKind,
    PlayhubException,
    InputError,
    ValidationError,
    ConflictError,
    NotFoundError,
    UpstreamError,
    UpstreamNotFoundError,
    StorageError,
    AuthenticationError,
    AuthorizationError,
    RateLimitError,
)

__all__ = [
    # Logging
    "logger",
    "get_logger",
    "log_context",
    "clear_log_context",
    # Exceptions
    "ErrorKind",
    "PlayhubException",
    "InputError",
    "ValidationError",
    "ConflictError",
    "NotFoundError",
    "UpstreamError",
    "UpstreamNotFoundError",
    "StorageError",
    "AuthenticationError",
    "AuthorizationError",
    "RateLimitError",
]
