"""
API Handlers

Route handlers for the Playhub API.

Handlers follow the pattern:
- Parse HTTP requests
- Call service methods
- Format HTTP responses

All business logic is delegated to the service layer, and errors are
turned into responses by the error handler middleware.
"""

from src.api.handlers import (
    catalog_handler,
    discovery_handler,
    health_handler,
    image_handler,
    moderation_handler,
    submission_handler,
)

__all__ = [
    "catalog_handler",
    "discovery_handler",
    "health_handler",
    "image_handler",
    "moderation_handler",
    "submission_handler",
]
