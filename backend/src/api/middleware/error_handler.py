"""
Error Handler Middleware

Global exception handling for the API.

Exceptions carry an ErrorKind, never an HTTP status. This module is the
only place the two are connected.

Error Response Format:
======================
    {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Bundle failed validation",
            "details": {"violations": ["Blocked file type: server.php"]}
        }
    }

Exception Handling:
===================
1. PlayhubException subclasses → status from STATUS_BY_KIND, body from to_dict()
2. Request schema errors (FastAPI / Pydantic) → 400 with validation details
3. SQLAlchemy connectivity errors → 503 StorageError
4. Other exceptions → 500 with generic message (details hidden)

Usage:
======
    from src.api.middleware.error_handler import setup_exception_handlers

    app = FastAPI()
    setup_exception_handlers(app)
"""

from types import MappingProxyType

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.exc import InterfaceError, OperationalError

from src.shared.core.exceptions import ErrorKind, PlayhubException, StorageError
from src.shared.core.logging import logger


STATUS_BY_KIND = MappingProxyType({
    ErrorKind.INPUT: 400,
    ErrorKind.VALIDATION: 422,
    ErrorKind.CONFLICT: 409,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UPSTREAM: 502,
    ErrorKind.STORAGE: 503,
    ErrorKind.AUTHENTICATION: 401,
    ErrorKind.AUTHORIZATION: 403,
    ErrorKind.RATE_LIMIT: 429,
    ErrorKind.INTERNAL: 500,
})


def status_for(exc: PlayhubException) -> int:
    """HTTP status code for an application exception."""
    return STATUS_BY_KIND.get(exc.kind, 500)


def _error_response(exc: PlayhubException) -> JSONResponse:
    headers = None
    retry_after = exc.details.get("retry_after_seconds")
    if exc.kind == ErrorKind.RATE_LIMIT and retry_after:
        headers = {"Retry-After": str(retry_after)}
    return JSONResponse(
        status_code=status_for(exc),
        content=exc.to_dict(),
        headers=headers,
    )


def _schema_error_response(errors: list) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "error": {
                "code": "INPUT_ERROR",
                "message": "Request validation failed",
                "details": {"errors": jsonable_encoder(errors)},
            }
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Set up global exception handlers.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(PlayhubException)
    async def playhub_exception_handler(
        request: Request,
        exc: PlayhubException,
    ) -> JSONResponse:
        """Handle Playhub-specific exceptions."""
        logger.warning(
            "Application error",
            kind=exc.kind.value,
            error_code=exc.error_code,
            message=exc.message,
            path=request.url.path,
        )
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Request body, query or form did not match the expected schema."""
        logger.warning("Request validation error", errors=len(exc.errors()), path=request.url.path)
        return _schema_error_response(exc.errors())

    @app.exception_handler(SchemaValidationError)
    async def schema_validation_handler(
        request: Request,
        exc: SchemaValidationError,
    ) -> JSONResponse:
        logger.warning("Validation error", errors=len(exc.errors()), path=request.url.path)
        return _schema_error_response(exc.errors())

    @app.exception_handler(OperationalError)
    @app.exception_handler(InterfaceError)
    async def storage_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """The database is unreachable; fatal for this request, not retried."""
        logger.error(
            "Storage unavailable",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        return _error_response(StorageError())

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """
        Handle unexpected exceptions.

        Full error details are logged but not exposed to clients.
        """
        logger.error(
            "Unexpected error",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                }
            },
        )
