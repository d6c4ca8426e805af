"""
Custom Exceptions

Application-specific exceptions carrying a machine-readable error kind.

Exceptions never know about HTTP. The error handler middleware maps each
ErrorKind to a response status code at the API boundary.

Exception Hierarchy:
====================
    PlayhubException (base)
       │
       ├── InputError              ← Missing field, malformed reference, agreement not accepted
       ├── ValidationError         ← Bundle rejected by the validation gate
       ├── ConflictError           ← Duplicate source identity, invalid status transition
       ├── NotFoundError           ← Unknown id or slug
       ├── UpstreamError           ← Remote fetch timeout, failure or oversized response
       │      └── UpstreamNotFoundError
       ├── StorageError            ← Persistence layer unavailable
       ├── AuthenticationError     ← Missing or invalid token
       ├── AuthorizationError      ← Authenticated but not permitted
       └── RateLimitError          ← Per-user quota exhausted

Usage:
======
    from src.shared.core.exceptions import NotFoundError, ValidationError

    raise NotFoundError("Content item", item_id)
    # Results in: {"error": {"code": "NOT_FOUND", "message": "Content item with id '7' not found"}}

    raise ValidationError(violations=["Blocked file type: server.php"])

Exception Handling:
===================
    Exceptions are caught by the error handler middleware and converted to JSON:
    {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Bundle failed validation",
            "details": {"violations": ["Blocked file type: server.php"]}
        }
    }
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Machine-readable error category."""

    INPUT = "input"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    UPSTREAM = "upstream"
    STORAGE = "storage"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RATE_LIMIT = "rate_limit"
    INTERNAL = "internal"


class PlayhubException(Exception):
    """
    Base exception for all Playhub application errors.

    All custom exceptions inherit from this class, providing:
    - An ErrorKind used by the API layer to pick a status code
    - Error code for programmatic handling
    - Optional details dictionary
    - Consistent JSON serialization

    Attributes:
        message: Human-readable error message
        kind: Error category
        error_code: Machine-readable error code
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.INTERNAL,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.kind = kind
        self.error_code = error_code or "INTERNAL_ERROR"
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Returns:
            Dictionary with error details for JSON response
        """
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
            }
        }


# ═══════════════════════════════════════════════════════════════════════════════
# CLIENT INPUT ERRORS
# ═══════════════════════════════════════════════════════════════════════════════


class InputError(PlayhubException):
    """
    User-correctable input problem.

    Raised before any bundle is created, so there is nothing to clean up.
    """

    def __init__(
        self,
        message: str = "Invalid input",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            kind=ErrorKind.INPUT,
            error_code="INPUT_ERROR",
            details=details,
        )


class ValidationError(PlayhubException):
    """
    Bundle rejected by the validation gate.

    Carries every violation found, not just the first one.

    Example:
        raise ValidationError(violations=["Missing index.html", "Blocked file: .env"])
    """

    def __init__(
        self,
        message: str = "Bundle failed validation",
        violations: Optional[list[str]] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.violations = list(violations or [])
        extra_details = details or {}
        if self.violations:
            extra_details["violations"] = self.violations
        super().__init__(
            message=message,
            kind=ErrorKind.VALIDATION,
            error_code="VALIDATION_ERROR",
            details=extra_details,
        )


class ConflictError(PlayhubException):
    """
    Resource conflict error.

    Raised when an operation conflicts with existing state. No state changes.

    Example:
        raise ConflictError('This source has already been imported as "Snake" (slug: snake-1a)')
    """

    def __init__(
        self,
        message: str = "Resource conflict",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            kind=ErrorKind.CONFLICT,
            error_code="CONFLICT",
            details=details,
        )


class NotFoundError(PlayhubException):
    """
    Resource not found error.

    Example:
        raise NotFoundError("Content item", item_id)
        # Message: "Content item with id '42' not found"
    """

    def __init__(
        self,
        resource: str,
        resource_id: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        message = f"{resource} not found"
        if resource_id is not None:
            message = f"{resource} with id '{resource_id}' not found"
        super().__init__(
            message=message,
            kind=ErrorKind.NOT_FOUND,
            error_code="NOT_FOUND",
            details=details,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# UPSTREAM & STORAGE ERRORS
# ═══════════════════════════════════════════════════════════════════════════════


class UpstreamError(PlayhubException):
    """
    Remote fetch failed, timed out, or returned an oversized response.

    Surfaced immediately; the only retry is the repository branch fallback.
    """

    def __init__(
        self,
        message: str = "Upstream request failed",
        url: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        extra_details = details or {}
        if url:
            extra_details["url"] = url
        super().__init__(
            message=message,
            kind=ErrorKind.UPSTREAM,
            error_code="UPSTREAM_ERROR",
            details=extra_details,
        )


class UpstreamNotFoundError(UpstreamError):
    """Remote answered 404."""

    def __init__(self, url: str) -> None:
        super().__init__(message=f"Remote resource not found: {url}", url=url)


class StorageError(PlayhubException):
    """
    Persistence layer unavailable.

    Fatal for the request and not retried.
    """

    def __init__(
        self,
        message: str = "Storage temporarily unavailable",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            kind=ErrorKind.STORAGE,
            error_code="STORAGE_UNAVAILABLE",
            details=details,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# AUTHENTICATION, AUTHORIZATION & QUOTAS
# ═══════════════════════════════════════════════════════════════════════════════


class AuthenticationError(PlayhubException):
    """
    Authentication failed.

    Raised when:
    - Missing or invalid credentials
    - Token expired or malformed
    """

    def __init__(
        self,
        message: str = "Authentication failed",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            kind=ErrorKind.AUTHENTICATION,
            error_code="AUTHENTICATION_ERROR",
            details=details,
        )


class AuthorizationError(PlayhubException):
    """Authenticated, but lacks the capability for this action."""

    def __init__(
        self,
        message: str = "Access denied",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            kind=ErrorKind.AUTHORIZATION,
            error_code="AUTHORIZATION_ERROR",
            details=details,
        )


class RateLimitError(PlayhubException):
    """
    Per-user quota exhausted.

    Includes retry_after hint for clients.
    """

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        extra_details = details or {}
        if retry_after:
            extra_details["retry_after_seconds"] = retry_after
        super().__init__(
            message=message,
            kind=ErrorKind.RATE_LIMIT,
            error_code="RATE_LIMIT_EXCEEDED",
            details=extra_details,
        )
