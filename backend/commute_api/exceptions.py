"""
Commute Match Backend — Application Error Hierarchy
====================================================

What:  A single user-facing error kind, `AppError`, carrying a message and an
       HTTP status code, plus named subclasses that fix the status.
How:   Services raise these; the global handler registered in main.py reads
       `status_code` and serializes the `{success, result, message}` envelope.
Who:   Raised by services, dependencies and repositories; caught by handlers.

Exception Hierarchy:
    AppError (base, status_code defaults to 500)
    ├── ValidationError        → 400 Bad Request
    ├── AuthenticationError    → 401 Unauthorized
    ├── PermissionDeniedError  → 403 Forbidden
    ├── NotFoundError          → 404 Not Found
    └── DatabaseError          → 500 Internal Server Error

    `AppError("...", 400)` and `ValidationError("...")` are interchangeable from
    the handler's point of view; the subclasses exist so callers and tests can
    catch a specific kind.
"""

from typing import Any, Dict, Optional


class AppError(Exception):
    """
    Base exception for all Commute Match application errors.

    Attributes:
        message:      User-facing error description (returned in the envelope)
        status_code:  HTTP status the handler responds with
        context:      Additional debug info (logged but NOT returned to client)
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.context = context or {}
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, {self.status_code})"


class ValidationError(AppError):
    """
    Raised when client input fails a business rule.

    HTTP: 400 Bad Request. Used for missing/blank fields, invalid enum values,
    malformed identifiers and duplicate registrations.
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(AppError):
    """Missing/invalid bearer token or bad credentials (401)."""

    status_code = 401

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PermissionDeniedError(AppError):
    """Authenticated caller may not perform the action (403)."""

    status_code = 403

    def __init__(
        self,
        message: str = "Insufficient permissions",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(AppError):
    """
    Raised when a requested resource does not exist.

    HTTP: 404 Not Found. Repositories return None for missing rows; services
    convert that None into this error. Owner-scoped mutations use the same
    error for "missing" and "not yours" so existence is not leaked.
    """

    status_code = 404

    def __init__(
        self,
        message: str = "The requested resource was not found",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(AppError):
    """
    Raised when a persistence operation fails unexpectedly.

    The message returned to the client is always generic; the detailed cause
    goes into `context` and the server log only.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
