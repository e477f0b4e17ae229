"""
MedTrack Backend: Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the error scenarios the API knows about.
Why:   Targeted handling with the right HTTP status code and a user-friendly
       message, without leaking internal details to the client.
How:   Each exception carries a message and an optional context dict.
       Global handlers (registered in main.py) turn them into JSON responses.
Who:   Raised by services; caught by global handlers.

Exception Hierarchy:
    MedTrackError (base)         → 500 Internal Server Error
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── NotFoundError            → 404 Not Found
    └── DatabaseError            → 500 Internal Server Error

Schema-level problems (missing fields, negative counts, malformed dates) never
reach this hierarchy: FastAPI rejects them with 422 before a service runs.
"""

from typing import Any, Dict, Optional


class MedTrackError(Exception):
    """
    Base exception for all MedTrack application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only where the handler opts in)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(MedTrackError):
    """
    Raised when client input breaks a business rule.

    When:    The expiry date precedes the purchase date.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Expiry date 2024-01-01 is before purchase date 2024-02-01",
            "details": {"field": "expiry_date"}
        }
    """

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


class NotFoundError(MedTrackError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows. The service layer converts that
    into NotFoundError so the route stays free of lookups and status codes.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(MedTrackError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic. Details such as the
    original exception type stay in the server log.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

