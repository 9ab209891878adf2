"""
Naviga8 Backend - Custom Exception Hierarchy
==============================================

What:  Defines application-specific exceptions for different error scenarios.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services and routes; caught by global handlers.
When:  During request processing, always handled within the request that
       raised them. Nothing is retried.

Exception Hierarchy:
    NavigaError (base)
    ├── ValidationError       → 400 Bad Request (client can fix)
    ├── ConflictError         → 409 Conflict (route already saved)
    ├── NotFoundError         → 404 Not Found
    ├── ConfigurationError    → 500 Internal Server Error (missing secret)
    └── StoreError            → 500 Internal Server Error (generic message)
"""

from typing import Any, Dict, Optional


class NavigaError(Exception):
    """
    Base exception for all Naviga8 application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only for 400/409)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NavigaError):
    """
    Raised when client input is missing or malformed.

    When:    userId, origin or destination absent; address empty after trimming;
             request body that does not match the schema.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "All fields are required",
            "details": {"missing": ["destination"]}
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


class ConflictError(NavigaError):
    """
    Raised when a write would duplicate an existing record.

    When:    The same (userId, origin, destination) route is saved twice.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "Route already saved!",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(NavigaError):
    """
    Raised when a requested resource does not exist.

    When:    Deleting a route that is absent or owned by another userId;
             requesting a static page that is not on disk.
    HTTP:    404 Not Found

    A route owned by someone else is reported exactly like a missing one,
    so the response does not reveal which ids exist.
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


class ConfigurationError(NavigaError):
    """
    Raised when a required setting is missing at request time.

    When:    GET /api/google-key while GOOGLE_MAPS_API_KEY is blank.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "API key not configured",
        setting: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if setting:
            ctx["setting"] = setting
        super().__init__(message=message, context=ctx)
        self.setting = setting


class StoreError(NavigaError):
    """
    Raised when a database operation fails unexpectedly.

    When:    Connection lost mid-query, driver error, unexpected constraint.
    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic.
        Driver messages, SQL and constraint names go to the server log only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
