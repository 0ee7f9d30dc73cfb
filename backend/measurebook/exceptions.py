"""
Measurebook Backend - Custom Exception Hierarchy
==================================================

What:  Application-specific exceptions for the failure modes of the project API.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the matching HTTP status.
Who:   Raised by ProjectService and the project stores; caught by global handlers.

Exception Hierarchy:
    MeasurebookError (base)
    ├── ValidationError   → 400 Bad Request (client can fix)
    ├── NotFoundError     → 404 Not Found
    └── StoreError        → 500 Internal Server Error (cause reported to caller)

Malformed record trees are NOT an error: the normalizer degrades them to
empty lists and null sequence numbers instead of raising.
"""

from typing import Any, Dict, Optional


class MeasurebookError(Exception):
    """
    Base exception for all Measurebook application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info for logs and, where the handler allows, the response
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(MeasurebookError):
    """
    Raised when client input fails a business rule.

    When:    Creating a project without a usable name, or saving
             non-string details through the merge endpoint.
    HTTP:    400 Bad Request

    Schema-level problems (wrong JSON types, unparseable body) never reach
    this class; FastAPI rejects those with 422 before the service runs.
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


class NotFoundError(MeasurebookError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PUT/DELETE/save on a project id that is not in the collection.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class StoreError(MeasurebookError):
    """
    Raised when persisting the project collection fails.

    What:    The JSON document could not be written (disk full, permission
             denied, unserializable payload) even after retries.
    HTTP:    500 Internal Server Error

    Loads never raise this: an unreadable document is treated as an empty
    collection. Saves do, and the handler reports `cause` back to the caller.
    """

    def __init__(
        self,
        message: str = "Failed to persist projects",
        cause: Optional[BaseException] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if cause is not None:
            ctx["cause"] = str(cause) or type(cause).__name__
        super().__init__(message=message, context=ctx)
        self.cause = cause
