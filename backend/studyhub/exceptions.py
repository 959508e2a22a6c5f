"""
StudyHub Backend - Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for each error scenario.
Why:   Services raise these instead of building HTTP responses; the global
       handlers in main.py turn them into the uniform JSON error body
       `{"success": false, "error": ..., "message": ...}`.
How:   Each exception carries a user-facing message and an optional context
       dict. Context is logged server-side and never returned to the client.

Exception Hierarchy:
    StudyHubError (base)
    ├── ValidationError            → 400 Bad Request
    │   ├── MissingFieldsError
    │   └── InvalidPriceError
    ├── ConflictError              → 400 Bad Request
    │   ├── AlreadyEnrolledError
    │   └── InvalidSignatureError
    ├── AuthenticationError        → 401 Unauthorized
    ├── PermissionDeniedError      → 403 Forbidden
    ├── NotFoundError              → 404 Not Found
    ├── ExternalServiceError       → 500 Internal Server Error
    └── DatabaseError              → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class StudyHubError(Exception):
    """
    Base exception for all StudyHub application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(StudyHubError):
    """
    Raised when client input fails validation.

    When:  Empty course list, missing display picture, malformed ids.
    HTTP:  400 Bad Request
    """

    status_code = 400
    error_code = "validation_error"

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


class MissingFieldsError(ValidationError):
    """One or more required request fields were absent or empty."""

    def __init__(
        self,
        message: str = "Missing required fields",
        fields: Optional[list] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if fields:
            ctx["missing"] = list(fields)
        super().__init__(message=message, context=ctx)
        self.fields = list(fields or [])


class InvalidPriceError(ValidationError):
    """A course in the cart has no price set, so no order can be built."""

    def __init__(self, course_id: Optional[str] = None):
        ctx = {"course_id": course_id} if course_id else {}
        super().__init__(message="Course has no price", context=ctx)


class ConflictError(StudyHubError):
    """
    Raised when the request conflicts with current state.

    HTTP:  400 Bad Request (the frontend only distinguishes 400/404/500)
    """

    status_code = 400
    error_code = "conflict"

    def __init__(
        self,
        message: str = "Request conflicts with the current state",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AlreadyEnrolledError(ConflictError):
    """The user is already on the roster of one of the requested courses."""

    def __init__(self, course_id: Optional[str] = None):
        ctx = {"course_id": course_id} if course_id else {}
        super().__init__(message="Already Enrolled in a course", context=ctx)


class InvalidSignatureError(ConflictError):
    """The gateway signature does not match HMAC-SHA256(order_id|payment_id)."""

    def __init__(self, order_id: Optional[str] = None):
        ctx = {"order_id": order_id} if order_id else {}
        super().__init__(message="Invalid signature", context=ctx)


class AuthenticationError(StudyHubError):
    """Missing, expired or malformed bearer token."""

    status_code = 401
    error_code = "unauthorized"

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PermissionDeniedError(StudyHubError):
    """The caller is authenticated but their account type may not use this route."""

    status_code = 403
    error_code = "forbidden"

    def __init__(
        self,
        message: str = "You are not allowed to access this resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(StudyHubError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows; services convert that None
    into this exception so the handler can answer 404.
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"{resource} not found"
            if resource_id:
                message = f"{resource} not found: {resource_id}"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ExternalServiceError(StudyHubError):
    """
    Raised when the payment gateway, image host or mail relay fails.

    HTTP:  500. There is no transient/permanent distinction at this level;
    retries, where they exist, have already been spent by the time this is
    raised.
    """

    status_code = 500
    error_code = "external_service_error"

    def __init__(
        self,
        service: str,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["service"] = service
        super().__init__(message=message or f"{service} request failed", context=ctx)
        self.service = service


class DatabaseError(StudyHubError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic; the original error
    type goes into context for the logs.
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
