"""
Competence Gateway - Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for every outcome a request can fail with.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by controllers, the DAO layer and middleware; caught by global handlers.

Exception Hierarchy:
    GatewayError (base)
    ├── ValidationError             → 400 Bad Request (payload rejected)
    │   └── InvalidJSONError        → 400 Bad Request (body is not JSON)
    ├── NotFoundError               → 404 Not Found
    ├── RateLimitExceededError      → 429 Too Many Requests
    ├── DownstreamError             → 502 Bad Gateway (API answered badly)
    ├── DownstreamUnavailableError  → 503 Service Unavailable (retries exhausted)
    └── CircuitBreakerOpenError     → 503 Service Unavailable (circuit open)
"""

from typing import Any, Dict, Optional

from competence_gateway import messages


class GatewayError(Exception):
    """
    Base exception for all gateway errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only for 4xx errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(GatewayError):
    """
    Raised when an inbound payload is not an acceptable JSON object.

    When:    Body omitted, body is a list, a required field is missing or blank,
             a field value is out of range, or the downstream API rejected
             the object with 400.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = messages.INVALID_JSON_OBJECT,
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class InvalidJSONError(ValidationError):
    """Raised when the request body cannot be decoded as JSON at all."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message=messages.INVALID_JSON, context=context)


class NotFoundError(GatewayError):
    """
    Raised when the downstream API reports that an item does not exist.

    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=messages.NO_SUCH_ITEM, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class DownstreamError(GatewayError):
    """
    Raised when the downstream API answers with a status we cannot map to success.

    When:    500 from the API, an unexpected status code, or a malformed body.
    HTTP:    502 Bad Gateway

    The downstream status code and URL are kept in context for the logs.
    """

    def __init__(
        self,
        message: str = messages.INVALID_RESPONSE_CODE,
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["downstream_status"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code


class DownstreamUnavailableError(GatewayError):
    """
    Raised when the downstream API could not be reached after all retries.

    When:    Connection refused, DNS failure, or timeouts on every attempt.
    HTTP:    503 Service Unavailable
    """

    def __init__(
        self,
        message: str = "The competence API is temporarily unavailable. Please try again later.",
        retry_after: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if retry_after:
            ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class CircuitBreakerOpenError(GatewayError):
    """
    Raised when the circuit breaker guarding the downstream API is OPEN.

    How circuit breaker works:
        CLOSED (normal) → transport failures increment counter
        → After N failures → OPEN (reject all calls for the recovery timeout)
        → After the timeout → HALF-OPEN (allow one test call)
        → Test succeeds → CLOSED; test fails → OPEN again
    HTTP:    503 Service Unavailable
    """

    def __init__(
        self,
        recovery_time: int = 30,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"The competence API is temporarily unavailable due to repeated failures. "
            f"Calls resume in approximately {recovery_time} seconds."
        )
        ctx = context or {}
        ctx["recovery_time"] = recovery_time
        super().__init__(message=message, context=ctx)
        self.recovery_time = recovery_time


class RateLimitExceededError(GatewayError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
