# 📄 File: app/shared/core/exceptions.py
# 🧭 Purpose (Layman Explanation):
# This file defines all the special error types our Plant Care app uses to communicate
# what went wrong (bad input, missing plant, full photo quota, storage outage) in a clear way.
# 🧪 Purpose (Technical Summary):
# Exception hierarchy rooted at PlantCareException. Each class fixes its HTTP status and
# machine-readable error code; instances carry a message and a JSON-safe details dict
# rendered by the handlers in app.main.
# 🔗 Dependencies:
# FastAPI status constants, typing, app.shared.core.validation (FieldError)
# 🔄 Connected Modules / Calls From:
# Domain services, repository implementations, app.main exception handlers,
# app.api.middleware.rate_limiting

from typing import Any, Dict, Iterable, List, Optional

from fastapi import status

from app.shared.core.validation import FieldError


def _compact(**values: Any) -> Dict[str, Any]:
    """Details dict without the entries that were not provided."""
    return {key: value for key, value in values.items() if value is not None}


class PlantCareException(Exception):
    """
    Base exception class for Plant Care Application.

    Subclasses set ``status_code`` and ``error_code`` as class attributes;
    both can still be overridden per instance.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_SERVER_ERROR"
    default_message: str = "An internal server error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        self.message = message or self.default_message
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Code, message and details as rendered inside the ``error`` envelope."""
        return {
            "code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


# =============================================================================
# AUTHENTICATION & AUTHORIZATION
# =============================================================================

class AuthenticationError(PlantCareException):
    """Bearer token missing or rejected by the identity provider."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "AUTHENTICATION_ERROR"
    default_message = "Authentication failed"


class AuthorizationError(PlantCareException):
    """
    Caller touched an object key outside its own namespace.
    """

    status_code = status.HTTP_403_FORBIDDEN
    error_code = "AUTHORIZATION_ERROR"
    default_message = "Access denied"

    def __init__(self, message: Optional[str] = None, resource_type: Optional[str] = None):
        super().__init__(message, details=_compact(resource_type=resource_type))


# =============================================================================
# CLIENT INPUT
# =============================================================================

class ValidationError(PlantCareException):
    """
    Invalid client input.

    Carries every field error found by the validation engine so clients can
    render all problems at once; they are exposed as ``details["errors"]``.
    """

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error_code = "VALIDATION_ERROR"
    default_message = "Validation failed"

    def __init__(
        self,
        message: Optional[str] = None,
        errors: Optional[Iterable[FieldError]] = None,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        self.errors: List[FieldError] = list(errors or [])
        details = dict(details or {})
        if self.errors:
            details["errors"] = [error.to_dict() for error in self.errors]
        super().__init__(message, details=details, error_code=error_code)

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(errors=[FieldError(field, message)])


class QuotaExceededError(ValidationError):
    """Per-user cap (plants, uploads) reached; details hold the limit and current usage."""

    error_code = "QUOTA_EXCEEDED"

    def __init__(self, message: str, limit: int, current: int):
        super().__init__(message, details={"limit": limit, "current": current})


class NotFoundError(PlantCareException):
    """
    Requested resource does not exist for the caller.
    Resources owned by another user are reported the same way.
    """

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"
    default_message = "Resource not found"

    def __init__(self, message: Optional[str] = None, resource_type: Optional[str] = None):
        super().__init__(message, details=_compact(resource_type=resource_type))


class PlantNotFoundError(NotFoundError):
    def __init__(self, message: str = "Plant not found"):
        super().__init__(message, resource_type="plant")


class ConflictError(PlantCareException):
    """Write collided with a uniqueness rule (plant slug, one config per user)."""

    status_code = status.HTTP_409_CONFLICT
    error_code = "CONFLICT"
    default_message = "Resource conflict"

    def __init__(self, message: Optional[str] = None, field: Optional[str] = None):
        super().__init__(message, details=_compact(field=field))


class RateLimitError(PlantCareException):
    """
    Caller is over its request budget.

    ``retry_after`` (seconds) is sent back as the ``Retry-After`` header.
    """

    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    error_code = "RATE_LIMIT_EXCEEDED"
    default_message = "Too many requests"

    def __init__(
        self,
        message: Optional[str] = None,
        limit: Optional[int] = None,
        window: Optional[str] = None,
        retry_after: Optional[int] = None
    ):
        self.retry_after = retry_after
        super().__init__(
            message,
            details=_compact(limit=limit, window=window, retry_after=retry_after),
        )


# =============================================================================
# BACKENDS
# =============================================================================

class StoreUnavailableError(PlantCareException):
    """
    Database could not serve the request.

    The driver error is logged by the raiser; clients only see the generic message.
    """

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code = "STORE_UNAVAILABLE"
    default_message = "Storage backend unavailable"

    def __init__(self, message: Optional[str] = None, operation: Optional[str] = None):
        super().__init__(message, details=_compact(operation=operation))


class ObjectStoreUnavailableError(PlantCareException):
    """S3 compatible object store call failed."""

    status_code = status.HTTP_502_BAD_GATEWAY
    error_code = "OBJECT_STORE_UNAVAILABLE"
    default_message = "Object storage unavailable"

    def __init__(self, message: Optional[str] = None, operation: Optional[str] = None):
        super().__init__(message, details=_compact(operation=operation))


class RequestTimeoutError(PlantCareException):
    """A store round trip exceeded REQUEST_TIMEOUT_SECONDS."""

    status_code = status.HTTP_504_GATEWAY_TIMEOUT
    error_code = "REQUEST_TIMEOUT"
    default_message = "Request timed out"

    def __init__(
        self,
        message: Optional[str] = None,
        operation: Optional[str] = None,
        timeout_seconds: Optional[float] = None
    ):
        super().__init__(
            message,
            details=_compact(operation=operation, timeout_seconds=timeout_seconds),
        )
