"""
Service error taxonomy.

Services raise these; the HTTP layer renders them with a stable status code.
"""
from typing import Any, Dict, Optional

from fastapi import status


class ServiceError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    kind = "internal_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        payload = {"success": False, "error": self.kind, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    kind = "not_found"


class ValidationError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    kind = "validation_error"


class AuthenticationError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    kind = "unauthenticated"


class ForbiddenError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    kind = "forbidden"


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    kind = "conflict"


class RateLimitedError(ServiceError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    kind = "rate_limited"

    def __init__(self, message: str, retry_after: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.retry_after = retry_after


class UnavailableError(ServiceError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    kind = "unavailable"
