"""Error envelope models returned by the Anthropic API.

Provides the error type enum with its HTTP status code mapping and the
error response structure the server sends on failure.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel


class ErrorType(str, Enum):
    """Anthropic API error types with corresponding HTTP status codes.

    Maps to official error types:
    - invalid_request_error (400): Invalid request parameters
    - authentication_error (401): Invalid or missing API key
    - permission_error (403): API key lacks permission
    - not_found_error (404): Resource not found
    - request_too_large (413): Request exceeds the maximum size
    - rate_limit_error (429): Rate limit exceeded
    - api_error (500): Internal server error
    - overloaded_error (529): Service overloaded
    """

    INVALID_REQUEST = "invalid_request_error"
    AUTHENTICATION = "authentication_error"
    PERMISSION = "permission_error"
    NOT_FOUND = "not_found_error"
    REQUEST_TOO_LARGE = "request_too_large"
    RATE_LIMIT = "rate_limit_error"
    API = "api_error"
    OVERLOADED = "overloaded_error"

    @property
    def status_code(self) -> int:
        """Get HTTP status code for this error type."""
        return {
            ErrorType.INVALID_REQUEST: 400,
            ErrorType.AUTHENTICATION: 401,
            ErrorType.PERMISSION: 403,
            ErrorType.NOT_FOUND: 404,
            ErrorType.REQUEST_TOO_LARGE: 413,
            ErrorType.RATE_LIMIT: 429,
            ErrorType.API: 500,
            ErrorType.OVERLOADED: 529,
        }[self]

    @classmethod
    def lookup(cls, value: str) -> ErrorType | None:
        """Return the known error type for ``value``, or None for new kinds."""
        try:
            return cls(value)
        except ValueError:
            return None


class ErrorDetail(BaseModel):
    """Error detail object.

    ``type`` stays a plain string so kinds added by the server still parse.
    """

    type: str
    message: str

    @property
    def kind(self) -> ErrorType | None:
        return ErrorType.lookup(self.type)


class ErrorResponse(BaseModel):
    """Error response body."""

    type: Literal["error"] = "error"
    error: ErrorDetail
