"""Classify failed HTTP exchanges into one typed error.

Every failed exchange maps to exactly one of:

- TransportError: no response was received (connect, TLS, timeout)
- ApiError: non-2xx status with a parseable API error envelope
- MalformedErrorBodyError: non-2xx status with any other body
- MalformedSuccessBodyError: 2xx status whose body fails the expected schema

An unparseable error body is kept distinct from a real API error; the
first usually means schema drift or an intermediary, the second a
documented failure.
"""

from __future__ import annotations

from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..models.errors import ErrorResponse
from .exceptions import (
    ApiError,
    MalformedErrorBodyError,
    MalformedSuccessBodyError,
    TransportError,
)

ModelT = TypeVar("ModelT", bound=BaseModel)


def classify_transport_error(exc: Exception) -> TransportError:
    """Wrap a fault raised below the HTTP layer.

    The caller raises the result ``from exc`` to keep the original fault.
    """
    if isinstance(exc, httpx.TimeoutException):
        return TransportError(f"Request timed out: {exc}")
    if isinstance(exc, httpx.ConnectError):
        return TransportError(f"Failed to connect to API: {exc}")
    return TransportError(f"Request failed: {exc}")


def classify_error_response(
    status_code: int, body: bytes
) -> ApiError | MalformedErrorBodyError:
    """Classify a non-2xx response body.

    Args:
        status_code: HTTP status of the response
        body: Full response body as received

    Returns:
        ApiError when the body is an error envelope, MalformedErrorBodyError
        otherwise (with the validation fault attached as ``__cause__``)
    """
    try:
        envelope = ErrorResponse.model_validate_json(body)
    except ValidationError as exc:
        error = MalformedErrorBodyError(status_code, body, str(exc))
        error.__cause__ = exc
        return error
    return ApiError(envelope, status_code=status_code)


def parse_success_body(body: bytes, schema: type[ModelT]) -> ModelT:
    """Validate a 2xx response body against ``schema``.

    Raises:
        MalformedSuccessBodyError: If the body does not match the schema
    """
    try:
        return schema.model_validate_json(body)
    except ValidationError as exc:
        raise MalformedSuccessBodyError(body, str(exc)) from exc
