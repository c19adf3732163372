"""Exception hierarchy for anthropic-lite.

Every failure surfaced by the client or a message stream is an
``AnthropicError``. The underlying transport or parse fault, when there is
one, is chained as ``__cause__``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models.errors import ErrorResponse, ErrorType


class AnthropicError(Exception):
    """Base exception for anthropic-lite."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r})"


# ============================================================================
# Exchange errors
# ============================================================================


class TransportError(AnthropicError):
    """The exchange never completed (connect, TLS, timeout, protocol fault)."""


class ApiError(AnthropicError):
    """The server returned a documented API error envelope.

    Raised both for non-2xx responses and for ``error`` events received in
    the middle of a stream (``status_code`` is then the stream's 2xx status,
    or None when unknown).
    """

    def __init__(self, envelope: ErrorResponse, status_code: int | None = None):
        self.envelope = envelope
        self.status_code = status_code
        super().__init__(f"{envelope.error.type}: {envelope.error.message}")

    @property
    def error_type(self) -> str:
        return self.envelope.error.type

    @property
    def kind(self) -> ErrorType | None:
        return self.envelope.error.kind

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"error_type={self.error_type!r}, "
            f"message={self.envelope.error.message!r}, "
            f"status_code={self.status_code})"
        )


class MalformedErrorBodyError(AnthropicError):
    """Non-2xx status whose body is not an API error envelope."""

    def __init__(self, status_code: int, body: bytes, detail: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code} with unparseable error body: {detail}")


class MalformedSuccessBodyError(AnthropicError):
    """2xx status whose body does not match the expected schema."""

    def __init__(self, body: bytes, detail: str):
        self.body = body
        super().__init__(f"Unparseable response body: {detail}")


# ============================================================================
# Stream errors
# ============================================================================


class MalformedEventError(AnthropicError):
    """A stream event with a known type failed schema validation."""

    def __init__(self, data: str, detail: str, event_type: str | None = None):
        self.data = data
        self.event_type = event_type
        super().__init__(f"Malformed {event_type or 'stream'} event: {detail}")


class InvalidEncodingError(AnthropicError):
    """The event stream contained bytes that are not valid UTF-8."""

    def __init__(self, raw: bytes, detail: str):
        self.raw = raw
        super().__init__(f"Event stream is not valid UTF-8: {detail}")


# ============================================================================
# Configuration errors
# ============================================================================


class ClientConfigError(AnthropicError):
    """Invalid client configuration (header value, base URL)."""


class ModelNotSupportedError(AnthropicError):
    """Unknown model identifier."""

    def __init__(self, model: str):
        self.model = model
        super().__init__(f"Model not supported: {model}")


class ApiVersionError(AnthropicError):
    """Unknown API version."""

    def __init__(self, version: str):
        self.version = version
        super().__init__(f"Invalid API version: {version}")
