"""Core infrastructure for anthropic-lite.

This package contains shared infrastructure components:
- config: Settings and configuration
- exceptions: AnthropicError hierarchy
- structured_logging: structlog setup
- metrics: Prometheus metrics
"""

from .config import (
    Settings,
    get_settings,
    reload_settings,
    settings,
)
from .exceptions import (
    AnthropicError,
    ApiError,
    ApiVersionError,
    ClientConfigError,
    InvalidEncodingError,
    MalformedErrorBodyError,
    MalformedEventError,
    MalformedSuccessBodyError,
    ModelNotSupportedError,
    TransportError,
)
from .metrics import (
    API_CALLS_TOTAL,
    ERRORS_TOTAL,
    STREAM_EVENTS_TOTAL,
    STREAMS_IN_PROGRESS,
    TOKEN_USAGE,
    get_metrics,
    init_client_info,
    record_api_call,
    record_error,
    record_stream_completion,
    record_stream_event,
    record_token_usage,
)
from .structured_logging import (
    bind_context,
    clear_context,
    configure_structured_logging,
    get_logger,
)

__all__ = [
    # Config
    "Settings",
    "settings",
    "get_settings",
    "reload_settings",
    # Exceptions
    "AnthropicError",
    "ApiError",
    "ApiVersionError",
    "ClientConfigError",
    "InvalidEncodingError",
    "MalformedErrorBodyError",
    "MalformedEventError",
    "MalformedSuccessBodyError",
    "ModelNotSupportedError",
    "TransportError",
    # Metrics
    "init_client_info",
    "get_metrics",
    "record_api_call",
    "record_error",
    "record_token_usage",
    "record_stream_event",
    "record_stream_completion",
    "API_CALLS_TOTAL",
    "ERRORS_TOTAL",
    "STREAM_EVENTS_TOTAL",
    "STREAMS_IN_PROGRESS",
    "TOKEN_USAGE",
    # Logging
    "configure_structured_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
