"""Prometheus metrics for anthropic-lite.

Client-side instrumentation of API calls and message streams. Metrics
live in the default prometheus_client registry, so an application that
already exposes /metrics picks them up without extra wiring.
"""

from __future__ import annotations

from prometheus_client import (
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    Info,
    generate_latest,
)

# Client info
CLIENT_INFO = Info(
    "anthropic_lite",
    "Information about the anthropic-lite client"
)

# API call metrics
API_CALLS_TOTAL = Counter(
    "anthropic_lite_api_calls_total",
    "Total number of calls to the Messages API",
    ["model", "streaming", "outcome"]
)

API_CALL_DURATION = Histogram(
    "anthropic_lite_api_call_duration_seconds",
    "Time until the Messages API response headers arrived",
    ["model", "streaming"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, float("inf"))
)

# Error metrics
ERRORS_TOTAL = Counter(
    "anthropic_lite_errors_total",
    "Total number of classified errors",
    ["error_type"]
)

TOKEN_USAGE = Counter(
    "anthropic_lite_tokens_total",
    "Total tokens reported by the API",
    ["type"]  # "input" or "output"
)

# Stream metrics
STREAM_EVENTS_TOTAL = Counter(
    "anthropic_lite_stream_events_total",
    "Total number of parsed stream events",
    ["event_type"]
)

STREAM_BYTES_TOTAL = Counter(
    "anthropic_lite_stream_bytes_total",
    "Total bytes received in streaming responses"
)

STREAM_DURATION = Histogram(
    "anthropic_lite_stream_duration_seconds",
    "Duration of streaming responses in seconds",
    ["status"],
    buckets=(1.0, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0, 600.0, float("inf"))
)

STREAMS_IN_PROGRESS = Gauge(
    "anthropic_lite_streams_in_progress",
    "Number of message streams currently open"
)


def init_client_info(version: str = "0.1.0") -> None:
    """Initialize client info metric."""
    CLIENT_INFO.info({
        "version": version,
        "name": "anthropic-lite",
    })


def record_api_call(model: str, streaming: bool, outcome: str, duration: float) -> None:
    """Record metrics for one Messages API call.

    Args:
        model: Model ID used
        streaming: Whether this was a streaming request
        outcome: "success" or the exception class name
        duration: Seconds until the response headers arrived
    """
    API_CALLS_TOTAL.labels(
        model=model,
        streaming=str(streaming).lower(),
        outcome=outcome,
    ).inc()
    API_CALL_DURATION.labels(model=model, streaming=str(streaming).lower()).observe(duration)


def record_error(error_type: str) -> None:
    """Count a classified error by exception class name."""
    ERRORS_TOTAL.labels(error_type=error_type).inc()


def record_token_usage(input_tokens: int, output_tokens: int) -> None:
    """Record token usage metrics.

    Args:
        input_tokens: Number of input tokens
        output_tokens: Number of output tokens
    """
    TOKEN_USAGE.labels(type="input").inc(input_tokens)
    TOKEN_USAGE.labels(type="output").inc(output_tokens)


def record_stream_event(event_type: str) -> None:
    """Count one parsed stream event."""
    STREAM_EVENTS_TOTAL.labels(event_type=event_type).inc()


def record_stream_completion(status: str, bytes_received: int, duration: float) -> None:
    """Record metrics for a finished stream.

    Args:
        status: "success", "error" or "cancelled"
        bytes_received: Total bytes read from the response body
        duration: Duration of the stream in seconds
    """
    STREAM_BYTES_TOTAL.inc(bytes_received)
    STREAM_DURATION.labels(status=status).observe(duration)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output.

    Returns:
        Prometheus metrics in text format
    """
    return generate_latest(REGISTRY)
