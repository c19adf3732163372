"""HTTP client for the Messages API."""

from .client import AnthropicClient, build_base_url, build_headers

__all__ = [
    "AnthropicClient",
    "build_base_url",
    "build_headers",
]
