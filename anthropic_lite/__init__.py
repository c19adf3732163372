"""anthropic-lite - async client for the Anthropic Messages API.

Builds authenticated requests, parses typed responses and decodes
streaming responses (Server-Sent Events) into typed events while the body
is still arriving.

Subpackages:
- models: Pydantic data models (requests, responses, streaming, errors, versions)
- core: Shared infrastructure (config, exceptions, error classifier, logging, metrics)
- streaming: SSE decoder, event parser, MessageStream
- client: AnthropicClient

Quick Start:
    from anthropic_lite import AnthropicClient, Message, MessagesRequest, Model

    async with AnthropicClient() as client:
        request = MessagesRequest.new(Model.CLAUDE_3_5_SONNET, 1024, [Message.user("Hi")])
        stream = await client.stream_message(request)
        async for text in stream.text_stream():
            print(text, end="", flush=True)
"""

__version__ = "0.1.0"

from .models import (
    AnthropicVersion,
    ApiVersion,
    ContentBlockText,
    ErrorResponse,
    ErrorType,
    Message,
    MessageMetadata,
    MessagesRequest,
    MessagesResponse,
    Model,
    StreamEvent,
    Usage,
)

from .core import (
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
    settings,
)

from .core.classifier import (
    classify_error_response,
    classify_transport_error,
    parse_success_body,
)

from .streaming import MessageStream, SSEDecoder, parse_event

from .client import AnthropicClient

__all__ = [
    "__version__",
    # Client
    "AnthropicClient",
    # Models
    "AnthropicVersion",
    "ApiVersion",
    "ContentBlockText",
    "ErrorResponse",
    "ErrorType",
    "Message",
    "MessageMetadata",
    "MessagesRequest",
    "MessagesResponse",
    "Model",
    "StreamEvent",
    "Usage",
    # Errors
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
    "classify_error_response",
    "classify_transport_error",
    "parse_success_body",
    # Streaming
    "MessageStream",
    "SSEDecoder",
    "parse_event",
    # Core
    "settings",
]
