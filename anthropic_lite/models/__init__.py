"""Pydantic models matching Anthropic's Messages API schema.

This module re-exports all models for convenient imports:
    from anthropic_lite.models import MessagesRequest, MessagesResponse
"""

from .errors import (
    ErrorType,
    ErrorDetail,
    ErrorResponse,
)

from .versions import (
    Model,
    AnthropicVersion,
    ApiVersion,
)

from .requests import (
    ContentBlockText,
    ToolUseBlock,
    ContentBlock,
    Message,
    MessageMetadata,
    MessagesRequest,
)

from .responses import (
    Usage,
    TextBlock,
    ToolUseResponseBlock,
    ThinkingBlock,
    RedactedThinkingBlock,
    ResponseContentBlock,
    CONTENT_BLOCK_TYPES,
    StopReason,
    MessagesResponse,
    StreamedMessage,
)

from .streaming import (
    MessageStartEvent,
    ContentBlockStartEvent,
    ContentBlockDeltaText,
    ContentBlockDeltaThinking,
    ContentBlockDeltaSignature,
    ContentBlockDeltaToolInput,
    ContentBlockDelta,
    DELTA_TYPES,
    ContentBlockDeltaEvent,
    ContentBlockStopEvent,
    MessageDeltaUsage,
    MessageDelta,
    MessageDeltaEvent,
    MessageStopEvent,
    PingEvent,
    ErrorEvent,
    StreamEvent,
    EVENT_TYPES,
)

__all__ = [
    # Errors
    "ErrorType",
    "ErrorDetail",
    "ErrorResponse",
    # Versions
    "Model",
    "AnthropicVersion",
    "ApiVersion",
    # Requests
    "ContentBlockText",
    "ToolUseBlock",
    "ContentBlock",
    "Message",
    "MessageMetadata",
    "MessagesRequest",
    # Responses
    "Usage",
    "TextBlock",
    "ToolUseResponseBlock",
    "ThinkingBlock",
    "RedactedThinkingBlock",
    "ResponseContentBlock",
    "CONTENT_BLOCK_TYPES",
    "StopReason",
    "MessagesResponse",
    "StreamedMessage",
    # Streaming
    "MessageStartEvent",
    "ContentBlockStartEvent",
    "ContentBlockDeltaText",
    "ContentBlockDeltaThinking",
    "ContentBlockDeltaSignature",
    "ContentBlockDeltaToolInput",
    "ContentBlockDelta",
    "DELTA_TYPES",
    "ContentBlockDeltaEvent",
    "ContentBlockStopEvent",
    "MessageDeltaUsage",
    "MessageDelta",
    "MessageDeltaEvent",
    "MessageStopEvent",
    "PingEvent",
    "ErrorEvent",
    "StreamEvent",
    "EVENT_TYPES",
]
