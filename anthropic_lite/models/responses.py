"""Response models matching Anthropic's Messages API schema."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field


class Usage(BaseModel):
    """Token usage information."""

    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)


class TextBlock(BaseModel):
    """Text block in response content."""

    type: Literal["text"] = "text"
    text: str


class ToolUseResponseBlock(BaseModel):
    """Tool use block in response."""

    type: Literal["tool_use"] = "tool_use"
    id: str
    name: str
    input: dict[str, Any]


class ThinkingBlock(BaseModel):
    """Extended thinking block; the signature arrives last when streaming."""

    type: Literal["thinking"] = "thinking"
    thinking: str
    signature: str | None = None


class RedactedThinkingBlock(BaseModel):
    """Thinking block the server returned encrypted."""

    type: Literal["redacted_thinking"] = "redacted_thinking"
    data: str


ResponseContentBlock = Annotated[
    TextBlock | ToolUseResponseBlock | ThinkingBlock | RedactedThinkingBlock,
    Field(discriminator="type"),
]

CONTENT_BLOCK_TYPES = frozenset({"text", "tool_use", "thinking", "redacted_thinking"})


StopReason = Literal["end_turn", "max_tokens", "stop_sequence", "tool_use"]


class _MessageBody(BaseModel):
    id: str
    type: Literal["message"] = "message"
    role: Literal["assistant"] = "assistant"
    content: list[ResponseContentBlock]
    model: str
    stop_sequence: str | None = None
    usage: Usage

    @property
    def text(self) -> str:
        """Concatenated text of all text blocks."""
        return "".join(block.text for block in self.content if isinstance(block, TextBlock))


class MessagesResponse(_MessageBody):
    """Response body for POST /v1/messages - matches Anthropic's schema.

    A completed response always carries a stop reason.
    """

    stop_reason: StopReason


class StreamedMessage(_MessageBody):
    """Partial message carried by ``message_start``.

    Content is empty and the stop reason is not known yet; both arrive in
    later events.
    """

    stop_reason: StopReason | None = None
