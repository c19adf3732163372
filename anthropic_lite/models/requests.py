"""Request models matching Anthropic's Messages API schema.

Requests are frozen once built. The ``with_*`` builders return updated
copies so a request handed to the client is never mutated afterwards.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .versions import Model


class ContentBlockText(BaseModel):
    """Text content block in a message."""

    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str


class ToolUseBlock(BaseModel):
    """Tool use content block."""

    model_config = ConfigDict(frozen=True)

    type: Literal["tool_use"] = "tool_use"
    id: str
    name: str
    input: dict[str, Any]


ContentBlock = Annotated[ContentBlockText | ToolUseBlock, Field(discriminator="type")]


class Message(BaseModel):
    """A message in the conversation."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: list[ContentBlock]

    @field_validator("content", mode="before")
    @classmethod
    def _wrap_plain_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [{"type": "text", "text": value}]
        return value

    @classmethod
    def user(cls, text: str) -> Message:
        return cls(role="user", content=[ContentBlockText(text=text)])

    @classmethod
    def assistant(cls, text: str) -> Message:
        return cls(role="assistant", content=[ContentBlockText(text=text)])


class MessageMetadata(BaseModel):
    """An object describing metadata about the request."""

    model_config = ConfigDict(frozen=True)

    user_id: str | None = None


class MessagesRequest(BaseModel):
    """Request body for POST /v1/messages - matches Anthropic's schema."""

    model_config = ConfigDict(frozen=True)

    model: str = Model.default().value
    max_tokens: int = Field(ge=0)
    messages: list[Message] = Field(default_factory=list)
    metadata: MessageMetadata | None = None
    stop_sequences: list[str] | None = None
    stream: bool | None = None
    system: str | None = None
    temperature: float | None = None
    top_k: int | None = None
    top_p: float | None = None

    @field_validator("model", mode="before")
    @classmethod
    def _model_value(cls, value: Any) -> Any:
        if isinstance(value, Enum):
            return value.value
        return value

    @classmethod
    def new(
        cls,
        model: Model | str,
        max_tokens: int,
        messages: list[Message],
    ) -> MessagesRequest:
        return cls(model=model, max_tokens=max_tokens, messages=messages)

    def _with(self, **update: Any) -> MessagesRequest:
        # model_copy skips validation; round-trip through the constructor instead
        return type(self).model_validate({**self.model_dump(), **update})

    def with_metadata(self, metadata: MessageMetadata) -> MessagesRequest:
        return self._with(metadata=metadata)

    def with_stop_sequences(self, stop_sequences: list[str]) -> MessagesRequest:
        return self._with(stop_sequences=list(stop_sequences))

    def with_stream(self, stream: bool) -> MessagesRequest:
        return self._with(stream=stream)

    def with_system(self, system: str) -> MessagesRequest:
        return self._with(system=system)

    def with_temperature(self, temperature: float) -> MessagesRequest:
        return self._with(temperature=temperature)

    def with_top_k(self, top_k: int) -> MessagesRequest:
        return self._with(top_k=top_k)

    def with_top_p(self, top_p: float) -> MessagesRequest:
        return self._with(top_p=top_p)

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the JSON body sent on the wire."""
        return self.model_dump(mode="json", exclude_none=True)
