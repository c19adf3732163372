"""Pytest configuration and fixtures."""

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from anthropic_lite import AnthropicClient, Message, MessagesRequest, Model
from anthropic_lite.core.config import ClientConfig

from fixtures.sample_requests import SIMPLE_MESSAGE_REQUEST, STREAMING_REQUEST
from fixtures.sample_responses import FULL_STREAM_BODY, SIMPLE_RESPONSE

TEST_API_KEY = "sk-ant-test-key"


@pytest.fixture
def sample_messages_request() -> dict[str, Any]:
    """Sample Anthropic Messages API request."""
    return dict(SIMPLE_MESSAGE_REQUEST)


@pytest.fixture
def sample_streaming_request() -> dict[str, Any]:
    """Sample streaming request."""
    return dict(STREAMING_REQUEST)


@pytest.fixture
def sample_response() -> dict[str, Any]:
    """Sample non-streaming response body."""
    return dict(SIMPLE_RESPONSE)


@pytest.fixture
def messages_request() -> MessagesRequest:
    """A built MessagesRequest."""
    return MessagesRequest.new(Model.CLAUDE_3_5_SONNET, 1024, [Message.user("Hello, Claude!")])


@pytest.fixture
def client_config() -> ClientConfig:
    """Client config pointing at a fake host."""
    return ClientConfig(base_url="https://api.test.local")


@pytest.fixture
def recorded_requests() -> list[httpx.Request]:
    """Requests seen by the mock transport."""
    return []


@pytest.fixture
def make_client(
    client_config: ClientConfig,
    recorded_requests: list[httpx.Request],
) -> Callable[[Callable[[httpx.Request], httpx.Response]], AnthropicClient]:
    """Build an AnthropicClient whose transport is answered by ``handler``."""

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> AnthropicClient:
        def recording_handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return handler(request)

        return AnthropicClient(
            client_config,
            api_key=TEST_API_KEY,
            transport=httpx.MockTransport(recording_handler),
        )

    return factory


@pytest.fixture
def full_stream_body() -> bytes:
    """A complete well-formed SSE body."""
    return FULL_STREAM_BODY
