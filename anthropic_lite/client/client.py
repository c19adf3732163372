"""Async client for the Anthropic Messages API."""

from __future__ import annotations

import time
from typing import Any

import httpx

from .. import __version__
from ..core import metrics
from ..core.classifier import (
    classify_error_response,
    classify_transport_error,
    parse_success_body,
)
from ..core.config import ClientConfig, settings
from ..core.exceptions import AnthropicError, ClientConfigError
from ..core.structured_logging import get_logger
from ..models.requests import MessagesRequest
from ..models.responses import MessagesResponse
from ..models.versions import AnthropicVersion, ApiVersion
from ..streaming.session import MessageStream

logger = get_logger(__name__)


def _validate_header_value(name: str, value: str) -> str:
    if not value:
        raise ClientConfigError(f"Invalid value for header {name!r}: empty")
    for char in value:
        if char != "\t" and not (" " <= char <= "~"):
            raise ClientConfigError(
                f"Invalid value for header {name!r}: unexpected character {char!r}"
            )
    return value


def build_headers(api_key: str, anthropic_version: AnthropicVersion) -> dict[str, str]:
    """Default headers sent with every request.

    Raises:
        ClientConfigError: If a header value contains invalid characters
    """
    return {
        "x-api-key": _validate_header_value("x-api-key", api_key),
        "anthropic-version": _validate_header_value(
            "anthropic-version", anthropic_version.value
        ),
        "content-type": "application/json",
        "user-agent": f"anthropic-lite/{__version__}",
    }


def build_base_url(base_url: str, api_version: ApiVersion) -> httpx.URL:
    """Join the configured base URL with the API version segment.

    ``https://api.anthropic.com`` and ``https://api.anthropic.com/`` both
    become ``https://api.anthropic.com/v1/``; a base path is kept.

    Raises:
        ClientConfigError: If the base URL is not an absolute http(s) URL
    """
    try:
        url = httpx.URL(base_url)
    except httpx.InvalidURL as exc:
        raise ClientConfigError(f"Invalid base URL {base_url!r}: {exc}") from exc

    if url.scheme not in ("http", "https") or not url.host:
        raise ClientConfigError(f"Invalid base URL {base_url!r}: expected http(s)://host")

    if not url.path.endswith("/"):
        url = url.copy_with(path=url.path + "/")
    return url.join(f"{api_version.value}/")


class AnthropicClient:
    """
    Anthropic Messages API client.

    Args:
        config: Client configuration. Defaults to the [client] section of
            settings/settings.toml.
        api_key: API key. If not provided, reads ANTHROPIC_API_KEY.
        transport: Optional httpx transport (e.g. httpx.MockTransport in tests).
        metrics_enabled: Record Prometheus metrics. Defaults to the
            [observability] setting.

    Example:
        >>> async with AnthropicClient(api_key="sk-ant-...") as client:
        ...     request = MessagesRequest.new(Model.CLAUDE_3_5_SONNET, 1024, [Message.user("Hi")])
        ...     response = await client.create_message(request)
        ...     print(response.text)
    """

    MESSAGES_PATH = "messages"

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        metrics_enabled: bool | None = None,
    ):
        config = config or settings.client

        api_key = api_key or settings.api_key
        if not api_key:
            raise ClientConfigError(
                "API key required. Set ANTHROPIC_API_KEY environment variable or pass api_key parameter."
            )

        try:
            anthropic_version = AnthropicVersion(config.anthropic_version)
        except ValueError:
            raise ClientConfigError(
                f"Invalid anthropic version: {config.anthropic_version}"
            ) from None

        self._api_key = api_key
        self._api_version = ApiVersion.parse(config.api_version)
        self._anthropic_version = anthropic_version
        self._base_url = build_base_url(config.base_url, self._api_version)
        self._metrics_enabled = (
            settings.metrics_enabled if metrics_enabled is None else metrics_enabled
        )

        self._client = httpx.AsyncClient(
            headers=build_headers(api_key, anthropic_version),
            timeout=httpx.Timeout(config.timeout, connect=config.connect_timeout),
            transport=transport,
        )

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def api_version(self) -> ApiVersion:
        return self._api_version

    @property
    def anthropic_version(self) -> AnthropicVersion:
        return self._anthropic_version

    @property
    def base_url(self) -> str:
        """Base URL for API requests, including the version segment."""
        return str(self._base_url)

    # ============================================================
    # Messages API
    # ============================================================

    async def create_message(self, request: MessagesRequest) -> MessagesResponse:
        """
        Create a message and wait for the complete response.

        Args:
            request: The message request.

        Returns:
            The parsed MessagesResponse.

        Raises:
            TransportError: The request never got a response.
            ApiError: The API returned an error envelope.
            MalformedErrorBodyError: Non-2xx response with an unparseable body.
            MalformedSuccessBodyError: 2xx response that isn't a MessagesResponse.
        """
        start_time = time.monotonic()
        response = await self._send(request, streaming=False, start_time=start_time)

        try:
            if not response.is_success:
                raise classify_error_response(response.status_code, response.content)
            result = parse_success_body(response.content, MessagesResponse)
        except AnthropicError as e:
            self._record_failure(request.model, False, start_time, e)
            raise

        self._record_success(request.model, False, start_time, response.status_code)
        if self._metrics_enabled:
            metrics.record_token_usage(result.usage.input_tokens, result.usage.output_tokens)
        return result

    async def stream_message(self, request: MessagesRequest) -> MessageStream:
        """
        Create a message and stream it as Server-Sent Events.

        The request is sent with ``stream`` set. Exchange-level failures are
        raised here; failures after the stream has started are raised while
        iterating the returned MessageStream.

        Args:
            request: The message request.

        Returns:
            An open MessageStream. Iterate it, or close it to abandon the
            response.

        Example:
            >>> stream = await client.stream_message(request)
            >>> async for text in stream.text_stream():
            ...     print(text, end="", flush=True)
        """
        if not request.stream:
            request = request.with_stream(True)

        start_time = time.monotonic()
        response = await self._send(request, streaming=True, start_time=start_time)

        if not response.is_success:
            try:
                body = await response.aread()
            except httpx.TransportError as exc:
                error: AnthropicError = classify_transport_error(exc)
                error.__cause__ = exc
            else:
                error = classify_error_response(response.status_code, body)
            finally:
                await response.aclose()
            self._record_failure(request.model, True, start_time, error)
            raise error

        self._record_success(request.model, True, start_time, response.status_code)
        return MessageStream.from_response(
            response,
            model=request.model,
            metrics_enabled=self._metrics_enabled,
        )

    # ============================================================
    # Private methods
    # ============================================================

    def _url(self, path: str) -> httpx.URL:
        return self._base_url.join(path)

    async def _send(
        self,
        request: MessagesRequest,
        streaming: bool,
        start_time: float,
    ) -> httpx.Response:
        """Send the request; only transport faults are handled here."""
        headers = {"accept": "text/event-stream"} if streaming else None
        http_request = self._client.build_request(
            "POST",
            self._url(self.MESSAGES_PATH),
            json=request.to_payload(),
            headers=headers,
        )

        logger.debug(
            "api_request",
            model=request.model,
            streaming=streaming,
            messages=len(request.messages),
        )

        try:
            return await self._client.send(http_request, stream=streaming)
        except httpx.TransportError as exc:
            error = classify_transport_error(exc)
            self._record_failure(request.model, streaming, start_time, error)
            raise error from exc

    def _record_success(
        self, model: str, streaming: bool, start_time: float, status_code: int
    ) -> None:
        duration = time.monotonic() - start_time
        logger.info(
            "api_response",
            model=model,
            streaming=streaming,
            status_code=status_code,
            duration_seconds=round(duration, 3),
        )
        if self._metrics_enabled:
            metrics.record_api_call(model, streaming, "success", duration)

    def _record_failure(
        self, model: str, streaming: bool, start_time: float, error: AnthropicError
    ) -> None:
        duration = time.monotonic() - start_time
        log_data: dict[str, Any] = {
            "model": model,
            "streaming": streaming,
            "error": str(error),
            "error_type": type(error).__name__,
            "duration_seconds": round(duration, 3),
        }
        status_code = getattr(error, "status_code", None)
        if status_code is not None:
            log_data["status_code"] = status_code
        logger.warning("api_error", **log_data)

        if self._metrics_enabled:
            metrics.record_api_call(model, streaming, type(error).__name__, duration)
            metrics.record_error(type(error).__name__)

    # ============================================================
    # Context Manager
    # ============================================================

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> AnthropicClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
