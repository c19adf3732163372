"""Message stream over one streaming Messages API response.

``MessageStream`` pulls body chunks only when the consumer asks for the
next event, feeds them through the SSE decoder and the event parser, and
yields events in arrival order. The underlying response is closed on
every exit path: normal end, fatal error and cancellation.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncIterable, AsyncIterator, Awaitable, Callable
from typing import Any

import httpx

from ..core import metrics
from ..core.classifier import classify_transport_error
from ..core.exceptions import AnthropicError, ApiError
from ..core.structured_logging import get_logger
from ..models.streaming import (
    ContentBlockDeltaEvent,
    ContentBlockDeltaText,
    ErrorEvent,
    MessageDeltaEvent,
    MessageStartEvent,
    MessageStopEvent,
    StreamEvent,
)
from .decoder import SSEDecoder
from .parser import parse_event

logger = get_logger(__name__)


class MessageStream:
    """Async iterator of StreamEvent parsed from a live response body.

    Iteration ends after ``message_stop`` or when the body ends. Any fatal
    condition (transport fault, invalid UTF-8, malformed event, ``error``
    event) is raised once from ``__anext__``; the stream is exhausted
    afterwards. Closing the stream early is not an error.

    Usage:
        async with await client.stream_message(request) as stream:
            async for event in stream:
                ...
    """

    def __init__(
        self,
        chunks: AsyncIterable[bytes],
        *,
        close: Callable[[], Awaitable[None]] | None = None,
        status_code: int | None = None,
        model: str | None = None,
        metrics_enabled: bool = True,
    ):
        self._chunks = chunks.__aiter__()
        self._close = close
        self.status_code = status_code
        self.model = model
        self._metrics_enabled = metrics_enabled

        self._decoder = SSEDecoder()
        self._events = self._iter_events()
        self._released = False
        self._completed = False

        self.bytes_received = 0
        self.events_received = 0

        if self._metrics_enabled:
            metrics.STREAMS_IN_PROGRESS.inc()

    @classmethod
    def from_response(cls, response: httpx.Response, **kwargs: Any) -> MessageStream:
        """Create a stream that owns an open httpx response."""
        return cls(
            response.aiter_bytes(),
            close=response.aclose,
            status_code=response.status_code,
            **kwargs,
        )

    @property
    def closed(self) -> bool:
        return self._released

    def __aiter__(self) -> MessageStream:
        return self

    async def __anext__(self) -> StreamEvent:
        return await self._events.__anext__()

    async def __aenter__(self) -> MessageStream:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Abandon the stream and release the response.

        Safe to call at any time and more than once.
        """
        await self._events.aclose()
        await self._release()

    async def text_stream(self) -> AsyncIterator[str]:
        """Yield only the text fragments of content block deltas."""
        async for event in self:
            if isinstance(event, ContentBlockDeltaEvent) and isinstance(
                event.delta, ContentBlockDeltaText
            ):
                yield event.delta.text

    # ============================================================
    # Private methods
    # ============================================================

    async def _read_chunks(self) -> AsyncIterator[bytes]:
        while True:
            try:
                chunk = await self._chunks.__anext__()
            except StopAsyncIteration:
                return
            except httpx.TransportError as exc:
                raise classify_transport_error(exc) from exc
            yield chunk

    async def _iter_events(self) -> AsyncIterator[StreamEvent]:
        start_time = time.monotonic()
        status = "success"
        error: AnthropicError | None = None
        chunks = self._read_chunks()

        try:
            async for chunk in chunks:
                self.bytes_received += len(chunk)

                for frame in self._decoder.feed(chunk):
                    if frame.data is None:
                        continue

                    event = parse_event(frame.data)
                    if event is None:
                        continue

                    if isinstance(event, ErrorEvent):
                        raise ApiError(event.to_envelope(), status_code=self.status_code)

                    self._record_event(event)

                    if isinstance(event, MessageStopEvent):
                        # Consumers often stop pulling here; release first
                        await chunks.aclose()
                        await self._release()
                        self._log_completion(status, time.monotonic() - start_time, None)
                        yield event
                        return

                    yield event

            self._decoder.finish()

        except (GeneratorExit, asyncio.CancelledError):
            status = "cancelled"
            raise

        except AnthropicError as e:
            status = "error"
            error = e
            if self._metrics_enabled:
                metrics.record_error(type(e).__name__)
            raise

        except Exception:
            status = "error"
            raise

        finally:
            await chunks.aclose()
            await self._release()
            self._log_completion(status, time.monotonic() - start_time, error)

    def _record_event(self, event: StreamEvent) -> None:
        self.events_received += 1
        if not self._metrics_enabled:
            return

        metrics.record_stream_event(event.type)
        if isinstance(event, MessageStartEvent):
            usage = event.message.usage
            metrics.record_token_usage(usage.input_tokens, 0)
        elif isinstance(event, MessageDeltaEvent) and event.usage is not None:
            metrics.record_token_usage(0, event.usage.output_tokens)

    async def _release(self) -> None:
        if self._released:
            return
        self._released = True

        if self._metrics_enabled:
            metrics.STREAMS_IN_PROGRESS.dec()

        aclose = getattr(self._chunks, "aclose", None)
        if aclose is not None:
            await aclose()
        if self._close is not None:
            await self._close()

    def _log_completion(
        self,
        status: str,
        duration: float,
        error: AnthropicError | None,
    ) -> None:
        if self._completed:
            return
        self._completed = True

        if self._metrics_enabled:
            metrics.record_stream_completion(status, self.bytes_received, duration)

        log_data: dict[str, Any] = {
            "model": self.model,
            "status": status,
            "events": self.events_received,
            "bytes": self.bytes_received,
            "duration_seconds": round(duration, 3),
        }
        if error is not None:
            logger.warning(
                "stream_completed",
                error=str(error),
                error_type=type(error).__name__,
                **log_data,
            )
        else:
            logger.info("stream_completed", **log_data)
