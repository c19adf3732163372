"""Unit tests for MessageStream."""

import asyncio
import json

import httpx
import pytest
from prometheus_client import REGISTRY

from anthropic_lite import (
    ApiError,
    ErrorType,
    InvalidEncodingError,
    MalformedEventError,
    MessageStream,
    TransportError,
)
from anthropic_lite.models import (
    ContentBlockDeltaEvent,
    ContentBlockDeltaSignature,
    ContentBlockDeltaText,
    ContentBlockDeltaThinking,
    ContentBlockStartEvent,
    MessageStartEvent,
    MessageStopEvent,
    TextBlock,
    ThinkingBlock,
)

from fixtures.sample_responses import (
    FULL_STREAM_BODY,
    STREAM_ERROR,
    STREAM_MESSAGE_START,
    THINKING_STREAM_BODY,
    sse_frame,
)
from fixtures.streams import ChunkSource, split_every

MESSAGE_START_CHUNK = (
    "event: message_start\ndata: " + json.dumps(STREAM_MESSAGE_START) + "\n\n"
).encode("utf-8")
TEXT_DELTA_CHUNK = b'data: {"type":"content_block_delta","index":0,"delta":{"text":"Hi"}}\n\n'
MESSAGE_STOP_CHUNK = b'data: {"type":"message_stop"}\n\n'

THREE_EVENT_CHUNKS = [MESSAGE_START_CHUNK, TEXT_DELTA_CHUNK, MESSAGE_STOP_CHUNK]


class CloseRecorder:
    """Close callback that counts its calls."""

    def __init__(self):
        self.calls = 0

    async def __call__(self) -> None:
        self.calls += 1


def make_stream(source: ChunkSource, **kwargs) -> tuple[MessageStream, CloseRecorder]:
    recorder = CloseRecorder()
    kwargs.setdefault("metrics_enabled", False)
    return MessageStream(source, close=recorder, **kwargs), recorder


async def collect(stream: MessageStream) -> list:
    return [event async for event in stream]


class TestStreamEvents:
    """Test events are yielded in arrival order."""

    @pytest.mark.asyncio
    async def test_three_event_stream(self):
        """Test the three-event stream yields exactly three events then ends."""
        source = ChunkSource(THREE_EVENT_CHUNKS)
        stream, recorder = make_stream(source)

        events = await collect(stream)

        assert [type(e) for e in events] == [
            MessageStartEvent,
            ContentBlockDeltaEvent,
            MessageStopEvent,
        ]
        assert isinstance(events[1].delta, ContentBlockDeltaText)
        assert events[1].delta.text == "Hi"
        assert stream.closed
        assert source.closed
        assert recorder.calls == 1

    @pytest.mark.asyncio
    async def test_exhausted_stream_stays_exhausted(self):
        """Test pulling after the end keeps raising StopAsyncIteration."""
        stream, _ = make_stream(ChunkSource(THREE_EVENT_CHUNKS))
        await collect(stream)

        with pytest.raises(StopAsyncIteration):
            await stream.__anext__()

    @pytest.mark.asyncio
    async def test_full_stream_in_small_chunks(self):
        """Test a body split into tiny chunks yields the same events."""
        whole, _ = make_stream(ChunkSource([FULL_STREAM_BODY]))
        split, _ = make_stream(ChunkSource(split_every(FULL_STREAM_BODY, 5)))

        assert await collect(whole) == await collect(split)

    @pytest.mark.asyncio
    async def test_chunks_pulled_on_demand(self):
        """Test no chunk is read before the consumer asks for an event."""
        source = ChunkSource(THREE_EVENT_CHUNKS)
        stream, _ = make_stream(source)
        assert source.pulled == 0

        first = await stream.__anext__()

        assert isinstance(first, MessageStartEvent)
        assert source.pulled == 1
        await stream.aclose()

    @pytest.mark.asyncio
    async def test_stops_at_message_stop(self):
        """Test frames after message_stop are not read."""
        source = ChunkSource(THREE_EVENT_CHUNKS + [TEXT_DELTA_CHUNK])
        stream, _ = make_stream(source)

        events = await collect(stream)

        assert len(events) == 3
        assert source.pulled == 3

    @pytest.mark.asyncio
    async def test_body_ending_without_message_stop(self):
        """Test a body that just ends terminates cleanly."""
        source = ChunkSource([MESSAGE_START_CHUNK, TEXT_DELTA_CHUNK])
        stream, recorder = make_stream(source)

        events = await collect(stream)

        assert len(events) == 2
        assert recorder.calls == 1

    @pytest.mark.asyncio
    async def test_frames_without_data_skipped(self):
        """Test comment and data-less frames produce no events."""
        source = ChunkSource([b": keepalive\n\n", b"event: ping\n\n"] + THREE_EVENT_CHUNKS)
        stream, _ = make_stream(source)

        assert len(await collect(stream)) == 3

    @pytest.mark.asyncio
    async def test_unknown_event_skipped(self):
        """Test an unknown event type is skipped and the next frame still parses."""
        source = ChunkSource(
            [
                MESSAGE_START_CHUNK,
                b'data: {"type":"future_event","x":1}\n\n',
                TEXT_DELTA_CHUNK,
                MESSAGE_STOP_CHUNK,
            ]
        )
        stream, _ = make_stream(source)

        events = await collect(stream)

        assert [e.type for e in events] == ["message_start", "content_block_delta", "message_stop"]

    @pytest.mark.asyncio
    async def test_text_stream(self):
        """Test text_stream yields only text fragments."""
        stream, _ = make_stream(ChunkSource([FULL_STREAM_BODY]))

        texts = [text async for text in stream.text_stream()]

        assert texts == ["Hello", ", world"]

    @pytest.mark.asyncio
    async def test_thinking_stream(self):
        """Test a thinking block streams through to its signature and the answer follows."""
        stream, recorder = make_stream(ChunkSource(split_every(THINKING_STREAM_BODY, 11)))

        events = await collect(stream)

        assert [e.type for e in events] == [
            "message_start",
            "content_block_start",
            "content_block_delta",
            "content_block_delta",
            "content_block_stop",
            "content_block_start",
            "content_block_delta",
            "content_block_stop",
            "message_delta",
            "message_stop",
        ]
        assert isinstance(events[1], ContentBlockStartEvent)
        assert events[1].content_block == ThinkingBlock(thinking="")
        assert isinstance(events[2].delta, ContentBlockDeltaThinking)
        assert events[2].delta.thinking == "Let me think."
        assert isinstance(events[3].delta, ContentBlockDeltaSignature)
        assert events[5].content_block == TextBlock(text="")
        assert recorder.calls == 1

    @pytest.mark.asyncio
    async def test_thinking_stream_text_only(self):
        """Test text_stream leaves thinking deltas out."""
        stream, _ = make_stream(ChunkSource([THINKING_STREAM_BODY]))

        assert [text async for text in stream.text_stream()] == ["42"]

    @pytest.mark.asyncio
    async def test_unknown_delta_kind_skipped(self):
        """Test a delta of an unknown kind is skipped without ending the stream."""
        source = ChunkSource(
            [
                MESSAGE_START_CHUNK,
                b'data: {"type":"content_block_delta","index":0,'
                b'"delta":{"type":"citations_delta","citation":{"cited_text":"x"}}}\n\n',
                TEXT_DELTA_CHUNK,
                MESSAGE_STOP_CHUNK,
            ]
        )
        stream, _ = make_stream(source)

        events = await collect(stream)

        assert [e.type for e in events] == ["message_start", "content_block_delta", "message_stop"]
        assert events[1].delta.text == "Hi"

    @pytest.mark.asyncio
    async def test_counters(self):
        """Test bytes and events are counted."""
        stream, _ = make_stream(ChunkSource(THREE_EVENT_CHUNKS))
        await collect(stream)

        assert stream.events_received == 3
        assert stream.bytes_received == sum(len(c) for c in THREE_EVENT_CHUNKS)


class TestStreamErrors:
    """Test fatal conditions end the stream exactly once."""

    @pytest.mark.asyncio
    async def test_malformed_event_terminates(self):
        """Test a known event missing fields raises and stops processing."""
        source = ChunkSource(
            [
                MESSAGE_START_CHUNK,
                b'data: {"type":"content_block_delta","index":0}\n\n',
                TEXT_DELTA_CHUNK,
                MESSAGE_STOP_CHUNK,
            ]
        )
        stream, recorder = make_stream(source)

        assert isinstance(await stream.__anext__(), MessageStartEvent)
        with pytest.raises(MalformedEventError):
            await stream.__anext__()
        with pytest.raises(StopAsyncIteration):
            await stream.__anext__()

        assert source.pulled == 2
        assert recorder.calls == 1

    @pytest.mark.asyncio
    async def test_error_event_raises_api_error(self):
        """Test an error event ends the stream with ApiError."""
        source = ChunkSource([MESSAGE_START_CHUNK, sse_frame(STREAM_ERROR), TEXT_DELTA_CHUNK])
        stream, recorder = make_stream(source, status_code=200)

        events = []
        with pytest.raises(ApiError) as exc_info:
            async for event in stream:
                events.append(event)

        assert [e.type for e in events] == ["message_start"]
        error = exc_info.value
        assert error.kind is ErrorType.OVERLOADED
        assert error.envelope.error.message == "Overloaded"
        assert error.status_code == 200
        assert recorder.calls == 1

    @pytest.mark.asyncio
    async def test_invalid_utf8_terminates(self):
        """Test invalid UTF-8 in a frame raises InvalidEncodingError."""
        source = ChunkSource([MESSAGE_START_CHUNK, b"data: \xff\n\n", MESSAGE_STOP_CHUNK])
        stream, recorder = make_stream(source)

        with pytest.raises(InvalidEncodingError):
            await collect(stream)

        assert source.pulled == 2
        assert recorder.calls == 1

    @pytest.mark.asyncio
    async def test_transport_error_mid_stream(self):
        """Test a read fault becomes TransportError with the cause chained."""
        source = ChunkSource([MESSAGE_START_CHUNK], error=httpx.ReadError("connection reset"))
        stream, recorder = make_stream(source)

        with pytest.raises(TransportError) as exc_info:
            await collect(stream)

        assert isinstance(exc_info.value.__cause__, httpx.ReadError)
        assert recorder.calls == 1

    @pytest.mark.asyncio
    async def test_read_timeout_mid_stream(self):
        """Test a read timeout becomes TransportError."""
        source = ChunkSource([], error=httpx.ReadTimeout("timed out"))
        stream, _ = make_stream(source)

        with pytest.raises(TransportError, match="timed out"):
            await stream.__anext__()


class TestStreamCancellation:
    """Test abandoning a stream releases the transport."""

    @pytest.mark.asyncio
    async def test_close_before_iteration(self):
        """Test closing an unstarted stream releases everything."""
        source = ChunkSource(THREE_EVENT_CHUNKS)
        stream, recorder = make_stream(source)

        await stream.aclose()

        assert stream.closed
        assert source.closed
        assert source.pulled == 0
        assert recorder.calls == 1
        with pytest.raises(StopAsyncIteration):
            await stream.__anext__()

    @pytest.mark.asyncio
    async def test_close_mid_stream_pulls_nothing_more(self):
        """Test closing after one event reads no further chunks."""
        source = ChunkSource(THREE_EVENT_CHUNKS)
        stream, recorder = make_stream(source)

        await stream.__anext__()
        await stream.aclose()

        assert source.pulled == 1
        assert source.closed
        assert recorder.calls == 1

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self):
        """Test closing twice releases once."""
        stream, recorder = make_stream(ChunkSource(THREE_EVENT_CHUNKS))

        await stream.aclose()
        await stream.aclose()

        assert recorder.calls == 1

    @pytest.mark.asyncio
    async def test_released_when_message_stop_is_handed_out(self):
        """Test breaking out at message_stop, without closing, leaves nothing open."""
        source = ChunkSource(THREE_EVENT_CHUNKS)
        stream, recorder = make_stream(source)

        async for event in stream:
            if isinstance(event, MessageStopEvent):
                assert stream.closed
                assert source.closed
                assert recorder.calls == 1
                break

        assert stream.closed
        assert recorder.calls == 1

    @pytest.mark.asyncio
    async def test_completion_recorded_once_after_message_stop(self):
        """Test closing after message_stop does not record a second completion."""
        before = TestStreamMetrics._sample(
            "anthropic_lite_stream_duration_seconds_count", {"status": "success"}
        )
        cancelled_before = TestStreamMetrics._sample(
            "anthropic_lite_stream_duration_seconds_count", {"status": "cancelled"}
        )
        stream, _ = make_stream(ChunkSource(THREE_EVENT_CHUNKS), metrics_enabled=True)

        async for event in stream:
            if isinstance(event, MessageStopEvent):
                break
        await stream.aclose()

        assert TestStreamMetrics._sample(
            "anthropic_lite_stream_duration_seconds_count", {"status": "success"}
        ) == before + 1
        assert TestStreamMetrics._sample(
            "anthropic_lite_stream_duration_seconds_count", {"status": "cancelled"}
        ) == cancelled_before

    @pytest.mark.asyncio
    async def test_context_manager_break(self):
        """Test leaving the async with block early closes the stream."""
        source = ChunkSource(THREE_EVENT_CHUNKS)
        stream, recorder = make_stream(source)

        async with stream:
            async for event in stream:
                break

        assert source.pulled == 1
        assert recorder.calls == 1

    @pytest.mark.asyncio
    async def test_task_cancellation_releases(self):
        """Test cancelling a consumer blocked on the next chunk releases the transport."""
        source = ChunkSource([MESSAGE_START_CHUNK], hang=True)
        stream, recorder = make_stream(source)

        async def consume():
            async for _ in stream:
                pass

        task = asyncio.create_task(consume())
        await source.waiting.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert stream.closed
        assert source.closed
        assert recorder.calls == 1
        assert source.pulled == 1


class TestStreamMetrics:
    """Test stream metrics recording."""

    @staticmethod
    def _sample(name: str, labels: dict | None = None) -> float:
        return REGISTRY.get_sample_value(name, labels or {}) or 0.0

    @pytest.mark.asyncio
    async def test_in_progress_gauge(self):
        """Test the in-progress gauge goes up on open and down on close."""
        before = self._sample("anthropic_lite_streams_in_progress")
        stream, _ = make_stream(ChunkSource(THREE_EVENT_CHUNKS), metrics_enabled=True)
        assert self._sample("anthropic_lite_streams_in_progress") == before + 1

        await collect(stream)

        assert self._sample("anthropic_lite_streams_in_progress") == before

    @pytest.mark.asyncio
    async def test_events_counted(self):
        """Test parsed events are counted by type."""
        labels = {"event_type": "message_stop"}
        before = self._sample("anthropic_lite_stream_events_total", labels)
        stream, _ = make_stream(ChunkSource(THREE_EVENT_CHUNKS), metrics_enabled=True)

        await collect(stream)

        assert self._sample("anthropic_lite_stream_events_total", labels) == before + 1

    @pytest.mark.asyncio
    async def test_token_usage_counted_once(self):
        """Test input tokens come from message_start and output from message_delta."""
        input_before = self._sample("anthropic_lite_tokens_total", {"type": "input"})
        output_before = self._sample("anthropic_lite_tokens_total", {"type": "output"})
        stream, _ = make_stream(ChunkSource([FULL_STREAM_BODY]), metrics_enabled=True)

        await collect(stream)

        assert self._sample("anthropic_lite_tokens_total", {"type": "input"}) == input_before + 10
        assert self._sample("anthropic_lite_tokens_total", {"type": "output"}) == output_before + 5

    @pytest.mark.asyncio
    async def test_cancelled_completion_recorded(self):
        """Test an abandoned stream is recorded as cancelled."""
        labels = {"status": "cancelled"}
        before = self._sample("anthropic_lite_stream_duration_seconds_count", labels)
        stream, _ = make_stream(ChunkSource(THREE_EVENT_CHUNKS), metrics_enabled=True)

        await stream.__anext__()
        await stream.aclose()

        assert self._sample("anthropic_lite_stream_duration_seconds_count", labels) == before + 1
