"""Incremental Server-Sent Events decoder.

The decoder owns a raw byte buffer shared across chunks. A frame is only
emitted once its blank-line delimiter has arrived, and UTF-8 decoding happens
per complete frame, so chunk boundaries (including ones that split a
multi-byte character) never change the output.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from ..core.exceptions import InvalidEncodingError

# Leftmost match wins; no delimiter is a prefix of another at the same offset.
_FRAME_DELIMITER = re.compile(rb"\r\n\r\n|\n\n|\r\r")
_MAX_DELIMITER_LEN = 4
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class ServerSentEvent:
    """One decoded SSE frame.

    ``data`` is None when the frame had no data field (comments, pings
    sent as bare ``event:`` lines, keepalives).
    """

    event: str | None = None
    data: str | None = None
    id: str | None = None
    retry: int | None = None


def parse_frame(text: str) -> ServerSentEvent:
    """Parse the lines of one frame into a ServerSentEvent."""
    event: str | None = None
    data_lines: list[str] = []
    event_id: str | None = None
    retry: int | None = None

    for line in _LINE_BREAK.split(text):
        if not line or line.startswith(":"):
            continue

        field, sep, value = line.partition(":")
        if sep and value.startswith(" "):
            value = value[1:]

        if field == "data":
            data_lines.append(value)
        elif field == "event":
            event = value
        elif field == "id":
            event_id = value
        elif field == "retry" and value.isdigit():
            retry = int(value)

    return ServerSentEvent(
        event=event,
        data="\n".join(data_lines) if data_lines else None,
        id=event_id,
        retry=retry,
    )


class SSEDecoder:
    """Split a byte stream of arbitrary chunks into complete SSE frames.

    Usage:
        decoder = SSEDecoder()
        for chunk in chunks:
            for frame in decoder.feed(chunk):
                ...
        decoder.finish()

    One decoder serves exactly one response body.
    """

    def __init__(self) -> None:
        self._buffer = bytearray()
        # Bytes before this offset are known to hold no delimiter
        self._scan_from = 0

    @property
    def pending(self) -> int:
        """Number of buffered bytes not yet emitted as a frame."""
        return len(self._buffer)

    def feed(self, chunk: bytes) -> Iterator[ServerSentEvent]:
        """Buffer ``chunk`` and iterate over every frame it completed, in order.

        Frames are decoded lazily; exhaust the iterator before the next call.
        A frame that fails to decode raises only after the frames preceding
        it have been yielded.

        Raises:
            InvalidEncodingError: If a completed frame is not valid UTF-8
        """
        if chunk:
            self._buffer.extend(chunk)
        return self._drain()

    def finish(self) -> list[ServerSentEvent]:
        """Signal end of stream.

        An undelimited trailing frame is incomplete and is dropped.
        """
        self._buffer.clear()
        self._scan_from = 0
        return []

    def _drain(self) -> Iterator[ServerSentEvent]:
        while True:
            match = _FRAME_DELIMITER.search(self._buffer, self._scan_from)
            if match is None:
                # A delimiter completed by the next chunk starts in the last few bytes
                self._scan_from = max(0, len(self._buffer) - _MAX_DELIMITER_LEN + 1)
                return

            raw = bytes(self._buffer[: match.start()])
            del self._buffer[: match.end()]
            self._scan_from = 0

            try:
                text = raw.decode("utf-8")
            except UnicodeDecodeError as exc:
                self._buffer.clear()
                raise InvalidEncodingError(raw, str(exc)) from exc

            if text.strip():
                yield parse_frame(text)
