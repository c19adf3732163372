"""Streaming response pipeline.

- decoder: byte chunks -> complete SSE frames
- parser: frame data -> typed stream events
- session: MessageStream driving both over a live response
"""

from .decoder import SSEDecoder, ServerSentEvent, parse_frame
from .parser import parse_event
from .session import MessageStream

__all__ = [
    "SSEDecoder",
    "ServerSentEvent",
    "parse_frame",
    "parse_event",
    "MessageStream",
]
