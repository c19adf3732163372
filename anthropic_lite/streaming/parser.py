"""Parse SSE data payloads into typed stream events.

Dispatch is by the payload's explicit ``type`` tag. Unknown tags are
skipped so newer server event types don't break older clients; a known
tag with a payload that fails validation is fatal. The same applies one
level down: a ``content_block_start`` or ``content_block_delta`` whose
block or delta carries an unknown tag is skipped.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from ..core.exceptions import MalformedEventError
from ..core.structured_logging import get_logger
from ..models.responses import CONTENT_BLOCK_TYPES
from ..models.streaming import DELTA_TYPES, EVENT_TYPES, StreamEvent

logger = get_logger(__name__)

# event type -> (nested field, known tags, tag assumed when absent)
_NESTED_TAGS: dict[str, tuple[str, frozenset[str], str | None]] = {
    "content_block_start": ("content_block", CONTENT_BLOCK_TYPES, None),
    "content_block_delta": ("delta", DELTA_TYPES, "text_delta"),
}


def _unknown_nested_tag(event_type: str, payload: dict[str, Any]) -> str | None:
    """Return the nested type tag if it is one this client does not know."""
    if event_type not in _NESTED_TAGS:
        return None

    field, known, default = _NESTED_TAGS[event_type]
    nested = payload.get(field)
    if not isinstance(nested, dict):
        return None

    tag = nested.get("type", default)
    if isinstance(tag, str) and tag not in known:
        return tag
    return None


def parse_event(data: str) -> StreamEvent | None:
    """Parse one frame's data payload.

    Args:
        data: JSON text from the frame's data field

    Returns:
        The typed event, or None if the event type (or the type of the
        block or delta it carries) is not recognized

    Raises:
        MalformedEventError: If the payload is not a JSON object with a
            string ``type`` or a recognized event fails validation
    """
    try:
        payload: Any = json.loads(data)
    except json.JSONDecodeError as exc:
        raise MalformedEventError(data, f"invalid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise MalformedEventError(data, "payload is not a JSON object")

    event_type = payload.get("type")
    if not isinstance(event_type, str):
        raise MalformedEventError(data, "missing event type")

    model = EVENT_TYPES.get(event_type)
    if model is None:
        logger.debug("stream_event_skipped", event_type=event_type)
        return None

    nested_type = _unknown_nested_tag(event_type, payload)
    if nested_type is not None:
        logger.debug("stream_event_skipped", event_type=event_type, nested_type=nested_type)
        return None

    try:
        return model.model_validate(payload)  # type: ignore[return-value]
    except ValidationError as exc:
        raise MalformedEventError(data, str(exc), event_type=event_type) from exc
