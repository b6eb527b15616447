from __future__ import annotations

import json
from typing import Any, Optional, Union

from .errors import DecodeError
from .messages import Command, EventNotification, InboundMessage


def encode(command: Command) -> str:
    """
    Serialize one command into a JSON text frame.

    Example: {"messageId":"1","command":"set_api_schema","schemaVersion":7}
    """
    return command.model_dump_json(by_alias=True, exclude_none=True)


def _parse_message_id(value: Any) -> int | None:
    """
    The server echoes messageId back as a string, but be lenient:
    "1", 1 and 1.0 all mean id 1. Anything non-numeric -> None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _text(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _parse_event(value: Any) -> Optional[EventNotification]:
    if not isinstance(value, dict):
        return None

    # Serial numbers are strings in practice; compare as text regardless.
    serial = value.get("serialNumber")
    return EventNotification(
        event_name=_text(value.get("event")),
        entity_id=str(serial) if serial is not None else None,
        attribute_name=_text(value.get("name")),
        new_value=value.get("value"),
    )


def decode(frame: Union[str, bytes]) -> InboundMessage:
    """
    Parse one inbound frame into an InboundMessage.

    This function is PURE (no sockets, no logging) so it's easy to unit test.
    Raises DecodeError on anything that is not a JSON object.
    Unknown fields and unknown message shapes are fine; they just decode with nothing set.
    """
    if isinstance(frame, (bytes, bytearray)):
        try:
            frame = frame.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Frame is not valid UTF-8: {e}") from e

    try:
        obj = json.loads(frame)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Invalid JSON: {e}") from e

    if not isinstance(obj, dict):
        raise DecodeError(f"Expected a JSON object, got {type(obj).__name__}")

    msg_type = obj.get("type")
    event = _parse_event(obj.get("event")) if msg_type == "event" else None

    return InboundMessage(
        message_id=_parse_message_id(obj.get("messageId")),
        type=_text(msg_type),
        event=event,
        raw=obj,
    )
