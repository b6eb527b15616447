from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class Command(BaseModel):
    """
    One outgoing command frame.

    Field names follow Python style; aliases match the eufy-security-ws wire format.
    The message id is string-encoded on the wire.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    message_id: str = Field(..., alias="messageId")
    command: str
    schema_version: Optional[int] = Field(default=None, alias="schemaVersion")


class EventNotification(BaseModel):
    """
    The nested `event` object of an inbound `{"type": "event", ...}` message.

    Transient: the dispatcher consumes it immediately.
    """

    kind: Literal["event"] = "event"
    event_name: Optional[str] = None  # "property changed", "motion detected", ...
    entity_id: Optional[str] = None  # device serial number
    attribute_name: Optional[str] = None  # property name, e.g. "motionDetected"
    new_value: Any = None


class InboundMessage(BaseModel):
    """
    Decoded inbound frame.

    Keep raw for debugging; only message_id and event are interpreted.
    """

    message_id: Optional[int] = None
    type: Optional[str] = None
    event: Optional[EventNotification] = None
    raw: dict[str, Any] = Field(default_factory=dict)
