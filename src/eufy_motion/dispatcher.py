from __future__ import annotations

import logging
from typing import Optional

from .handshake import HandshakeSequencer
from .messages import Command, InboundMessage

logger = logging.getLogger(__name__)

PROPERTY_CHANGED = "property changed"
MOTION_DETECTED = "motionDetected"


class MotionState:
    """The derived motion flag. Only the dispatcher writes it."""

    def __init__(self, value: bool = False) -> None:
        self._value = value

    @property
    def value(self) -> bool:
        return self._value

    def set(self, value: bool) -> None:
        if value != self._value:
            logger.info("MotionState changed from %s to %s", self._value, value)
        self._value = value

    def __bool__(self) -> bool:
        return self._value


class EventDispatcher:
    """
    Routes decoded messages for one connection attempt.

    - handshake acks go to the sequencer (the resulting command is handed back to the caller)
    - motionDetected property changes for the watched serial update MotionState
    - everything else is dropped
    """

    def __init__(self, watched_entity_id: str, motion: MotionState, sequencer: HandshakeSequencer) -> None:
        self.watched_entity_id = watched_entity_id
        self.motion = motion
        self.sequencer = sequencer

    def handle(self, message: InboundMessage) -> Optional[Command]:
        reply = self.sequencer.on_message(message)

        event = message.event
        if message.type == "event" and event is not None:
            if event.event_name == PROPERTY_CHANGED and event.attribute_name == MOTION_DETECTED:
                if event.entity_id == self.watched_entity_id:
                    self.motion.set(bool(event.new_value))
                else:
                    logger.debug("Ignoring motion event for other device %s", event.entity_id)

        return reply
