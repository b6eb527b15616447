from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from .messages import Command, InboundMessage

logger = logging.getLogger(__name__)

# eufy-security-ws API schema this client speaks.
SCHEMA_VERSION = 7

FIRST_MESSAGE_ID = 1


class HandshakeState(str, Enum):
    IDLE = "idle"
    AWAITING_SCHEMA_ACK = "awaiting_schema_ack"
    SUBSCRIBING = "subscribing"
    STREAMING = "streaming"


class MessageIdCounter:
    """
    Monotonically increasing message ids for one connection attempt.

    A fresh counter is created per attempt, so the negotiation request
    always carries FIRST_MESSAGE_ID.
    """

    def __init__(self, start: int = FIRST_MESSAGE_ID) -> None:
        self._next = start

    def next(self) -> int:
        value = self._next
        self._next += 1
        return value

    @property
    def peek(self) -> int:
        return self._next


class HandshakeSequencer:
    """
    Drives set_api_schema -> start_listening for one connection.

    The sequencer never touches the socket. It hands back the Command to send
    and the session does the sending.
    """

    def __init__(self, ids: Optional[MessageIdCounter] = None, schema_version: int = SCHEMA_VERSION) -> None:
        self.ids = ids or MessageIdCounter()
        self.schema_version = schema_version
        self.state = HandshakeState.IDLE
        self.negotiation_id: Optional[int] = None

    def open(self) -> Command:
        """Transport is open: build the schema negotiation command."""
        self.negotiation_id = self.ids.next()
        self.state = HandshakeState.AWAITING_SCHEMA_ACK
        logger.debug("Negotiating schema %s with messageId=%s", self.schema_version, self.negotiation_id)
        return Command(
            message_id=str(self.negotiation_id),
            command="set_api_schema",
            schema_version=self.schema_version,
        )

    def on_message(self, message: InboundMessage) -> Optional[Command]:
        """
        Returns the start_listening command when `message` acks the negotiation, else None.
        """
        if self.state is HandshakeState.IDLE:
            # Protocol error, but not worth killing the session over.
            logger.debug("Ignoring message received before handshake started: %s", message.raw)
            return None

        if self.state is not HandshakeState.AWAITING_SCHEMA_ACK:
            return None

        if message.message_id is None or message.message_id != self.negotiation_id:
            return None

        self.state = HandshakeState.SUBSCRIBING
        listen_id = self.ids.next()
        logger.debug("Schema acknowledged; subscribing with messageId=%s", listen_id)
        return Command(message_id=str(listen_id), command="start_listening")

    def subscription_sent(self) -> None:
        """
        start_listening has gone out. There is no ack for it; the send itself completes the handshake.
        """
        if self.state is HandshakeState.SUBSCRIBING:
            self.state = HandshakeState.STREAMING

    @property
    def streaming(self) -> bool:
        return self.state is HandshakeState.STREAMING
