from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from pydantic import BaseModel, ConfigDict
from websockets.asyncio.client import connect
from websockets.exceptions import ConnectionClosed, WebSocketException

from .codec import decode, encode
from .dispatcher import EventDispatcher, MotionState
from .errors import ConfigurationError, SessionError, TransportClosed, TransportError
from .handshake import SCHEMA_VERSION, HandshakeSequencer, HandshakeState, MessageIdCounter
from .prober import PING_INTERVAL_SEC, LivenessProber

logger = logging.getLogger(__name__)

STARTUP_DELAY_SEC = 5.0
RETRY_DELAY_SEC = 5.0


class SessionConfig(BaseModel):
    """
    Connection parameters. A snapshot is taken at the start of every attempt.
    """

    model_config = ConfigDict(frozen=True)

    server_endpoint: str = ""
    watched_entity_id: str = ""


class SupervisorState(str, Enum):
    RUNNING = "running"
    STOPPED = "stopped"


class MotionSession:
    """
    One indefinitely retried connection to eufy-security-ws for a single device.

    run() loops: attempt -> log why it ended -> wait -> attempt ... until stop().
    Everything runs on one asyncio loop, so message handling, the prober and the
    supervisor never mutate state concurrently.

    `connector` and `sleep` exist so tests can swap the network and the
    supervisor's clock (startup delay and retry backoff).
    """

    def __init__(
        self,
        config: SessionConfig,
        *,
        startup_delay: float = STARTUP_DELAY_SEC,
        retry_delay: float = RETRY_DELAY_SEC,
        ping_interval: float = PING_INTERVAL_SEC,
        schema_version: int = SCHEMA_VERSION,
        connector: Callable[..., Any] = connect,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._config = config
        self.startup_delay = startup_delay
        self.retry_delay = retry_delay
        self.ping_interval = ping_interval
        self.schema_version = schema_version
        self._connector = connector
        self._sleep = sleep

        self.motion = MotionState()
        self.state = SupervisorState.RUNNING
        self.attempts = 0
        self.last_error: Optional[str] = None

        self._sequencer: Optional[HandshakeSequencer] = None
        # State the most recent attempt reached before it ended.
        self.last_handshake_state = HandshakeState.IDLE
        self._prober: Optional[LivenessProber] = None
        self._task: Optional[asyncio.Task] = None

    # --- Observable state ---

    @property
    def motion_detected(self) -> bool:
        return self.motion.value

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def stopped(self) -> bool:
        return self.state is SupervisorState.STOPPED

    @property
    def handshake_state(self) -> HandshakeState:
        """Handshake state of the live connection; idle between attempts."""
        if self._sequencer is None:
            return HandshakeState.IDLE
        return self._sequencer.state

    @property
    def prober(self) -> Optional[LivenessProber]:
        """Prober of the current (or most recent) attempt."""
        return self._prober

    # --- Control ---

    def update_config(self, *, server_endpoint: Optional[str] = None, watched_entity_id: Optional[str] = None) -> SessionConfig:
        """
        Replace connection parameters. Takes effect on the next attempt.
        """
        changes: dict[str, str] = {}
        if server_endpoint is not None:
            changes["server_endpoint"] = server_endpoint
        if watched_entity_id is not None:
            changes["watched_entity_id"] = watched_entity_id

        self._config = self._config.model_copy(update=changes)
        logger.info(
            "Session config updated: endpoint=%s serial=%s",
            self._config.server_endpoint, self._config.watched_entity_id
        )
        return self._config

    def start(self) -> asyncio.Task:
        """
        Schedule run() on the running loop and return immediately.
        """
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run(), name="motion-session")
        return self._task

    def stop(self) -> None:
        """
        Release the session. Cooperative: an attempt already in flight runs to its
        natural end, but no further attempt is started.
        """
        if self.stopped:
            return
        self.state = SupervisorState.STOPPED
        logger.info("Session for %s released; no further reconnects", self._config.watched_entity_id)

    # --- Supervisor loop ---

    async def run(self) -> None:
        """
        Keep the session alive until stop(). Never raises except on task cancellation.
        """
        # Delay the first attempt to prevent noisy startup/reload storms.
        logger.info("Session starting in %s seconds", self.startup_delay)
        await self._sleep(self.startup_delay)

        while not self.stopped:
            self.attempts += 1
            serial = self._config.watched_entity_id
            try:
                await self.run_attempt()
            except SessionError as e:
                self.last_error = f"{type(e).__name__}: {e}"
                logger.error(
                    "Session for %s unexpectedly terminated (%s), restarting in %s seconds",
                    serial, self.last_error, self.retry_delay
                )
            except Exception as e:
                # Anything else is retried too, with a traceback in the log.
                self.last_error = f"{type(e).__name__}: {e}"
                logger.exception("Session for %s crashed, restarting in %s seconds", serial, self.retry_delay)

            if self.stopped:
                break

            await self._sleep(self.retry_delay)

        logger.info("Session for %s shut down", self._config.watched_entity_id)

    async def run_attempt(self) -> None:
        """
        One connect-through-terminate cycle.

        Always ends by raising a SessionError subclass:
        ConfigurationError, DecodeError, TransportError or TransportClosed.
        """
        config = self._config
        if not config.server_endpoint:
            raise ConfigurationError("no eufy server endpoint configured")

        sequencer = HandshakeSequencer(MessageIdCounter(), schema_version=self.schema_version)
        dispatcher = EventDispatcher(config.watched_entity_id, self.motion, sequencer)
        self._sequencer = sequencer
        self._prober = None

        try:
            # Built-in keepalive is off; LivenessProber owns pinging.
            async with self._connector(config.server_endpoint, ping_interval=None) as ws:
                logger.info("Connected to %s for %s", config.server_endpoint, config.watched_entity_id)

                prober = LivenessProber(ws.ping, self.ping_interval)
                self._prober = prober
                try:
                    await ws.send(encode(sequencer.open()))
                    prober.start()

                    async for frame in ws:
                        logger.debug("Received frame: %s", frame)
                        reply = dispatcher.handle(decode(frame))
                        if reply is not None:
                            await ws.send(encode(reply))
                            sequencer.subscription_sent()
                            logger.info("Listening for events from %s", config.server_endpoint)
                finally:
                    prober.cancel()

                # Clean close (1000/1001): iteration just ends, so read the code off the connection.
                raise TransportClosed(
                    f"connection closed by server ({ws.close_code} {ws.close_reason})",
                    code=ws.close_code,
                )
        except ConnectionClosed as e:
            code = e.rcvd.code if e.rcvd is not None else None
            raise TransportClosed(f"connection closed ({e})", code=code) from e
        except (OSError, TimeoutError, WebSocketException) as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e
        finally:
            self.last_handshake_state = sequencer.state
            self._sequencer = None
