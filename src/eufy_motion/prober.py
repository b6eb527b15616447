from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from websockets.exceptions import ConnectionClosed

logger = logging.getLogger(__name__)

PING_INTERVAL_SEC = 5.0


class LivenessProber:
    """
    Sends a transport-level ping every `interval` seconds for one connection.

    Scoped to a single connection: the session must call cancel() when the
    attempt ends so timers never leak across reconnects.
    """

    def __init__(
        self,
        ping: Callable[[], Awaitable[Any]],
        interval: float = PING_INTERVAL_SEC,
        *,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._ping = ping
        self.interval = interval
        self._sleep = sleep
        self._task: Optional[asyncio.Task] = None
        self.probes_sent = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="liveness-prober")

    def cancel(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self) -> None:
        while True:
            await self._sleep(self.interval)
            try:
                # Empty payload; the pong (if any) is not awaited.
                await self._ping()
            except ConnectionClosed:
                # The receive loop reports the close; nothing more to probe.
                logger.debug("Ping skipped, connection already closed")
                return
            except Exception:
                logger.exception("Liveness ping failed; stopping prober for this connection")
                return
            self.probes_sent += 1
