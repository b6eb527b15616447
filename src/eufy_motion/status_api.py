from __future__ import annotations

import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI
from pydantic import BaseModel

from .session import MotionSession


class HealthOut(BaseModel):
    status: str
    time_utc: datetime

    model_config = {"json_schema_extra": {"examples": [{"status": "ok", "time_utc": "2026-02-18T12:00:00Z"}]}}


class StatusOut(BaseModel):
    watched_entity_id: str
    server_endpoint: str
    motion_detected: bool
    supervisor_state: str
    handshake_state: str
    attempts: int
    last_error: Optional[str] = None
    uptime_seconds: int

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "watched_entity_id": "T8210N0123",
                    "server_endpoint": "ws://127.0.0.1:3000",
                    "motion_detected": False,
                    "supervisor_state": "running",
                    "handshake_state": "streaming",
                    "attempts": 1,
                    "last_error": None,
                    "uptime_seconds": 42,
                }
            ]
        }
    }


class ConfigIn(BaseModel):
    server_endpoint: Optional[str] = None
    watched_entity_id: Optional[str] = None


class ConfigOut(BaseModel):
    server_endpoint: str
    watched_entity_id: str


def create_app(session: MotionSession, *, manage_session: bool = True) -> FastAPI:
    """
    Create the local status API.

    With manage_session=True the app lifespan starts the session on startup and
    releases it on shutdown, so `uvicorn.run(app)` is all the CLI needs.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if manage_session:
            session.start()
        yield
        if manage_session:
            session.stop()

    app = FastAPI(
        title="eufy motion agent - Status API",
        version="0.1.0",
        description="Local endpoints to check the eufy-security-ws session and the current motion state.",
        lifespan=lifespan,
    )

    started_monotonic = time.monotonic()

    @app.get("/health", response_model=HealthOut, tags=["health"])
    def health() -> HealthOut:
        """Liveness check: returns OK if the agent process is running."""
        return HealthOut(status="ok", time_utc=datetime.now(timezone.utc))

    @app.get("/status", response_model=StatusOut, tags=["session"])
    def status() -> StatusOut:
        """Snapshot of the session: motion flag, lifecycle and handshake state, last failure."""
        cfg = session.config
        return StatusOut(
            watched_entity_id=cfg.watched_entity_id,
            server_endpoint=cfg.server_endpoint,
            motion_detected=session.motion_detected,
            supervisor_state=session.state.value,
            handshake_state=session.handshake_state.value,
            attempts=session.attempts,
            last_error=session.last_error,
            uptime_seconds=int(time.monotonic() - started_monotonic),
        )

    @app.put("/config", response_model=ConfigOut, tags=["session"])
    def update_config(body: ConfigIn) -> ConfigOut:
        """Change endpoint and/or serial number. Applied on the next connection attempt."""
        cfg = session.update_config(
            server_endpoint=body.server_endpoint,
            watched_entity_id=body.watched_entity_id,
        )
        return ConfigOut(server_endpoint=cfg.server_endpoint, watched_entity_id=cfg.watched_entity_id)

    return app
