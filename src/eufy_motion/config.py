from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

from .handshake import SCHEMA_VERSION
from .session import SessionConfig


class AgentSettings(BaseSettings):
    """
    Configuration for the motion session agent.
    """

    # Tell pydantic-settings to load environment variables from .env if present.
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",  # ignore unknown env vars
    )

    # --- eufy-security-ws server ---
    # e.g. ws://127.0.0.1:3000. Empty means "not configured yet"; the session keeps retrying.
    server_endpoint: str = ""

    # Serial number of the device whose motion we track.
    watched_entity_id: str = ""

    schema_version: int = SCHEMA_VERSION

    # --- Timers (seconds) ---
    startup_delay_sec: float = 5.0  # avoid reconnect storms when many sessions start together
    retry_delay_sec: float = 5.0  # wait between a failed attempt and the next one
    ping_interval_sec: float = 5.0  # transport-level keepalive

    # --- Logging ---
    log_level: str = "INFO"
    debug: bool = False

    # --- Local status API ---
    http_host: str = "127.0.0.1"
    http_port: int = 8128

    def session_config(self) -> SessionConfig:
        return SessionConfig(
            server_endpoint=self.server_endpoint,
            watched_entity_id=self.watched_entity_id,
        )
