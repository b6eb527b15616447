from __future__ import annotations

from typing import Optional


class SessionError(Exception):
    """
    Base class for everything that ends one connection attempt.

    The supervisor catches this, logs it and retries. Nothing here is fatal to the process.
    """


class ConfigurationError(SessionError):
    """Endpoint (or other required setting) missing; no connection was attempted."""


class DecodeError(SessionError):
    """Inbound frame could not be decoded into a JSON object."""


class TransportError(SessionError):
    """Network or protocol failure reported by the WebSocket layer."""


class TransportClosed(SessionError):
    """Connection closed, either gracefully or by the remote side."""

    def __init__(self, message: str, code: Optional[int] = None) -> None:
        super().__init__(message)
        self.code = code
