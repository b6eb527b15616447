import logging

# Third-party loggers that are noisy at INFO (one line per connection handshake).
_QUIET_LOGGERS = ("websockets", "uvicorn.access")


def configure_logging(level: str = "INFO") -> None:
    """
    Configure logging for the motion session agent.

    Below DEBUG, the websockets library only reports warnings so reconnect loops
    don't bury the session's own messages.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    quiet_level = numeric_level if numeric_level <= logging.DEBUG else max(numeric_level, logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)
