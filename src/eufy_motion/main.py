from __future__ import annotations

import argparse
import asyncio
import logging

from .config import AgentSettings
from .logging import configure_logging
from .session import MotionSession

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="eufy motion agent - eufy-security-ws motion session")
    parser.add_argument("--print-config", action="store_true", help="Print resolved configuration and exit.")
    parser.add_argument("--run", action="store_true", help="Run the motion session until interrupted.")
    parser.add_argument(
        "--http-serve", action="store_true", help="Run the motion session behind the status API (/health, /status)."
    )
    return parser


def create_session(cfg: AgentSettings) -> MotionSession:
    return MotionSession(
        cfg.session_config(),
        startup_delay=cfg.startup_delay_sec,
        retry_delay=cfg.retry_delay_sec,
        ping_interval=cfg.ping_interval_sec,
        schema_version=cfg.schema_version,
    )


def run(argv: list[str] | None = None, cfg: AgentSettings | None = None) -> int:
    """
    Agent entrypoint.
    """
    try:
        args = build_parser().parse_args(argv)

        # Load settings from environment / .env
        cfg = cfg or AgentSettings()

        configure_logging(cfg.log_level)

        logger.info("eufy motion agent starting")
        logger.info(
            "Resolved config: endpoint=%s serial=%s schema=%s",
            cfg.server_endpoint or "<unset>", cfg.watched_entity_id or "<unset>", cfg.schema_version
        )

        if args.print_config:
            print(cfg.model_dump())
            return 0

        if args.http_serve:
            import uvicorn
            from .status_api import create_app

            app = create_app(create_session(cfg))

            logger.info("Starting status API at http://%s:%s", cfg.http_host, cfg.http_port)
            uvicorn.run(
                app,
                host=cfg.http_host,
                port=cfg.http_port,
                log_level=cfg.log_level.lower(),
            )
            return 0

        if args.run:
            session = create_session(cfg)
            try:
                asyncio.run(session.run())
            except KeyboardInterrupt:
                logger.info("Interrupted, shutting down")
            return 0

        logger.info("Nothing to do. Use --print-config, --run or --http-serve.")
        return 0

    except Exception:
        # Log unexpected exceptions so the agent is diagnosable.
        logger.exception("eufy motion agent crashed due to an unexpected error")
        if cfg is not None and (cfg.debug or cfg.log_level.upper() == "DEBUG"):
            raise
        return 1


if __name__ == "__main__":
    raise SystemExit(run())
