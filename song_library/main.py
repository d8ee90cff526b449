#!/usr/bin/env python3
"""
Song Library - Main Entry Point

Run with ``python -m song_library.main`` or the ``song-library`` script.
"""

import os

# Load .env file (for local development)
from dotenv import load_dotenv
load_dotenv()

import uvicorn

from song_library.common.logging import setup_logging, get_logger
from song_library.core.config import get_settings

logger = get_logger(__name__)


def main():
    """Main entry point."""
    settings = get_settings()

    # env wins over logging-config.yaml only when set explicitly
    setup_logging(
        level=settings.log_level.value if os.getenv("LOG_LEVEL") else None,
        log_file=settings.log_file,
        json_format=settings.log_json if os.getenv("LOG_JSON") else None,
        component="api",
    )

    logger.info(
        "Starting Song Library...",
        data={"host": settings.http_host, "port": settings.http_port, "env": settings.env.value},
    )

    from song_library.api import create_app
    uvicorn.run(
        create_app(settings),
        host=settings.http_host,
        port=settings.http_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
