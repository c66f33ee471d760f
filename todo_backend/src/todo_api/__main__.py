"""
Command-line entry point: ``todo-api`` or ``python -m todo_api``.

Configures logging and serves ``todo_api.main:app`` with uvicorn on HOST:PORT.
"""
from __future__ import annotations

import logging
import sys

import uvicorn

from .logging_utils import configure_logging
from .settings import get_settings

logger = logging.getLogger("todo_api")


def main() -> int:
    """Run the server until interrupted. Returns a process exit code."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Starting on %s:%s", settings.host, settings.port)
    try:
        uvicorn.run(
            "todo_api.main:app",
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
        )
    except Exception:
        logger.exception("Failed to start server")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
