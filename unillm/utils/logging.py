"""Logging setup shared by the library, the HTTP API and the chat CLI.

Library modules only call ``get_logger(__name__)``. Handlers are installed by
the entry points (``unillm.main`` lifespan and ``scripts/chat_cli.py``) through
``setup_logging``.
"""

import logging
import os
import sys

from pydantic import BaseModel

NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


class LogConfig(BaseModel):
    """Root logger settings used by the API and CLI entry points."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    third_party_level: str = "WARNING"


def setup_logging(config: LogConfig | None = None) -> None:
    """Install a stdout handler on the root logger.

    Called once by an entry point. The level defaults to the LOG_LEVEL env var.
    """
    if config is None:
        config = LogConfig(level=os.getenv("LOG_LEVEL", "INFO"))

    logging.basicConfig(
        level=getattr(logging, config.level.upper()),
        format=config.format,
        datefmt=config.date_format,
        stream=sys.stdout,
        force=True,
    )

    # Transport libraries log every request at INFO
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(config.third_party_level.upper())


def get_logger(name: str, level: str | None = None) -> logging.Logger:
    """Get the logger for a unillm module.

    Adapters log request shapes at DEBUG and vendor failures at WARNING.

    Args:
        name: Module name (typically __name__)
        level: Explicit level; defaults to the LOG_LEVEL env var

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    log_level = level if level else os.getenv("LOG_LEVEL", "INFO")
    logger.setLevel(log_level.upper())

    return logger
