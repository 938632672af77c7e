"""Logging initialization."""

from __future__ import annotations

import logging

from carevoice.config.logging import LOG_LEVEL, LOG_FORMAT, SHOW_TRANSPORT_LOGS


def configure_logging() -> None:
    # websockets and httpx are chatty at DEBUG. Keep them tame unless explicitly enabled.
    if not SHOW_TRANSPORT_LOGS:
        logging.getLogger("websockets").setLevel(logging.WARNING)
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)


__all__ = ["configure_logging"]
