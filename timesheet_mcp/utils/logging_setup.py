"""Logging setup for the server process."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler

from timesheet_mcp.config import Settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_HANDLER_TAG = "_timesheet_mcp"


def setup_logging(settings: Settings) -> None:
    """
    Configure the root logger from settings.

    The console handler writes to stderr because stdout carries the MCP stdio
    protocol. Calling this again replaces the handlers it installed before.
    """
    level = getattr(logging, settings.log_level, logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

    root = logging.getLogger()
    root.setLevel(level)
    for handler in [h for h in root.handlers if getattr(h, _HANDLER_TAG, False)]:
        root.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if settings.log_file is not None:
        log_file = settings.log_file.expanduser()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_file,
                maxBytes=settings.log_max_bytes,
                backupCount=settings.log_backup_count,
                encoding="utf-8",
            )
        )

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        setattr(handler, _HANDLER_TAG, True)
        root.addHandler(handler)

    logging.getLogger(__name__).info(
        "Logging initialized at %s; file: %s", settings.log_level, settings.log_file or "-"
    )
