"""Console logging for the ``tweet-sentiment-*`` commands.

``rich`` output is meant for interactive runs; ``plain`` writes one
timestamped line per record, which suits batch jobs whose output is
collected into files.
"""
from __future__ import annotations

import logging
from typing import Optional

from rich.logging import RichHandler

LOG_FORMATS = ("rich", "plain")
PLAIN_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# httpx logs every request at INFO; one line per classified tweet drowns the report.
CHATTY_LOGGERS = ("httpx", "httpcore")


def _handler(fmt: str) -> logging.Handler:
    if fmt == "rich":
        handler: logging.Handler = RichHandler(rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="%H:%M:%S"))
        return handler
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
    return handler


def setup_logging(level: str = "INFO", fmt: str = "rich") -> None:
    if fmt not in LOG_FORMATS:
        raise ValueError(f"Unknown log format '{fmt}'. Must be one of {list(LOG_FORMATS)}")

    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logging.basicConfig(level=numeric_level, handlers=[_handler(fmt)])
    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["LOG_FORMATS", "setup_logging", "get_logger"]
