from __future__ import annotations

import logging

import pytest
from rich.logging import RichHandler

from tweet_sentiment.log_utils import setup_logging


def _configure(level: str, fmt: str = "rich"):
    """Run setup_logging on an empty root logger and return what it installed."""

    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    root.handlers = []
    try:
        setup_logging(level, fmt)
        return root.handlers[:], root.level
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)


@pytest.fixture(autouse=True)
def reset_http_loggers():
    yield
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.NOTSET)


def test_rich_format_installs_a_rich_handler():
    handlers, level = _configure("debug")

    assert level == logging.DEBUG
    assert [type(handler) for handler in handlers] == [RichHandler]


def test_plain_format_uses_timestamped_lines():
    (handler,), _ = _configure("INFO", fmt="plain")

    assert not isinstance(handler, RichHandler)
    assert "%(asctime)s" in handler.formatter._fmt


def test_http_request_logs_are_quieted():
    _configure("INFO")

    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("httpcore").level == logging.WARNING


def test_unknown_level_falls_back_to_info():
    _, level = _configure("chatty", fmt="plain")

    assert level == logging.INFO


def test_unknown_format_is_rejected():
    with pytest.raises(ValueError):
        setup_logging("INFO", fmt="json")
