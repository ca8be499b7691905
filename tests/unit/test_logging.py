"""Unit tests for structured logging."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

from repo_scaffold.scaffold.logging import JsonFormatter, configure_logging


def test_json_formatter_includes_extra_fields() -> None:
    record = logging.LogRecord(
        name="repo_scaffold.test",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="Template %s",
        args=("copied",),
        exc_info=None,
    )
    record.target = "/tmp/demo"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "repo_scaffold.test"
    assert payload["message"] == "Template copied"
    assert payload["extra"] == {"target": "/tmp/demo"}


def test_json_formatter_includes_exception() -> None:
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord(
            name="x",
            level=logging.ERROR,
            pathname=__file__,
            lineno=1,
            msg="failed",
            args=(),
            exc_info=sys.exc_info(),
        )

    payload = json.loads(JsonFormatter().format(record))

    assert "RuntimeError: boom" in payload["exception"]


def test_configure_logging_replaces_handlers() -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        configure_logging("debug")
        configure_logging("info")

        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
        assert root.level == logging.INFO
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)


def test_json_formatter_renders_paths_and_stack() -> None:
    logger = logging.getLogger("repo_scaffold.test.stack")
    record = logger.makeRecord(
        logger.name,
        logging.INFO,
        __file__,
        1,
        "copied",
        (),
        None,
        extra={"target": Path("/tmp/demo")},
        sinfo="Stack (most recent call last):\n  frame",
    )

    payload = json.loads(JsonFormatter().format(record))

    assert payload["extra"] == {"target": str(Path("/tmp/demo"))}
    assert "frame" in payload["stack"]
