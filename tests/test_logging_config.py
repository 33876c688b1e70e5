"""Tests for logging configuration."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from logging_config import StructuredFormatter, configure_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestStructuredFormatter:
    def test_basic_json_output(self) -> None:
        record = logging.LogRecord(
            name="canvas",
            level=logging.WARNING,
            pathname="canvas.py",
            lineno=10,
            msg="Stroke already active, ignoring begin at (%d, %d)",
            args=(3, 4),
            exc_info=None,
        )
        data = json.loads(StructuredFormatter().format(record))
        assert data["level"] == "WARNING"
        assert data["logger"] == "canvas"
        assert data["message"] == "Stroke already active, ignoring begin at (3, 4)"
        assert "timestamp" in data
        assert "extra" not in data

    def test_extra_fields_are_collected(self) -> None:
        record = logging.LogRecord("tools", logging.INFO, "tools.py", 1, "hi", (), None)
        record.action = "undo"
        record.cells = {(1, 2)}
        data = json.loads(StructuredFormatter().format(record))
        assert data["extra"]["action"] == "undo"
        assert data["extra"]["cells"] == "{(1, 2)}"


class TestConfigureLogging:
    def test_text_format_to_stream(self) -> None:
        stream = StringIO()
        configure_logging(json_format=False, log_level=logging.DEBUG, stream=stream)
        logging.getLogger("history").debug("History recorded")
        assert "[history] History recorded" in stream.getvalue()

    def test_json_format_to_stream(self) -> None:
        stream = StringIO()
        configure_logging(json_format=True, stream=stream)
        logging.getLogger("canvas").info("committed")
        assert json.loads(stream.getvalue().strip())["message"] == "committed"

    def test_replaces_existing_handlers(self) -> None:
        configure_logging(stream=StringIO())
        configure_logging(stream=StringIO())
        assert len(logging.getLogger().handlers) == 1
