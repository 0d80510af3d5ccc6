"""Tests for solidity_analyzer.core.logging."""

from __future__ import annotations

import io
import json
import logging
import sys

from solidity_analyzer.core.logging import DevFormatter, JSONFormatter, setup_logging


def _record(msg: str = "hello %s", args: tuple = ("world",), **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="solidity_analyzer.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=args,
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_basic_fields(self):
        entry = json.loads(JSONFormatter().format(_record()))
        assert entry["level"] == "INFO"
        assert entry["logger"] == "solidity_analyzer.test"
        assert entry["message"] == "hello world"
        assert entry["line"] == 10

    def test_context_fields(self):
        entry = json.loads(JSONFormatter().format(_record(path="A.sol", duration_ms=1.5, statements=3)))
        assert entry["path"] == "A.sol"
        assert entry["duration_ms"] == 1.5
        assert entry["statements"] == 3
        assert "provider" not in entry

    def test_exception_info(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = _record()
            record.exc_info = sys.exc_info()
        entry = json.loads(JSONFormatter().format(record))
        assert entry["exception"]["type"] == "ValueError"
        assert entry["exception"]["message"] == "boom"


class TestDevFormatter:
    def test_includes_level_and_path(self):
        line = DevFormatter().format(_record(path="contracts/A.sol"))
        assert "INFO" in line
        assert "[contracts/A.sol] hello world" in line
        assert "solidity_analyzer.test" in line


class TestSetupLogging:
    def test_development_uses_dev_formatter(self):
        stream = io.StringIO()
        setup_logging("development", "debug", stream=stream)
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, DevFormatter)

    def test_production_emits_json(self):
        stream = io.StringIO()
        setup_logging("production", "INFO", stream=stream)
        logging.getLogger("solidity_analyzer.x").info("analyzed", extra={"path": "B.sol"})
        entry = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert entry["message"] == "analyzed"
        assert entry["path"] == "B.sol"

    def test_unknown_level_falls_back_to_info(self):
        setup_logging("staging", "chatty", stream=io.StringIO())
        assert logging.getLogger().level == logging.INFO
