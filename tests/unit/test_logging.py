"""Unit tests for logging setup."""

from __future__ import annotations

import logging
import sys

import orjson
import pytest

from utils.logging import JsonFormatter, get_logger, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


class TestJsonFormatter:
    """Test JSON rendering."""

    def test_includes_extra_fields(self):
        record = logging.LogRecord(
            "apps.extractor", logging.INFO, __file__, 1, "Collected %d", (3,), None
        )
        record.output_file = "out.csv"

        payload = orjson.loads(JsonFormatter().format(record))

        assert payload["message"] == "Collected 3"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "apps.extractor"
        assert payload["output_file"] == "out.csv"
        assert "args" not in payload

    def test_includes_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord(
                "x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
            )

        payload = orjson.loads(JsonFormatter().format(record))
        assert "RuntimeError: boom" in payload["exc_info"]


class TestSetupLogging:
    """Test setup_logging."""

    def test_level_and_format(self, restore_root_logger):
        setup_logging(level="DEBUG", format_type="text")

        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert not isinstance(restore_root_logger.handlers[0].formatter, JsonFormatter)

    def test_repeat_call_does_not_duplicate_handlers(self, restore_root_logger):
        setup_logging(format_type="json")
        setup_logging(format_type="json")

        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0].formatter, JsonFormatter)

    def test_file_output(self, restore_root_logger, tmp_path):
        log_file = tmp_path / "logs" / "extractor.log"
        setup_logging(level="INFO", format_type="json", output=log_file)

        get_logger("tests.logging").info("hello", extra={"page": 2})
        for handler in restore_root_logger.handlers:
            handler.flush()

        line = log_file.read_text(encoding="utf-8").splitlines()[-1]
        assert orjson.loads(line)["page"] == 2
