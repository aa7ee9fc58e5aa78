# tests/unit/logging/test_unit_logger.py — v3
"""Tests for logging/logger.py — logger factory and formatters."""

from __future__ import annotations

import json
import logging
import sys
from logging.handlers import RotatingFileHandler

import pytest

from llmbridge.config.settings import Settings
from llmbridge.logging.context import clear_context, set_call_context
from llmbridge.logging.logger import (
    JsonFormatter,
    TextFormatter,
    get_logger,
    parse_size,
    setup_logging,
    setup_logging_from_settings,
)


def _record(msg: str = "Hello") -> logging.LogRecord:
    return logging.LogRecord(
        name="test", level=logging.INFO, pathname="", lineno=0,
        msg=msg, args=(), exc_info=None,
    )


class TestJsonFormatter:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_format_basic(self):
        parsed = json.loads(JsonFormatter().format(_record()))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Hello"
        assert "timestamp" in parsed
        assert "context" not in parsed

    def test_format_with_context(self):
        set_call_context("bedrock", "image_recognition", "amazon.nova-lite-v1:0")
        parsed = json.loads(JsonFormatter().format(_record()))
        assert parsed["context"] == {
            "provider": "bedrock",
            "operation": "image_recognition",
            "model": "amazon.nova-lite-v1:0",
        }

    def test_format_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = _record("failed")
            record.exc_info = sys.exc_info()
        parsed = json.loads(JsonFormatter().format(record))
        assert "ValueError: boom" in parsed["exception"]


class TestTextFormatter:
    def teardown_method(self):
        clear_context()

    def test_format_basic(self):
        output = TextFormatter().format(_record("Hello text"))
        assert "Hello text" in output
        assert "INFO" in output

    def test_format_with_context(self):
        set_call_context("gemini", "text_completion")
        output = TextFormatter().format(_record())
        assert "[gemini]" in output
        assert "(text_completion)" in output


class TestGetLogger:
    def test_returns_logger(self):
        assert get_logger("adapters").name == "llmbridge.adapters"


class TestParseSize:
    def test_units(self):
        assert parse_size("10KB") == 10 * 1024
        assert parse_size("10 mb") == 10 * 1024**2
        assert parse_size("1GB") == 1024**3

    def test_invalid(self):
        with pytest.raises(ValueError, match="Invalid size"):
            parse_size("ten megabytes")


class TestSetupLogging:
    def teardown_method(self):
        logging.getLogger("llmbridge").handlers.clear()

    def test_json_format(self):
        root = setup_logging(level="DEBUG", log_format="json")
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_no_duplicate_handlers(self):
        setup_logging()
        root = setup_logging()
        assert len(root.handlers) == 1

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "llmbridge.log"
        root = setup_logging(log_file=log_file, rotation="1KB", retention=2)
        file_handlers = [h for h in root.handlers if isinstance(h, RotatingFileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].maxBytes == 1024
        assert file_handlers[0].backupCount == 2
        assert log_file.parent.is_dir()
        file_handlers[0].close()


class TestSetupLoggingFromSettings:
    def teardown_method(self):
        logging.getLogger("llmbridge").handlers.clear()

    def test_env_level_and_format(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        monkeypatch.setenv("LOG_FORMAT", "json")
        root = setup_logging_from_settings(Settings(_env_file=None))
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_log_file_settings(self, tmp_path):
        settings = Settings(
            _env_file=None,
            log_file=tmp_path / "bridge.log",
            log_rotation="2KB",
            log_retention=3,
        )
        root = setup_logging_from_settings(settings)
        file_handlers = [h for h in root.handlers if isinstance(h, RotatingFileHandler)]
        assert file_handlers[0].maxBytes == 2048
        assert file_handlers[0].backupCount == 3
        file_handlers[0].close()

    def test_loads_settings_when_omitted(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        root = setup_logging_from_settings()
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, TextFormatter)
