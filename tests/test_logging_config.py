"""Tests for structured logging and session context."""

import json
import logging
import sys

import pytest

from src.logging_config.config import LogFormat, LoggingConfig, LogLevel
from src.logging_config.context import (
    SessionContext,
    generate_session_id,
    get_context_dict,
    get_session_id,
    get_user_id,
)
from src.logging_config.setup import (
    ConsoleFormatter,
    StructuredFormatter,
    configure_logging,
    get_logger,
)


def _record(msg="test", level=logging.INFO, name="test", lineno=1, exc_info=None):
    return logging.LogRecord(
        name=name, level=level, pathname="test.py",
        lineno=lineno, msg=msg, args=(), exc_info=exc_info,
    )


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestLoggingConfig:
    """Tests for logging configuration dataclasses."""

    def test_default_config_values(self):
        config = LoggingConfig()
        assert config.level == LogLevel.INFO
        assert config.format == LogFormat.JSON
        assert config.include_caller is True
        assert config.service_name == "floating-notifications"

    def test_custom_config(self):
        config = LoggingConfig(level=LogLevel.DEBUG, format=LogFormat.CONSOLE, service_name="test")
        assert config.level == LogLevel.DEBUG
        assert config.format == LogFormat.CONSOLE
        assert config.service_name == "test"

    def test_log_format_enum_values(self):
        assert LogFormat.JSON.value == "json"
        assert LogFormat.CONSOLE.value == "console"


class TestSessionContext:
    """Tests for session context management."""

    def test_generate_session_id_unique(self):
        ids = {generate_session_id() for _ in range(50)}
        assert len(ids) == 50

    def test_context_sets_and_clears_ids(self):
        with SessionContext(session_id="s-1", user_id="user_42"):
            assert get_session_id() == "s-1"
            assert get_user_id() == "user_42"
        assert get_session_id() == ""
        assert get_user_id() == ""

    def test_auto_generates_session_id(self):
        with SessionContext() as ctx:
            assert ctx.session_id != ""
            assert get_session_id() == ctx.session_id

    def test_bind_extra_context(self):
        with SessionContext(session_id="s-1") as ctx:
            ctx.bind(notification_id="n-7")
            assert get_context_dict()["notification_id"] == "n-7"
        assert get_context_dict() == {}

    def test_nested_contexts_restore_outer(self):
        with SessionContext(session_id="outer"):
            with SessionContext(session_id="inner"):
                assert get_session_id() == "inner"
            assert get_session_id() == "outer"


class TestStructuredFormatter:
    """Tests for JSON structured log formatting."""

    def test_formats_as_json(self):
        parsed = json.loads(StructuredFormatter().format(_record("hello world")))
        assert parsed["message"] == "hello world"
        assert parsed["level"] == "INFO"
        assert parsed["logger"] == "test"
        assert parsed["service"] == "floating-notifications"
        assert "timestamp" in parsed

    def test_includes_caller_info(self):
        parsed = json.loads(StructuredFormatter(include_caller=True).format(_record(lineno=42)))
        assert parsed["line"] == 42
        assert "function" in parsed

    def test_excludes_caller_when_disabled(self):
        parsed = json.loads(StructuredFormatter(include_caller=False).format(_record(lineno=42)))
        assert "line" not in parsed

    def test_includes_session_context(self):
        with SessionContext(session_id="ctx-test", user_id="u1"):
            parsed = json.loads(StructuredFormatter().format(_record()))
        assert parsed["session_id"] == "ctx-test"
        assert parsed["user_id"] == "u1"

    def test_formats_exception(self):
        try:
            raise ValueError("test error")
        except ValueError:
            record = _record("failed", level=logging.ERROR, exc_info=sys.exc_info())
        parsed = json.loads(StructuredFormatter().format(record))
        assert parsed["exception"]["type"] == "ValueError"
        assert "test error" in parsed["exception"]["message"]

    def test_includes_pipeline_extra_fields(self):
        record = _record()
        record.notification_id = "n-1"
        record.queue_length = 3
        parsed = json.loads(StructuredFormatter().format(record))
        assert parsed["notification_id"] == "n-1"
        assert parsed["queue_length"] == 3


class TestConsoleFormatter:
    """Tests for colored console log formatting."""

    def test_formats_readable_output(self):
        output = ConsoleFormatter().format(_record("hello", name="test.module"))
        assert "test.module" in output
        assert "hello" in output

    def test_includes_context_info(self):
        with SessionContext(session_id="abc"):
            output = ConsoleFormatter().format(_record())
        assert "session_id=abc" in output

    def test_has_color_codes(self):
        output = ConsoleFormatter().format(_record(level=logging.ERROR))
        assert "\033[31m" in output


class TestConfigureLogging:
    """Tests for the configure_logging setup function."""

    def test_json_format(self):
        configure_logging(LoggingConfig(format=LogFormat.JSON))
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, StructuredFormatter)

    def test_console_format(self):
        configure_logging(LoggingConfig(format=LogFormat.CONSOLE))
        assert isinstance(logging.getLogger().handlers[0].formatter, ConsoleFormatter)

    def test_sets_log_level(self):
        configure_logging(LoggingConfig(level=LogLevel.DEBUG))
        assert logging.getLogger().level == logging.DEBUG

    def test_get_logger_returns_logger(self):
        logger = get_logger("test.module")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "test.module"

    def test_env_var_override_level(self, monkeypatch):
        monkeypatch.setenv("FLOATNOTE_LOG_LEVEL", "DEBUG")
        effective = configure_logging(LoggingConfig(level=LogLevel.ERROR))
        assert effective.level == LogLevel.DEBUG
        assert logging.getLogger().level == logging.DEBUG

    def test_env_var_override_format(self, monkeypatch):
        monkeypatch.setenv("FLOATNOTE_LOG_FORMAT", "CONSOLE")
        configure_logging(LoggingConfig(format=LogFormat.JSON))
        assert isinstance(logging.getLogger().handlers[0].formatter, ConsoleFormatter)

    def test_invalid_env_values_ignored(self, monkeypatch):
        monkeypatch.setenv("FLOATNOTE_LOG_LEVEL", "LOUD")
        effective = configure_logging(LoggingConfig(level=LogLevel.WARNING))
        assert effective.level == LogLevel.WARNING
