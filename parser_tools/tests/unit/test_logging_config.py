"""Unit tests for parser_tools.logging_config."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from parser_tools.config import Settings
from parser_tools.logging_config import JSONFormatter, configure_logging


@pytest.fixture()
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def _record(msg: str = "hello %s", args: tuple = ("world",), **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="parser_tools.test",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=args,
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


# ---------------------------------------------------------------------------
# JSONFormatter
# ---------------------------------------------------------------------------


class TestJSONFormatter:
    def test_core_fields(self):
        payload = json.loads(JSONFormatter().format(_record()))
        assert payload["level"] == "WARNING"
        assert payload["logger"] == "parser_tools.test"
        assert payload["message"] == "hello world"
        assert payload["timestamp"].endswith("+00:00")

    def test_single_line(self):
        assert "\n" not in JSONFormatter().format(_record())

    def test_sql_preview_included(self):
        payload = json.loads(JSONFormatter().format(_record(sql_preview="SELEC * FRM;")))
        assert payload["sql_preview"] == "SELEC * FRM;"

    def test_sql_preview_absent_by_default(self):
        payload = json.loads(JSONFormatter().format(_record()))
        assert "sql_preview" not in payload
        assert "exc_info" not in payload

    def test_exception_info(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = _record()
            record.exc_info = sys.exc_info()
        payload = json.loads(JSONFormatter().format(record))
        assert "ValueError: boom" in payload["exc_info"]


# ---------------------------------------------------------------------------
# configure_logging
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    def test_installs_single_handler(self, restore_root_logger):
        handler = configure_logging(Settings())
        assert restore_root_logger.handlers == [handler]

    def test_plain_formatter_by_default(self, restore_root_logger):
        handler = configure_logging(Settings())
        assert not isinstance(handler.formatter, JSONFormatter)

    def test_structured_formatter(self, restore_root_logger):
        handler = configure_logging(Settings(structured_logging=True))
        assert isinstance(handler.formatter, JSONFormatter)

    def test_level_from_settings(self, restore_root_logger):
        configure_logging(Settings(log_level="ERROR"))
        assert restore_root_logger.level == logging.ERROR

    def test_debug_overrides_level(self, restore_root_logger):
        configure_logging(Settings(log_level="ERROR", debug=True))
        assert restore_root_logger.level == logging.DEBUG

    def test_reads_environment_when_no_settings(self, restore_root_logger, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PARSER_TOOLS_STRUCTURED_LOGGING", "true")
        handler = configure_logging()
        assert isinstance(handler.formatter, JSONFormatter)

    def test_repeated_calls_do_not_stack_handlers(self, restore_root_logger):
        configure_logging(Settings())
        configure_logging(Settings())
        assert len(restore_root_logger.handlers) == 1
