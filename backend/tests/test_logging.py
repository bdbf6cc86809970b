# tests/test_logging.py
"""
Tests for the structured logging setup.
"""

import json
import logging
from decimal import Decimal

from ops.logging_config import APP_LOGGERS, JsonFormatter, get_logging_config


def _record(msg="Journal entry posted", level=logging.INFO, **extra):
    record = logging.LogRecord("accounting.commands", level, __file__, 10, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:

    def test_ledger_context_is_top_level(self):
        record = _record(company="acme", entry_number="JE-2026-000001", lines=2)

        payload = json.loads(JsonFormatter().format(record))

        assert payload["message"] == "Journal entry posted"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "accounting.commands"
        assert payload["company"] == "acme"
        assert payload["entry_number"] == "JE-2026-000001"
        assert payload["extra"] == {"lines": 2}

    def test_rejection_code_is_top_level(self):
        record = _record("Journal entry rejected", code="unbalanced", reason="Entry is not balanced.")

        payload = json.loads(JsonFormatter().format(record))

        assert payload["code"] == "unbalanced"
        assert payload["extra"]["reason"] == "Entry is not balanced."

    def test_record_attributes_are_not_extras(self):
        payload = json.loads(JsonFormatter().format(_record()))

        assert "extra" not in payload
        assert "lineno" not in payload

    def test_non_serializable_values_are_stringified(self):
        payload = json.loads(JsonFormatter().format(_record(percent=Decimal("75.50"))))

        assert payload["extra"]["percent"] == "75.50"


class TestLoggingConfig:

    def test_json_by_default_outside_debug(self, monkeypatch):
        monkeypatch.delenv("LOG_FORMAT", raising=False)
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        config = get_logging_config(debug=False)

        assert config["formatters"]["default"]["()"] == "ops.logging_config.JsonFormatter"
        assert config["loggers"]["accounting"]["level"] == "INFO"
        assert config["loggers"]["django.request"]["level"] == "ERROR"

    def test_console_in_debug(self, monkeypatch):
        monkeypatch.delenv("LOG_FORMAT", raising=False)
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        config = get_logging_config(debug=True)

        assert "format" in config["formatters"]["default"]
        assert config["loggers"]["limits"]["level"] == "DEBUG"

    def test_every_app_logger_is_configured(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "WARNING")

        loggers = get_logging_config()["loggers"]

        for name in APP_LOGGERS:
            assert loggers[name] == {"handlers": ["console"], "level": "WARNING", "propagate": False}
