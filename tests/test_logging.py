"""
Tests for structured logging and report id propagation.
"""
import json
import logging

import pytest

from bp_svc.core.config import Settings
from bp_svc.core.logging_config import (
    JSONFormatter,
    get_report_id,
    reset_report_id,
    set_report_id,
    setup_logging,
    setup_logging_from_settings,
)


def _record(message="Report rendered", **extra):
    record = logging.LogRecord(
        name="bp_svc.test", level=logging.INFO, pathname=__file__, lineno=1,
        msg=message, args=(), exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Single-line JSON output."""

    def test_basic_fields(self):
        entry = json.loads(JSONFormatter().format(_record()))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "bp_svc.test"
        assert entry["message"] == "Report rendered"
        assert entry["timestamp"].endswith("Z")
        assert "report_id" not in entry

    def test_extra_fields(self):
        entry = json.loads(JSONFormatter().format(_record(readings=12, export_filename="a.pdf")))
        assert entry["extra"] == {"readings": 12, "export_filename": "a.pdf"}

    def test_report_id_included(self):
        token = set_report_id("rep-1")
        try:
            entry = json.loads(JSONFormatter().format(_record()))
        finally:
            reset_report_id(token)

        assert entry["report_id"] == "rep-1"
        assert get_report_id() is None


class TestSetupLogging:
    """Handler configuration."""

    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers = handlers
        root.setLevel(level)

    def test_json_handler(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.delenv("LOG_FORMAT", raising=False)

        setup_logging(level="debug", json_format=True)

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert logging.getLogger("reportlab").level == logging.INFO

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        monkeypatch.setenv("LOG_FORMAT", "text")

        setup_logging(level="DEBUG", json_format=True)

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert not isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_from_settings_text_format(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.delenv("LOG_FORMAT", raising=False)

        setup_logging_from_settings(
            Settings(_env_file=None, bp_svc_log_format="text", bp_svc_log_level="WARNING")
        )

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert not isinstance(root.handlers[0].formatter, JSONFormatter)
        assert "%(name)s" in root.handlers[0].formatter._fmt

    def test_from_settings_json_default(self, settings, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.delenv("LOG_FORMAT", raising=False)

        setup_logging_from_settings(settings)

        root = logging.getLogger()
        assert root.level == logging.INFO
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
