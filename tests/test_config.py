"""
Tests for settings validation.
"""
from datetime import timezone

import pytest
from reportlab.lib.pagesizes import A4, LETTER

from bp_svc.core.config import Settings, get_settings


class TestSettings:
    """Defaults and fail-fast validation."""

    def test_defaults(self, settings):
        assert settings.bp_svc_timezone == "UTC"
        assert settings.tzinfo is timezone.utc
        assert settings.bp_svc_rolling_window == 7
        assert settings.bp_svc_note_max_chars == 40
        assert settings.page_size == A4
        assert settings.bp_svc_report_prefix == "bp-report"
        assert settings.bp_svc_csv_prefix == "bp-readings"
        assert settings.bp_svc_font_path is None

    def test_letter_page_size_case_insensitive(self):
        assert Settings(_env_file=None, bp_svc_page_size="letter").page_size == LETTER

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("BP_SVC_ROLLING_WINDOW", "14")
        assert Settings(_env_file=None).bp_svc_rolling_window == 14

    @pytest.mark.parametrize("overrides,message", [
        ({"bp_svc_timezone": "Mars/Olympus_Mons"}, "BP_SVC_TIMEZONE"),
        ({"bp_svc_page_size": "A3"}, "BP_SVC_PAGE_SIZE"),
        ({"bp_svc_rolling_window": 0}, "BP_SVC_ROLLING_WINDOW"),
        ({"bp_svc_note_max_chars": 0}, "BP_SVC_NOTE_MAX_CHARS"),
        ({"bp_svc_log_format": "xml"}, "BP_SVC_LOG_FORMAT"),
        ({"bp_svc_font_path": "/nonexistent/report.ttf"}, "BP_SVC_FONT_PATH"),
        ({"bp_svc_bold_font_path": "/nonexistent/report-bold.ttf"}, "BP_SVC_BOLD_FONT_PATH"),
    ])
    def test_invalid_values_fail(self, overrides, message):
        with pytest.raises(ValueError, match=message):
            Settings(_env_file=None, **overrides)

    def test_errors_are_collected(self):
        with pytest.raises(ValueError) as exc_info:
            Settings(_env_file=None, bp_svc_page_size="A3", bp_svc_rolling_window=0)

        assert "BP_SVC_PAGE_SIZE" in str(exc_info.value)
        assert "BP_SVC_ROLLING_WINDOW" in str(exc_info.value)

    def test_get_settings_cached(self):
        assert get_settings() is get_settings()
