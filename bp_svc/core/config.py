"""
Configuration module for the blood pressure service core.
Uses Pydantic BaseSettings for validation - fails fast on invalid config.

Settings only provide defaults for the service classes (ReportRenderer,
CsvExporter, TrendChartService). The pure functions in services/ never read
settings; they take every input as an explicit parameter.
"""
import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from reportlab.lib.pagesizes import A4, LETTER

from bp_svc.core.datetime_utils import resolve_timezone

logger = logging.getLogger(__name__)


PAGE_SIZES: Dict[str, tuple] = {
    "A4": A4,
    "LETTER": LETTER,
}


class Settings(BaseSettings):
    """
    Application settings with validation.
    Invalid values cause settings construction to fail with a clear error.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Locale Configuration
    bp_svc_timezone: str = Field(default="UTC", description="IANA timezone used for calendar dates and labels")

    # Trend Configuration
    bp_svc_rolling_window: int = Field(default=7, description="Default trailing window for rolling averages")

    # Export Configuration
    bp_svc_note_max_chars: int = Field(default=40, description="Maximum note characters shown in the report table")
    bp_svc_page_size: str = Field(default="A4", description="Report page size (A4 or LETTER)")
    bp_svc_report_prefix: str = Field(default="bp-report", description="Filename prefix for PDF reports")
    bp_svc_csv_prefix: str = Field(default="bp-readings", description="Filename prefix for CSV exports")
    bp_svc_font_path: Optional[str] = Field(default=None, description="TrueType font for report text (Helvetica when unset)")
    bp_svc_bold_font_path: Optional[str] = Field(default=None, description="TrueType font for report headings")

    # Logging Configuration
    bp_svc_log_level: str = Field(default="INFO", description="Log level")
    bp_svc_log_format: str = Field(default="json", description="Log format (json or text)")

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """
        Validate settings and fail fast with clear error messages.
        """
        errors = []

        try:
            resolve_timezone(self.bp_svc_timezone)
        except (KeyError, ValueError):
            errors.append(f"BP_SVC_TIMEZONE '{self.bp_svc_timezone}' is not a known timezone")

        if self.bp_svc_page_size.upper() not in PAGE_SIZES:
            errors.append(
                f"BP_SVC_PAGE_SIZE must be one of {sorted(PAGE_SIZES)}, got '{self.bp_svc_page_size}'"
            )

        if self.bp_svc_rolling_window < 1:
            errors.append("BP_SVC_ROLLING_WINDOW must be at least 1")

        if self.bp_svc_note_max_chars < 1:
            errors.append("BP_SVC_NOTE_MAX_CHARS must be at least 1")

        for name in ("bp_svc_font_path", "bp_svc_bold_font_path"):
            path = getattr(self, name)
            if path and not Path(path).is_file():
                errors.append(f"{name.upper()} '{path}' does not exist")

        if self.bp_svc_log_format.lower() not in ("json", "text"):
            errors.append(f"BP_SVC_LOG_FORMAT must be 'json' or 'text', got '{self.bp_svc_log_format}'")

        if errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            logger.critical(error_msg)
            raise ValueError(error_msg)

        return self

    @property
    def tzinfo(self):
        """Get the configured timezone as a tzinfo object."""
        return resolve_timezone(self.bp_svc_timezone)

    @property
    def page_size(self) -> tuple:
        """Get the reportlab page size tuple (width, height) in points."""
        return PAGE_SIZES[self.bp_svc_page_size.upper()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the cached settings instance.

    Settings are loaded once from the environment (and .env file) on first use.
    Tests can call get_settings.cache_clear() after changing the environment.
    """
    return Settings()
