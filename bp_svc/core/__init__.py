"""
Core module for configuration, logging, and shared domain tables.

This module provides:
- Settings: Service defaults via pydantic-settings
- Exceptions: Domain-specific exception classes
- Datetime utilities: UTC-first datetime handling
- Level registry: Blood pressure level metadata and thresholds
"""
from bp_svc.core.config import Settings, get_settings

# Exception classes for consistent error handling
from bp_svc.core.exceptions import (
    BPServiceError,
    ExportError,
    EmptyExportError,
    InvalidDateRangeError,
    ReportRenderError,
)

# UTC datetime utilities
from bp_svc.core.datetime_utils import (
    utc_now,
    to_utc,
    to_local,
    local_date,
    parse_datetime,
    parse_calendar_date,
    format_iso,
    resolve_timezone,
)

# Level registry exports
from bp_svc.core.bp_levels import (
    BPLevel,
    LevelMeta,
    get_level_meta,
    list_levels,
)

__all__ = [
    # Config
    'Settings',
    'get_settings',
    # Exceptions
    'BPServiceError',
    'ExportError',
    'EmptyExportError',
    'InvalidDateRangeError',
    'ReportRenderError',
    # Datetime utilities
    'utc_now',
    'to_utc',
    'to_local',
    'local_date',
    'parse_datetime',
    'parse_calendar_date',
    'format_iso',
    'resolve_timezone',
    # Level registry
    'BPLevel',
    'LevelMeta',
    'get_level_meta',
    'list_levels',
]
