"""
UTC-first datetime utilities for the blood pressure service.

This module provides consistent datetime handling across the application:
- All reading timestamps are processed in UTC
- Calendar dates (export ranges, table rows, chart labels) are taken in an
  explicit local timezone passed by the caller
- ISO 8601 format used for string serialization

Usage:
    from bp_svc.core.datetime_utils import utc_now, parse_datetime, local_date

    now = utc_now()
    dt = parse_datetime("2024-01-15T10:30:00+05:30")  # Converts to UTC
    day = local_date(dt, resolve_timezone("Asia/Kolkata"))  # date(2024, 1, 15)
"""
import logging
from datetime import date, datetime, timezone, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)


# =============================================================================
# CORE UTILITIES
# =============================================================================

def utc_now() -> datetime:
    """
    Get current datetime in UTC with timezone info.

    Returns:
        datetime: Current time as timezone-aware datetime in UTC.
    """
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    - If datetime is naive (no timezone), assumes it's already UTC
    - If datetime has timezone, converts to UTC

    Example:
        >>> from datetime import timedelta
        >>> ist = timezone(timedelta(hours=5, minutes=30))
        >>> to_utc(datetime(2024, 1, 15, 16, 0, tzinfo=ist)).hour
        10
    """
    if dt.tzinfo is None:
        # Naive datetime - assume UTC
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def resolve_timezone(name: Optional[str]) -> tzinfo:
    """
    Resolve a timezone name to a tzinfo object.

    "UTC" (or an empty name) maps to datetime.timezone.utc so that the
    default configuration works without a system timezone database.

    Raises:
        zoneinfo.ZoneInfoNotFoundError (a KeyError): If the zone is unknown.
        ValueError: If the name is malformed.
    """
    if not name or name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def to_local(dt: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Convert a datetime to the given timezone (UTC when tz is None)."""
    return to_utc(dt).astimezone(tz or timezone.utc)


def local_date(dt: datetime, tz: Optional[tzinfo] = None) -> date:
    """Get the calendar date of a datetime as seen in the given timezone."""
    return to_local(dt, tz).date()


# =============================================================================
# PARSING
# =============================================================================

def parse_datetime(value: Union[str, datetime]) -> datetime:
    """
    Parse a datetime value to UTC datetime.

    Accepts a datetime object or an ISO 8601 string (with or without
    timezone, 'Z' suffix allowed).

    Raises:
        ValueError: If the value cannot be parsed.

    Examples:
        >>> parse_datetime("2024-01-15T10:30:00Z")
        datetime.datetime(2024, 1, 15, 10, 30, tzinfo=datetime.timezone.utc)
    """
    if isinstance(value, datetime):
        return to_utc(value)

    if not isinstance(value, str):
        raise ValueError(f"Expected datetime or string, got {type(value).__name__}")

    cleaned = value.strip()
    # Handle 'Z' suffix (UTC indicator)
    if cleaned.endswith('Z'):
        cleaned = cleaned[:-1] + '+00:00'
    try:
        return to_utc(datetime.fromisoformat(cleaned))
    except ValueError:
        raise ValueError(f"Cannot parse datetime: '{value}'")


def parse_calendar_date(value: Union[str, date, None]) -> Optional[date]:
    """
    Parse a calendar date bound in strict YYYY-MM-DD form.

    None and empty strings mean "no bound" (what an untouched date input
    control sends) and return None.

    Raises:
        ValueError: If the value is not a valid YYYY-MM-DD date.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    cleaned = value.strip()
    if not cleaned:
        return None
    try:
        return datetime.strptime(cleaned, "%Y-%m-%d").date()
    except ValueError:
        raise ValueError(f"Expected a YYYY-MM-DD date, got '{value}'")


# =============================================================================
# FORMATTING
# =============================================================================

def format_iso(dt: datetime) -> str:
    """
    Format datetime to ISO 8601 string with 'Z' suffix.

    Example:
        >>> format_iso(datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc))
        '2024-01-15T10:30:00Z'
    """
    return to_utc(dt).strftime("%Y-%m-%dT%H:%M:%SZ")


def format_short_label(dt: datetime, tz: Optional[tzinfo] = None) -> str:
    """Format a chart axis label such as 'Jan 5' in the given timezone."""
    local = to_local(dt, tz)
    return f"{local.strftime('%b')} {local.day}"


def format_for_display(dt: datetime, tz: Optional[tzinfo] = None, include_time: bool = True) -> str:
    """
    Format datetime for human-readable display.

    Example:
        >>> format_for_display(datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc))
        'Jan 15, 2024, 10:30'
    """
    local = to_local(dt, tz)
    if include_time:
        return local.strftime("%b %d, %Y, %H:%M")
    return local.strftime("%b %d, %Y")
