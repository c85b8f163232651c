"""
Reading selection and naming shared by the PDF and CSV exporters.

Responsible for:
- Parsing the optional YYYY-MM-DD range bounds
- Filtering readings by local calendar date (inclusive bounds)
- Sorting into the canonical export order (oldest first)
- Building export filenames that include the export date and range
"""

import logging
from datetime import date, tzinfo
from typing import Iterable, Optional, Tuple, Union

from bp_svc.core.datetime_utils import local_date, parse_calendar_date
from bp_svc.core.exceptions import EmptyExportError, InvalidDateRangeError
from bp_svc.schemas import Reading
from bp_svc.services.trend_series import sort_by_timestamp

logger = logging.getLogger(__name__)


DateBound = Union[str, date, None]

ELLIPSIS = "..."


def parse_range(start_date: DateBound, end_date: DateBound) -> Tuple[Optional[date], Optional[date]]:
    """
    Parse both range bounds.

    Raises:
        InvalidDateRangeError: If a bound is present but not a valid date
    """
    bounds = []
    for value in (start_date, end_date):
        try:
            bounds.append(parse_calendar_date(value))
        except ValueError:
            raise InvalidDateRangeError(value=str(value))
    return bounds[0], bounds[1]


def filter_by_date_range(
    readings: Iterable[Reading],
    start_date: Optional[date],
    end_date: Optional[date],
    tz: Optional[tzinfo] = None,
) -> Tuple[Reading, ...]:
    """
    Keep readings whose local calendar date lies within [start_date, end_date].

    Either bound may be None (open-ended). An inverted range keeps nothing.
    """
    if start_date is None and end_date is None:
        return tuple(readings)

    selected = []
    for reading in readings:
        day = local_date(reading.timestamp, tz)
        if start_date is not None and day < start_date:
            continue
        if end_date is not None and day > end_date:
            continue
        selected.append(reading)
    return tuple(selected)


def select_for_export(
    readings: Iterable[Reading],
    start_date: DateBound = None,
    end_date: DateBound = None,
    tz: Optional[tzinfo] = None,
) -> Tuple[Reading, ...]:
    """
    Filter and sort readings for export.

    The input is copied into a tuple first, so the caller may keep mutating
    its own list while an export runs.

    Returns:
        Selected readings, oldest first

    Raises:
        InvalidDateRangeError: If a bound is not a valid date
        EmptyExportError: If no reading is selected (including end < start)
    """
    snapshot = tuple(readings)
    start, end = parse_range(start_date, end_date)

    selected = sort_by_timestamp(filter_by_date_range(snapshot, start, end, tz))
    if not selected:
        logger.info(
            "Export selection is empty",
            extra={'total': len(snapshot), 'start_date': str(start), 'end_date': str(end)}
        )
        raise EmptyExportError(
            start_date=start.isoformat() if start else None,
            end_date=end.isoformat() if end else None,
        )
    return selected


def build_export_filename(
    prefix: str,
    export_date: date,
    start_date: DateBound = None,
    end_date: DateBound = None,
    extension: str = "pdf",
) -> str:
    """
    Build an export filename from the export date and optional range.

    Example:
        >>> build_export_filename("bp-report", date(2025, 2, 1), "2025-01-01", None)
        'bp-report-2025-02-01_2025-01-01_to_end.pdf'
    """
    start, end = parse_range(start_date, end_date)
    range_part = ""
    if start is not None or end is not None:
        range_part = "_{}_to_{}".format(
            start.isoformat() if start else "start",
            end.isoformat() if end else "end",
        )
    return f"{prefix}-{export_date.isoformat()}{range_part}.{extension}"


def truncate_note(note: Optional[str], max_chars: int) -> str:
    """Cut a note to max_chars characters, appending '...' when it was longer."""
    if not note:
        return ""
    cleaned = " ".join(note.split())
    if len(cleaned) <= max_chars:
        return cleaned
    return cleaned[:max_chars].rstrip() + ELLIPSIS
