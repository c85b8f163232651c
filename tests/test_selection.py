"""
Unit tests for export selection helpers.

Tests cover:
- Date range parsing and validation
- Local-calendar-date filtering with inclusive and open bounds
- Export ordering and the empty-selection error
- Filename and note formatting
"""
from datetime import date, datetime, timedelta, timezone

import pytest

from bp_svc.core.exceptions import EmptyExportError, ExportError, InvalidDateRangeError
from bp_svc.services.export.selection import (
    build_export_filename,
    filter_by_date_range,
    parse_range,
    select_for_export,
    truncate_note,
)


UTC = timezone.utc


class TestParseRange:
    """Tests for parse_range."""

    def test_empty_strings_mean_no_bound(self):
        assert parse_range("", None) == (None, None)

    def test_valid_dates(self):
        assert parse_range("2025-01-01", date(2025, 1, 31)) == (date(2025, 1, 1), date(2025, 1, 31))

    @pytest.mark.parametrize("bad", ["2025-13-01", "01/02/2025", "yesterday"])
    def test_invalid_date(self, bad):
        with pytest.raises(InvalidDateRangeError) as exc_info:
            parse_range(bad, None)

        assert bad in exc_info.value.detail
        assert isinstance(exc_info.value, ValueError)
        assert isinstance(exc_info.value, ExportError)


class TestFilterByDateRange:
    """Tests for filter_by_date_range."""

    def test_no_bounds_keeps_everything(self, daily_readings):
        assert len(filter_by_date_range(daily_readings, None, None)) == 10

    def test_bounds_are_inclusive(self, daily_readings):
        # daily_readings cover 2025-03-06 .. 2025-03-15
        selected = filter_by_date_range(daily_readings, date(2025, 3, 10), date(2025, 3, 12))
        days = sorted(r.timestamp.date() for r in selected)

        assert days == [date(2025, 3, 10), date(2025, 3, 11), date(2025, 3, 12)]

    def test_open_start(self, daily_readings):
        selected = filter_by_date_range(daily_readings, None, date(2025, 3, 7))
        assert len(selected) == 2

    def test_open_end(self, daily_readings):
        selected = filter_by_date_range(daily_readings, date(2025, 3, 14), None)
        assert len(selected) == 2

    def test_uses_local_calendar_date(self, make_reading):
        """23:30 UTC on Mar 1 is already Mar 2 at UTC+2."""
        reading = make_reading(timestamp=datetime(2025, 3, 1, 23, 30, tzinfo=UTC))
        plus_two = timezone(timedelta(hours=2))

        assert filter_by_date_range([reading], date(2025, 3, 2), date(2025, 3, 2), plus_two) == (reading,)
        assert filter_by_date_range([reading], date(2025, 3, 2), date(2025, 3, 2)) == ()


class TestSelectForExport:
    """Tests for select_for_export."""

    def test_sorted_oldest_first(self, daily_readings):
        selected = select_for_export(daily_readings)
        timestamps = [r.timestamp for r in selected]

        assert timestamps == sorted(timestamps)

    def test_empty_collection(self):
        with pytest.raises(EmptyExportError) as exc_info:
            select_for_export([])

        assert exc_info.value.detail == "No readings in this range"

    def test_no_readings_in_range(self, daily_readings):
        with pytest.raises(EmptyExportError) as exc_info:
            select_for_export(daily_readings, "2024-01-01", "2024-01-31")

        assert exc_info.value.to_dict() == {
            "detail": "No readings in this range",
            "context": {"start_date": "2024-01-01", "end_date": "2024-01-31"},
        }

    def test_inverted_range_is_empty(self, daily_readings):
        with pytest.raises(EmptyExportError):
            select_for_export(daily_readings, "2025-03-15", "2025-03-06")

    def test_snapshot(self, daily_readings, make_reading):
        selected = select_for_export(daily_readings)
        daily_readings.clear()
        assert len(selected) == 10


class TestBuildExportFilename:
    """Tests for build_export_filename."""

    def test_without_range(self):
        assert build_export_filename("bp-report", date(2025, 2, 1)) == "bp-report-2025-02-01.pdf"

    def test_full_range(self):
        name = build_export_filename("bp-report", date(2025, 2, 1), "2025-01-01", "2025-01-31")
        assert name == "bp-report-2025-02-01_2025-01-01_to_2025-01-31.pdf"

    def test_open_bounds_use_placeholders(self):
        assert build_export_filename("bp-report", date(2025, 2, 1), "2025-01-01", "") == (
            "bp-report-2025-02-01_2025-01-01_to_end.pdf"
        )
        assert build_export_filename("bp-readings", date(2025, 2, 1), None, "2025-01-31", "csv") == (
            "bp-readings-2025-02-01_start_to_2025-01-31.csv"
        )


class TestTruncateNote:
    """Tests for truncate_note."""

    def test_short_note_unchanged(self):
        assert truncate_note("After walk", 40) == "After walk"

    def test_missing_note(self):
        assert truncate_note(None, 40) == ""
        assert truncate_note("", 40) == ""

    def test_long_note_is_cut(self):
        note = "x" * 50
        assert truncate_note(note, 40) == "x" * 40 + "..."

    def test_exact_budget_is_kept(self):
        assert truncate_note("y" * 40, 40) == "y" * 40

    def test_whitespace_collapsed(self):
        assert truncate_note("line one\n  line two", 40) == "line one line two"
