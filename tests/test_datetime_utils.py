"""
Unit tests for UTC-first datetime helpers.
"""
from datetime import date, datetime, timedelta, timezone

import pytest

from bp_svc.core.datetime_utils import (
    format_for_display,
    format_iso,
    format_short_label,
    local_date,
    parse_calendar_date,
    parse_datetime,
    resolve_timezone,
    to_utc,
)


class TestParseDatetime:

    def test_z_suffix(self):
        assert parse_datetime("2024-01-15T10:30:00Z") == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)

    def test_offset_converted_to_utc(self):
        parsed = parse_datetime("2024-01-15T16:00:00+05:30")
        assert parsed.hour == 10
        assert parsed.tzinfo == timezone.utc

    def test_naive_assumed_utc(self):
        assert parse_datetime(datetime(2024, 1, 15, 10, 30)).tzinfo == timezone.utc

    @pytest.mark.parametrize("value", ["not a date", "", 12345])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_datetime(value)


class TestParseCalendarDate:

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_no_bound(self, value):
        assert parse_calendar_date(value) is None

    def test_valid(self):
        assert parse_calendar_date("2025-02-28") == date(2025, 2, 28)

    def test_date_and_datetime_passthrough(self):
        assert parse_calendar_date(date(2025, 1, 1)) == date(2025, 1, 1)
        assert parse_calendar_date(datetime(2025, 1, 1, 9)) == date(2025, 1, 1)

    @pytest.mark.parametrize("value", ["2025-02-30", "2025/02/01", "20250201"])
    def test_invalid(self, value):
        with pytest.raises(ValueError, match="YYYY-MM-DD"):
            parse_calendar_date(value)


class TestTimezones:

    def test_utc_without_database(self):
        assert resolve_timezone("UTC") is timezone.utc
        assert resolve_timezone("") is timezone.utc

    def test_unknown_zone(self):
        with pytest.raises(KeyError):
            resolve_timezone("Nowhere/Special")

    def test_local_date_crosses_midnight(self):
        instant = datetime(2025, 3, 1, 22, 0, tzinfo=timezone.utc)
        assert local_date(instant) == date(2025, 3, 1)
        assert local_date(instant, timezone(timedelta(hours=3))) == date(2025, 3, 2)

    def test_to_utc_converts(self):
        ist = timezone(timedelta(hours=5, minutes=30))
        assert to_utc(datetime(2024, 1, 15, 16, 0, tzinfo=ist)).hour == 10


class TestFormatting:

    def test_format_iso(self):
        assert format_iso(datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)) == "2024-01-15T10:30:00Z"

    def test_short_label_has_no_padding(self):
        assert format_short_label(datetime(2025, 1, 5, tzinfo=timezone.utc)) == "Jan 5"

    def test_display(self):
        instant = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
        assert format_for_display(instant) == "Jan 15, 2024, 10:30"
        assert format_for_display(instant, include_time=False) == "Jan 15, 2024"
