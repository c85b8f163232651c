"""
Unit tests for the trend series builder.

Tests cover:
- Chronological ordering (stable for equal timestamps)
- Rolling averages over the trailing window, including the warm-up points
- Restartable iteration
- Window validation
"""
from datetime import timedelta, timezone

import pytest

from bp_svc.services.trend_series import TrendSeries, build_series, sort_by_timestamp


@pytest.fixture
def ascending(make_reading, now):
    """Eight readings one hour apart, systolic 100..170, diastolic 60..95."""
    return [
        make_reading(100 + 10 * i, 60 + 5 * i, timestamp=now + timedelta(hours=i), reading_id=f"a{i}")
        for i in range(8)
    ]


class TestOrdering:
    """Series points follow timestamps, not input order."""

    def test_sorted_ascending(self, daily_readings):
        points = list(build_series(daily_readings))
        timestamps = [p.timestamp for p in points]

        assert timestamps == sorted(timestamps)
        assert len(points) == len(daily_readings)

    def test_equal_timestamps_keep_input_order(self, make_reading, now):
        readings = [
            make_reading(130, 80, timestamp=now, reading_id="x"),
            make_reading(120, 70, timestamp=now - timedelta(hours=1), reading_id="y"),
            make_reading(140, 90, timestamp=now, reading_id="z"),
        ]
        assert [r.id for r in sort_by_timestamp(readings)] == ["y", "x", "z"]


class TestRollingAverage:
    """Trailing-window averages."""

    def test_first_point_is_its_own_average(self, ascending):
        first = next(iter(build_series(ascending, window_size=3)))
        assert first.systolic_avg == first.systolic == 100
        assert first.diastolic_avg == first.diastolic == 60

    def test_warm_up_points_average_available_values(self, ascending):
        points = list(build_series(ascending, window_size=3))
        assert points[1].systolic_avg == 105  # (100 + 110) / 2
        assert points[1].diastolic_avg == 63  # 62.5 rounds up

    def test_full_window(self, ascending):
        points = list(build_series(ascending, window_size=3))
        # index 2 is the first full window: (100 + 110 + 120) / 3
        assert points[2].systolic_avg == 110
        # index 7 averages 150, 160, 170
        assert points[7].systolic_avg == 160
        assert points[7].diastolic_avg == 90

    def test_window_of_one_is_identity(self, ascending):
        for point in build_series(ascending, window_size=1):
            assert point.systolic_avg == point.systolic
            assert point.diastolic_avg == point.diastolic

    def test_default_window_is_seven(self, ascending):
        series = build_series(ascending)
        points = list(series)

        assert series.window_size == 7
        # index 7 averages 110..170
        assert points[7].systolic_avg == 140

    def test_labels_use_timezone(self, make_reading, now):
        reading = make_reading(timestamp=now.replace(hour=23))
        utc_point = next(iter(build_series([reading])))
        ahead_point = next(iter(build_series([reading], tz=timezone(timedelta(hours=5)))))

        assert utc_point.timestamp_label == "Mar 15"
        assert ahead_point.timestamp_label == "Mar 16"


class TestTrendSeries:
    """Container behaviour."""

    def test_restartable(self, ascending):
        series = TrendSeries(ascending, window_size=3)
        assert list(series) == list(series)

    def test_empty(self):
        series = build_series([])
        assert len(series) == 0
        assert list(series) == []

    def test_snapshot_ignores_later_mutation(self, ascending, make_reading):
        series = build_series(ascending)
        ascending.append(make_reading())
        assert len(list(series)) == 8

    @pytest.mark.parametrize("window_size", [0, -3])
    def test_invalid_window(self, ascending, window_size):
        with pytest.raises(ValueError, match="window_size"):
            build_series(ascending, window_size=window_size)
