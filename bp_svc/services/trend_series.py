"""
Trend series builder for blood pressure charts.

Produces a time-ordered series of points with trailing rolling averages.
The first `window_size - 1` points average over the readings available so
far (1, 2, ... values), so a chart has no leading gap.
"""

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Deque, Iterable, Iterator, Optional, Tuple

from bp_svc.core.datetime_utils import format_short_label
from bp_svc.schemas import Reading
from bp_svc.services.statistics import round_half_up

logger = logging.getLogger(__name__)


DEFAULT_WINDOW_SIZE = 7


@dataclass(frozen=True)
class SeriesPoint:
    """A single chart point: the reading's own values plus rolling averages."""
    timestamp: datetime
    timestamp_label: str
    systolic: int
    diastolic: int
    systolic_avg: int
    diastolic_avg: int


def sort_by_timestamp(readings: Iterable[Reading]) -> Tuple[Reading, ...]:
    """Sort readings oldest first; readings with equal timestamps keep their input order."""
    return tuple(sorted(readings, key=lambda r: r.timestamp))


class TrendSeries:
    """
    Finite, restartable sequence of SeriesPoint.

    Holds only the sorted snapshot of readings; every iteration recomputes
    the points from it, so nothing carries over between iterations.
    """

    def __init__(
        self,
        readings: Iterable[Reading],
        window_size: int = DEFAULT_WINDOW_SIZE,
        tz: Optional[tzinfo] = None,
    ):
        if window_size < 1:
            raise ValueError(f"window_size must be at least 1, got {window_size}")
        self._readings = sort_by_timestamp(readings)
        self._window_size = window_size
        self._tz = tz

    @property
    def window_size(self) -> int:
        return self._window_size

    def __len__(self) -> int:
        return len(self._readings)

    def __iter__(self) -> Iterator[SeriesPoint]:
        systolic_window: Deque[int] = deque()
        diastolic_window: Deque[int] = deque()
        systolic_total = 0
        diastolic_total = 0

        for reading in self._readings:
            systolic_window.append(reading.systolic)
            diastolic_window.append(reading.diastolic)
            systolic_total += reading.systolic
            diastolic_total += reading.diastolic

            if len(systolic_window) > self._window_size:
                systolic_total -= systolic_window.popleft()
                diastolic_total -= diastolic_window.popleft()

            size = len(systolic_window)
            yield SeriesPoint(
                timestamp=reading.timestamp,
                timestamp_label=format_short_label(reading.timestamp, self._tz),
                systolic=reading.systolic,
                diastolic=reading.diastolic,
                systolic_avg=round_half_up(systolic_total / size),
                diastolic_avg=round_half_up(diastolic_total / size),
            )

    def __repr__(self) -> str:
        return f"<TrendSeries points={len(self)} window={self._window_size}>"


def build_series(
    readings: Iterable[Reading],
    window_size: int = DEFAULT_WINDOW_SIZE,
    tz: Optional[tzinfo] = None,
) -> TrendSeries:
    """
    Build the chart series for a reading collection.

    Args:
        readings: Reading collection in any order
        window_size: Trailing window for the rolling averages
        tz: Timezone for the point labels (UTC when None)

    Returns:
        TrendSeries, iterable any number of times

    Raises:
        ValueError: If window_size is below 1
    """
    series = TrendSeries(readings, window_size=window_size, tz=tz)
    logger.debug("Trend series built", extra={'points': len(series), 'window_size': window_size})
    return series
