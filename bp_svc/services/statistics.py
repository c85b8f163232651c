"""
Statistics aggregation over blood pressure readings.

Responsible for:
- Windowed (last N days) and all-time averages
- Dashboard overview (average, highest, lowest, pulse, positions)
- Trend summary (highest/lowest systolic and diastolic values)

All functions are pure and order-independent. The reference time for
windowed statistics is taken once per call and can be injected via `now`
for deterministic results.

Rounding follows round-half-up (120.5 -> 121), matching how the values are
shown on stat cards.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from bp_svc.core.datetime_utils import to_utc, utc_now
from bp_svc.schemas import BodyPosition, Reading

logger = logging.getLogger(__name__)


DEFAULT_WINDOWS = (7, 30, 90)


# =============================================================================
# RESULT STRUCTURES
# =============================================================================

@dataclass(frozen=True)
class ReadingStats:
    """
    Aggregate statistics for a set of readings.

    `pulse` is 0 when no reading in the set has a pulse value; 0 is a
    "no pulse data" sentinel, not a measured average.
    """
    systolic: int
    diastolic: int
    pulse: int
    count: int

    @property
    def has_pulse(self) -> bool:
        return self.pulse > 0


@dataclass(frozen=True)
class PeriodStats:
    """Stat cards for the summary page: each window plus all-time."""
    windows: Dict[int, Optional[ReadingStats]]
    all_time: ReadingStats

    def for_days(self, days: int) -> Optional[ReadingStats]:
        return self.windows.get(days)


@dataclass(frozen=True)
class ReadingOverview:
    """Dashboard overview for a non-empty collection."""
    average_systolic: int
    average_diastolic: int
    highest: Reading
    lowest: Reading
    average_pulse: Optional[int]
    position_counts: Dict[BodyPosition, int]
    total_readings: int


@dataclass(frozen=True)
class TrendSummary:
    """Min/max/average values shown alongside the trend chart."""
    average_systolic: int
    average_diastolic: int
    average_pulse: int
    highest_systolic: int
    lowest_systolic: int
    highest_diastolic: int
    lowest_diastolic: int


# =============================================================================
# HELPERS
# =============================================================================

def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding up (120.5 -> 121)."""
    return int(math.floor(value + 0.5))


def _mean(values: Sequence[int]) -> int:
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


def _aggregate(readings: Sequence[Reading]) -> ReadingStats:
    pulses = [r.pulse for r in readings if r.pulse is not None]
    return ReadingStats(
        systolic=_mean([r.systolic for r in readings]),
        diastolic=_mean([r.diastolic for r in readings]),
        pulse=_mean(pulses),
        count=len(readings),
    )


def highest_systolic(readings: Iterable[Reading]) -> Optional[Reading]:
    """Get the reading with the highest systolic value (first occurrence wins ties)."""
    best: Optional[Reading] = None
    for reading in readings:
        if best is None or reading.systolic > best.systolic:
            best = reading
    return best


def lowest_systolic(readings: Iterable[Reading]) -> Optional[Reading]:
    """Get the reading with the lowest systolic value (first occurrence wins ties)."""
    best: Optional[Reading] = None
    for reading in readings:
        if best is None or reading.systolic < best.systolic:
            best = reading
    return best


def latest_reading(readings: Iterable[Reading]) -> Optional[Reading]:
    """Get the most recent reading by timestamp (first occurrence wins ties)."""
    latest: Optional[Reading] = None
    for reading in readings:
        if latest is None or reading.timestamp > latest.timestamp:
            latest = reading
    return latest


def position_counts(readings: Iterable[Reading]) -> Dict[BodyPosition, int]:
    """Count readings per body position; every position is present."""
    counts = {position: 0 for position in BodyPosition}
    for reading in readings:
        counts[BodyPosition(reading.body_position)] += 1
    return counts


# =============================================================================
# PUBLIC API
# =============================================================================

def windowed_stats(
    readings: Iterable[Reading],
    days: int,
    now: Optional[datetime] = None,
) -> Optional[ReadingStats]:
    """
    Compute statistics over readings from the last `days` days.

    The cutoff (now - days) is computed once, and readings at or after it are
    included.

    Args:
        readings: Reading collection
        days: Window length in days
        now: Reference time (defaults to the current UTC time)

    Returns:
        ReadingStats, or None when no reading falls inside the window
    """
    reference = to_utc(now) if now is not None else utc_now()
    cutoff = reference - timedelta(days=days)

    in_window: List[Reading] = [r for r in readings if r.timestamp >= cutoff]
    if not in_window:
        return None
    return _aggregate(in_window)


def all_time_stats(readings: Iterable[Reading]) -> ReadingStats:
    """
    Compute statistics over the whole collection.

    Never returns None: an empty collection yields zeros for every field.
    """
    return _aggregate(list(readings))


def period_stats(
    readings: Iterable[Reading],
    now: Optional[datetime] = None,
    windows: Sequence[int] = DEFAULT_WINDOWS,
) -> PeriodStats:
    """
    Compute the summary-page stat cards (7/30/90 days and all-time).

    A single reference time is used for every window.
    """
    snapshot = tuple(readings)
    reference = to_utc(now) if now is not None else utc_now()
    return PeriodStats(
        windows={days: windowed_stats(snapshot, days, now=reference) for days in windows},
        all_time=all_time_stats(snapshot),
    )


def reading_overview(readings: Iterable[Reading]) -> Optional[ReadingOverview]:
    """
    Compute the dashboard overview.

    Returns:
        ReadingOverview, or None for an empty collection
    """
    snapshot = tuple(readings)
    if not snapshot:
        return None

    stats = _aggregate(snapshot)
    return ReadingOverview(
        average_systolic=stats.systolic,
        average_diastolic=stats.diastolic,
        highest=highest_systolic(snapshot),
        lowest=lowest_systolic(snapshot),
        average_pulse=stats.pulse if stats.has_pulse else None,
        position_counts=position_counts(snapshot),
        total_readings=stats.count,
    )


def trend_summary(readings: Iterable[Reading]) -> TrendSummary:
    """Compute averages and value extremes; all zeros for an empty collection."""
    snapshot = tuple(readings)
    if not snapshot:
        return TrendSummary(0, 0, 0, 0, 0, 0, 0)

    stats = _aggregate(snapshot)
    systolic_values = [r.systolic for r in snapshot]
    diastolic_values = [r.diastolic for r in snapshot]
    return TrendSummary(
        average_systolic=stats.systolic,
        average_diastolic=stats.diastolic,
        average_pulse=stats.pulse,
        highest_systolic=max(systolic_values),
        lowest_systolic=min(systolic_values),
        highest_diastolic=max(diastolic_values),
        lowest_diastolic=min(diastolic_values),
    )
