"""
Shared pytest fixtures for blood pressure service tests.

Key patterns:

1. Reading factory: `make_reading` builds valid readings with sensible
   defaults so each test only states the fields it cares about
2. Fixed clock: `now` pins the reference time for windowed statistics
3. Explicit settings: services get a Settings instance built in the test,
   never the process-wide cached one
"""
from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

from bp_svc.core.config import Settings, get_settings
from bp_svc.schemas import Reading


NOW = datetime(2025, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed reference time: 2025-03-15 12:00 UTC."""
    return NOW


@pytest.fixture
def make_reading():
    """
    Factory fixture for readings.

    Usage:
        reading = make_reading(140, 90, timestamp=now - timedelta(days=2))
    """
    ids = count(1)

    def _make(
        systolic=120,
        diastolic=80,
        pulse=70,
        timestamp=NOW,
        body_position="seated",
        note=None,
        reading_id=None,
    ):
        return Reading(
            id=reading_id or f"r{next(ids)}",
            systolic=systolic,
            diastolic=diastolic,
            pulse=pulse,
            body_position=body_position,
            note=note,
            timestamp=timestamp,
        )

    return _make


@pytest.fixture
def daily_readings(make_reading):
    """Ten readings, one per day ending at NOW, newest first (as the API returns them)."""
    values = [
        (118, 76), (122, 80), (131, 84), (145, 92), (128, 79),
        (152, 98), (119, 74), (137, 88), (124, 82), (141, 90),
    ]
    return [
        make_reading(s, d, timestamp=NOW - timedelta(days=i))
        for i, (s, d) in enumerate(values)
    ]


@pytest.fixture
def settings():
    """Settings with defaults, independent of the environment file."""
    return Settings(_env_file=None)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Reset the cached settings around every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
