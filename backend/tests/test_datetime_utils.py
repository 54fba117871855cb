"""
Tests for datetime helpers
"""
from datetime import datetime, timedelta

from app.core.templates import friendly_datetime
from app.utils.datetime_utils import MonotonicClock, utc_now


def test_utc_now_is_naive():
    assert utc_now().tzinfo is None


def test_clock_never_repeats_a_frozen_time():
    frozen = datetime(2025, 3, 5, 15, 7)
    clock = MonotonicClock(source=lambda: frozen)

    first, second, third = clock(), clock(), clock()

    assert first == frozen
    assert second == frozen + timedelta(microseconds=1)
    assert third == frozen + timedelta(microseconds=2)


def test_clock_survives_backwards_steps():
    readings = iter([
        datetime(2025, 3, 5, 15, 7, 0),
        datetime(2025, 3, 5, 15, 6, 0),
        datetime(2025, 3, 5, 15, 8, 0),
    ])
    clock = MonotonicClock(source=lambda: next(readings))

    values = [clock.now() for _ in range(3)]

    assert values[1] > values[0]
    assert values[2] == datetime(2025, 3, 5, 15, 8, 0)


def test_friendly_datetime():
    assert friendly_datetime(datetime(2025, 3, 5, 15, 7)) == "Mar 5, 2025 at 3:07 PM"
    assert friendly_datetime(datetime(2025, 12, 31, 0, 30)) == "Dec 31, 2025 at 12:30 AM"
    assert friendly_datetime(None) == ""
