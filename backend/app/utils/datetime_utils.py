"""
Datetime utilities
Database columns store naive UTC timestamps so SQLite and PostgreSQL round-trip the same values.
"""
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional


def utc_now() -> datetime:
    """
    Get current UTC time as a naive datetime

    Returns:
        datetime: Current UTC time without tzinfo

    Example:
        >>> from app.utils.datetime_utils import utc_now
        >>> now = utc_now()
        >>> print(now.tzinfo)
        None
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


class MonotonicClock:
    """
    Hands out strictly increasing UTC timestamps.

    Two calls in the same process never return equal values, even when the
    wall clock has not advanced or has stepped backwards; the later caller
    gets the previous value plus one microsecond.
    """

    _STEP = timedelta(microseconds=1)

    def __init__(self, source: Callable[[], datetime] = utc_now):
        self._source = source
        self._last: Optional[datetime] = None
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            current = self._source()
            if self._last is not None and current <= self._last:
                current = self._last + self._STEP
            self._last = current
            return current

    __call__ = now


# Shared by every column default that needs insertion-ordered timestamps
insertion_clock = MonotonicClock()


def utc_now_callable() -> Callable[[], datetime]:
    """
    Get a callable that returns monotonic UTC time
    For use in SQLAlchemy Column defaults

    Returns:
        Callable: Function that returns current UTC time

    Example:
        >>> from app.utils.datetime_utils import utc_now_callable
        >>> created_at = Column(DateTime, default=utc_now_callable())
    """
    return insertion_clock.now
