"""Primitive operations on half-open time intervals.

All intervals are ``(start, end)`` pairs of aware datetimes where the start
is inclusive and the end exclusive. Touching intervals do not overlap.
"""

from datetime import date, datetime, time, timedelta, tzinfo

Interval = tuple[datetime, datetime]

CELL_LENGTH = timedelta(hours=1)


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Check if two half-open intervals share any instant."""
    return a_start < b_end and a_end > b_start


def is_empty(start: datetime, end: datetime) -> bool:
    """True for degenerate intervals (end at or before start)."""
    return end <= start


def clamp(interval: Interval, window: Interval) -> Interval:
    """Intersect an interval with a bounding window.

    The caller is expected to check for overlap first; a disjoint pair
    yields an empty interval.
    """
    start, end = interval
    window_start, window_end = window
    return (max(start, window_start), min(end, window_end))


def duration_minutes(start: datetime, end: datetime) -> float:
    """Length of an interval in minutes."""
    return (end - start).total_seconds() / 60.0


def cell_bounds(day: date, hour: int, tz: tzinfo) -> Interval:
    """Wall-clock bounds of the one-hour cell starting at ``hour`` on ``day``."""
    start = datetime.combine(day, time(hour), tzinfo=tz)
    return (start, start + CELL_LENGTH)
