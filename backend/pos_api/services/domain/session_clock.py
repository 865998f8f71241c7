"""
Session clock: elapsed and chargeable time for a running KTV session.

Pure functions of ``start`` and ``now``; the caller supplies ``now`` so a
bill preview and the charged bill agree for the same instant. Naive
datetimes are taken to be UTC.
"""

from datetime import datetime, timedelta, timezone

_HOUR = timedelta(hours=1)
_ZERO = timedelta(0)


def utc_now() -> datetime:
    """Default clock for services."""
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def elapsed(start: datetime, now: datetime) -> timedelta:
    """Time since ``start``. A ``now`` before ``start`` (clock skew) counts as zero."""
    delta = _as_utc(now) - _as_utc(start)
    return delta if delta > _ZERO else _ZERO


def chargeable_hours(start: datetime, now: datetime, minimum_hours: int = 1) -> int:
    """
    Whole hours to bill: any started hour counts in full, with a minimum.

    61 minutes -> 2, 5 minutes -> 1, exactly 120 minutes -> 2.
    """
    duration = elapsed(start, now)
    # Integer division on timedelta avoids float rounding at hour boundaries.
    hours, remainder = divmod(duration, _HOUR)
    if remainder > _ZERO:
        hours += 1
    return max(minimum_hours, hours)


def format_duration(start: datetime, now: datetime) -> str:
    """Human readable elapsed time, e.g. ``"1h 10m"``."""
    total_minutes = int(elapsed(start, now).total_seconds() // 60)
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours}h {minutes:02d}m"
