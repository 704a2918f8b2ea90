import math
from datetime import datetime, timedelta, timezone

_SECONDS_PER_DAY = 24 * 60 * 60


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value):
    """Treat naive datetimes (as SQLite returns them) as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def window_end(now: datetime, window_days: int) -> datetime:
    return now + timedelta(days=window_days)


def days_until(expires_at: datetime, now: datetime) -> int:
    remaining = (ensure_utc(expires_at) - ensure_utc(now)).total_seconds()
    return math.ceil(remaining / _SECONDS_PER_DAY)
