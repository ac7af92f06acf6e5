"""UTC datetime utilities."""

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def deadline_after(hours: int, now: datetime | None = None) -> datetime:
    """Absolute UTC deadline `hours` from `now` (default: current time)."""
    return (now or utc_now()) + timedelta(hours=hours)
