from datetime import datetime, timezone

from dateutil import tz


def local_now() -> datetime:
    """
    Get the current local datetime, aware of the server's time zone.

    Due dates carry no time zone and mean local midnight. The zone attached
    here follows daylight saving, so day counts use real elapsed time.

    Returns:
        datetime: Current local datetime with a ``tzlocal`` tzinfo
    """
    return datetime.now(tz.tzlocal())


def to_utc(dt: datetime) -> datetime:
    """
    Convert a timezone-aware datetime object to UTC.

    Args:
        dt: Timezone-aware datetime to convert

    Returns:
        datetime: UTC timezone-aware datetime
    """
    if dt.tzinfo is None:
        raise ValueError("Input datetime must be timezone-aware")
    return dt.astimezone(timezone.utc)


def utc_now() -> datetime:
    """Get current UTC datetime as a timezone-aware datetime."""
    return datetime.now(timezone.utc)
