"""Date helpers. Every datetime the application stores is naive UTC."""
from datetime import date, datetime, timezone
from dateutil import parser

from .consts import END_OF_DAY


def utcnow():
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_dt(iso_or_dt):
    """
    Robustly convert an ISO string, date or datetime to a naive UTC datetime.

    Offsets are converted to UTC; values without one are taken as UTC.

    Args:
        iso_or_dt (str | date | datetime): The input value.

    Returns:
        datetime: Naive datetime in UTC, or None for empty input.
    """
    if iso_or_dt is None or iso_or_dt == "":
        return None

    if isinstance(iso_or_dt, datetime):
        dt = iso_or_dt
    elif isinstance(iso_or_dt, date):
        dt = datetime.combine(iso_or_dt, datetime.min.time())
    elif isinstance(iso_or_dt, str):
        try:
            # Use fromisoformat for standard ISO strings
            dt = datetime.fromisoformat(iso_or_dt.replace("Z", "+00:00"))
        except ValueError:
            # Fallback to dateutil.parser for more lenient parsing
            dt = parser.parse(iso_or_dt)
    else:
        # Handle other unexpected types
        raise TypeError(f"Unsupported type for to_dt: {type(iso_or_dt)}")

    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def to_iso(dt):
    """
    Return an ISO string in UTC (with Z) from a datetime or None.

    Args:
        dt (datetime): Naive UTC or timezone-aware datetime.

    Returns:
        str: ISO 8601 formatted string in UTC, millisecond precision.
    """
    if dt is None:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt.isoformat(timespec="milliseconds") + "Z"


def day_bounds(value):
    """
    Calendar-day bounds of ``value``: (00:00:00.000, 23:59:59.999) in UTC.

    Raises:
        ValueError: If ``value`` is not a parseable date.
    """
    dt = to_dt(value)
    start = datetime.combine(dt.date(), datetime.min.time())
    return start, start + END_OF_DAY
