"""
Date Conversion Utility

Converts between the ISO timestamps stored with every record
(e.g. "2025-03-16T08:00:00.000Z"), timezone-aware datetimes, the
"HH:MM" reminder times used by medications and display dates.
"""

from datetime import datetime, timedelta
import pytz
from dateutil import parser


def get_timezone(name='Africa/Nairobi'):
    """
    Resolve a timezone name.

    Raises:
        ValueError: If the name is not a known timezone
    """
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError as e:
        raise ValueError(f"Unknown timezone '{name}'") from e


def now_utc():
    return datetime.now(pytz.utc)


def to_iso(dt):
    """
    Format a datetime the way records store it.

    Args:
        dt (datetime): Aware or naive (treated as UTC) datetime

    Returns:
        str: UTC timestamp with millisecond precision, e.g. "2025-03-16T08:00:00.000Z"
    """
    if dt.tzinfo is None:
        dt = pytz.utc.localize(dt)
    return dt.astimezone(pytz.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def parse_iso(value, tz=None):
    """
    Parse a stored date or timestamp into an aware datetime.

    Args:
        value (str): ISO date ("2025-03-16") or timestamp
        tz (tzinfo, optional): Zone for values without an offset (default: UTC)

    Returns:
        datetime: Timezone-aware datetime

    Raises:
        ValueError: If value is not a parseable date
    """
    try:
        dt = parser.isoparse(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise ValueError(f"Invalid date '{value}'. Expected an ISO 8601 date") from e

    if dt.tzinfo is None:
        zone = tz or pytz.utc
        dt = zone.localize(dt) if hasattr(zone, 'localize') else dt.replace(tzinfo=zone)
    return dt


def parse_reminder_time(value):
    """
    Split an "HH:MM" reminder time into hours and minutes.

    Raises:
        ValueError: If value is not a valid 24h time
    """
    try:
        hours_str, minutes_str = value.strip().split(':')
        hours, minutes = int(hours_str), int(minutes_str)
    except (AttributeError, ValueError) as e:
        raise ValueError(f"Invalid reminder time '{value}'. Expected HH:MM") from e

    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ValueError(f"Invalid reminder time '{value}'. Expected HH:MM")
    return hours, minutes


def format_display_date(value):
    """Render an ISO date as M/D/YYYY for exports."""
    dt = parse_iso(value)
    return f"{dt.month}/{dt.day}/{dt.year}"


def shift_days(dt, days):
    return dt + timedelta(days=days)


if __name__ == "__main__":
    stamp = to_iso(now_utc())
    print(f"now -> {stamp}")
    print(f"{stamp} -> {format_display_date(stamp)}")
