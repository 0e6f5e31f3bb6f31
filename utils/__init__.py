"""
Utility modules for the AfiaTrack application.
"""

from .date_converter import (
    get_timezone,
    now_utc,
    to_iso,
    parse_iso,
    parse_reminder_time,
    format_display_date,
)

__all__ = [
    'get_timezone',
    'now_utc',
    'to_iso',
    'parse_iso',
    'parse_reminder_time',
    'format_display_date',
]
