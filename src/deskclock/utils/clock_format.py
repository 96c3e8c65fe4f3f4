"""
Wall-clock formatting helpers.

Everything here takes a plain epoch-millisecond timestamp and an optional
pytz timezone, so the rendering of a given instant never depends on when
the function is called.
"""
import datetime
import re

import pytz

from deskclock.utils.custom_exception import InvalidAlarmTimeError
from deskclock.utils.logging_handler import setup_logger

logger = setup_logger(__name__)

_HHMM_RE = re.compile(r"([01]\d|2[0-3]):([0-5]\d)")
_WEEKDAYS = ("MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN")


def resolve_timezone(timezone_str=None):
    """Returns a pytz timezone, or None to mean the system local time."""
    if not timezone_str:
        return None
    return pytz.timezone(timezone_str)

def to_local_datetime(epoch_ms, tz=None):
    """Converts epoch milliseconds into an aware datetime in `tz` (system local if None)."""
    utc_dt = datetime.datetime.fromtimestamp(epoch_ms / 1000, tz=pytz.utc)
    if tz is None:
        return utc_dt.astimezone()
    return utc_dt.astimezone(tz)

def hhmm(epoch_ms, tz=None):
    """24h "HH:MM" of the instant, the form alarm times are compared in."""
    return to_local_datetime(epoch_ms, tz).strftime("%H:%M")

def format_clock(epoch_ms, is24h=True, tz=None):
    """
    Returns (time_text, meridiem) for the clock face.
    In 12h mode hour 0 and hour 12 both read as 12.
    """
    dt = to_local_datetime(epoch_ms, tz)
    if is24h:
        return f"{dt.hour:02}:{dt.minute:02}", ""
    hour = dt.hour % 12 or 12
    meridiem = "PM" if dt.hour >= 12 else "AM"
    return f"{hour:02}:{dt.minute:02}", meridiem

def format_date(epoch_ms, tz=None):
    """Returns ("DD.MM.YY", "MON") for the date face."""
    dt = to_local_datetime(epoch_ms, tz)
    return f"{dt.day:02}.{dt.month:02}.{dt.year % 100:02}", _WEEKDAYS[dt.weekday()]

def parse_hhmm(time_str):
    """Validates a 24h "HH:MM" string and returns (hour, minute)."""
    match = _HHMM_RE.fullmatch(time_str) if isinstance(time_str, str) else None
    if not match:
        raise InvalidAlarmTimeError(f"Invalid alarm time '{time_str}'. Use HH:MM.")
    return int(match.group(1)), int(match.group(2))

def timezone_or_local(timezone_str=None):
    """Like resolve_timezone, but an unknown zone name falls back to system local time."""
    try:
        return resolve_timezone(timezone_str)
    except pytz.exceptions.UnknownTimeZoneError:
        logger.warning(f"Unknown timezone '{timezone_str}'. Using system local time.")
        return None
