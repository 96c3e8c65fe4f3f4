import math
import re
import time


def now_ms() -> int:
    """Current wall-clock time as integer epoch milliseconds."""
    return int(time.time() * 1000)


def convert_to_ms(hours=0, minutes=0, seconds=0):
    """
    Converts hours, minutes, and seconds into a total duration in milliseconds.

    Args:
        hours (int/float): Number of hours. Defaults to 0.
        minutes (int/float): Number of minutes. Defaults to 0.
        seconds (int/float): Number of seconds. Defaults to 0.

    Returns:
        int: The total duration in milliseconds.

    Raises:
        ValueError: If any input is negative.
    """
    if any(val < 0 for val in [hours, minutes, seconds]):
        raise ValueError("Time components cannot be negative.")
    return int(((hours * 3600) + (minutes * 60) + seconds) * 1000)

def parse_time_string(time_str: str) -> int:
    """
    Parses a string representing a duration (e.g., '1h 30m', '20m', '45s') into milliseconds.
    A bare number is read as seconds.
    """
    if not time_str:
        return 0

    time_str = time_str.lower().replace(" ", "")

    if time_str.isdigit():
        return convert_to_ms(seconds=int(time_str))

    h_match = re.search(r'(\d+)h', time_str)
    m_match = re.search(r'(\d+)m', time_str)
    s_match = re.search(r'(\d+)s', time_str)

    hours = int(h_match.group(1)) if h_match else 0
    minutes = int(m_match.group(1)) if m_match else 0
    seconds = int(s_match.group(1)) if s_match else 0

    return convert_to_ms(hours, minutes, seconds)

def stopwatch_parts(elapsed_ms):
    """Splits elapsed milliseconds into (minutes, seconds, centiseconds)."""
    elapsed_ms = max(0, int(elapsed_ms))
    minutes = elapsed_ms // 60000
    seconds = (elapsed_ms // 1000) % 60
    centiseconds = (elapsed_ms % 1000) // 10
    return minutes, seconds, centiseconds

def countdown_parts(remaining_ms):
    """
    Splits remaining milliseconds into (minutes, seconds) rounding up to the
    next whole second, so 400 ms left reads as 00:01 until it truly hits zero.
    """
    total_seconds = math.ceil(max(0, remaining_ms) / 1000)
    return total_seconds // 60, total_seconds % 60

def duration_parts(duration_ms):
    """Splits a configured duration into whole (minutes, seconds), rounding down."""
    duration_ms = max(0, int(duration_ms))
    return duration_ms // 60000, (duration_ms % 60000) // 1000

def format_stopwatch(elapsed_ms):
    minutes, seconds, centiseconds = stopwatch_parts(elapsed_ms)
    return f"{minutes:02}:{seconds:02}.{centiseconds:02}"

def format_minutes_seconds(minutes, seconds):
    return f"{minutes:02}:{seconds:02}"
