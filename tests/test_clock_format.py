import pytest
import pytz

from deskclock.utils.clock_format import (
    format_clock, format_date, hhmm, parse_hhmm, resolve_timezone, timezone_or_local,
)
from deskclock.utils.custom_exception import InvalidAlarmTimeError
from tests.test_doubles import epoch_ms


@pytest.mark.parametrize("hour, expected", [
    (0, ("12:15", "AM")),
    (1, ("01:15", "AM")),
    (11, ("11:15", "AM")),
    (12, ("12:15", "PM")),
    (13, ("01:15", "PM")),
    (23, ("11:15", "PM")),
])
def test_twelve_hour_clock(hour, expected):
    assert format_clock(epoch_ms(2024, 1, 1, hour, 15), is24h=False, tz=pytz.utc) == expected


def test_twenty_four_hour_clock_has_no_meridiem():
    assert format_clock(epoch_ms(2024, 1, 1, 0, 5), is24h=True, tz=pytz.utc) == ("00:05", "")
    assert format_clock(epoch_ms(2024, 1, 1, 23, 59), is24h=True, tz=pytz.utc) == ("23:59", "")


def test_date_across_year_boundary():
    assert format_date(epoch_ms(2023, 12, 31, 23, 59, 59), pytz.utc) == ("31.12.23", "SUN")
    assert format_date(epoch_ms(2024, 1, 1, 0, 0, 0), pytz.utc) == ("01.01.24", "MON")


def test_leap_day():
    assert format_date(epoch_ms(2024, 2, 29, 12), pytz.utc) == ("29.02.24", "THU")


def test_dst_spring_forward_in_new_york():
    tz = pytz.timezone("America/New_York")
    # 10 March 2024, 06:59:59 UTC is 01:59:59 EST; one second later is 03:00 EDT
    assert hhmm(epoch_ms(2024, 3, 10, 6, 59, 59), tz) == "01:59"
    assert hhmm(epoch_ms(2024, 3, 10, 7, 0, 0), tz) == "03:00"


def test_local_date_differs_from_utc_date():
    tz = pytz.timezone("Asia/Tokyo")
    assert format_date(epoch_ms(2024, 3, 5, 20), tz) == ("06.03.24", "WED")


@pytest.mark.parametrize("value, expected", [("00:00", (0, 0)), ("07:30", (7, 30)), ("23:59", (23, 59))])
def test_parse_valid_times(value, expected):
    assert parse_hhmm(value) == expected


@pytest.mark.parametrize("value", ["24:00", "12:60", "7:30", "07:30\n", " 07:30", "07-30", "", None, 730])
def test_parse_invalid_times(value):
    with pytest.raises(InvalidAlarmTimeError):
        parse_hhmm(value)


def test_resolve_timezone():
    assert resolve_timezone(None) is None
    assert resolve_timezone("Europe/Lisbon").zone == "Europe/Lisbon"
    with pytest.raises(pytz.exceptions.UnknownTimeZoneError):
        resolve_timezone("Mars/Olympus")


def test_unknown_timezone_falls_back_to_local():
    assert timezone_or_local("Mars/Olympus") is None
