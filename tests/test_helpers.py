import datetime as dt
import math

import pytest

from tablemate.utils.helpers import clamp_unit, parse_amount, parse_iso_datetime, parse_time_of_day, to_naive_utc
from tablemate.utils.sanitization import sanitize_optional, sanitize_string


def test_parse_iso_datetime_lowercase_z():
    value = "2023-05-06T12:00:00z"
    result = parse_iso_datetime(value)
    assert result == dt.datetime(2023, 5, 6, 12, 0, 0, tzinfo=dt.timezone.utc)


def test_parse_iso_datetime_invalid_returns_none():
    assert parse_iso_datetime("not-a-date") is None
    assert parse_iso_datetime(None) is None


def test_to_naive_utc():
    aware = dt.datetime(2023, 5, 6, 14, 0, tzinfo=dt.timezone(dt.timedelta(hours=2)))
    assert to_naive_utc(aware) == dt.datetime(2023, 5, 6, 12, 0)


@pytest.mark.parametrize(
    "raw,expected",
    [(12.5, 12.5), ("$1,234.50", 1234.5), ("42", 42.0), ("", None), ("abc", None), (True, None), (math.inf, None)],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize(
    "raw,expected",
    [(0.5, 0.5), (3, 1.0), (-1, 0.0), ("0.25", 0.25), (None, 0.7), ("high", 0.7), (math.nan, 0.7)],
)
def test_clamp_unit(raw, expected):
    assert clamp_unit(raw, 0.7) == expected


def test_parse_time_of_day():
    assert parse_time_of_day("6:30 PM") == dt.time(18, 30)
    assert parse_time_of_day("7 pm") == dt.time(19, 0)
    assert parse_time_of_day("18:05") == dt.time(18, 5)
    assert parse_time_of_day("dinner") is None


def test_sanitize_string():
    assert sanitize_string("  <b>hi</b>\x00 ") == "&lt;b&gt;hi&lt;/b&gt;"
    assert sanitize_optional("   ") is None
