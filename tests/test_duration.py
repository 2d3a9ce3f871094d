import pytest

from ramadan_tracker.config import DisplaySettings
from ramadan_tracker.duration import (
    calculate_duration,
    format_minutes,
    parse_time_of_day,
    session_minutes,
    total_minutes,
)
from ramadan_tracker.models import Session


def test_parse_time_of_day():
    assert parse_time_of_day("04:30") == 270
    assert parse_time_of_day("7:05") == 425
    assert parse_time_of_day("") is None
    assert parse_time_of_day(None) is None
    assert parse_time_of_day("Kapan saja") is None


def test_overnight_session_wraps_past_midnight():
    assert session_minutes(Session("21:00", "05:00")) == 480
    assert calculate_duration([Session("21:00", "05:00")]) == "8j"


def test_equal_endpoints_count_as_a_full_day():
    assert session_minutes(Session("08:00", "08:00")) == 1440


@pytest.mark.parametrize(
    ("sessions", "expected"),
    [
        ([Session("07:00", "08:30")], "1j 30m"),
        ([Session("07:00", "07:45")], "45m"),
        ([Session("07:00", "08:00"), Session("20:00", "21:00")], "2j"),
    ],
)
def test_duration_formatting(sessions, expected):
    assert calculate_duration(sessions) == expected


def test_sessions_missing_an_endpoint_give_no_duration():
    sessions = [Session("07:00", ""), Session("", "08:00"), Session()]
    assert total_minutes(sessions) == 0
    assert calculate_duration(sessions) is None


def test_unparseable_times_contribute_nothing():
    # Robustness choice: garbage input is ignored rather than raising.
    sessions = [Session("pagi", "08:00"), Session("07:00", "07:20")]
    assert calculate_duration(sessions) == "20m"


def test_custom_unit_suffixes():
    settings = DisplaySettings(hour_suffix="h", minute_suffix="min")
    assert format_minutes(90, settings) == "1h 30min"
    assert calculate_duration([Session("21:00", "05:00")], settings) == "8h"
