from ramadan_tracker.config import DisplaySettings
from ramadan_tracker.display import format_activity_time
from ramadan_tracker.models import ActivityTimeRecord, Session
from ramadan_tracker.sessions import decode_sessions


def test_no_sessions_falls_back_to_scheduled_label():
    assert format_activity_time(decode_sessions(None), "04:30") == "04:30"
    assert format_activity_time([], "Kapan saja") == "Kapan saja"


def test_single_session_with_both_endpoints():
    assert format_activity_time([Session("04:30", "05:00")], "04:30") == "04:30 - 05:00"


def test_single_session_with_start_only():
    assert format_activity_time([Session("04:40", "")], "04:30") == "04:40"


def test_single_session_without_start_uses_schedule():
    assert format_activity_time([Session("", "05:00")], "04:30") == "04:30"


def test_multi_session_with_duration():
    sessions = [Session("07:00", "07:30"), Session("13:00", "13:15"), Session("20:00", "20:30")]
    assert format_activity_time(sessions, "Setelah Subuh/Maghrib") == "3 sesi (1j 15m)"


def test_multi_session_without_duration():
    sessions = [Session("07:00", ""), Session("20:00", "")]
    assert format_activity_time(sessions, "x") == "2 sesi"


def test_custom_session_label():
    settings = DisplaySettings(hour_suffix="h", minute_suffix="m", session_label="sessions")
    sessions = [Session("07:00", "08:00"), Session("20:00", "21:00")]
    assert format_activity_time(sessions, "x", settings) == "2 sessions (2h)"


def test_formatting_does_not_mutate_sessions():
    record = ActivityTimeRecord('[{"start":"07:00","end":"08:00"},{"start":"09:00","end":""}]', "__multi__")
    sessions = decode_sessions(record)
    snapshot = [Session(s.start, s.end) for s in sessions]
    format_activity_time(sessions, "x")
    assert sessions == snapshot
