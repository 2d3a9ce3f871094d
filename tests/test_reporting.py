from datetime import datetime

from ramadan_tracker.models import ActivityEntry, ActivityTimeRecord
from ramadan_tracker.reporting import SummaryPrinter, activity_minutes_summary, format_duration

from conftest import TODAY


def _entry(activity_id, start, end, day=TODAY):
    return ActivityEntry(
        day=day,
        activity_id=activity_id,
        completed=True,
        record=ActivityTimeRecord(start, end),
        completed_at=datetime(2026, 3, 5, 12, 0),
    )


def test_minutes_summary_merges_spillover():
    entries = [
        _entry("tarawih", "20:00", "21:00"),
        _entry("tahajud", "23:00", "00:30"),
        _entry("tahajud__spillover", "00:00", "00:30"),
        _entry("subuh", "04:30", None),
    ]
    assert activity_minutes_summary(entries) == [
        ("tahajud", 120, 1),
        ("tarawih", 60, 1),
    ]


def test_minutes_summary_reads_multi_session_records():
    payload = '[{"start":"05:00","end":"05:30"},{"start":"19:00","end":"19:20"}]'
    assert activity_minutes_summary([_entry("tadarus", payload, "__multi__")]) == [
        ("tadarus", 50, 1)
    ]


def test_format_duration():
    assert format_duration(0) == "-"
    assert format_duration(135) == "2j 15m"


def test_print_day(tracker, capsys):
    tracker.toggle_activity(TODAY, "subuh", "04:30", "04:45")
    SummaryPrinter(tracker).print_day(TODAY)
    out = capsys.readouterr().out
    assert "Ramadan day 15 (2026-03-05)" in out
    assert "[x] Sholat Subuh" in out
    assert "04:30 - 04:45" in out
    assert "Completed: 1/15" in out


def test_print_recap(tracker, capsys):
    tracker.toggle_activity(TODAY, "tarawih", "20:00", "21:30")
    SummaryPrinter(tracker).print_recap(tracker.date_for_day(1), TODAY)
    out = capsys.readouterr().out
    assert "Sholat Tarawih" in out
    assert "1j 30m" in out


def test_print_recap_without_data(tracker, capsys):
    SummaryPrinter(tracker).print_recap(TODAY, TODAY)
    assert "No recorded time" in capsys.readouterr().out
