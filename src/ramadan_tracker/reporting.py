"""Simple reporting utilities for CLI output."""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Iterable, Optional

from . import db
from .catalog import base_activity_id, resolve_activity
from .config import DisplaySettings
from .duration import format_minutes, total_minutes
from .models import ActivityEntry
from .ramadan import ramadan_day_for
from .sessions import decode_sessions
from .tracker import ActivityTracker


class SummaryPrinter:
    """Render human-readable summaries in the console."""

    def __init__(self, tracker: ActivityTracker) -> None:
        self.tracker = tracker

    def print_day(self, day: date) -> None:
        activities = self.tracker.day_activities(day)
        ramadan_day = ramadan_day_for(day, self.tracker.settings.ramadan_start)
        completed = sum(1 for item in activities if item.completed)

        print(f"Ramadan day {ramadan_day} ({day.isoformat()})")
        print("-" * 40)
        for item in activities:
            mark = "x" if item.completed else " "
            print(f"  [{mark}] {item.activity.name:<24} {item.label}")
        print()
        print(f"Completed: {completed}/{len(activities)}")

    def print_recap(self, start: date, end: date) -> None:
        with db.database_connection(self.tracker.db_path) as conn:
            entries = db.fetch_activities_between(conn, start, end)
        rows = activity_minutes_summary(entries)
        if not rows:
            print("No recorded time for the selected range.")
            return

        display = self.tracker.settings.display
        print(f"Recorded time {start.isoformat()} .. {end.isoformat()}")
        print("-" * 40)
        for activity_id, minutes, days in rows:
            name = resolve_activity(activity_id).name
            print(f"  {name:<24} {format_duration(minutes, display):>10}  ({days} days)")


def activity_minutes_summary(
    entries: Iterable[ActivityEntry],
) -> list[tuple[str, int, int]]:
    """Total recorded minutes and day count per activity, largest first.

    Overnight continuation rows count toward their parent activity's minutes
    but not its day count.
    """
    minutes: defaultdict[str, int] = defaultdict(int)
    days: defaultdict[str, int] = defaultdict(int)
    for entry in entries:
        if not entry.completed:
            continue
        spent = total_minutes(decode_sessions(entry.record))
        if spent <= 0:
            continue
        activity_id = base_activity_id(entry.activity_id)
        minutes[activity_id] += spent
        if activity_id == entry.activity_id:
            days[activity_id] += 1
    ordered = sorted(minutes.items(), key=lambda item: item[1], reverse=True)
    return [(activity_id, total, days[activity_id]) for activity_id, total in ordered]


def format_duration(minutes: int, settings: Optional[DisplaySettings] = None) -> str:
    if minutes <= 0:
        return "-"
    return format_minutes(minutes, settings)
