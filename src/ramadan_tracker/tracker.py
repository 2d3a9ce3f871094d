"""Activity records keyed by day, plus derived statistics."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from . import db
from .catalog import ALL_ACTIVITIES, DEFAULT_PRAYERS, resolve_activity
from .config import TrackerSettings
from .display import format_activity_time
from .duration import calculate_duration
from .editing import SessionEditor
from .models import Activity, ActivityEntry, ActivityTimeRecord, DayActivity, QuranProgress
from .ramadan import date_for_ramadan_day, ramadan_day_for
from .sessions import decode_sessions

logger = logging.getLogger(__name__)


class FutureDayError(ValueError):
    """Raised when recording an activity for a day that has not started."""


@dataclass(slots=True)
class DayRecorder:
    """Collaborator handed to ``SessionEditor``, bound to a single day."""

    tracker: "ActivityTracker"
    day: date

    def toggle_activity(
        self,
        activity_id: str,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
    ) -> bool:
        return self.tracker.toggle_activity(self.day, activity_id, start_time, end_time)

    def update_activity_time(
        self,
        activity_id: str,
        start_time: Optional[str],
        end_time: Optional[str],
    ) -> None:
        self.tracker.update_activity_time(self.day, activity_id, start_time, end_time)


class ActivityTracker:
    """Reads and writes activity records stored in SQLite."""

    def __init__(
        self,
        db_path: Path,
        settings: Optional[TrackerSettings] = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.db_path = Path(db_path)
        self.settings = settings or TrackerSettings()
        self._today = today

    @property
    def today(self) -> date:
        return self._today()

    @property
    def current_ramadan_day(self) -> int:
        return ramadan_day_for(self.today, self.settings.ramadan_start)

    def date_for_day(self, ramadan_day: int) -> date:
        return date_for_ramadan_day(ramadan_day, self.settings.ramadan_start)

    def toggle_activity(
        self,
        day: date,
        activity_id: str,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
    ) -> bool:
        """Flip completion of ``activity_id`` on ``day`` and return the new state."""
        if day > self.today:
            raise FutureDayError(f"{day.isoformat()} has not started yet")
        activity = resolve_activity(activity_id)
        with db.database_connection(self.db_path) as conn:
            current = db.fetch_activity(conn, day, activity_id)
            if current is not None and current.completed:
                db.delete_activity(conn, day, activity_id)
                logger.info("Uncompleted %s on %s", activity_id, day)
                return False
            db.upsert_activity(
                conn,
                day,
                activity_id,
                activity_name=activity.name,
                activity_category=activity.category,
                record=ActivityTimeRecord(start_time or None, end_time or None),
                completed_at=datetime.now(),
            )
        logger.info("Completed %s on %s", activity_id, day)
        return True

    def update_activity_time(
        self,
        day: date,
        activity_id: str,
        start_time: Optional[str],
        end_time: Optional[str],
    ) -> None:
        with db.database_connection(self.db_path) as conn:
            db.update_activity_time(
                conn, day, activity_id, ActivityTimeRecord(start_time or None, end_time or None)
            )
        logger.debug("Updated time of %s on %s", activity_id, day)

    def get_time_record(self, day: date, activity_id: str) -> Optional[ActivityTimeRecord]:
        with db.database_connection(self.db_path) as conn:
            entry = db.fetch_activity(conn, day, activity_id)
        return entry.record if entry is not None else None

    def is_completed(self, day: date, activity_id: str) -> bool:
        with db.database_connection(self.db_path) as conn:
            entry = db.fetch_activity(conn, day, activity_id)
        return bool(entry and entry.completed)

    def for_day(self, day: date) -> DayRecorder:
        return DayRecorder(self, day)

    def open_editor(self, day: date, activity_id: str) -> SessionEditor:
        with db.database_connection(self.db_path) as conn:
            entry = db.fetch_activity(conn, day, activity_id)
        completed = bool(entry and entry.completed)
        return SessionEditor.open(
            resolve_activity(activity_id),
            entry.record if entry is not None else None,
            completed=completed,
        )

    def day_activities(self, day: date) -> list[DayActivity]:
        with db.database_connection(self.db_path) as conn:
            entries = {entry.activity_id: entry for entry in db.fetch_activities_for_day(conn, day)}
        return [self._day_activity(activity, entries.get(activity.id)) for activity in ALL_ACTIVITIES]

    def day_activity(self, day: date, activity_id: str) -> DayActivity:
        """Card data for one activity, including ids missing from the catalog."""
        with db.database_connection(self.db_path) as conn:
            entry = db.fetch_activity(conn, day, activity_id)
        return self._day_activity(resolve_activity(activity_id), entry)

    def _day_activity(self, activity: Activity, entry: Optional[ActivityEntry]) -> DayActivity:
        display = self.settings.display
        record = entry.record if entry is not None else None
        sessions = decode_sessions(record)
        return DayActivity(
            activity=activity,
            completed=bool(entry and entry.completed),
            record=record,
            sessions=sessions,
            label=format_activity_time(sessions, activity.time, display),
            duration=calculate_duration(sessions, display),
        )

    def reset_day(self, day: date) -> int:
        with db.database_connection(self.db_path) as conn:
            removed = db.delete_activities_for_day(conn, day)
        logger.info("Reset %d activities on %s", removed, day)
        return removed

    def streak(self) -> int:
        """Consecutive days, counting back from today, with every obligatory prayer done."""
        current_day = self.current_ramadan_day
        if current_day < 1:
            return 0
        start = self.settings.ramadan_start
        with db.database_connection(self.db_path) as conn:
            entries = db.fetch_activities_between(conn, start, self.date_for_day(current_day))
        completed = {(entry.day, entry.activity_id) for entry in entries if entry.completed}
        streak = 0
        for ramadan_day in range(current_day, 0, -1):
            day = self.date_for_day(ramadan_day)
            if all((day, prayer.id) in completed for prayer in DEFAULT_PRAYERS):
                streak += 1
            else:
                break
        return streak

    def stats(self, day: date) -> Dict[str, Any]:
        activities = self.day_activities(day)
        completed_day = sum(1 for item in activities if item.completed)
        total = len(activities)
        with db.database_connection(self.db_path) as conn:
            total_completed = db.count_completed(conn)
        progress = self.quran_progress()
        return {
            "completed_today": completed_day,
            "total_activities": total,
            "percentage": round(completed_day / total * 100) if total else 0,
            "total_completed": total_completed,
            "current_day": self.current_ramadan_day,
            "selected_day": ramadan_day_for(day, self.settings.ramadan_start),
            "quran_juz": progress.current_juz,
            "quran_pages": progress.pages_read,
            "streak": self.streak(),
        }

    def history(self) -> list[Dict[str, Any]]:
        """Per-day completion summary, newest day first."""
        current_day = min(self.current_ramadan_day, self.settings.ramadan_length)
        if current_day < 1:
            return []
        with db.database_connection(self.db_path) as conn:
            entries = db.fetch_activities_between(
                conn, self.settings.ramadan_start, self.date_for_day(current_day)
            )
        by_day: dict[date, set[str]] = {}
        for entry in entries:
            if entry.completed:
                by_day.setdefault(entry.day, set()).add(entry.activity_id)

        history: list[Dict[str, Any]] = []
        for ramadan_day in range(1, current_day + 1):
            day = self.date_for_day(ramadan_day)
            done = by_day.get(day, set())
            history.append(
                {
                    "date": day.isoformat(),
                    "day": ramadan_day,
                    "activities": [a.name for a in ALL_ACTIVITIES if a.id in done],
                    "missed": [a.name for a in DEFAULT_PRAYERS if a.id not in done],
                    "completed_count": len(done),
                    "total_count": len(ALL_ACTIVITIES),
                }
            )
        history.reverse()
        return history

    def quran_progress(self) -> QuranProgress:
        with db.database_connection(self.db_path) as conn:
            return db.fetch_quran_progress(conn)

    def add_pages_read(self, pages: int) -> QuranProgress:
        if pages <= 0:
            raise ValueError("pages must be a positive number")
        today = self.today
        with db.database_connection(self.db_path) as conn:
            progress = db.fetch_quran_progress(conn)
            progress.pages_read += pages
            progress.current_juz = min(
                progress.pages_read // self.settings.pages_per_juz + 1,
                self.settings.total_juz,
            )
            progress.last_read_date = today
            db.save_quran_progress(conn, progress)
            db.log_reading(conn, today, pages, progress.current_juz)
        logger.info("Read %d pages; now at juz %d", pages, progress.current_juz)
        return progress
