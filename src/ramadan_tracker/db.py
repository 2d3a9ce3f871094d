"""SQLite database layer for activity records and Quran progress."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Iterator, Optional

from .models import ActivityEntry, ActivityTimeRecord, QuranProgress


DATE_FMT = "%Y-%m-%d"
DATETIME_FMT = "%Y-%m-%d %H:%M:%S.%f"


def open_database(path: Path, *, check_same_thread: bool = True) -> sqlite3.Connection:
    """Open (and initialize) the SQLite database."""
    conn = sqlite3.connect(
        path,
        isolation_level=None,
        check_same_thread=check_same_thread,
    )
    conn.row_factory = sqlite3.Row
    initialize_schema(conn)
    return conn


@contextmanager
def database_connection(
    path: Path, *, check_same_thread: bool = True
) -> Iterator[sqlite3.Connection]:
    conn = open_database(path, check_same_thread=check_same_thread)
    try:
        yield conn
    finally:
        conn.close()


def initialize_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS daily_activities (
            id INTEGER PRIMARY KEY,
            activity_date TEXT NOT NULL,
            activity_id TEXT NOT NULL,
            activity_name TEXT,
            activity_category TEXT,
            completed INTEGER NOT NULL DEFAULT 1,
            start_time TEXT,
            end_time TEXT,
            completed_at TEXT NOT NULL,
            UNIQUE (activity_date, activity_id)
        );

        CREATE INDEX IF NOT EXISTS idx_activities_date
            ON daily_activities(activity_date);

        CREATE TABLE IF NOT EXISTS quran_progress (
            id INTEGER PRIMARY KEY CHECK (id = 1),
            current_juz INTEGER NOT NULL DEFAULT 1,
            pages_read INTEGER NOT NULL DEFAULT 0,
            last_read_date TEXT
        );

        CREATE TABLE IF NOT EXISTS quran_reading_log (
            read_date TEXT PRIMARY KEY,
            pages_count INTEGER NOT NULL,
            juz_number INTEGER NOT NULL
        );
        """
    )


def upsert_activity(
    conn: sqlite3.Connection,
    day: date,
    activity_id: str,
    *,
    activity_name: Optional[str],
    activity_category: Optional[str],
    record: ActivityTimeRecord,
    completed_at: datetime,
) -> None:
    """Write a completed activity, replacing any existing row wholesale."""
    conn.execute(
        """
        INSERT INTO daily_activities (
            activity_date,
            activity_id,
            activity_name,
            activity_category,
            completed,
            start_time,
            end_time,
            completed_at
        ) VALUES (?, ?, ?, ?, 1, ?, ?, ?)
        ON CONFLICT (activity_date, activity_id) DO UPDATE SET
            activity_name = excluded.activity_name,
            activity_category = excluded.activity_category,
            completed = 1,
            start_time = excluded.start_time,
            end_time = excluded.end_time,
            completed_at = excluded.completed_at
        """,
        (
            day.strftime(DATE_FMT),
            activity_id,
            activity_name,
            activity_category,
            record.start_time,
            record.end_time,
            completed_at.strftime(DATETIME_FMT),
        ),
    )


def update_activity_time(
    conn: sqlite3.Connection,
    day: date,
    activity_id: str,
    record: ActivityTimeRecord,
) -> None:
    """Overwrite the time fields of a completed activity."""
    cur = conn.execute(
        """
        UPDATE daily_activities
        SET start_time = ?, end_time = ?
        WHERE activity_date = ? AND activity_id = ? AND completed = 1
        """,
        (record.start_time, record.end_time, day.strftime(DATE_FMT), activity_id),
    )
    if cur.rowcount == 0:
        raise ValueError(f"No completed activity {activity_id!r} on {day.isoformat()}")


def delete_activity(conn: sqlite3.Connection, day: date, activity_id: str) -> None:
    conn.execute(
        "DELETE FROM daily_activities WHERE activity_date = ? AND activity_id = ?",
        (day.strftime(DATE_FMT), activity_id),
    )


def delete_activities_for_day(conn: sqlite3.Connection, day: date) -> int:
    cur = conn.execute(
        "DELETE FROM daily_activities WHERE activity_date = ?",
        (day.strftime(DATE_FMT),),
    )
    return cur.rowcount


def fetch_activity(
    conn: sqlite3.Connection, day: date, activity_id: str
) -> Optional[ActivityEntry]:
    row = conn.execute(
        """
        SELECT activity_date, activity_id, activity_name, completed,
               start_time, end_time, completed_at
        FROM daily_activities
        WHERE activity_date = ? AND activity_id = ?
        """,
        (day.strftime(DATE_FMT), activity_id),
    ).fetchone()
    return _row_to_entry(row) if row is not None else None


def fetch_activities_between(
    conn: sqlite3.Connection, start: date, end: date
) -> list[ActivityEntry]:
    """Fetch activity rows dated from ``start`` to ``end`` inclusive."""
    rows = conn.execute(
        """
        SELECT activity_date, activity_id, activity_name, completed,
               start_time, end_time, completed_at
        FROM daily_activities
        WHERE activity_date >= ? AND activity_date <= ?
        ORDER BY activity_date, activity_id
        """,
        (start.strftime(DATE_FMT), end.strftime(DATE_FMT)),
    )
    return [_row_to_entry(row) for row in rows]


def fetch_activities_for_day(conn: sqlite3.Connection, day: date) -> list[ActivityEntry]:
    return fetch_activities_between(conn, day, day)


def count_completed(conn: sqlite3.Connection) -> int:
    row = conn.execute(
        "SELECT COUNT(*) AS total FROM daily_activities WHERE completed = 1"
    ).fetchone()
    return int(row["total"])


def fetch_quran_progress(conn: sqlite3.Connection) -> QuranProgress:
    row = conn.execute(
        "SELECT current_juz, pages_read, last_read_date FROM quran_progress WHERE id = 1"
    ).fetchone()
    if row is None:
        return QuranProgress()
    last_read = row["last_read_date"]
    return QuranProgress(
        current_juz=row["current_juz"],
        pages_read=row["pages_read"],
        last_read_date=datetime.strptime(last_read, DATE_FMT).date() if last_read else None,
    )


def save_quran_progress(conn: sqlite3.Connection, progress: QuranProgress) -> None:
    conn.execute(
        """
        INSERT INTO quran_progress (id, current_juz, pages_read, last_read_date)
        VALUES (1, ?, ?, ?)
        ON CONFLICT (id) DO UPDATE SET
            current_juz = excluded.current_juz,
            pages_read = excluded.pages_read,
            last_read_date = excluded.last_read_date
        """,
        (
            progress.current_juz,
            progress.pages_read,
            progress.last_read_date.strftime(DATE_FMT) if progress.last_read_date else None,
        ),
    )


def log_reading(conn: sqlite3.Connection, day: date, pages: int, juz_number: int) -> None:
    """Add ``pages`` to the reading log entry of ``day``."""
    conn.execute(
        """
        INSERT INTO quran_reading_log (read_date, pages_count, juz_number)
        VALUES (?, ?, ?)
        ON CONFLICT (read_date) DO UPDATE SET
            pages_count = pages_count + excluded.pages_count,
            juz_number = excluded.juz_number
        """,
        (day.strftime(DATE_FMT), pages, juz_number),
    )


def _row_to_entry(row: sqlite3.Row) -> ActivityEntry:
    return ActivityEntry(
        day=datetime.strptime(row["activity_date"], DATE_FMT).date(),
        activity_id=row["activity_id"],
        completed=bool(row["completed"]),
        record=ActivityTimeRecord(start_time=row["start_time"], end_time=row["end_time"]),
        completed_at=datetime.strptime(row["completed_at"], DATETIME_FMT),
        activity_name=row["activity_name"],
    )
