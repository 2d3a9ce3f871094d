"""Domain models for tracked Ramadan activities."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional


@dataclass(slots=True)
class Session:
    """A single logged span of wall-clock time ("HH:MM" or empty)."""

    start: str = ""
    end: str = ""


@dataclass(slots=True, frozen=True)
class ActivityTimeRecord:
    """Persisted time data for one activity on one day."""

    start_time: Optional[str] = None
    end_time: Optional[str] = None


@dataclass(slots=True, frozen=True)
class Activity:
    """A catalog entry; ``time`` is the free-text scheduled label."""

    id: str
    name: str
    icon: str
    time: str
    category: str


@dataclass(slots=True)
class ActivityEntry:
    """A completed activity as stored for a given day."""

    day: date
    activity_id: str
    completed: bool
    record: ActivityTimeRecord
    completed_at: datetime
    activity_name: Optional[str] = None


@dataclass(slots=True)
class DayActivity:
    """An activity as presented for a day, with its derived labels."""

    activity: Activity
    completed: bool
    record: Optional[ActivityTimeRecord]
    sessions: list[Session] = field(default_factory=list)
    label: str = ""
    duration: Optional[str] = None


@dataclass(slots=True)
class QuranProgress:
    current_juz: int = 1
    pages_read: int = 0
    last_read_date: Optional[date] = None
