"""Editing buffer for the sessions of a single activity."""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Optional, Protocol

from .duration import TIME_PATTERN
from .models import Activity, ActivityTimeRecord, Session
from .sessions import decode_sessions, encode_sessions

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("start", "end")

_NON_TIME_CHARS = re.compile(r"[^0-9:]")


class EditorError(ValueError):
    """Raised when a transition is not allowed from the current state."""


class EditorState(str, Enum):
    NEW = "new"
    EDITING = "editing"


class ActivityRecorder(Protocol):
    """Writes completion and time data for activities of one day."""

    def toggle_activity(
        self,
        activity_id: str,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
    ) -> bool: ...

    def update_activity_time(
        self,
        activity_id: str,
        start_time: Optional[str],
        end_time: Optional[str],
    ) -> None: ...


def default_start_time(schedule: Optional[str]) -> str:
    """Best-effort "HH:MM" taken from a free-text schedule label."""
    if not schedule:
        return ""
    match = TIME_PATTERN.search(schedule)
    if match:
        return f"{int(match.group(1)):02d}:{match.group(2)}"
    return _NON_TIME_CHARS.sub("", schedule)[:5]


class SessionEditor:
    """Holds the sessions being edited for one activity.

    ``NEW`` means the activity is not yet complete; ``EDITING`` means it is
    complete and its stored record is being amended.
    """

    def __init__(self, activity: Activity, state: EditorState, sessions: list[Session]) -> None:
        self.activity = activity
        self.state = state
        self.sessions = sessions

    @classmethod
    def open(
        cls,
        activity: Activity,
        record: Optional[ActivityTimeRecord],
        *,
        completed: bool,
    ) -> "SessionEditor":
        if not completed:
            return cls(activity, EditorState.NEW, cls._new_buffer(activity))
        return cls(activity, EditorState.EDITING, cls._editing_buffer(record))

    def add_session(self) -> None:
        self.sessions.append(Session())

    def remove_session(self, index: int) -> None:
        self._check_index(index)
        if len(self.sessions) <= 1:
            return
        del self.sessions[index]

    def update_session(self, index: int, field: str, value: str) -> None:
        if field not in EDITABLE_FIELDS:
            raise ValueError(f"Unknown session field: {field!r}")
        self._check_index(index)
        setattr(self.sessions[index], field, value)

    def save(self, recorder: ActivityRecorder) -> ActivityTimeRecord:
        record = encode_sessions(self.sessions)
        if self.state is EditorState.NEW:
            if record.start_time is None:
                recorder.toggle_activity(self.activity.id)
            else:
                recorder.toggle_activity(self.activity.id, record.start_time, record.end_time)
        else:
            recorder.update_activity_time(self.activity.id, record.start_time, record.end_time)
        logger.debug("Saved %s sessions for %s", len(decode_sessions(record)), self.activity.id)
        self.state = EditorState.EDITING
        self.sessions = self._editing_buffer(record)
        return record

    def skip(self, recorder: ActivityRecorder) -> None:
        if self.state is EditorState.EDITING:
            return
        recorder.toggle_activity(self.activity.id)
        self.state = EditorState.EDITING
        self.sessions = [Session()]

    def uncomplete(self, recorder: ActivityRecorder) -> None:
        if self.state is not EditorState.EDITING:
            raise EditorError(f"{self.activity.id} is not complete")
        recorder.toggle_activity(self.activity.id)
        self.state = EditorState.NEW
        self.sessions = self._new_buffer(self.activity)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.sessions):
            raise EditorError(f"No session at position {index}")

    @staticmethod
    def _new_buffer(activity: Activity) -> list[Session]:
        return [Session(start=default_start_time(activity.time), end="")]

    @staticmethod
    def _editing_buffer(record: Optional[ActivityTimeRecord]) -> list[Session]:
        return decode_sessions(record) or [Session()]
