"""Conversion between session lists and the two-field storage shape."""

from __future__ import annotations

import json
import logging
from typing import Iterable, Optional

from .models import ActivityTimeRecord, Session

logger = logging.getLogger(__name__)

MULTI_SESSION_MARKER = "__multi__"


def decode_sessions(record: Optional[ActivityTimeRecord]) -> list[Session]:
    """Return the sessions stored in ``record``.

    Malformed multi-session payloads degrade to a single session holding the
    raw ``start_time`` so a corrupt row can still be shown and re-saved.
    """
    if record is None:
        return []
    if record.end_time == MULTI_SESSION_MARKER and record.start_time:
        sessions = _parse_session_list(record.start_time)
        if sessions is None:
            logger.warning(
                "Malformed multi-session payload %r; keeping it as a single session.",
                record.start_time,
            )
            return [Session(start=record.start_time, end="")]
        return sessions
    if record.start_time:
        return [Session(start=record.start_time, end=record.end_time or "")]
    return []


def encode_sessions(sessions: Iterable[Session]) -> ActivityTimeRecord:
    """Compact ``sessions`` into the storage shape, dropping rows without a start."""
    valid = [session for session in sessions if session.start]
    if not valid:
        return ActivityTimeRecord(start_time=None, end_time=None)
    if len(valid) == 1:
        only = valid[0]
        return ActivityTimeRecord(start_time=only.start, end_time=only.end or None)
    payload = json.dumps(
        [{"start": session.start, "end": session.end} for session in valid],
        separators=(",", ":"),
        ensure_ascii=False,
    )
    return ActivityTimeRecord(start_time=payload, end_time=MULTI_SESSION_MARKER)


def is_multi_session(record: Optional[ActivityTimeRecord]) -> bool:
    return record is not None and record.end_time == MULTI_SESSION_MARKER


def _parse_session_list(raw: str) -> Optional[list[Session]]:
    try:
        items = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(items, list):
        return None
    sessions: list[Session] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        sessions.append(
            Session(start=_as_text(item.get("start")), end=_as_text(item.get("end")))
        )
    return sessions


def _as_text(value: object) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)
