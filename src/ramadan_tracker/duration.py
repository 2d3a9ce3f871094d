"""Duration arithmetic over logged sessions."""

from __future__ import annotations

import re
from typing import Iterable, Optional

from .config import DisplaySettings
from .models import Session

MINUTES_PER_DAY = 24 * 60

TIME_PATTERN = re.compile(r"(\d{1,2}):(\d{2})")


def parse_time_of_day(value: Optional[str]) -> Optional[int]:
    """Return minutes since midnight for the first ``H:MM`` token, if any."""
    if not value:
        return None
    match = TIME_PATTERN.search(value)
    if not match:
        return None
    return int(match.group(1)) * 60 + int(match.group(2))


def session_minutes(session: Session) -> int:
    """Minutes covered by one session; an end at or before the start wraps past midnight."""
    start = parse_time_of_day(session.start)
    end = parse_time_of_day(session.end)
    if start is None or end is None:
        return 0
    if end <= start:
        end += MINUTES_PER_DAY
    return end - start


def total_minutes(sessions: Iterable[Session]) -> int:
    return sum(session_minutes(session) for session in sessions)


def format_minutes(minutes: int, settings: Optional[DisplaySettings] = None) -> str:
    settings = settings or DisplaySettings()
    hours, mins = divmod(minutes, 60)
    if hours and mins:
        return f"{hours}{settings.hour_suffix} {mins}{settings.minute_suffix}"
    if hours:
        return f"{hours}{settings.hour_suffix}"
    return f"{mins}{settings.minute_suffix}"


def calculate_duration(
    sessions: Iterable[Session], settings: Optional[DisplaySettings] = None
) -> Optional[str]:
    """Return the formatted total of ``sessions`` or ``None`` when nothing is measurable."""
    total = total_minutes(sessions)
    if total <= 0:
        return None
    return format_minutes(total, settings)
