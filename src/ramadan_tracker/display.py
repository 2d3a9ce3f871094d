"""Human-readable labels for an activity's recorded time."""

from __future__ import annotations

from typing import Optional, Sequence

from .config import DisplaySettings
from .duration import calculate_duration
from .models import Session


def format_activity_time(
    sessions: Sequence[Session],
    scheduled_label: str,
    settings: Optional[DisplaySettings] = None,
) -> str:
    """Return the label shown on an activity card.

    Without any recorded session the static ``scheduled_label`` is shown.
    """
    settings = settings or DisplaySettings()
    if not sessions:
        return scheduled_label
    if len(sessions) == 1:
        only = sessions[0]
        if only.start and only.end:
            return f"{only.start} - {only.end}"
        return only.start or scheduled_label

    label = f"{len(sessions)} {settings.session_label}"
    duration = calculate_duration(sessions, settings)
    if duration:
        label = f"{label} ({duration})"
    return label
