"""Configuration models and helpers for the Ramadan tracker."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

DEFAULT_RAMADAN_START = date(2026, 2, 19)


@dataclass(slots=True)
class DisplaySettings:
    """Labels used when rendering recorded time."""

    hour_suffix: str = "j"
    minute_suffix: str = "m"
    session_label: str = "sesi"


@dataclass(slots=True)
class TrackerSettings:
    """Runtime configuration for the activity tracker."""

    ramadan_start: date = DEFAULT_RAMADAN_START
    ramadan_length: int = 30
    pages_per_juz: int = 20
    total_juz: int = 30
    display: DisplaySettings = field(default_factory=DisplaySettings)
