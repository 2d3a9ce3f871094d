"""Mapping between Ramadan day numbers and calendar dates."""

from __future__ import annotations

from datetime import date, timedelta


def date_for_ramadan_day(day: int, start: date) -> date:
    return start + timedelta(days=day - 1)


def ramadan_day_for(value: date, start: date) -> int:
    """Return the Ramadan day number; zero or negative before Ramadan begins."""
    return (value - start).days + 1


def clamp_ramadan_day(day: int, length: int = 30) -> int:
    return min(max(day, 1), length)
