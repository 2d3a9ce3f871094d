"""Default activities offered for every Ramadan day."""

from __future__ import annotations

from typing import Optional

from .models import Activity

WAJIB = "wajib"

DEFAULT_PRAYERS: tuple[Activity, ...] = (
    Activity("subuh", "Sholat Subuh", "🌅", "04:30", WAJIB),
    Activity("dzuhur", "Sholat Dzuhur", "☀️", "12:00", WAJIB),
    Activity("ashar", "Sholat Ashar", "🌤️", "15:00", WAJIB),
    Activity("maghrib", "Sholat Maghrib", "🌅", "18:00", WAJIB),
    Activity("isya", "Sholat Isya", "🌙", "19:30", WAJIB),
)

DEFAULT_SUNNAH: tuple[Activity, ...] = (
    Activity("tahajud", "Sholat Tahajud", "🌌", "03:00", "sunnah"),
    Activity("dhuha", "Sholat Dhuha", "🌞", "08:00", "sunnah"),
    Activity("tarawih", "Sholat Tarawih", "🕌", "20:00", "sunnah"),
    Activity("witir", "Sholat Witir", "⭐", "21:00", "sunnah"),
)

DEFAULT_ACTIVITIES: tuple[Activity, ...] = (
    Activity("sahur", "Sahur", "🍽️", "04:00", "puasa"),
    Activity("puasa", "Puasa", "☪️", "Sepanjang Hari", "puasa"),
    Activity("buka", "Buka Puasa", "🌙", "18:00", "puasa"),
    Activity("dzikir", "Dzikir Pagi/Petang", "📿", "Pagi & Petang", "amal"),
    Activity("sedekah", "Sedekah", "💝", "Kapan saja", "amal"),
    Activity("tadarus", "Tadarus Al-Quran", "📖", "Setelah Subuh/Maghrib", "quran"),
)

ALL_ACTIVITIES: tuple[Activity, ...] = DEFAULT_PRAYERS + DEFAULT_SUNNAH + DEFAULT_ACTIVITIES

SPILLOVER_SUFFIX = "__spillover"

_BY_ID = {activity.id: activity for activity in ALL_ACTIVITIES}


def find_activity(activity_id: str) -> Optional[Activity]:
    return _BY_ID.get(activity_id)


def resolve_activity(activity_id: str) -> Activity:
    """Return the catalog entry, or a placeholder for ids outside the catalog."""
    activity = find_activity(activity_id)
    if activity is not None:
        return activity
    return Activity(activity_id, activity_id, "📌", "", "other")


def base_activity_id(activity_id: str) -> str:
    """Strip the overnight-continuation suffix from an activity id."""
    if activity_id.endswith(SPILLOVER_SUFFIX):
        return activity_id[: -len(SPILLOVER_SUFFIX)]
    return activity_id
