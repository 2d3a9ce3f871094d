from datetime import date

import pytest

from ramadan_tracker.config import TrackerSettings
from ramadan_tracker.tracker import ActivityTracker

# Ramadan day 15 with the default start of 2026-02-19.
TODAY = date(2026, 3, 5)


@pytest.fixture
def settings():
    return TrackerSettings()


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "ramadan.sqlite3"


@pytest.fixture
def tracker(db_path, settings):
    return ActivityTracker(db_path, settings, today=lambda: TODAY)
