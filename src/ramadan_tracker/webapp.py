"""FastAPI application that exposes a local JSON API for the Ramadan tracker."""

from __future__ import annotations

import logging
import threading
from contextlib import asynccontextmanager
from datetime import date
from pathlib import Path
from typing import Any, AsyncIterator, Callable, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from . import db
from .config import TrackerSettings
from .models import DayActivity, Session
from .paths import get_db_path
from .ramadan import clamp_ramadan_day
from .reporting import activity_minutes_summary
from .sessions import is_multi_session
from .tracker import ActivityTracker, FutureDayError

logger = logging.getLogger(__name__)


class ActivityTimePayload(BaseModel):
    start_time: Optional[str] = None
    end_time: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class SessionPayload(BaseModel):
    start: str = ""
    end: str = ""

    model_config = ConfigDict(extra="forbid")


class SessionsPayload(BaseModel):
    sessions: List[SessionPayload] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class PagesPayload(BaseModel):
    pages: int

    model_config = ConfigDict(extra="forbid")


def create_app(
    *,
    db_path: Optional[Path] = None,
    settings: Optional[TrackerSettings] = None,
    today: Optional[Callable[[], date]] = None,
) -> FastAPI:
    """Instantiate the FastAPI application."""
    resolved_db_path = Path(db_path or get_db_path())
    resolved_settings = settings or TrackerSettings()
    tracker = ActivityTracker(resolved_db_path, resolved_settings, today=today or date.today)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )
        with db.database_connection(resolved_db_path):
            logger.info("Using database %s", resolved_db_path)
        yield

    app = FastAPI(title="Ramadan Tracker", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.db_path = resolved_db_path
    app.state.tracker = tracker
    app.state.edit_lock = threading.Lock()

    @app.get("/api/status")
    def status(request: Request) -> Dict[str, Any]:
        current = request.app.state.tracker.current_ramadan_day
        return {
            "database_path": str(request.app.state.db_path),
            "ramadan_start": resolved_settings.ramadan_start.isoformat(),
            "current_day": current,
            "is_ramadan": 1 <= current <= resolved_settings.ramadan_length,
        }

    @app.get("/api/day")
    def day_view(
        request: Request,
        day: Optional[int] = Query(
            default=None,
            description="Ramadan day number. Defaults to the current day.",
        ),
    ) -> Dict[str, Any]:
        tracker: ActivityTracker = request.app.state.tracker
        ramadan_day = _resolve_day(tracker, day)
        target = tracker.date_for_day(ramadan_day)
        return {
            "day": ramadan_day,
            "date": target.isoformat(),
            "is_today": target == tracker.today,
            "activities": [_day_activity_payload(item) for item in tracker.day_activities(target)],
        }

    @app.post("/api/day/{day}/activities/{activity_id}/toggle")
    def toggle_activity(
        day: int,
        activity_id: str,
        request: Request,
        payload: Optional[ActivityTimePayload] = None,
    ) -> Dict[str, Any]:
        tracker: ActivityTracker = request.app.state.tracker
        target = tracker.date_for_day(_check_day(day, resolved_settings))
        payload = payload or ActivityTimePayload()
        try:
            tracker.toggle_activity(target, activity_id, payload.start_time, payload.end_time)
        except FutureDayError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return _activity_payload(tracker, target, activity_id)

    @app.put("/api/day/{day}/activities/{activity_id}/time")
    def update_activity_time(
        day: int,
        activity_id: str,
        payload: ActivityTimePayload,
        request: Request,
    ) -> Dict[str, Any]:
        tracker: ActivityTracker = request.app.state.tracker
        target = tracker.date_for_day(_check_day(day, resolved_settings))
        try:
            tracker.update_activity_time(
                target, activity_id, payload.start_time, payload.end_time
            )
        except ValueError as exc:
            raise HTTPException(status_code=404, detail="Activity not completed") from exc
        return _activity_payload(tracker, target, activity_id)

    @app.put("/api/day/{day}/activities/{activity_id}/sessions")
    def save_sessions(
        day: int,
        activity_id: str,
        payload: SessionsPayload,
        request: Request,
    ) -> Dict[str, Any]:
        tracker: ActivityTracker = request.app.state.tracker
        target = tracker.date_for_day(_check_day(day, resolved_settings))
        # A save from NEW toggles completion, so opening and saving must not interleave.
        with request.app.state.edit_lock:
            editor = tracker.open_editor(target, activity_id)
            editor.sessions = [Session(start=item.start, end=item.end) for item in payload.sessions]
            if not editor.sessions:
                editor.add_session()
            try:
                editor.save(tracker.for_day(target))
            except FutureDayError as exc:
                raise HTTPException(status_code=400, detail=str(exc)) from exc
        return _activity_payload(tracker, target, activity_id)

    @app.delete("/api/day/{day}")
    def reset_day(day: int, request: Request) -> Dict[str, Any]:
        tracker: ActivityTracker = request.app.state.tracker
        target = tracker.date_for_day(_check_day(day, resolved_settings))
        removed = tracker.reset_day(target)
        return {"day": day, "date": target.isoformat(), "removed": removed}

    @app.get("/api/stats")
    def stats(
        request: Request,
        day: Optional[int] = Query(default=None, description="Ramadan day number."),
    ) -> Dict[str, Any]:
        tracker: ActivityTracker = request.app.state.tracker
        return tracker.stats(tracker.date_for_day(_resolve_day(tracker, day)))

    @app.get("/api/history")
    def history(request: Request) -> Dict[str, Any]:
        return {"history": request.app.state.tracker.history()}

    @app.get("/api/quran")
    def quran(request: Request) -> Dict[str, Any]:
        return _quran_payload(request.app.state.tracker)

    @app.post("/api/quran/pages")
    def add_pages(payload: PagesPayload, request: Request) -> Dict[str, Any]:
        tracker: ActivityTracker = request.app.state.tracker
        try:
            tracker.add_pages_read(payload.pages)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return _quran_payload(tracker)

    @app.get("/api/recap")
    def recap(
        request: Request,
        start: int = Query(default=1, description="First Ramadan day (inclusive)."),
        end: Optional[int] = Query(default=None, description="Last Ramadan day (inclusive)."),
    ) -> Dict[str, Any]:
        tracker: ActivityTracker = request.app.state.tracker
        start = _check_day(start, resolved_settings)
        last = _resolve_day(tracker, end)
        if last < start:
            raise HTTPException(status_code=400, detail="end day must be on or after start day")
        with db.database_connection(request.app.state.db_path) as conn:
            entries = db.fetch_activities_between(
                conn, tracker.date_for_day(start), tracker.date_for_day(last)
            )
        return {
            "start": start,
            "end": last,
            "activities": [
                {
                    "activity_id": activity_id,
                    "total_minutes": minutes,
                    "total_hours": round(minutes / 60, 2),
                    "day_count": days,
                }
                for activity_id, minutes, days in activity_minutes_summary(entries)
            ],
        }

    return app


def _resolve_day(tracker: ActivityTracker, day: Optional[int]) -> int:
    length = tracker.settings.ramadan_length
    if day is None:
        return clamp_ramadan_day(tracker.current_ramadan_day, length)
    return _check_day(day, tracker.settings)


def _check_day(day: int, settings: TrackerSettings) -> int:
    if not 1 <= day <= settings.ramadan_length:
        raise HTTPException(
            status_code=400,
            detail=f"day must be between 1 and {settings.ramadan_length}",
        )
    return day


def _day_activity_payload(item: DayActivity) -> Dict[str, Any]:
    return {
        "id": item.activity.id,
        "name": item.activity.name,
        "icon": item.activity.icon,
        "time": item.activity.time,
        "category": item.activity.category,
        "completed": item.completed,
        "start_time": item.record.start_time if item.record else None,
        "end_time": item.record.end_time if item.record else None,
        "multi_session": is_multi_session(item.record),
        "sessions": [{"start": s.start, "end": s.end} for s in item.sessions],
        "label": item.label,
        "duration": item.duration,
    }


def _activity_payload(tracker: ActivityTracker, day: date, activity_id: str) -> Dict[str, Any]:
    return _day_activity_payload(tracker.day_activity(day, activity_id))


def _quran_payload(tracker: ActivityTracker) -> Dict[str, Any]:
    progress = tracker.quran_progress()
    return {
        "current_juz": progress.current_juz,
        "pages_read": progress.pages_read,
        "last_read_date": progress.last_read_date.isoformat() if progress.last_read_date else None,
    }
