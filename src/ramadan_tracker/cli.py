"""Command-line interface for the Ramadan tracker."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import List, NoReturn, Optional

import typer

from .config import TrackerSettings
from .models import Session
from .paths import get_db_path
from .ramadan import clamp_ramadan_day
from .server_runner import run_api
from .tracker import ActivityTracker

app = typer.Typer(help="Local Ramadan activity tracker.")


@app.callback(no_args_is_help=True)
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs.")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _tracker(db_path: Optional[Path]) -> ActivityTracker:
    return ActivityTracker(db_path or get_db_path(), TrackerSettings())


def _target_day(tracker: ActivityTracker, day: Optional[int]) -> date:
    ramadan_day = day if day is not None else clamp_ramadan_day(
        tracker.current_ramadan_day, tracker.settings.ramadan_length
    )
    return tracker.date_for_day(ramadan_day)


def _fail(message: str) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(code=1)


def parse_session(value: str) -> Session:
    """Parse ``START`` or ``START-END`` into a session."""
    start, _, end = value.partition("-")
    return Session(start=start.strip(), end=end.strip())


@app.command()
def today(
    day: Optional[int] = typer.Option(
        None, "--day", min=1, max=30, help="Ramadan day to show. Defaults to today."
    ),
    db_path: Optional[Path] = typer.Option(
        None, "--db", path_type=Path, help="Location of the tracker SQLite database."
    ),
) -> None:
    """Print the checklist for a Ramadan day."""
    from .reporting import SummaryPrinter

    tracker = _tracker(db_path)
    SummaryPrinter(tracker).print_day(_target_day(tracker, day))


@app.command()
def mark(
    activity_id: str = typer.Argument(..., help="Activity id, e.g. subuh or tadarus."),
    start: Optional[str] = typer.Option(None, "--start", help="Start time (HH:MM)."),
    end: Optional[str] = typer.Option(None, "--end", help="End time (HH:MM)."),
    day: Optional[int] = typer.Option(None, "--day", min=1, max=30, help="Ramadan day."),
    db_path: Optional[Path] = typer.Option(
        None, "--db", path_type=Path, help="Location of the tracker SQLite database."
    ),
) -> None:
    """Toggle completion of an activity."""
    tracker = _tracker(db_path)
    try:
        completed = tracker.toggle_activity(_target_day(tracker, day), activity_id, start, end)
    except ValueError as exc:
        _fail(str(exc))
    typer.echo(f"{activity_id}: {'done' if completed else 'not done'}")


@app.command()
def log(
    activity_id: str = typer.Argument(..., help="Activity id, e.g. subuh or tadarus."),
    sessions: List[str] = typer.Option(
        [], "--session", "-s", help="Session as START or START-END; repeat for more."
    ),
    day: Optional[int] = typer.Option(None, "--day", min=1, max=30, help="Ramadan day."),
    db_path: Optional[Path] = typer.Option(
        None, "--db", path_type=Path, help="Location of the tracker SQLite database."
    ),
) -> None:
    """Record the time sessions of an activity, completing it if needed."""
    tracker = _tracker(db_path)
    target = _target_day(tracker, day)
    editor = tracker.open_editor(target, activity_id)
    if sessions:
        editor.sessions = [parse_session(value) for value in sessions]
    try:
        editor.save(tracker.for_day(target))
    except ValueError as exc:
        _fail(str(exc))
    label = tracker.day_activity(target, activity_id).label
    typer.echo(f"{activity_id}: {label or 'saved'}")


@app.command()
def quran(
    pages: int = typer.Argument(..., help="Number of pages read."),
    db_path: Optional[Path] = typer.Option(
        None, "--db", path_type=Path, help="Location of the tracker SQLite database."
    ),
) -> None:
    """Add pages to the Quran reading progress."""
    tracker = _tracker(db_path)
    try:
        progress = tracker.add_pages_read(pages)
    except ValueError as exc:
        _fail(str(exc))
    typer.echo(f"Juz {progress.current_juz}, {progress.pages_read} pages read")


@app.command()
def recap(
    start: int = typer.Option(1, "--start", min=1, max=30, help="First Ramadan day."),
    end: Optional[int] = typer.Option(
        None, "--end", min=1, max=30, help="Last Ramadan day. Defaults to today."
    ),
    db_path: Optional[Path] = typer.Option(
        None, "--db", path_type=Path, help="Location of the tracker SQLite database."
    ),
) -> None:
    """Print recorded hours per activity across a range of days."""
    from .reporting import SummaryPrinter

    tracker = _tracker(db_path)
    last = _target_day(tracker, end)
    first = tracker.date_for_day(start)
    if last < first:
        _fail("end day must be on or after start day")
    SummaryPrinter(tracker).print_recap(first, last)


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind the API."),
    port: int = typer.Option(
        8765, "--port", min=1, max=65535, help="TCP port for the API."
    ),
    db_path: Optional[Path] = typer.Option(
        None, "--db", path_type=Path, help="Location of the tracker SQLite database."
    ),
    open_browser: bool = typer.Option(
        True,
        "--open-browser/--no-open-browser",
        help="Automatically open the API docs in your default browser.",
    ),
) -> None:
    """Start the local JSON API."""
    run_api(
        host=host,
        port=port,
        db_path=db_path or get_db_path(),
        settings=TrackerSettings(),
        open_browser=open_browser,
    )
