"""Run the tracker's JSON API under uvicorn."""

from __future__ import annotations

import logging
import threading
import webbrowser
from pathlib import Path
from typing import Optional

import uvicorn

from .config import TrackerSettings
from .paths import get_db_path
from .webapp import create_app

logger = logging.getLogger(__name__)

BROWSER_DELAY_SECONDS = 1.0


def run_api(
    *,
    host: str = "127.0.0.1",
    port: int = 8765,
    db_path: Optional[Path] = None,
    settings: Optional[TrackerSettings] = None,
    open_browser: bool = True,
    log_level: str = "info",
) -> None:
    """Serve the API until interrupted; optionally open its interactive docs."""
    resolved_db_path = db_path or get_db_path()
    app = create_app(db_path=resolved_db_path, settings=settings or TrackerSettings())
    docs_url = f"http://{host}:{port}{app.docs_url}"
    logger.info("Serving %s on %s", resolved_db_path, docs_url)

    if open_browser:
        timer = threading.Timer(BROWSER_DELAY_SECONDS, _open_docs, args=(docs_url,))
        timer.daemon = True
        timer.start()

    uvicorn.run(app, host=host, port=port, log_level=log_level)


def _open_docs(url: str) -> None:
    if not webbrowser.open(url):
        logger.warning("No browser available; open %s manually", url)
