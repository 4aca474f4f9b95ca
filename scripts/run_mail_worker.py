"""Run the mail queue consumer until interrupted (Ctrl+C)."""

from __future__ import annotations

import signal
import sys
import threading
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.attendance_api.attendance_api.container import build_container
from src.attendance_api.attendance_api.main import configure_logging, load_settings


def main() -> None:
    settings = load_settings()
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    container = build_container(db_config=settings.DB_CONFIG, settings=settings)

    stop = threading.Event()
    signal.signal(signal.SIGINT, lambda *_: stop.set())
    signal.signal(signal.SIGTERM, lambda *_: stop.set())

    container.mail_worker.run_forever(
        poll_interval=float(getattr(settings, "MAIL_POLL_INTERVAL", 1.0)),
        stop_event=stop,
    )


if __name__ == "__main__":
    main()
