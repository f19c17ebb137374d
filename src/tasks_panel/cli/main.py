# src/tasks_panel/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, starts the event loop that owns sync
state (in a background thread), then runs the console REPL in the main thread.
"""

from __future__ import annotations

import logging
import signal
import threading

from ..cli.bootstrap import create_initial_state, start_background, stop_background
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)
    start_background(state)

    stop_main = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    try:
        signal.signal(signal.SIGTERM, _handle_signal)
        if not settings.console_enabled:
            signal.signal(signal.SIGINT, _handle_signal)
    except Exception:
        # Some platforms may not support SIGTERM, etc.
        pass

    try:
        if settings.console_enabled:
            run_console_loop(state)
            stop_main.set()
        else:
            logger.info("Console disabled. Refreshing in background only. Press Ctrl+C to stop.")
            stop_main.wait()
    finally:
        stop_background(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
