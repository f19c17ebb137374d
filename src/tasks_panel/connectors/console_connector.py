# src/tasks_panel/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import add_title, badge_label, registry as command_registry
from ..core.state import AppState
from ..sync.sync_engine import SyncEngine

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class _PendingWatcher:
    """Engine listener: announces background changes to the pending count and new errors."""

    def __init__(self) -> None:
        self._last_count: int | None = None
        self._last_error: str | None = None

    def __call__(self, engine: SyncEngine) -> None:
        if engine.is_loading:
            return
        count = engine.pending_count
        if self._last_count is not None and count != self._last_count:
            _print_ts(f"[SYNC] Pending: {badge_label(count) or '0'}")
        self._last_count = count

        err = engine.last_error
        if err and err != self._last_error:
            _print_ts(f"[SYNC] Error: {err}")
        self._last_error = err


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Type a title to add a task. Use /help for commands. Use /exit to quit.\n")

    watcher = _PendingWatcher()
    state.call(_attach(state, watcher))

    def emit(text: str) -> None:
        # Immediate user-visible feedback for long operations.
        _print_ts(text)

    try:
        while True:
            try:
                user_input = input(">>> ").strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            try:
                if user_input.startswith("/"):
                    response = command_registry.handle(state, user_input, emit=emit)
                else:
                    # Plain text is a new task title.
                    response = add_title(state, user_input)
            except Exception:
                logger.exception("Command handler crashed.")
                response = "Internal error while handling a command."

            if response is not None:
                _print_ts(response)
    finally:
        try:
            state.call(_detach(state, watcher))
        except Exception:
            logger.debug("Failed to detach console listener.", exc_info=True)

    logger.info("Console connector finished.")


async def _attach(state: AppState, watcher: _PendingWatcher) -> None:
    state.engine.add_listener(watcher)


async def _detach(state: AppState, watcher: _PendingWatcher) -> None:
    state.engine.remove_listener(watcher)
