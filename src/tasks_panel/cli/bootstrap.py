# src/tasks_panel/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the command executor, sync engine and refresh scheduler into AppState,
- starts and stops the event loop that owns sync state.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..connectors.loop_runner import start_loop_in_background
from ..core.ports import CommandRunner
from ..core.state import AppState
from ..sync.command_executor import CommandExecutor
from ..sync.refresh_scheduler import RefreshScheduler
from ..sync.sync_engine import SyncEngine, TaskCommands

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, runner: CommandRunner | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the command runner) injectable makes the app easier to test.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if not settings.list_id or not settings.account:
        logger.warning("List id or account is not configured; commands will likely fail.")

    commands = TaskCommands(
        gog_path=settings.gog_path,
        list_id=settings.list_id,
        account=settings.account,
    )
    engine = SyncEngine(commands, runner=runner or CommandExecutor())
    scheduler = RefreshScheduler(engine, interval_seconds=settings.refresh_interval_seconds)
    return AppState(settings=settings, engine=engine, scheduler=scheduler)


async def _start_sync(state: AppState) -> None:
    if getattr(state.settings, "auto_refresh", True):
        state.scheduler.start()


async def _stop_sync(state: AppState) -> None:
    state.scheduler.stop()
    state.engine.close()
    await state.scheduler.wait_stopped()


def start_background(state: AppState) -> None:
    """Start the owning event loop and (optionally) the periodic refresh."""
    runner = start_loop_in_background()
    if runner is None:
        raise RuntimeError("Failed to start the event loop thread.")
    state.loop_runner = runner
    state.call(_start_sync(state))


def stop_background(state: AppState, *, timeout: float = 10.0) -> None:
    """Best-effort shutdown: stop the refresh loop, close the engine, stop the loop thread."""
    runner = state.loop_runner
    if runner is None:
        return
    try:
        runner.run(_stop_sync(state), timeout=timeout)
    except Exception:
        logger.exception("Failed to stop sync cleanly.")
    runner.stop()
    runner.join(timeout=timeout)
    state.loop_runner = None
