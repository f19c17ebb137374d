# sync/refresh_scheduler.py

from __future__ import annotations

"""
Periodic refresh loop.

start():
- cancels a loop that is already running (at most one active loop),
- refreshes immediately,
- then sleeps interval_seconds and refreshes again, until stopped.

Cancellation is cooperative: an asyncio.Event per loop is checked before each
sleep and right after waking, and the sleep itself wakes early when it is set.
A refresh already in flight is allowed to finish, but its result is discarded
because the engine is given a liveness check bound to that loop's event.
"""

import asyncio
import logging
from enum import StrEnum

from .sync_engine import SyncEngine

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 300.0


class SchedulerState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"


class RefreshScheduler:
    def __init__(self, engine: SyncEngine, *, interval_seconds: float = DEFAULT_INTERVAL_SECONDS) -> None:
        self._engine = engine
        self._interval = max(0.01, float(interval_seconds))
        self._cancel: asyncio.Event | None = None
        self._task: asyncio.Task[None] | None = None
        self._retired: set[asyncio.Task[None]] = set()
        self._active_loops = 0

    @property
    def state(self) -> SchedulerState:
        return SchedulerState.RUNNING if self._cancel is not None else SchedulerState.IDLE

    @property
    def is_running(self) -> bool:
        return self.state == SchedulerState.RUNNING

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def active_loops(self) -> int:
        """Loop coroutines that have not exited yet."""
        return self._active_loops

    def start(self) -> asyncio.Task[None] | None:
        """Start (or restart) the loop. Must be called on the engine's event loop."""
        if self._engine.is_closed:
            logger.warning("Sync engine is closed; auto-refresh not started")
            self.stop()
            return None

        if self._cancel is not None:
            logger.debug("Refresh loop already running; restarting")
            self.stop()

        cancel = asyncio.Event()
        task = asyncio.get_running_loop().create_task(self._run(cancel), name="refresh-loop")
        self._cancel = cancel
        self._task = task
        logger.info("Auto-refresh started (every %.0fs)", self._interval)
        return task

    def stop(self) -> None:
        """Request cancellation. Takes effect at the loop's next check point."""
        if self._cancel is None:
            return
        self._cancel.set()
        if self._task is not None and not self._task.done():
            self._retired.add(self._task)
            self._task.add_done_callback(self._retired.discard)
        self._cancel = None
        self._task = None
        logger.info("Auto-refresh stopped")

    async def wait_stopped(self) -> None:
        """Wait until every stopped loop has actually exited."""
        pending = [t for t in self._retired if not t.done()]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def _refresh_once(self, cancel: asyncio.Event) -> None:
        try:
            await self._engine.refresh(is_live=lambda: not cancel.is_set())
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Scheduled refresh failed")

    async def _run(self, cancel: asyncio.Event) -> None:
        self._active_loops += 1
        try:
            await self._refresh_once(cancel)
            while not cancel.is_set():
                try:
                    await asyncio.wait_for(cancel.wait(), timeout=self._interval)
                except asyncio.TimeoutError:
                    pass
                if cancel.is_set():
                    break
                await self._refresh_once(cancel)
        finally:
            self._active_loops -= 1
            logger.debug("Refresh loop exited")
