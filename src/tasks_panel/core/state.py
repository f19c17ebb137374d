# src/tasks_panel/core/state.py

from __future__ import annotations

from collections.abc import Awaitable
from dataclasses import dataclass
from typing import TypeVar

from ..connectors.loop_runner import LoopRunner
from ..sync.refresh_scheduler import RefreshScheduler
from ..sync.sync_engine import SyncEngine

T = TypeVar("T")


@dataclass
class AppState:
    # Settings object (config.Settings or a test stand-in).
    settings: object

    engine: SyncEngine
    scheduler: RefreshScheduler
    loop_runner: LoopRunner | None = None

    def call(self, coro: Awaitable[T]) -> T:
        """Run a coroutine on the loop that owns engine state and wait for it."""
        if self.loop_runner is None:
            raise RuntimeError("Event loop is not running.")
        return self.loop_runner.run(coro)
