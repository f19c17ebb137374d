# sync/sync_engine.py

from __future__ import annotations

"""
Sync engine.

Orchestrates refresh / complete / add against the external task CLI:
- runs commands through an injected CommandRunner port,
- parses listings and snapshot-replaces the TaskStore,
- keeps a transient SyncStatus (loading / last error / last refreshed).

All state mutation happens on the event loop that runs these coroutines.
Only the process wait is suspended on; every mutation after an await is
guarded so results arriving after close() (or after the caller's liveness
check turns False) are discarded.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime

from ..core.ports import CommandRunner, LivenessCheck, StateListener
from .command_executor import CommandExecutor, CommandResult, ErrorKind
from .response_parser import parse_tasks
from .task_models import Task
from .task_store import TaskStore

logger = logging.getLogger(__name__)


def _now_local() -> datetime:
    return datetime.now().astimezone()


@dataclass(slots=True, frozen=True)
class TaskCommands:
    """Argument vectors for the external task CLI."""

    gog_path: str
    list_id: str
    account: str

    def list_args(self) -> list[str]:
        return ["tasks", "list", self.list_id, "--account", self.account, "--plain"]

    def complete_args(self, task_id: str) -> list[str]:
        return ["tasks", "complete", self.list_id, task_id, "--account", self.account, "--force"]

    def add_args(self, title: str) -> list[str]:
        return ["tasks", "add", self.list_id, "--title", title, "--account", self.account]


@dataclass(slots=True, frozen=True)
class SyncStatus:
    is_loading: bool = False
    last_error: str | None = None
    last_refreshed_at: datetime | None = None

    def age_text(self, now: datetime | None = None) -> str:
        """Relative time since the last successful refresh ("never" if none)."""
        if self.last_refreshed_at is None:
            return "never"
        now = now or datetime.now(self.last_refreshed_at.tzinfo)
        secs = max(0, int((now - self.last_refreshed_at).total_seconds()))
        if secs < 60:
            return "just now"
        mins = secs // 60
        if mins < 60:
            return f"{mins} min ago"
        hours = mins // 60
        if hours < 24:
            return f"{hours} h ago"
        return f"{hours // 24} d ago"


class SyncEngine:
    def __init__(
        self,
        commands: TaskCommands,
        *,
        runner: CommandRunner | None = None,
        store: TaskStore | None = None,
        clock: Callable[[], datetime] = _now_local,
    ) -> None:
        self._commands = commands
        self._runner: CommandRunner = runner or CommandExecutor()
        self._store = store if store is not None else TaskStore()
        self._clock = clock
        self._status = SyncStatus()
        self._listeners: list[StateListener] = []
        self._closed = False

    # ---- observable state ----

    @property
    def commands(self) -> TaskCommands:
        return self._commands

    @property
    def store(self) -> TaskStore:
        return self._store

    @property
    def status(self) -> SyncStatus:
        return self._status

    @property
    def tasks(self) -> list[Task]:
        return self._store.tasks

    @property
    def is_loading(self) -> bool:
        return self._status.is_loading

    @property
    def last_error(self) -> str | None:
        return self._status.last_error

    @property
    def last_refreshed_at(self) -> datetime | None:
        return self._status.last_refreshed_at

    @property
    def pending_count(self) -> int:
        return self._store.pending_count

    @property
    def has_pending(self) -> bool:
        return self._store.has_pending

    @property
    def is_closed(self) -> bool:
        return self._closed

    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def close(self) -> None:
        """Tear down: results of commands still in flight will be discarded."""
        if not self._closed:
            self._closed = True
            logger.info("Sync engine closed.")

    # ---- internals ----

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("State listener failed")

    def _set_status(self, status: SyncStatus) -> None:
        self._status = status
        self._notify()

    def _accepting(self, is_live: LivenessCheck | None = None) -> bool:
        if self._closed:
            return False
        return is_live is None or bool(is_live())

    def _report_failure(self, result: CommandResult, op: str) -> None:
        message = result.message or "Unknown error"
        logger.warning("%s failed (%s): %s", op, result.error_kind, message)
        self._set_status(replace(self._status, last_error=message))

    def _report_internal(self, op: str, exc: Exception) -> None:
        logger.exception("%s crashed", op)
        self._set_status(replace(self._status, last_error=f"Internal error: {exc}"))

    # ---- operations ----

    async def refresh(self, *, is_live: LivenessCheck | None = None) -> bool:
        """
        Fetch the full listing and snapshot-replace the store.

        Returns True only when the store was replaced.
        is_loading is reset on every exit path.
        """
        if not self._accepting(is_live):
            return False

        self._set_status(replace(self._status, is_loading=True, last_error=None))
        try:
            result = await self._runner.run(self._commands.gog_path, self._commands.list_args())

            if not self._accepting(is_live):
                logger.debug("Discarding refresh result (engine closed or refresh cancelled)")
                return False

            if not result.ok:
                self._report_failure(result, "refresh")
                return False

            tasks = parse_tasks(result.stdout)
            self._store.replace_all(tasks)
            self._status = replace(self._status, last_refreshed_at=self._clock())
            logger.debug("Refreshed: %d task(s), %d pending", len(tasks), self._store.pending_count)
            return True

        except asyncio.CancelledError:
            raise
        except Exception as e:
            if self._accepting(is_live):
                self._report_internal("refresh", e)
            else:
                logger.debug("refresh failed after teardown", exc_info=True)
            return False
        finally:
            self._set_status(replace(self._status, is_loading=False))

    async def complete(self, task: Task | str) -> bool:
        """
        Mark a task completed remotely; on success remove it locally right away.

        On failure the task stays in the store so the caller can retry.
        """
        task_id = task if isinstance(task, str) else task.id
        if self._closed:
            return False

        try:
            result = await self._runner.run(self._commands.gog_path, self._commands.complete_args(task_id))
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if not self._closed:
                self._report_internal("complete", e)
            return False

        if self._closed:
            logger.debug("Discarding complete result for %s (engine closed)", task_id)
            return False

        if not result.ok:
            self._report_failure(result, "complete")
            return False

        if self._store.remove_by_id(task_id):
            logger.info("Completed task %s", task_id)
        else:
            logger.info("Completed task %s (not in local list)", task_id)
        self._notify()
        return True

    async def add(self, title: str) -> bool:
        """
        Add a task. Blank titles are ignored silently.

        On success a full refresh follows: the id is assigned remotely, so
        nothing is inserted locally before that refresh lands.
        """
        clean = (title or "").strip()
        if not clean:
            logger.debug("add ignored: empty title (%s)", ErrorKind.VALIDATION_SKIP)
            return False
        if self._closed:
            return False

        try:
            result = await self._runner.run(self._commands.gog_path, self._commands.add_args(clean))
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if not self._closed:
                self._report_internal("add", e)
            return False

        if self._closed:
            logger.debug("Discarding add result (engine closed)")
            return False

        if not result.ok:
            self._report_failure(result, "add")
            return False

        logger.info("Added task %r", clean)
        await self.refresh()
        return True
