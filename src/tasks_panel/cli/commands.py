# src/tasks_panel/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import cast

from ..core.state import AppState
from ..sync.sync_engine import SyncStatus
from ..sync.task_models import Task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._raw: set[str] = set()

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        raw_args: bool = False,
    ) -> None:
        """raw_args: pass the rest of the line untouched as a single argument."""
        aliases = aliases or []
        names = [name.lower()] + [a.lower() for a in aliases]
        self._help[names[0]] = help_text
        for key in names:
            self._handlers[key] = handler
            if raw_args:
                self._raw.add(key)

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split(None, 1)
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        rest = parts[1] if len(parts) > 1 else ""
        if name in self._raw:
            args = [rest] if rest.strip() else []
        else:
            args = rest.split()

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


@dataclass(slots=True, frozen=True)
class Snapshot:
    tasks: list[Task]
    status: SyncStatus
    pending_count: int
    auto_refresh: bool


async def take_snapshot(state: AppState) -> Snapshot:
    """Read engine state on its owning loop."""
    engine = state.engine
    return Snapshot(
        tasks=engine.tasks,
        status=engine.status,
        pending_count=engine.pending_count,
        auto_refresh=state.scheduler.is_running,
    )


def badge_label(count: int) -> str:
    """Compact pending count: empty for zero, "9+" above nine."""
    if count <= 0:
        return ""
    return str(count) if count < 10 else "9+"


def format_tasks(tasks: list[Task]) -> str:
    if not tasks:
        return "All done. No pending tasks."
    lines = []
    for i, t in enumerate(tasks, start=1):
        due = f" (due {t.due_date})" if t.due_date else ""
        lines.append(f"{i}. {t.title}{due}")
    return "\n".join(lines)


def _resolve_task(tasks: list[Task], ref: str) -> Task | None:
    for t in tasks:
        if t.id == ref:
            return t
    if ref.isdigit():
        idx = int(ref)
        if 1 <= idx <= len(tasks):
            return tasks[idx - 1]
    return None


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    snap = state.call(take_snapshot(state))
    return format_tasks(snap.tasks)


def cmd_refresh(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit:
        emit("Refreshing...")
    ok = state.call(state.engine.refresh())
    snap = state.call(take_snapshot(state))
    if not ok:
        return f"Refresh failed: {snap.status.last_error or 'unknown error'}"
    return format_tasks(snap.tasks)


def add_title(state: AppState, title: str) -> str:
    """Add a task with the title exactly as typed (only the ends are trimmed)."""
    ok = state.call(state.engine.add(title))
    if not ok:
        snap = state.call(take_snapshot(state))
        return f"Add failed: {snap.status.last_error or 'unknown error'}"
    return f"Added: {title.strip()}"


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title>  -> add a task, then refresh the list
    """
    if not args:
        return "Usage: /add <title>"
    return add_title(state, args[0])


def cmd_done(state: AppState, args: list[str]) -> str:
    """
    /done <n>   -> complete the n-th task from /list
    /done <id>  -> complete a task by its id
    """
    if not args:
        return "Usage: /done <number|id>"
    snap = state.call(take_snapshot(state))
    task = _resolve_task(snap.tasks, args[0])
    if task is None:
        return f"No such task: {args[0]}"
    ok = state.call(state.engine.complete(task))
    if not ok:
        snap = state.call(take_snapshot(state))
        return f"Complete failed: {snap.status.last_error or 'unknown error'}"
    return f"Completed: {task.title}"


def cmd_status(state: AppState, args: list[str]) -> str:
    snap = state.call(take_snapshot(state))
    badge = badge_label(snap.pending_count) or "0"
    lines = [
        "Status:",
        f"  Pending: {badge}",
        f"  Loading: {'yes' if snap.status.is_loading else 'no'}",
        f"  Updated: {snap.status.age_text()}",
        f"  Auto-refresh: {'ON' if snap.auto_refresh else 'OFF'}",
    ]
    if snap.status.last_error:
        lines.append(f"  Last error: {snap.status.last_error}")
    return "\n".join(lines)


async def _set_auto(state: AppState, enabled: bool) -> None:
    if enabled:
        state.scheduler.start()
    else:
        state.scheduler.stop()


def cmd_auto(state: AppState, args: list[str]) -> str:
    """
    /auto       -> show status
    /auto on    -> start periodic refresh
    /auto off   -> stop periodic refresh
    """
    if not args:
        on = state.call(take_snapshot(state)).auto_refresh
        return f"Auto-refresh is currently {'ON' if on else 'OFF'}. Use /auto on or /auto off."

    arg = args[0].lower()
    if arg in ("on", "1", "true", "yes"):
        state.call(_set_auto(state, True))
        return "Auto-refresh enabled."
    if arg in ("off", "0", "false", "no"):
        state.call(_set_auto(state, False))
        return "Auto-refresh disabled."
    return "Usage: /auto on or /auto off."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show tasks.", aliases=["ls"])
registry.register("refresh", cmd_refresh, help_text="Fetch the task list now.", aliases=["r"])
registry.register("add", cmd_add, help_text="Add a task: /add <title>.", raw_args=True)
registry.register("done", cmd_done, help_text="Complete a task: /done <number|id>.")
registry.register("status", cmd_status, help_text="Show pending count, errors and last refresh.")
registry.register("auto", cmd_auto, help_text="Periodic refresh: /auto on | /auto off.")
