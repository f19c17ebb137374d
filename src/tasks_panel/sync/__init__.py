"""
Synchronization engine: command execution, response parsing, local store,
orchestration and the periodic refresh loop.
"""

from .command_executor import CommandExecutor, CommandResult, ErrorKind
from .refresh_scheduler import RefreshScheduler, SchedulerState
from .response_parser import parse_tasks
from .sync_engine import SyncEngine, SyncStatus, TaskCommands
from .task_models import Task, TaskStatus
from .task_store import TaskStore

__all__ = [
    "CommandExecutor",
    "CommandResult",
    "ErrorKind",
    "RefreshScheduler",
    "SchedulerState",
    "SyncEngine",
    "SyncStatus",
    "Task",
    "TaskCommands",
    "TaskStatus",
    "TaskStore",
    "parse_tasks",
]
