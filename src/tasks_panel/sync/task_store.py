# sync/task_store.py

from __future__ import annotations

"""
In-memory task collection.

Order is the order received from the remote listing (never re-sorted).
No locking: all mutation happens on the event loop that owns the SyncEngine.
"""

import logging
from collections.abc import Iterable

from .task_models import Task

logger = logging.getLogger(__name__)


class TaskStore:
    def __init__(self, tasks: Iterable[Task] | None = None) -> None:
        self._tasks: list[Task] = list(tasks or [])

    @property
    def tasks(self) -> list[Task]:
        """Snapshot copy; callers cannot mutate the store through it."""
        return list(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def get(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def replace_all(self, tasks: Iterable[Task]) -> None:
        """Full snapshot replace (no diffing)."""
        self._tasks = list(tasks)
        logger.debug("Store replaced: %d task(s)", len(self._tasks))

    def remove_by_id(self, task_id: str) -> bool:
        """Remove the task with this id. Returns False if it was not present."""
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        return len(self._tasks) != before

    @property
    def pending_count(self) -> int:
        return sum(1 for t in self._tasks if not t.is_completed)

    @property
    def has_pending(self) -> bool:
        return self.pending_count > 0
