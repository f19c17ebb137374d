# sync/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class TaskStatus(StrEnum):
    """
    Status values reported by the remote listing.

    Notes:
    - the remote uses "needsAction" for open items; anything other than
      "completed" is treated as pending.
    - Task.status keeps the raw text so unknown values survive a refresh.
    """

    NEEDS_ACTION = "needsAction"
    COMPLETED = "completed"


@dataclass(slots=True, frozen=True)
class Task:
    id: str
    title: str
    status: str
    due_date: str | None = None

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED
