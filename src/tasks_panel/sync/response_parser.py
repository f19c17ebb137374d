# sync/response_parser.py

from __future__ import annotations

"""
Parser for the plain (tab-separated) task listing.

Columns: ID, TITLE, STATUS, DUE, UPDATED. The first non-blank line is a header
and is always discarded. Malformed rows are dropped silently: parsing never fails.
"""

import logging

from .command_executor import ErrorKind
from .task_models import Task

logger = logging.getLogger(__name__)

MIN_FIELDS = 3


def _parse_row(line: str) -> Task | None:
    # Split the untrimmed line so an empty leading ID column does not shift fields.
    cols = [c.strip() for c in line.split("\t")]
    if len(cols) < MIN_FIELDS:
        return None

    task_id, title, status = cols[0], cols[1], cols[2]
    if not task_id or not title:
        return None

    due = cols[3] if len(cols) > 3 and cols[3] else None
    return Task(id=task_id, title=title, status=status, due_date=due)


def parse_tasks(text: str) -> list[Task]:
    """Parse a listing into tasks, preserving the order received."""
    lines = [ln for ln in (text or "").split("\n") if ln.strip()]
    if len(lines) < 2:
        return []

    out: list[Task] = []
    seen: set[str] = set()
    dropped = 0
    for line in lines[1:]:
        task = _parse_row(line)
        if task is None or task.id in seen:
            dropped += 1
            continue
        seen.add(task.id)
        out.append(task)

    if dropped:
        logger.debug("Dropped %d row(s) from listing (%s)", dropped, ErrorKind.PARSE_ANOMALY)
    return out
