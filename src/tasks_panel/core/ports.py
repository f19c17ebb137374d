from __future__ import annotations

"""
Ports (interfaces) used by the sync engine.

The engine depends on Protocols instead of concrete implementations.
This keeps the process runner swappable and makes testing easier.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Protocol

if TYPE_CHECKING:
    from ..sync.command_executor import CommandResult


class CommandRunner(Protocol):
    """Runs one external command to completion (see sync.command_executor.CommandExecutor)."""
    def run(self, path: str, args: Sequence[str]) -> Awaitable[CommandResult]: ...


StateListener = Callable[[Any], None]
# Called with the engine after every observable change, on the owning event loop.

LivenessCheck = Callable[[], bool]
# Returns False once a result obtained after an await must be discarded.
