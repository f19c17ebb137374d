# sync/command_executor.py

from __future__ import annotations

"""
External command execution.

Runs one process per call, captures stdout/stderr in full and classifies the outcome.
The wait happens inside the event loop's subprocess machinery, so the calling
coroutine (and the loop that owns engine state) is never blocked.

No retries, no timeout, no output limits.
"""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

logger = logging.getLogger(__name__)


class ErrorKind(StrEnum):
    SPAWN_FAILURE = "spawn_failure"
    NON_ZERO_EXIT = "non_zero_exit"
    # Never surfaced to callers; used to tag debug logs.
    VALIDATION_SKIP = "validation_skip"
    PARSE_ANOMALY = "parse_anomaly"


@dataclass(slots=True, frozen=True)
class CommandResult:
    ok: bool
    stdout: str = ""
    error_kind: ErrorKind | None = None
    message: str | None = None
    exit_code: int | None = None

    @classmethod
    def success(cls, stdout: str) -> CommandResult:
        return cls(ok=True, stdout=stdout, exit_code=0)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str, *, exit_code: int | None = None) -> CommandResult:
        return cls(ok=False, error_kind=kind, message=message, exit_code=exit_code)


def _decode(raw: bytes | None) -> str:
    return (raw or b"").decode("utf-8", errors="replace")


def classify_exit(exit_code: int, stdout: str, stderr: str) -> CommandResult:
    """Map a finished process to a result. stderr is discarded on success."""
    if exit_code == 0:
        return CommandResult.success(stdout)
    message = stderr.rstrip() if stderr.strip() else f"Exit {exit_code}"
    return CommandResult.failure(ErrorKind.NON_ZERO_EXIT, message, exit_code=exit_code)


class CommandExecutor:
    """Runs `path args...` to completion and returns a CommandResult (never raises for OS errors)."""

    async def run(self, path: str, args: Sequence[str]) -> CommandResult:
        argv = [str(a) for a in args]
        logger.debug("exec %s %s", path, " ".join(argv))

        try:
            proc = await asyncio.create_subprocess_exec(
                path,
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (OSError, ValueError) as e:
            msg = getattr(e, "strerror", None) or str(e) or e.__class__.__name__
            logger.warning("Failed to spawn %s: %s", path, msg)
            return CommandResult.failure(ErrorKind.SPAWN_FAILURE, msg)

        out_b, err_b = await proc.communicate()
        exit_code = proc.returncode if proc.returncode is not None else -1

        result = classify_exit(exit_code, _decode(out_b), _decode(err_b))
        if not result.ok:
            logger.info("Command %s exited with %s", path, exit_code)
        return result
