"""Running external programs (v4l2-ctl, ffmpeg) without blocking the event loop."""

from __future__ import annotations

import asyncio
import logging
import shlex
from typing import Protocol, Sequence, runtime_checkable

from constants import DEFAULT_TIMEOUT, EXIT_NOT_FOUND

log = logging.getLogger(__name__)


class ExecutionError(Exception):
    """Raised when an external command fails, cannot start, or times out."""

    def __init__(
        self,
        argv: Sequence[str],
        exit_code: int | None,
        stderr: str = "",
        timed_out: bool = False,
    ) -> None:
        self.argv = list(argv)
        self.exit_code = exit_code
        self.stderr = stderr
        self.timed_out = timed_out
        super().__init__(self._format())

    def _format(self) -> str:
        program = self.argv[0] if self.argv else "<empty command>"
        if self.timed_out:
            return f"{program} timed out"
        detail = self.stderr.strip().splitlines()[0] if self.stderr.strip() else "no error output"
        return f"{program} exited with status {self.exit_code}: {detail}"


@runtime_checkable
class CommandExecutor(Protocol):
    """Runs a command and returns its standard output.

    Implementations raise ExecutionError for any failure.
    """

    async def execute(self, argv: Sequence[str], timeout: float | None = None) -> str:
        ...


class SubprocessExecutor:
    """CommandExecutor backed by asyncio subprocesses.

    Uses list args (no shell) and captures both output streams. A command
    that outlives its timeout is killed and reported as a failure.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.timeout = timeout

    async def execute(self, argv: Sequence[str], timeout: float | None = None) -> str:
        if not argv:
            raise ExecutionError(argv, EXIT_NOT_FOUND, "empty command")
        limit = self.timeout if timeout is None else timeout
        log.debug(f"Running: {shlex.join(argv)}")

        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            # FileNotFoundError / PermissionError: program missing or not executable
            log.warning(f"Could not start {argv[0]}: {e}")
            raise ExecutionError(argv, EXIT_NOT_FOUND, str(e)) from e

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=limit)
        except asyncio.TimeoutError:
            log.warning(f"{argv[0]} did not finish within {limit}s; killing")
            await _kill(proc)
            raise ExecutionError(argv, None, timed_out=True) from None
        except asyncio.CancelledError:
            # Worker cancelled (app quit, exclusive worker replaced)
            log.debug(f"Cancelled while running {argv[0]}; killing")
            await _kill(proc)
            raise

        out = stdout.decode("utf-8", errors="replace")
        err = stderr.decode("utf-8", errors="replace")
        if proc.returncode != 0:
            error = ExecutionError(argv, proc.returncode, err)
            log.warning(str(error))
            raise error
        return out


async def _kill(proc: asyncio.subprocess.Process) -> None:
    """Kill a still-running child and reap it."""
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
    await proc.wait()
