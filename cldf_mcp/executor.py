"""
Process executor for the cldf program.

Runs one argv per call via asyncio (no shell) and returns the captured
streams. Interpreting stdout/stderr is left to the tool handlers.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass
import logging
import time

from cldf_mcp.command import render
from cldf_mcp.errors import CommandExecutionError

logger = logging.getLogger(__name__)

# (subcommand, duration_ms, returncode or None if the process never finished)
CommandObserver = Callable[[str, float, int | None], None]


@dataclass
class ExecResult:
    """Result from command execution."""

    stdout: str
    stderr: str
    returncode: int = 0
    duration_ms: float = 0.0


class CommandExecutor:
    """Runs cldf commands as subprocesses.

    timeout is in seconds; None means wait for the program indefinitely.
    observer, when set, is called once per run, including failed starts
    and timeouts.
    """

    def __init__(self, timeout: float | None = None, observer: CommandObserver | None = None):
        self.timeout = timeout
        self.observer = observer

    def _observe(self, argv: Sequence[str], duration_ms: float, returncode: int | None) -> None:
        command = argv[1] if len(argv) > 1 else argv[0]
        logger.debug(
            f"cldf {command} finished in {duration_ms:.0f}ms (exit {returncode})",
            extra={"command": command, "exit_code": returncode, "duration_ms": duration_ms},
        )
        if self.observer is not None:
            self.observer(command, duration_ms, returncode)

    async def run(self, argv: Sequence[str]) -> ExecResult:
        """
        Execute argv and capture its output.

        Raises:
            CommandExecutionError: the program could not be started, timed out,
                or exited non-zero without producing any output.
        """
        display = render(argv)
        logger.debug(f"Executing command: {display}")
        started = time.monotonic()

        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            self._observe(argv, (time.monotonic() - started) * 1000, None)
            logger.error(f"Could not start {display}: {e}")
            raise CommandExecutionError(f"Command failed: {display}\n{e}") from e

        try:
            out, err = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            self._observe(argv, (time.monotonic() - started) * 1000, None)
            logger.error(f"Command timed out after {self.timeout}s: {display}")
            raise CommandExecutionError(
                f"Command timed out after {self.timeout}s: {display}"
            ) from None

        duration = (time.monotonic() - started) * 1000
        returncode = proc.returncode if proc.returncode is not None else -1
        self._observe(argv, duration, returncode)
        stdout = out.decode("utf-8", errors="replace")
        stderr = err.decode("utf-8", errors="replace")

        if returncode != 0 and not stdout and not stderr:
            raise CommandExecutionError(f"Command failed with exit code {returncode}: {display}")

        return ExecResult(stdout=stdout, stderr=stderr, returncode=returncode, duration_ms=duration)
