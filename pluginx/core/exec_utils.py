"""
Running external executables (git, gemini).

Everything that spawns a process takes an ExecFn so tests can substitute a
fake and never touch the network or the user's Gemini install.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    stdout: str
    stderr: str


class CommandFailed(Exception):
    """A process exited non-zero, timed out, or could not be started."""

    def __init__(self, cmd: list[str], returncode: Optional[int], stderr: str):
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(stderr.strip() or f"{cmd[0]} exited with code {returncode}")


ExecFn = Callable[[str, list[str]], Awaitable[CommandResult]]


async def run_command(cmd: str, args: list[str], timeout: Optional[float] = None) -> CommandResult:
    argv = [cmd, *args]
    logger.debug(f"Running: {' '.join(argv)}")
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as e:
        raise CommandFailed(argv, None, f"{cmd}: command not found") from e

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError as e:
        proc.kill()
        await proc.wait()
        raise CommandFailed(argv, None, f"{cmd} timed out after {timeout}s") from e

    out = stdout.decode(errors="replace") if stdout else ""
    err = stderr.decode(errors="replace") if stderr else ""
    if proc.returncode != 0:
        raise CommandFailed(argv, proc.returncode, err or out)
    return CommandResult(stdout=out, stderr=err)


def make_exec(timeout: Optional[float] = None) -> ExecFn:
    """ExecFn that spawns real processes with a per-command timeout."""

    async def _exec(cmd: str, args: list[str]) -> CommandResult:
        return await run_command(cmd, args, timeout=timeout)

    return _exec


default_exec: ExecFn = make_exec()
