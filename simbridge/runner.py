"""runner.py - Run one external command per request, asynchronously."""

from __future__ import annotations

import asyncio
import shlex
import sys
from dataclasses import dataclass
from typing import Protocol

from simbridge.errors import ProcessError


def _log(msg: str) -> None:
    print(f"[runner] {msg}", file=sys.stderr)


@dataclass(frozen=True)
class ProcessInvocation:
    """An executable plus its ordered arguments."""

    executable: str
    args: tuple[str, ...] = ()
    cwd: str | None = None

    @property
    def argv(self) -> list[str]:
        return [self.executable, *self.args]

    def command_line(self) -> str:
        return shlex.join(self.argv)


@dataclass(frozen=True)
class ProcessResult:
    """Exit status and captured output of a finished process."""

    returncode: int
    stdout: bytes = b""
    stderr: bytes = b""

    @property
    def stdout_text(self) -> str:
        return self.stdout.decode("utf-8", errors="replace")

    @property
    def stderr_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace")


class CommandRunner(Protocol):
    """Anything that can run a ProcessInvocation to completion.

    Implementations return the ProcessResult of a zero exit and raise
    ProcessError when the process cannot start or exits non-zero.
    """

    async def run(self, invocation: ProcessInvocation) -> ProcessResult: ...


def failure_message(invocation: ProcessInvocation, result: ProcessResult) -> str:
    """Describe a non-zero exit: the command line, then whatever it printed."""
    detail = result.stderr_text.strip() or result.stdout_text.strip()
    message = f"Command failed: {invocation.command_line()}"
    if detail:
        message += f"\n{detail}"
    return message


class SubprocessRunner:
    """CommandRunner backed by asyncio subprocesses."""

    async def run(self, invocation: ProcessInvocation) -> ProcessResult:
        _log(f"Running: {invocation.command_line()}")
        try:
            proc = await asyncio.create_subprocess_exec(
                invocation.executable,
                *invocation.args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=invocation.cwd,
            )
        except (OSError, ValueError) as exc:
            # ValueError: argv the OS cannot represent, e.g. an embedded NUL
            _log(f"Could not start {invocation.executable}: {exc}")
            raise ProcessError(str(exc), invocation=invocation) from exc

        stdout, stderr = await proc.communicate()
        result = ProcessResult(returncode=proc.returncode, stdout=stdout, stderr=stderr)
        if result.returncode != 0:
            _log(f"Exit {result.returncode}, stderr: {result.stderr_text.strip()}")
            raise ProcessError(
                failure_message(invocation, result),
                invocation=invocation,
                result=result,
            )
        return result
