"""Command runner: run one command against one repository.

The orchestration layer treats this as an opaque primitive. Success is the
only signal it looks at; output is passed through to the status sink as-is.

Usage:
    runner = GitRunner()
    result = runner.run(Path("/src/app"), "fetch origin main")
    if not result.success:
        print(result.output)
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from gitdeck.core.config import GIT_TIMEOUT_SECONDS
from gitdeck.core.result import Err, Ok
from gitdeck.platform.process import CancelToken
from gitdeck.platform.process import run as run_process

__all__ = [
    "CommandResult",
    "CommandRunner",
    "GitRunner",
    "ShellRunner",
    "split_args",
]


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of one command.

    Attributes:
        success: True if the command exited with status 0
        output: Captured text (stdout and stderr interleaved)
        cancelled: True if the command was stopped by a cancel request
    """

    success: bool
    output: str = ""
    cancelled: bool = False


class CommandRunner(Protocol):
    """Runs a version-control command line against a repository."""

    def run(
        self,
        repo: Path,
        command: str,
        cancel: CancelToken | None = None,
    ) -> CommandResult: ...


def split_args(command: str) -> list[str]:
    """Split a command line into arguments, falling back to whitespace.

    Unbalanced quotes (common in pasted review commands) are not an error.
    """
    try:
        return shlex.split(command)
    except ValueError:
        return command.split()


class GitRunner:
    """CommandRunner backed by the git executable.

    `command` is everything after "git", e.g. "push origin main".
    """

    def __init__(
        self,
        executable: str = "git",
        *,
        timeout: float | None = GIT_TIMEOUT_SECONDS,
    ) -> None:
        self.executable = executable
        self.timeout = timeout

    def run(
        self,
        repo: Path,
        command: str,
        cancel: CancelToken | None = None,
    ) -> CommandResult:
        args = [self.executable, "-C", str(repo), *split_args(command)]
        result = run_process(
            args,
            cwd=repo,
            timeout=self.timeout,
            merge_stderr=True,
            cancel=cancel,
        )
        match result:
            case Ok(output):
                return CommandResult(success=True, output=output.rstrip())
            case Err(e):
                message = e.stdout.rstrip() or e.stderr.strip() or str(e)
                return CommandResult(success=False, output=message, cancelled=e.cancelled)


class ShellRunner:
    """Runs an arbitrary external program in a working directory."""

    def __init__(self, *, timeout: float | None = None) -> None:
        self.timeout = timeout

    def run(
        self,
        repo: Path,
        command: str,
        cancel: CancelToken | None = None,
    ) -> CommandResult:
        args = split_args(command)
        if not args:
            return CommandResult(success=True)
        result = run_process(
            args,
            cwd=repo,
            timeout=self.timeout,
            merge_stderr=True,
            cancel=cancel,
        )
        match result:
            case Ok(output):
                return CommandResult(success=True, output=output.rstrip())
            case Err(e):
                message = e.stdout.rstrip() or e.stderr.strip() or str(e)
                return CommandResult(success=False, output=message, cancelled=e.cancelled)
