"""Subprocess execution with Result-based error handling.

Wraps subprocess.Popen so a running command can be terminated from another
thread through a CancelToken, and returns structured errors instead of
requiring try/except blocks at every call site.

Usage:
    token = CancelToken()
    result = run(["git", "fetch", "origin"], cwd=repo, cancel=token)
    match result:
        case Ok(stdout):
            print(stdout)
        case Err(error) if error.cancelled:
            print("cancelled")
        case Err(error):
            print(f"Failed: {error.stderr}")
"""

from __future__ import annotations

import subprocess
import threading
from dataclasses import dataclass
from pathlib import Path

from gitdeck.core.result import Err, Ok, Result

__all__ = ["CancelToken", "ProcessError", "run"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: Exit code of the process (-1 if it never ran or was killed).
        stdout: Standard output (may be empty).
        stderr: Standard error, or a description of why the process failed.
        cancelled: True if the process was stopped through a CancelToken.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str
    cancelled: bool = False

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        if self.cancelled:
            return f"{cmd_str} cancelled"
        return f"{cmd_str} failed (exit {self.returncode})"


class CancelToken:
    """Cancellation shared between the control thread and a worker.

    The worker attaches each process it starts; `cancel()` terminates the
    attached process and makes every later `attach()` refuse to run.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._event = threading.Event()
        self._proc: subprocess.Popen[str] | None = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        with self._lock:
            self._event.set()
            proc = self._proc
        if proc is not None and proc.poll() is None:
            proc.terminate()

    def attach(self, proc: subprocess.Popen[str]) -> bool:
        """Track a running process. Returns False if already cancelled."""
        with self._lock:
            if self._event.is_set():
                return False
            self._proc = proc
            return True

    def detach(self, proc: subprocess.Popen[str]) -> None:
        with self._lock:
            if self._proc is proc:
                self._proc = None


def _cancelled(cmd: list[str], stdout: str = "") -> Err[ProcessError]:
    return Err(
        ProcessError(
            command=tuple(cmd),
            returncode=-1,
            stdout=stdout,
            stderr="Command cancelled",
            cancelled=True,
        )
    )


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
    merge_stderr: bool = False,
    cancel: CancelToken | None = None,
) -> Result[str, ProcessError]:
    """Execute a command and return stdout or error.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Environment variables (uses current env if None).
        timeout: Maximum seconds to wait (None for no limit).
        merge_stderr: Interleave stderr into stdout (git reports progress there).
        cancel: Token through which another thread may stop the command.

    Returns:
        Ok(stdout) on success, Err(ProcessError) on failure.
    """
    if cancel is not None and cancel.cancelled:
        return _cancelled(cmd)

    try:
        proc = subprocess.Popen(
            cmd,
            cwd=str(cwd),
            env=env,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT if merge_stderr else subprocess.PIPE,
            stdin=subprocess.DEVNULL,
            text=True,
        )
    except OSError as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout="",
                stderr=str(e),
            )
        )

    if cancel is not None and not cancel.attach(proc):
        proc.kill()
        proc.communicate()
        return _cancelled(cmd)

    try:
        stdout, stderr = proc.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        proc.kill()
        stdout, _ = proc.communicate()
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout=stdout or "",
                stderr=f"Command timed out after {timeout}s",
            )
        )
    finally:
        if cancel is not None:
            cancel.detach(proc)

    stdout = stdout or ""
    stderr = stderr or ""

    if cancel is not None and cancel.cancelled and proc.returncode != 0:
        return _cancelled(cmd, stdout)

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=stdout,
                stderr=stderr,
            )
        )

    return Ok(stdout)
