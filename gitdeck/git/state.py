"""Reading authoritative repository state from git.

The registry's base refresh calls a StateReader for each repository. The git
implementation issues a few plumbing commands and parses their output:

- `git rev-parse --git-dir`                  (is this a repository?)
- `git symbolic-ref --quiet --short HEAD`    (current branch, "" if detached)
- `git for-each-ref refs/heads`              (local branches)
- `git remote -v`                            (remotes and their URLs)
- `git config --get-regexp remote.*.pushcmd` (push overrides)
- `git config --get gitdeck.remote`          (remote chosen with `remote use`)

The chosen remote is written back with `git config gitdeck.remote <name>`,
so it outlives the process that picked it.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from gitdeck.core.config import GIT_TIMEOUT_SECONDS
from gitdeck.core.result import Err, Ok, Result
from gitdeck.git.remotes import Remote
from gitdeck.git.repository import RepoState
from gitdeck.platform.process import ProcessError
from gitdeck.platform.process import run as run_process

__all__ = [
    "CURRENT_REMOTE_KEY",
    "GitStateReader",
    "StateError",
    "StateReader",
    "parse_push_commands",
    "parse_remotes",
]

_PUSHCMD_KEY = r"^remote\..*\.pushcmd$"
CURRENT_REMOTE_KEY = "gitdeck.remote"


@dataclass(frozen=True, slots=True)
class StateError:
    """Repository state could not be read.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


class StateReader(Protocol):
    def read(self, path: Path) -> Result[RepoState, StateError]: ...

    def save_current_remote(self, path: Path, name: str) -> Result[None, StateError]: ...


class GitStateReader:
    """StateReader that asks git."""

    def __init__(self, executable: str = "git", *, timeout: float = GIT_TIMEOUT_SECONDS) -> None:
        self.executable = executable
        self.timeout = timeout

    def read(self, path: Path) -> Result[RepoState, StateError]:
        probe = self._run(path, ["rev-parse", "--git-dir"])
        if isinstance(probe, Err):
            return Err(_state_error("rev-parse", probe.error, "not a git repository"))

        branch = ""
        head = self._run(path, ["symbolic-ref", "--quiet", "--short", "HEAD"])
        if isinstance(head, Ok):
            branch = head.value.strip()

        refs = self._run(path, ["for-each-ref", "--format=%(refname:short)", "refs/heads"])
        if isinstance(refs, Err):
            return Err(_state_error("for-each-ref", refs.error, "cannot list branches"))
        branches = tuple(ln.strip() for ln in refs.value.splitlines() if ln.strip())

        remotes_out = self._run(path, ["remote", "-v"])
        if isinstance(remotes_out, Err):
            return Err(_state_error("remote -v", remotes_out.error, "cannot list remotes"))

        # Exit status 1 just means no pushcmd is configured
        push_out = self._run(path, ["config", "--get-regexp", _PUSHCMD_KEY])
        push_commands = parse_push_commands(push_out.value) if isinstance(push_out, Ok) else {}

        chosen = self._run(path, ["config", "--get", CURRENT_REMOTE_KEY])
        current_remote = chosen.value.strip() if isinstance(chosen, Ok) else ""

        return Ok(
            RepoState(
                branch=branch,
                branches=branches,
                remotes=parse_remotes(remotes_out.value, push_commands),
                current_remote=current_remote,
            )
        )

    def save_current_remote(self, path: Path, name: str) -> Result[None, StateError]:
        """Store `name` as the repository's current remote in its git config."""
        args = ["config", CURRENT_REMOTE_KEY, name] if name else ["config", "--unset", CURRENT_REMOTE_KEY]
        result = self._run(path, args)
        if isinstance(result, Err):
            return Err(_state_error("config", result.error, "cannot store current remote"))
        return Ok(None)

    def _run(self, path: Path, args: list[str]) -> Result[str, ProcessError]:
        return run_process(
            [self.executable, "-C", str(path), *args],
            cwd=path,
            timeout=self.timeout,
        )


def _state_error(command: str, error: ProcessError, fallback: str) -> StateError:
    return StateError(
        command=command,
        message=error.stderr.strip() or fallback,
        returncode=error.returncode,
    )


def parse_remotes(output: str, push_commands: dict[str, str] | None = None) -> tuple[Remote, ...]:
    """Parse `git remote -v` output.

    Lines look like "origin<TAB>git@host:repo.git (fetch)". Order of first
    appearance is kept.
    """
    push_commands = push_commands or {}
    fetch: dict[str, str] = {}
    push: dict[str, str] = {}
    order: list[str] = []

    for line in output.splitlines():
        parts = line.split()
        if len(parts) < 2:
            continue
        name, url = parts[0], parts[1]
        kind = parts[2] if len(parts) > 2 else "(fetch)"
        if name not in order:
            order.append(name)
        if kind == "(push)":
            push[name] = url
        else:
            fetch[name] = url

    return tuple(
        Remote(
            name=name,
            fetch_url=fetch.get(name),
            push_url=push.get(name),
            push_command=push_commands.get(name, ""),
        )
        for name in order
    )


def parse_push_commands(output: str) -> dict[str, str]:
    """Parse `git config --get-regexp` output for remote.<name>.pushcmd keys."""
    commands: dict[str, str] = {}
    for line in output.splitlines():
        key, _, value = line.partition(" ")
        if not key.startswith("remote.") or not key.endswith(".pushcmd"):
            continue
        name = key[len("remote.") : -len(".pushcmd")]
        if name and value.strip():
            commands[name] = value.strip()
    return commands
