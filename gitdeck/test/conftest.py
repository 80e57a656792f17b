"""Shared fixtures: scripted git doubles, a manual timer, a synchronous executor."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from concurrent.futures import Executor, Future
from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest

from gitdeck.core.result import Err, Ok, Result
from gitdeck.git.remotes import Remote
from gitdeck.git.repository import Repository, RepoState, normalize_path
from gitdeck.git.runner import CommandResult
from gitdeck.git.state import StateError
from gitdeck.output.status import StatusSink
from gitdeck.platform.process import CancelToken


@dataclass
class ScriptedRunner:
    """CommandRunner double recording every call.

    `fail_at` holds 1-based call numbers that fail; `outputs` maps a command
    to the output it returns.
    """

    fail_at: set[int] = field(default_factory=set)
    outputs: dict[str, str] = field(default_factory=dict)
    calls: list[tuple[Path, str]] = field(default_factory=list)
    on_call: Callable[[int, CancelToken | None], None] | None = None

    def run(self, repo: Path, command: str, cancel: CancelToken | None = None) -> CommandResult:
        self.calls.append((repo, command))
        n = len(self.calls)
        if self.on_call is not None:
            self.on_call(n, cancel)
        if cancel is not None and cancel.cancelled:
            return CommandResult(success=False, output="terminated", cancelled=True)
        output = self.outputs.get(command, f"ok {command}")
        if n in self.fail_at:
            return CommandResult(success=False, output=f"fatal: {command}")
        return CommandResult(success=True, output=output)

    @property
    def commands(self) -> list[str]:
        return [c for _, c in self.calls]


@dataclass
class FakeStateReader:
    """StateReader double backed by a dict of path -> state or error message.

    Saved remotes are kept in `saved` and returned by later reads, the way
    git config keeps them between runs. `save_error` makes saving fail.
    """

    states: dict[Path, RepoState | str] = field(default_factory=dict)
    reads: list[Path] = field(default_factory=list)
    saved: dict[Path, str] = field(default_factory=dict)
    save_error: str = ""

    def set(self, path: Path, state: RepoState | str) -> None:
        self.states[normalize_path(path)] = state

    def read(self, path: Path) -> Result[RepoState, StateError]:
        self.reads.append(path)
        state = self.states.get(normalize_path(path))
        if state is None:
            return Err(StateError(command="rev-parse", message="not a git repository"))
        if isinstance(state, str):
            return Err(StateError(command="remote -v", message=state))
        chosen = self.saved.get(normalize_path(path))
        return Ok(state if chosen is None else replace(state, current_remote=chosen))

    def save_current_remote(self, path: Path, name: str) -> Result[None, StateError]:
        if self.save_error:
            return Err(StateError(command="config", message=self.save_error))
        self.saved[normalize_path(path)] = name
        return Ok(None)


class ManualTimers:
    """TimerFactory double: timers fire only when the test says so."""

    def __init__(self) -> None:
        self.timers: list[ManualTimer] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[ManualTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def fire_all(self) -> None:
        for timer in self.pending:
            timer.fire()


class ManualTimer:
    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        self.fired = True
        self.callback()


class ImmediateExecutor(Executor):
    """Executor running each task inline on submit."""

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Future[Any]:
        future: Future[Any] = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:  # noqa: BLE001
            future.set_exception(e)
        return future


class FixedClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def make_repo(
    path: Path,
    branch: str = "main",
    remotes: tuple[str, ...] = ("origin",),
    current: str | None = None,
    push_commands: dict[str, str] | None = None,
) -> Repository:
    push_commands = push_commands or {}
    repo = Repository(path, branch=branch, branches=[branch])
    for name in remotes:
        url = f"git@example.com:{name}.git"
        repo.remotes.add(Remote(name, fetch_url=url, push_url=url, push_command=push_commands.get(name, "")))
    if current is not None:
        repo.remotes.set_current(current)
    return repo


@pytest.fixture
def runner() -> ScriptedRunner:
    return ScriptedRunner()


@pytest.fixture
def reader() -> FakeStateReader:
    return FakeStateReader()


@pytest.fixture
def timers() -> ManualTimers:
    return ManualTimers()


@pytest.fixture
def sink() -> StatusSink:
    return StatusSink()


@pytest.fixture
def executor() -> ImmediateExecutor:
    return ImmediateExecutor()


@pytest.fixture
def repo_factory(tmp_path: Path) -> Callable[..., Repository]:
    """Build repositories under tmp_path: repo_factory("app", remotes=("origin", "upstream"))."""

    def _make(name: str, **kwargs: Any) -> Repository:
        path = tmp_path / name
        path.mkdir(exist_ok=True)
        return make_repo(path, **kwargs)

    return _make


@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock(datetime(2024, 3, 1, 15, 4, 5))


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv("GITDECK_CONFIG", raising=False)
    yield


@pytest.fixture
def arch_checks() -> None:
    """Skip architecture checks unless GITDECK_ARCH_CHECKS=1."""
    if os.getenv("GITDECK_ARCH_CHECKS") != "1":
        pytest.skip("architecture checks are advisory; set GITDECK_ARCH_CHECKS=1 to enable")


@pytest.fixture
def gitdeck_root() -> Path:
    return Path(__file__).resolve().parents[1]
