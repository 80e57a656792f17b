"""Batch fetch / pull / push across repositories and remotes.

A batch walks the target repositories in order and, for each, either its
current remote or all of its remotes. The first failing command aborts the
whole batch: later remotes and later repositories are not attempted.
Results of commands that already ran stand.

The executor is a pure function of (verb, targets, all_remotes): it never
samples input state, and it reads each repository through a snapshot taken
when that repository's iteration begins.

Usage:
    targets = resolve_targets(selected, registry.current())
    result = run_batch(Verb.PULL, targets, all_remotes=False, runner=GitRunner(), sink=sink)
    if result.aborted:
        print(f"stopped at {result.failed.path}")
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import TypeVar

from gitdeck.git.repository import RepoSnapshot, Repository
from gitdeck.git.runner import CommandRunner
from gitdeck.output.status import MessageKind, StatusSink
from gitdeck.platform.process import CancelToken

T = TypeVar("T")

__all__ = [
    "BatchResult",
    "OperationResult",
    "Verb",
    "describe",
    "resolve_targets",
    "run_batch",
]


class Verb(StrEnum):
    """Version-control verbs a batch can run."""

    FETCH = "fetch"
    PULL = "pull"
    PUSH = "push"


@dataclass(frozen=True, slots=True)
class OperationResult:
    """Result of one repository-remote pair.

    Attributes:
        path: Repository path
        remote: Remote name
        command: Command passed to the runner (e.g. "fetch origin main")
        success: True if the runner reported success
        output: Captured output
    """

    path: Path
    remote: str
    command: str
    success: bool
    output: str = ""


@dataclass(frozen=True, slots=True)
class BatchResult:
    """Ordered results of a batch.

    Attributes:
        verb: The verb that ran
        results: Per-pair results in attempt order
        aborted: True if a command failed and the rest was skipped
        cancelled: True if the user cancelled the batch
    """

    verb: Verb
    results: tuple[OperationResult, ...] = ()
    aborted: bool = False
    cancelled: bool = False

    @property
    def ok(self) -> bool:
        return not self.aborted and not self.cancelled

    @property
    def failed(self) -> OperationResult | None:
        """The pair that aborted the batch, if any."""
        if self.aborted and self.results:
            return self.results[-1]
        return None

    @property
    def invocations(self) -> int:
        return len(self.results)


def resolve_targets(selection: Sequence[T], current: T | None) -> list[T]:
    """Resolve the repositories a batch runs against.

    Two or more selected repositories are used as-is, ignoring the current
    one. Otherwise the batch targets only the current repository, or nothing
    when there is no current repository.
    """
    if len(selection) >= 2:
        return list(selection)
    if current is None:
        return []
    return [current]


def describe(verb: Verb, path: Path, args: str) -> str:
    """Status line posted before a command runs."""
    match verb:
        case Verb.FETCH:
            return f'Fetch from a remote repo "{args}" into "{path}"'
        case Verb.PULL:
            return f'Pull from a remote repo "{args}" into "{path}"'
        case Verb.PUSH:
            return f'Push "{path}" to a remote repo "{args}"'


def _arguments(verb: Verb, snap: RepoSnapshot, remote: str) -> str:
    if verb is Verb.PUSH:
        return snap.push_args(remote)
    return snap.remote_args(remote)


def run_batch(
    verb: Verb,
    targets: Iterable[Repository | RepoSnapshot],
    all_remotes: bool,
    runner: CommandRunner,
    sink: StatusSink,
    cancel: CancelToken | None = None,
) -> BatchResult:
    """Run `verb` across `targets`, stopping at the first failure.

    Args:
        verb: fetch, pull or push
        targets: Resolved repositories, in the order to process them
        all_remotes: Every remote of each repository instead of its current one
        runner: Command runner invoked once per repository-remote pair
        sink: Receives a description before each command and its output after
        cancel: Stops the running command and any later ones when cancelled

    Returns:
        BatchResult with one OperationResult per attempted pair
    """
    results: list[OperationResult] = []

    for target in targets:
        snap = target.snapshot() if isinstance(target, Repository) else target

        for remote in snap.remote_names:
            if not all_remotes and remote != snap.current_remote:
                continue

            if cancel is not None and cancel.cancelled:
                sink.post("Operation cancelled", MessageKind.GENERAL)
                return BatchResult(verb=verb, results=tuple(results), cancelled=True)

            args = _arguments(verb, snap, remote)
            command = f"{verb} {args}"
            sink.post(describe(verb, snap.path, args), MessageKind.GENERAL)
            sink.post(f"git {command}", MessageKind.COMMAND)

            outcome = runner.run(snap.path, command, cancel)
            results.append(
                OperationResult(
                    path=snap.path,
                    remote=remote,
                    command=command,
                    success=outcome.success,
                    output=outcome.output,
                )
            )

            if outcome.cancelled:
                sink.post(outcome.output, MessageKind.OUTPUT)
                sink.post("Operation cancelled", MessageKind.GENERAL)
                return BatchResult(verb=verb, results=tuple(results), cancelled=True)

            if not outcome.success:
                sink.post(outcome.output, MessageKind.ERROR)
                return BatchResult(verb=verb, results=tuple(results), aborted=True)

            sink.post(outcome.output, MessageKind.OUTPUT)

    return BatchResult(verb=verb, results=tuple(results))
