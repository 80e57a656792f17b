"""Application context.

One AppContext is created at startup and passed to whatever needs the
registry, the status sink or the broadcaster; there are no module-level
singletons. It wires the pieces together:

- the broadcaster's base refresh re-reads every repository through the
  state reader
- the busy channel feeds the debouncer
- batches run on the BatchWorker and come back to this thread

Usage:
    ctx = AppContext.create(config, console=RichConsole())
    load_workspace(ctx.registry, StaticWorkspaceSource(config.workspace.repos))
    ctx.broadcaster.do_refresh()
    result = ctx.run_and_wait(Verb.PULL, selection=[], all_remotes=False)
    ctx.close()
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from gitdeck.core.config import Config
from gitdeck.core.result import Err, Ok
from gitdeck.events.broadcaster import RefreshBroadcaster
from gitdeck.events.busy import (
    BusyDebouncer,
    BusyIndicator,
    RecordingIndicator,
    TimerFactory,
    thread_timer,
)
from gitdeck.git.registry import RepositoryRegistry
from gitdeck.git.repository import Repository
from gitdeck.git.runner import CommandRunner, GitRunner, ShellRunner
from gitdeck.git.state import GitStateReader, StateReader
from gitdeck.output.console import ConsoleProtocol, ConsoleStatusListener
from gitdeck.output.logfile import LogFileListener
from gitdeck.output.status import MessageKind, StatusSink
from gitdeck.services.batch import BatchResult, Verb, resolve_targets
from gitdeck.services.command_line import CommandLineResult, dispatch
from gitdeck.services.summary import SummaryObserver
from gitdeck.services.worker import BatchJob, BatchWorker

__all__ = ["AppContext"]


@dataclass
class AppContext:
    """Everything the control thread owns."""

    config: Config
    registry: RepositoryRegistry
    sink: StatusSink
    broadcaster: RefreshBroadcaster
    busy: BusyDebouncer
    runner: CommandRunner
    shell: CommandRunner
    reader: StateReader
    worker: BatchWorker
    summary: SummaryObserver

    @classmethod
    def create(
        cls,
        config: Config | None = None,
        *,
        console: ConsoleProtocol | None = None,
        runner: CommandRunner | None = None,
        shell: CommandRunner | None = None,
        reader: StateReader | None = None,
        indicator: BusyIndicator | None = None,
        timer_factory: TimerFactory | None = None,
    ) -> AppContext:
        config = config or Config()

        sink = StatusSink.from_config(config.status)
        if console is not None:
            sink.add_entry_listener(ConsoleStatusListener(console))
        if config.status.log_file is not None:
            log = LogFileListener(config.status.log_file)
            match log.open():
                case Ok(_):
                    sink.add_message_listener(log)
                case Err(e):
                    sink.post(f"Cannot open log file {config.status.log_file}: {e}", MessageKind.ERROR)

        registry = RepositoryRegistry()
        reader = reader or GitStateReader(config.git.executable, timeout=config.git.timeout_seconds)
        runner = runner or GitRunner(config.git.executable, timeout=config.git.timeout_seconds)

        busy = BusyDebouncer(
            indicator or RecordingIndicator(),
            delay=config.busy.delay_seconds,
            timer_factory=timer_factory or thread_timer,
        )

        broadcaster = RefreshBroadcaster()
        broadcaster.set_busy_consumer(busy.set_busy)
        summary = SummaryObserver(registry)

        ctx = cls(
            config=config,
            registry=registry,
            sink=sink,
            broadcaster=broadcaster,
            busy=busy,
            runner=runner,
            shell=shell or ShellRunner(),
            reader=reader,
            worker=BatchWorker(runner=runner, sink=sink, broadcaster=broadcaster),
            summary=summary,
        )
        broadcaster.base_refresh = ctx.refresh_base
        broadcaster.subscribe_unscoped(summary.refresh)
        return ctx

    def refresh_base(self) -> None:
        """Re-read authoritative state of every repository."""
        self.registry.refresh(self.reader, self.sink)

    # -- batches ------------------------------------------------------------

    def submit_batch(
        self,
        verb: Verb,
        selection: Sequence[Repository],
        all_remotes: bool,
    ) -> BatchJob:
        """Resolve targets from `selection` and start the batch on the worker.

        Selected repositories that are no longer registered are skipped.
        """
        targets = [r for r in resolve_targets(selection, self.registry.current()) if r in self.registry]
        return self.worker.submit(verb, targets, all_remotes)

    def run_and_wait(
        self,
        verb: Verb,
        selection: Sequence[Repository],
        all_remotes: bool,
    ) -> BatchResult | None:
        """Run a batch and apply its completion before returning."""
        self.submit_batch(verb, selection, all_remotes)
        return self.worker.wait()

    def cancel(self) -> None:
        self.worker.cancel()

    # -- remotes and command line --------------------------------------------

    def switch_remote(self, name: str, repo: Repository | None = None) -> bool:
        """Make `name` the current remote of `repo` (default: current repository).

        Returns False, changing nothing, if there is no such repository or remote.
        The choice is stored with the repository so later runs pick it up.
        """
        repo = self.registry.current() if repo is None else self.registry.get(repo.path)
        if repo is None or name not in repo.remotes:
            return False
        self.sink.post(f"Changed remote repository to {name}", MessageKind.GENERAL)
        repo.remotes.set_current(name)
        saved = self.reader.save_current_remote(repo.path, name)
        if isinstance(saved, Err):
            self.sink.post(f"Cannot store current remote for {repo.path}: {saved.error.message}", MessageKind.ERROR)
        self.broadcaster.do_refresh()
        return True

    def run_command_line(self, line: str, *, cwd: Path | None = None) -> list[CommandLineResult]:
        """Run a command line against the current repository (or `cwd`)."""
        current = self.registry.current()
        where = cwd or (current.path if current is not None else Path.cwd())
        self.broadcaster.busy(True)
        results = dispatch(line, cwd=where, git=self.runner, shell=self.shell, sink=self.sink)
        self.broadcaster.do_refresh()
        return results

    def close(self) -> None:
        self.worker.shutdown(cancel=True)
        self.busy.flush()
