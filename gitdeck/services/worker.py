"""Running batches off the control thread.

The control thread owns the registry and the broadcaster. It snapshots the
target repositories, signals busy, and hands the batch to a single worker
thread. The worker runs the blocking git commands one at a time and sends a
completion message back over a queue. The control thread applies it with
`drain()` or `wait()`: that is where the global refresh happens, so
observers never run on the worker.

Every batch ends with a global refresh, whether it succeeded, failed part
way, or was cancelled.

Usage:
    worker = BatchWorker(runner=GitRunner(), sink=sink, broadcaster=broadcaster)
    job = worker.submit(Verb.FETCH, targets, all_remotes=True)
    ...
    job.cancel()               # from a UI handler
    result = worker.wait()     # applies the completion on this thread
"""

from __future__ import annotations

import itertools
import queue
from collections.abc import Sequence
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass

from gitdeck.events.broadcaster import RefreshBroadcaster
from gitdeck.git.repository import RepoSnapshot, Repository
from gitdeck.git.runner import CommandRunner
from gitdeck.output.status import StatusSink
from gitdeck.platform.process import CancelToken
from gitdeck.services.batch import BatchResult, Verb, run_batch

__all__ = ["BatchCompleted", "BatchJob", "BatchWorker"]


@dataclass(frozen=True, slots=True)
class BatchCompleted:
    """Message sent from the worker to the control thread.

    Attributes:
        job_id: Identifier of the finished job
        result: Batch result, None if the batch raised
        error: Exception raised by the batch, re-raised on the control thread
    """

    job_id: int
    result: BatchResult | None = None
    error: BaseException | None = None


class BatchJob:
    """Handle for a submitted batch."""

    def __init__(self, job_id: int, verb: Verb, token: CancelToken, future: Future[None]) -> None:
        self.id = job_id
        self.verb = verb
        self._token = token
        self._future = future

    def cancel(self) -> None:
        """Stop the running command and skip the remaining ones."""
        self._token.cancel()

    @property
    def cancelled(self) -> bool:
        return self._token.cancelled

    def done(self) -> bool:
        return self._future.done()


class BatchWorker:
    """Single background context that runs batches sequentially."""

    def __init__(
        self,
        *,
        runner: CommandRunner,
        sink: StatusSink,
        broadcaster: RefreshBroadcaster,
        executor: Executor | None = None,
    ) -> None:
        self._runner = runner
        self._sink = sink
        self._broadcaster = broadcaster
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="gitdeck-batch")
        self._channel: queue.Queue[BatchCompleted] = queue.Queue()
        self._ids = itertools.count(1)
        self._jobs: dict[int, BatchJob] = {}

    def submit(
        self,
        verb: Verb,
        targets: Sequence[Repository | RepoSnapshot],
        all_remotes: bool,
    ) -> BatchJob:
        """Start a batch. Must be called on the control thread."""
        snapshots = [t.snapshot() if isinstance(t, Repository) else t for t in targets]
        job_id = next(self._ids)
        token = CancelToken()

        self._broadcaster.busy(True)
        future = self._executor.submit(self._run, job_id, verb, snapshots, all_remotes, token)
        job = BatchJob(job_id, verb, token, future)
        self._jobs[job_id] = job
        return job

    def _run(
        self,
        job_id: int,
        verb: Verb,
        snapshots: list[RepoSnapshot],
        all_remotes: bool,
        token: CancelToken,
    ) -> None:
        try:
            result = run_batch(verb, snapshots, all_remotes, self._runner, self._sink, token)
        except Exception as e:  # noqa: BLE001
            self._channel.put(BatchCompleted(job_id=job_id, error=e))
            return
        self._channel.put(BatchCompleted(job_id=job_id, result=result))

    def cancel(self) -> None:
        """Cancel every job that has not completed yet."""
        for job in list(self._jobs.values()):
            job.cancel()

    @property
    def pending(self) -> int:
        return len(self._jobs)

    def drain(self) -> list[BatchResult]:
        """Apply every completion already received, without blocking."""
        results: list[BatchResult] = []
        while True:
            try:
                message = self._channel.get_nowait()
            except queue.Empty:
                return results
            result = self._apply(message)
            if result is not None:
                results.append(result)

    def wait(self, timeout: float | None = None) -> BatchResult | None:
        """Block until the next completion arrives, then apply it.

        Returns None on timeout or if the finished batch produced no result.
        """
        try:
            message = self._channel.get(timeout=timeout)
        except queue.Empty:
            return None
        return self._apply(message)

    def _apply(self, message: BatchCompleted) -> BatchResult | None:
        self._jobs.pop(message.job_id, None)
        self._broadcaster.do_refresh()
        if message.error is not None:
            raise message.error
        return message.result

    def shutdown(self, *, cancel: bool = False) -> None:
        if cancel:
            self.cancel()
        self._executor.shutdown(wait=True)
