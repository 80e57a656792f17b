"""Orchestration services: batches, the command line, the app context."""

from gitdeck.services.batch import (
    BatchResult,
    OperationResult,
    Verb,
    resolve_targets,
    run_batch,
)
from gitdeck.services.command_line import CommandLineResult, dispatch, split_commands
from gitdeck.services.context import AppContext
from gitdeck.services.summary import Summary, SummaryObserver, summarize
from gitdeck.services.worker import BatchCompleted, BatchJob, BatchWorker
from gitdeck.services.workspace import (
    StaticWorkspaceSource,
    WorkspaceSource,
    load_workspace,
    save_workspace,
)

__all__ = [
    # batch
    "BatchResult",
    "OperationResult",
    "Verb",
    "resolve_targets",
    "run_batch",
    # worker
    "BatchCompleted",
    "BatchJob",
    "BatchWorker",
    # command line
    "CommandLineResult",
    "dispatch",
    "split_commands",
    # context
    "AppContext",
    # summary
    "Summary",
    "SummaryObserver",
    "summarize",
    # workspace
    "StaticWorkspaceSource",
    "WorkspaceSource",
    "load_workspace",
    "save_workspace",
]
