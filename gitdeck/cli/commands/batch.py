from __future__ import annotations

from pathlib import Path

import typer

from gitdeck.cli.commands._helpers import CURRENT_OPTION, REPO_OPTION, as_paths, batch_exit_code
from gitdeck.cli.context import build_context
from gitdeck.core.errors import ErrorCode
from gitdeck.services.batch import BatchResult, Verb
from gitdeck.services.context import AppContext


ALL_REMOTES_OPTION = typer.Option(
    False,
    "--all-remotes",
    "-a",
    help="Operate on every remote of each repository, not just the current one.",
)

_POLL_SECONDS = 0.2


def _wait(app: AppContext) -> BatchResult | None:
    """Wait for the running batch; Ctrl+C cancels it and keeps waiting for the refresh."""
    result: BatchResult | None = None
    while app.worker.pending:
        try:
            applied = app.worker.wait(timeout=_POLL_SECONDS)
        except KeyboardInterrupt:
            app.cancel()
            continue
        if applied is not None:
            result = applied
    return result


def _run_verb(verb: Verb, repos: list[Path], current: Path | None, all_remotes: bool) -> None:
    ctx = build_context(repos, current=current)
    app = ctx.app
    try:
        if app.registry.current() is None and len(ctx.selection) < 2:
            ctx.console.error("no current repository")
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        app.submit_batch(verb, ctx.selection, all_remotes)
        result = _wait(app)
    finally:
        app.close()

    code = batch_exit_code(result)
    if code != ErrorCode.OK:
        raise typer.Exit(code=int(code))


def fetch(
    repo: list[Path] | None = REPO_OPTION,
    current: Path | None = CURRENT_OPTION,
    all_remotes: bool = ALL_REMOTES_OPTION,
) -> None:
    """Fetch from remotes into the selected repositories."""
    _run_verb(Verb.FETCH, as_paths(repo), current, all_remotes)


def pull(
    repo: list[Path] | None = REPO_OPTION,
    current: Path | None = CURRENT_OPTION,
    all_remotes: bool = ALL_REMOTES_OPTION,
) -> None:
    """Pull from remotes into the selected repositories."""
    _run_verb(Verb.PULL, as_paths(repo), current, all_remotes)


def push(
    repo: list[Path] | None = REPO_OPTION,
    current: Path | None = CURRENT_OPTION,
    all_remotes: bool = ALL_REMOTES_OPTION,
) -> None:
    """Push the selected repositories to their remotes."""
    _run_verb(Verb.PUSH, as_paths(repo), current, all_remotes)
