from __future__ import annotations

from pathlib import Path

import typer

from gitdeck.cli.commands._helpers import CURRENT_OPTION, REPO_OPTION, as_paths
from gitdeck.cli.context import build_context
from gitdeck.core.errors import ErrorCode


def run(
    line: str = typer.Argument(..., help='Commands to run, joined with " && ".'),
    repo: list[Path] | None = REPO_OPTION,
    current: Path | None = CURRENT_OPTION,
) -> None:
    """Run git or shell commands in the current repository.

    Commands starting with `git` go to git, anything else to the shell.
    """
    ctx = build_context(as_paths(repo), current=current)
    try:
        results = ctx.app.run_command_line(line)
    finally:
        ctx.app.close()

    if not results:
        ctx.console.error("nothing to run")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    if not all(r.result.success for r in results):
        raise typer.Exit(code=int(ErrorCode.COMMAND_ERROR))
