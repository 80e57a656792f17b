from __future__ import annotations

from pathlib import Path

import typer

from gitdeck.cli.commands._helpers import CURRENT_OPTION, REPO_OPTION, as_paths
from gitdeck.cli.context import build_context
from gitdeck.core.errors import ErrorCode
from gitdeck.output.console import Style


remote_app = typer.Typer(no_args_is_help=True, help="Inspect and switch remotes.")


@remote_app.command("list")
def list_remotes(
    repo: list[Path] | None = REPO_OPTION,
    current: Path | None = CURRENT_OPTION,
) -> None:
    """List remotes of the current repository."""
    ctx = build_context(as_paths(repo), current=current)
    try:
        active = ctx.app.registry.current()
        if active is None:
            ctx.console.error("no current repository")
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        selected = active.remotes.current()
        for r in active.remotes:
            marker = "*" if r.name == selected else " "
            push = r.push_url or "(no push url)"
            ctx.console.print(f"{marker} {r.name}  {r.fetch_url or '-'}  {push}", Style.DEFAULT)
            if r.push_command:
                ctx.console.print(f"    push: {r.push_command}", Style.DIM)
    finally:
        ctx.app.close()


@remote_app.command("use")
def use(
    name: str = typer.Argument(..., help="Remote to make current."),
    repo: list[Path] | None = REPO_OPTION,
    current: Path | None = CURRENT_OPTION,
) -> None:
    """Switch the current remote of the current repository; later runs keep it."""
    ctx = build_context(as_paths(repo), current=current)
    try:
        if not ctx.app.switch_remote(name):
            ctx.console.error(f"unknown remote: {name}")
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        ctx.console.success(ctx.app.summary.summary.title)
    finally:
        ctx.app.close()
