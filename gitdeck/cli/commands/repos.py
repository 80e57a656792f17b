from __future__ import annotations

from pathlib import Path

from gitdeck.cli.commands._helpers import CURRENT_OPTION, REPO_OPTION, as_paths
from gitdeck.cli.context import build_context
from gitdeck.output.console import Style


def repos(
    repo: list[Path] | None = REPO_OPTION,
    current: Path | None = CURRENT_OPTION,
) -> None:
    """List the workspace repositories with their branch and remote."""
    ctx = build_context(as_paths(repo), current=current)
    app = ctx.app
    try:
        active = app.registry.current()
        for r in app.registry:
            marker = "*" if r == active else " "
            remote = r.remotes.current() or "-"
            branch = r.branch or "-"
            ctx.console.print(f"{marker} {r.path}  [{branch}]  {remote}", Style.BOLD if r == active else Style.DEFAULT)
        ctx.console.print(app.summary.summary.title, Style.DIM)
    finally:
        app.close()
