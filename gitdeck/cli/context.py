from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import typer

from gitdeck.core.config import Config, default_config_path, load_config
from gitdeck.core.errors import ErrorCode
from gitdeck.core.result import Err
from gitdeck.events.busy import RichBusyIndicator
from gitdeck.git.repository import Repository, normalize_path
from gitdeck.output.console import ConsoleProtocol, RichConsole
from gitdeck.services.context import AppContext
from gitdeck.services.workspace import StaticWorkspaceSource, load_workspace


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    console: ConsoleProtocol
    app: AppContext
    selection: tuple[Repository, ...] = ()


def _load_config(console: ConsoleProtocol) -> Config:
    path = default_config_path()
    if not path.exists():
        return Config()
    result = load_config(path)
    if isinstance(result, Err):
        console.error(result.error.message)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))
    return result.value


def build_context(
    repos: Sequence[Path] = (),
    *,
    current: Path | None = None,
) -> CLIContext:
    """Build the app context for one CLI invocation.

    The workspace is the configured repositories plus any given with --repo.
    Repositories given with --repo are the selection; a single one also
    becomes current unless --current says otherwise.
    """
    console = RichConsole()
    config = _load_config(console)

    selected = [normalize_path(p) for p in repos]
    configured = [normalize_path(p) for p in config.workspace.repos]
    paths = configured + [p for p in selected if p not in configured]
    if not paths:
        console.error("no repositories: pass --repo or list them under [workspace] in the config")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    if current is None:
        current = selected[0] if len(selected) == 1 else config.workspace.current

    app = AppContext.create(
        config,
        console=console,
        indicator=RichBusyIndicator(console.rich),
    )
    load_workspace(app.registry, StaticWorkspaceSource(paths), current=current)
    app.broadcaster.do_refresh()

    selection = tuple(r for p in selected if (r := app.registry.get(p)) is not None)
    return CLIContext(config=config, console=console, app=app, selection=selection)
