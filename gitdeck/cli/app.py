from __future__ import annotations

import os
from pathlib import Path

import typer

from gitdeck import __version__
from gitdeck.cli.commands.batch import fetch, pull, push
from gitdeck.cli.commands.remote import remote_app
from gitdeck.cli.commands.repos import repos
from gitdeck.cli.commands.run_cmd import run
from gitdeck.core.config import CONFIG_ENV_VAR
from gitdeck.core.errors import ErrorCode


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command()(fetch)
app.command()(pull)
app.command()(push)
app.command()(run)
app.command()(repos)

# Sub-apps
app.add_typer(remote_app, name="remote")


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    config: Path | None = typer.Option(
        None,
        "--config",
        help=f"Config file (default: ${CONFIG_ENV_VAR} or ./gitdeck.toml)",
    ),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if config is not None:
        path = config.expanduser()
        if not path.is_file():
            typer.echo(f"error: --config '{path}' does not exist", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        os.environ[CONFIG_ENV_VAR] = str(path.resolve())


def main() -> None:
    app()
