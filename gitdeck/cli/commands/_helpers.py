"""Shared helpers for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import typer

from gitdeck.core.errors import ErrorCode

if TYPE_CHECKING:
    from gitdeck.services.batch import BatchResult


REPO_OPTION = typer.Option(
    None,
    "--repo",
    "-r",
    help="Repository to operate on (repeatable; two or more form the selection).",
)
CURRENT_OPTION = typer.Option(
    None,
    "--current",
    help="Repository to treat as current.",
)


def batch_exit_code(result: BatchResult | None) -> ErrorCode:
    """Exit code for a finished batch."""
    if result is None or result.ok:
        return ErrorCode.OK
    if result.cancelled:
        return ErrorCode.CANCELLED
    return ErrorCode.COMMAND_ERROR


def as_paths(values: list[Path] | None) -> list[Path]:
    return list(values or [])
