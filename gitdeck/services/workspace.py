"""Workspace source: where the list of repository paths comes from.

The file format of a saved workspace is not ours to define; a source hands
over an ordered list of paths at load time and takes one back at save time.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from gitdeck.git.registry import RepositoryRegistry
from gitdeck.git.repository import Repository, normalize_path

__all__ = ["StaticWorkspaceSource", "WorkspaceSource", "load_workspace", "save_workspace"]


class WorkspaceSource(Protocol):
    def load(self) -> list[Path]: ...

    def save(self, paths: list[Path]) -> None: ...


class StaticWorkspaceSource:
    """In-memory source (paths from the command line or the config file)."""

    def __init__(self, paths: Iterable[Path | str] = ()) -> None:
        self.paths = [normalize_path(p) for p in paths]

    def load(self) -> list[Path]:
        return list(self.paths)

    def save(self, paths: list[Path]) -> None:
        self.paths = list(paths)


def load_workspace(
    registry: RepositoryRegistry,
    source: WorkspaceSource,
    *,
    current: Path | None = None,
) -> None:
    """Replace the registry's repositories with the source's.

    The current repository is `current` when it is in the workspace, else the
    first repository.
    """
    registry.clear()
    for path in source.load():
        registry.add(Repository(path))
    if current is not None and current in registry:
        registry.set_current(current)
    elif len(registry):
        registry.set_current(registry.list()[0])


def save_workspace(registry: RepositoryRegistry, source: WorkspaceSource) -> None:
    source.save(registry.paths())
