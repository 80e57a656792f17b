"""Repository registry.

Holds the workspace's repositories in insertion order and the current
repository. Mutated only from the control thread.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import TYPE_CHECKING

from gitdeck.core.result import Err
from gitdeck.git.repository import Repository, normalize_path
from gitdeck.output.status import MessageKind, StatusSink

if TYPE_CHECKING:
    from gitdeck.git.state import StateReader

__all__ = ["RepositoryRegistry"]


class RepositoryRegistry:
    """Ordered set of repositories keyed by path, with a current designation."""

    def __init__(self, repos: Iterable[Repository] = ()) -> None:
        self._repos: dict[Path, Repository] = {}
        self._current: Path | None = None
        for repo in repos:
            self.add(repo)

    def __iter__(self) -> Iterator[Repository]:
        return iter(self.list())

    def __len__(self) -> int:
        return len(self._repos)

    def __contains__(self, item: object) -> bool:
        key = self._key(item)
        return key is not None and key in self._repos

    @staticmethod
    def _key(item: object) -> Path | None:
        if isinstance(item, Repository):
            return item.path
        if isinstance(item, (str, Path)):
            return normalize_path(item)
        return None

    def list(self) -> list[Repository]:
        return list(self._repos.values())

    def paths(self) -> list[Path]:
        return list(self._repos)

    def get(self, path: Path | str) -> Repository | None:
        return self._repos.get(normalize_path(path))

    def current(self) -> Repository | None:
        if self._current is None:
            return None
        return self._repos.get(self._current)

    def set_current(self, repo: Repository | Path | str | None) -> None:
        """Designate the current repository.

        None clears the designation. A repository that is not a member is
        ignored: the reference may be stale after a concurrent removal.
        """
        if repo is None:
            self._current = None
            return
        key = self._key(repo)
        if key is not None and key in self._repos:
            self._current = key

    def add(self, repo: Repository) -> Repository:
        """Add a repository; returns the registered instance for its path."""
        return self._repos.setdefault(repo.path, repo)

    def remove(self, repo: Repository | Path | str) -> None:
        """Remove a repository. Removing the current one clears the designation."""
        key = self._key(repo)
        if key is None or self._repos.pop(key, None) is None:
            return
        if self._current == key:
            self._current = None

    def clear(self) -> None:
        self._repos.clear()
        self._current = None

    def refresh(self, reader: StateReader, sink: StatusSink | None = None) -> None:
        """Re-read branch and remote state of every repository.

        A repository whose state cannot be read keeps its previous state; the
        error is posted to `sink` when one is given.
        """
        for repo in self.list():
            result = reader.read(repo.path)
            if isinstance(result, Err):
                if sink is not None:
                    sink.post(f"{repo.path}: {result.error.message}", MessageKind.ERROR)
                continue
            repo.apply(result.value)
