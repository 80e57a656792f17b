"""Remotes of a single repository.

A RemoteSet keeps remotes in the order git reports them and tracks which one
is current. Names are unique within a set. Unknown names are tolerated
everywhere: lookups return None and designation changes are no-ops, because
a background refresh may drop a remote the caller still refers to.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace

__all__ = ["Remote", "RemoteSet"]


@dataclass(frozen=True, slots=True)
class Remote:
    """A named remote.

    Attributes:
        name: Remote name (e.g. "origin")
        fetch_url: URL fetched from, None if not set
        push_url: URL pushed to, None if not set
        push_command: Override for the push arguments (e.g. "origin HEAD:refs/for/master")
    """

    name: str
    fetch_url: str | None = None
    push_url: str | None = None
    push_command: str = ""

    @property
    def can_fetch(self) -> bool:
        return bool(self.fetch_url)

    @property
    def can_push(self) -> bool:
        return bool(self.push_url)


class RemoteSet:
    """Ordered remotes with a current designation."""

    def __init__(self, remotes: Iterable[Remote] = (), current: str = "") -> None:
        self._remotes: dict[str, Remote] = {}
        for remote in remotes:
            self._remotes.setdefault(remote.name, remote)
        self._current = current if current in self._remotes else ""

    def __iter__(self) -> Iterator[Remote]:
        return iter(list(self._remotes.values()))

    def __len__(self) -> int:
        return len(self._remotes)

    def __contains__(self, name: object) -> bool:
        return name in self._remotes

    def names(self) -> list[str]:
        return list(self._remotes)

    def get(self, name: str) -> Remote | None:
        return self._remotes.get(name)

    def current(self) -> str:
        """Name of the current remote, "" when unset."""
        return self._current

    def set_current(self, name: str) -> None:
        """Designate `name` as current; "" clears, unknown names are ignored."""
        if name == "" or name in self._remotes:
            self._current = name

    def add(self, remote: Remote) -> None:
        """Add or replace a remote. The first remote added becomes current."""
        self._remotes[remote.name] = remote
        if not self._current:
            self._current = remote.name

    def remove(self, name: str) -> None:
        if self._remotes.pop(name, None) is not None and self._current == name:
            self._current = ""

    def push_command(self, name: str) -> str:
        """Configured push override for `name`, "" if none."""
        remote = self._remotes.get(name)
        return remote.push_command if remote is not None else ""

    def set_push_command(self, name: str, command: str) -> None:
        remote = self._remotes.get(name)
        if remote is not None:
            self._remotes[name] = replace(remote, push_command=command.strip())

    def copy(self) -> RemoteSet:
        return RemoteSet(self._remotes.values(), current=self._current)

    def __repr__(self) -> str:
        return f"RemoteSet({self.names()!r}, current={self._current!r})"
