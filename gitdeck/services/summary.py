"""Workspace summary: the top-level view of the current repository.

Recomputed on every global refresh: a title naming the current branch and
remote, the remotes to switch between, and which of fetch/pull/push are
available (a remote without a push URL cannot be pushed to).
"""

from __future__ import annotations

from dataclasses import dataclass

from gitdeck.git.registry import RepositoryRegistry

__all__ = ["Summary", "SummaryObserver", "summarize"]

APP_NAME = "gitdeck"


@dataclass(frozen=True, slots=True)
class Summary:
    title: str = APP_NAME
    remotes: tuple[str, ...] = ()
    current_remote: str = ""
    can_fetch: bool = False
    can_push: bool = False


def summarize(registry: RepositoryRegistry) -> Summary:
    repo = registry.current()
    if repo is None:
        return Summary()

    title = f"{APP_NAME} - {repo.branch}"
    current = repo.remotes.current()
    if current:
        title += f" : {current}"

    remote = repo.remotes.get(current) if current else None
    return Summary(
        title=title,
        remotes=tuple(repo.remotes.names()) if current else (),
        current_remote=current,
        can_fetch=remote is not None and remote.can_fetch,
        can_push=remote is not None and remote.can_push,
    )


class SummaryObserver:
    """Unscoped refresh listener keeping the latest Summary."""

    def __init__(self, registry: RepositoryRegistry) -> None:
        self._registry = registry
        self.summary = Summary()
        self.refreshes = 0

    def refresh(self) -> None:
        self.summary = summarize(self._registry)
        self.refreshes += 1
