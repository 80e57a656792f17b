"""Repository model.

A Repository is identified by its filesystem path and carries the state last
read from git: the current branch, the local branches, and its remotes. The
state is owned by the control thread; the batch executor works from an
immutable RepoSnapshot taken when a repository's iteration begins.

Usage:
    repo = Repository(Path("/src/app"), branch="main")
    repo.remotes.add(Remote("origin", fetch_url=url, push_url=url))
    snap = repo.snapshot()
    print(snap.remote_args("origin"))  # "origin main"
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from gitdeck.git.remotes import Remote, RemoteSet

__all__ = [
    "RepoSnapshot",
    "RepoState",
    "Repository",
    "normalize_path",
]


def normalize_path(path: Path | str) -> Path:
    """Canonical key for a repository path."""
    return Path(path).expanduser().absolute()


@dataclass(frozen=True, slots=True)
class RepoState:
    """Authoritative state read from git for one repository.

    Attributes:
        branch: Current branch name ("" for detached HEAD or unborn branch)
        branches: Local branch names
        remotes: Remotes in git's order
        current_remote: Remote chosen earlier and stored with the repository ("" if none)
    """

    branch: str = ""
    branches: tuple[str, ...] = ()
    remotes: tuple[Remote, ...] = ()
    current_remote: str = ""


@dataclass(frozen=True, slots=True)
class RepoSnapshot:
    """Read-only view of a repository used by background work.

    Attributes:
        path: Repository path
        branch: Current branch at snapshot time
        remotes: Remotes at snapshot time, in order
        current_remote: Name of the current remote ("" if unset)
    """

    path: Path
    branch: str
    remotes: tuple[Remote, ...] = ()
    current_remote: str = ""

    @property
    def remote_names(self) -> list[str]:
        return [r.name for r in self.remotes]

    def remote_args(self, remote: str) -> str:
        """Default fetch/pull/push arguments: "<remote> <branch>"."""
        return f"{remote} {self.branch}"

    def push_args(self, remote: str) -> str:
        """Push arguments: the remote's override if set, else the default form."""
        for r in self.remotes:
            if r.name == remote and r.push_command:
                return r.push_command
        return self.remote_args(remote)


@dataclass(eq=False)
class Repository:
    """A managed git working copy.

    Equality and hashing follow the path, so a stale Repository object still
    matches the registry entry for the same directory.
    """

    path: Path
    branch: str = ""
    branches: list[str] = field(default_factory=list)
    remotes: RemoteSet = field(default_factory=RemoteSet)

    def __post_init__(self) -> None:
        self.path = normalize_path(self.path)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Repository):
            return NotImplemented
        return self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)

    @property
    def name(self) -> str:
        return self.path.name

    def exists(self) -> bool:
        """Check if the path is a git working copy."""
        return (self.path / ".git").exists()

    def apply(self, state: RepoState) -> None:
        """Replace branch and remote state with freshly read state.

        The current remote survives if it still exists; otherwise the stored
        choice is used, and failing that the first remote becomes current.
        """
        previous = self.remotes.current()
        self.branch = state.branch
        self.branches = list(state.branches)
        remotes = RemoteSet(state.remotes)
        if previous in remotes:
            remotes.set_current(previous)
        elif state.current_remote in remotes:
            remotes.set_current(state.current_remote)
        elif state.remotes:
            remotes.set_current(state.remotes[0].name)
        self.remotes = remotes

    def snapshot(self) -> RepoSnapshot:
        return RepoSnapshot(
            path=self.path,
            branch=self.branch,
            remotes=tuple(self.remotes),
            current_remote=self.remotes.current(),
        )
