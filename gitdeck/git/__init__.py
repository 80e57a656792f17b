"""Git layer.

- Remote / RemoteSet: remotes of one repository and the current one
- Repository / RepositoryRegistry: the workspace's repositories
- CommandRunner: run one git command against one repository
- StateReader: read branch and remote state back from git

Usage:
    from gitdeck.git import GitRunner, GitStateReader, Repository, RepositoryRegistry

    registry = RepositoryRegistry([Repository(Path("/src/app"))])
    registry.refresh(GitStateReader())
    for repo in registry:
        print(f"{repo.name}: {repo.branch} ({repo.remotes.current()})")
"""

from gitdeck.git.registry import RepositoryRegistry
from gitdeck.git.remotes import Remote, RemoteSet
from gitdeck.git.repository import RepoSnapshot, RepoState, Repository, normalize_path
from gitdeck.git.runner import CommandResult, CommandRunner, GitRunner, ShellRunner
from gitdeck.git.state import GitStateReader, StateError, StateReader

__all__ = [
    # Remotes
    "Remote",
    "RemoteSet",
    # Repository
    "RepoSnapshot",
    "RepoState",
    "Repository",
    "RepositoryRegistry",
    "normalize_path",
    # Runner
    "CommandResult",
    "CommandRunner",
    "GitRunner",
    "ShellRunner",
    # State
    "GitStateReader",
    "StateError",
    "StateReader",
]
