"""Tests for gitdeck.git.state (output parsing and the git-backed reader)."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from gitdeck.core.result import Err, Ok
from gitdeck.git.remotes import Remote
from gitdeck.git.state import GitStateReader, parse_push_commands, parse_remotes

REMOTE_V = """\
origin\tgit@example.com:app.git (fetch)
origin\tgit@example.com:app.git (push)
upstream\thttps://example.com/up.git (fetch)
upstream\tno_push (push)
mirror\thttps://example.com/mirror.git (fetch)
"""


class TestParseRemotes:
    def test_order_and_urls(self) -> None:
        remotes = parse_remotes(REMOTE_V)

        assert [r.name for r in remotes] == ["origin", "upstream", "mirror"]
        assert remotes[0] == Remote("origin", "git@example.com:app.git", "git@example.com:app.git")
        assert remotes[2].push_url is None
        assert not remotes[2].can_push

    def test_push_commands_attached(self) -> None:
        remotes = parse_remotes(REMOTE_V, {"origin": "origin HEAD:refs/for/master"})
        assert remotes[0].push_command == "origin HEAD:refs/for/master"
        assert remotes[1].push_command == ""

    def test_blank_and_garbage_lines(self) -> None:
        assert parse_remotes("\n   \nonlyname\n") == ()


class TestParsePushCommands:
    def test_parse(self) -> None:
        output = "remote.origin.pushcmd origin HEAD:refs/for/master\nremote.fork.pushcmd   \n"
        assert parse_push_commands(output) == {"origin": "origin HEAD:refs/for/master"}

    def test_ignores_other_keys(self) -> None:
        assert parse_push_commands("remote.origin.url git@x\n") == {}


def _git(cwd: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=cwd, check=True, capture_output=True)


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
class TestGitStateReader:
    """Reads state from a real repository."""

    def test_not_a_repository(self, tmp_path: Path) -> None:
        result = GitStateReader().read(tmp_path)
        assert isinstance(result, Err)
        assert result.error.command == "rev-parse"

    def test_reads_branch_and_remotes(self, tmp_path: Path) -> None:
        _git(tmp_path, "init", "-q", "-b", "main")
        _git(tmp_path, "-c", "user.name=t", "-c", "user.email=t@e", "commit", "-q", "--allow-empty", "-m", "init")
        _git(tmp_path, "remote", "add", "origin", "https://example.com/app.git")
        _git(tmp_path, "config", "remote.origin.pushcmd", "origin HEAD:refs/for/main")

        result = GitStateReader().read(tmp_path)

        assert isinstance(result, Ok)
        state = result.value
        assert state.branch == "main"
        assert state.branches == ("main",)
        assert [r.name for r in state.remotes] == ["origin"]
        assert state.remotes[0].push_command == "origin HEAD:refs/for/main"
        assert state.current_remote == ""

    def test_current_remote_round_trips_through_git_config(self, tmp_path: Path) -> None:
        _git(tmp_path, "init", "-q", "-b", "main")
        _git(tmp_path, "remote", "add", "origin", "https://example.com/app.git")
        _git(tmp_path, "remote", "add", "upstream", "https://example.com/up.git")
        reader = GitStateReader()

        assert isinstance(reader.save_current_remote(tmp_path, "upstream"), Ok)

        result = reader.read(tmp_path)
        assert isinstance(result, Ok)
        assert result.value.current_remote == "upstream"
        config = subprocess.run(
            ["git", "config", "--get", "gitdeck.remote"], cwd=tmp_path, capture_output=True, text=True
        )
        assert config.stdout.strip() == "upstream"
