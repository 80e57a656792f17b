"""Free-text command line.

A line may hold several commands separated by " && " (review tools print
command chains like that, ready to paste). Each command is echoed to the
status sink, then routed: a leading `git` token (any case) runs the rest
through the git runner, anything else runs as an external program. The
output is posted after each command. A failing command does not stop the
ones after it.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from gitdeck.git.runner import CommandResult, CommandRunner
from gitdeck.output.status import MessageKind, StatusSink

__all__ = ["CommandLineResult", "dispatch", "split_commands"]

SEPARATOR = " && "


@dataclass(frozen=True, slots=True)
class CommandLineResult:
    command: str
    route: Literal["git", "shell"]
    result: CommandResult


def split_commands(line: str) -> list[str]:
    """Split on the literal " && " token, dropping empty pieces."""
    return [c.strip() for c in line.split(SEPARATOR) if c.strip()]


def dispatch(
    line: str,
    *,
    cwd: Path,
    git: CommandRunner,
    shell: CommandRunner,
    sink: StatusSink,
) -> list[CommandLineResult]:
    """Run every command of `line` in `cwd`, in order."""
    results: list[CommandLineResult] = []

    for command in split_commands(line):
        sink.post(command, MessageKind.COMMAND)

        head, _, rest = command.partition(" ")
        if head.lower() == "git":
            outcome = git.run(cwd, rest.strip())
            results.append(CommandLineResult(command, "git", outcome))
        else:
            outcome = shell.run(cwd, command)
            results.append(CommandLineResult(command, "shell", outcome))

        sink.post(outcome.output, MessageKind.OUTPUT)

    return results
