"""Console output abstraction.

A protocol for console output with a Rich implementation for the terminal
and a capturing implementation for tests. Status entries reach the console
through ConsoleStatusListener, which picks a style per message kind.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Protocol

from rich.markup import escape

from gitdeck.output.status import MessageKind, StatusEntry

if TYPE_CHECKING:
    from rich.console import Console

__all__ = [
    "ConsoleProtocol",
    "ConsoleStatusListener",
    "MockConsole",
    "OutputRecord",
    "RichConsole",
    "Style",
    "style_for_kind",
]


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    COMMAND = auto()  # command lines echoed before they run
    OUTPUT = auto()  # captured command output
    DIM = auto()
    BOLD = auto()
    HEADER = auto()

    def __str__(self) -> str:
        return self.name.lower()


_KIND_STYLES: dict[MessageKind, Style] = {
    MessageKind.GENERAL: Style.DEFAULT,
    MessageKind.COMMAND: Style.COMMAND,
    MessageKind.OUTPUT: Style.OUTPUT,
    MessageKind.ERROR: Style.ERROR,
    MessageKind.DEBUG: Style.DIM,
    MessageKind.NEW_VERSION: Style.BOLD,
}


def style_for_kind(kind: MessageKind) -> Style:
    return _KIND_STYLES.get(kind, Style.DEFAULT)


class ConsoleProtocol(Protocol):
    """Protocol for console output."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        """Print a message verbatim with optional styling."""
        ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def header(self, message: str) -> None: ...

    def newline(self) -> None: ...


class RichConsole:
    """Console implementation using Rich."""

    def __init__(self, console: Console | None = None) -> None:
        from rich.console import Console

        self._console = console or Console()
        self._style_map = {
            Style.DEFAULT: "",
            Style.SUCCESS: "green",
            Style.ERROR: "red bold",
            Style.WARNING: "yellow",
            Style.INFO: "cyan",
            Style.COMMAND: "green",
            Style.OUTPUT: "blue",
            Style.DIM: "dim",
            Style.BOLD: "bold",
            Style.HEADER: "blue bold",
        }

    @property
    def rich(self) -> Console:
        """Underlying Rich console (used for the busy spinner)."""
        return self._console

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        # Git output may contain [brackets]; never treat it as markup
        rich_style = self._style_map.get(style, "") or None
        self._console.print(message, style=rich_style, markup=False, highlight=False)

    def success(self, message: str) -> None:
        self._console.print(f"[green]OK[/green] {escape(message)}")

    def error(self, message: str) -> None:
        self._console.print(f"[red bold]error:[/red bold] {escape(message)}")

    def warning(self, message: str) -> None:
        self._console.print(f"[yellow]warning:[/yellow] {escape(message)}")

    def info(self, message: str) -> None:
        self._console.print(f"[cyan]info:[/cyan] {escape(message)}")

    def header(self, message: str) -> None:
        self._console.print(f"\n[blue bold]{escape(message)}[/blue bold]")

    def newline(self) -> None:
        self._console.print()


@dataclass
class OutputRecord:
    """A single output record for MockConsole."""

    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console implementation that captures output for testing."""

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"OK {message}", Style.SUCCESS))

    def error(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"error: {message}", Style.ERROR))

    def warning(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"warning: {message}", Style.WARNING))

    def info(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"info: {message}", Style.INFO))

    def header(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.HEADER))

    def newline(self) -> None:
        self.outputs.append(OutputRecord("", Style.DEFAULT))

    # Test helper methods

    def clear(self) -> None:
        self.outputs.clear()

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(o.style == Style.ERROR for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        """Find all outputs containing a substring."""
        return [o for o in self.outputs if substring in o.message]

    def count(self, style: Style) -> int:
        return sum(1 for o in self.outputs if o.style == style)


class ConsoleStatusListener:
    """Status sink entry listener that prints each entry to a console."""

    def __init__(self, console: ConsoleProtocol) -> None:
        self._console = console

    def __call__(self, entry: StatusEntry) -> None:
        self._console.print(entry.text, style_for_kind(entry.kind))
