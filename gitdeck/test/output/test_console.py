"""Tests for gitdeck.output.console."""

from __future__ import annotations

from io import StringIO

from rich.console import Console

from gitdeck.output.console import (
    ConsoleStatusListener,
    MockConsole,
    RichConsole,
    Style,
    style_for_kind,
)
from gitdeck.output.status import MessageKind, StatusSink


class TestMockConsole:
    """Tests for MockConsole."""

    def test_print_captures_output(self) -> None:
        console = MockConsole()
        console.print("hello")
        assert console.messages == ["hello"]

    def test_error_marks_error(self) -> None:
        console = MockConsole()
        console.error("boom")
        assert console.has_error()
        assert console.messages == ["error: boom"]

    def test_find_and_count(self) -> None:
        console = MockConsole()
        console.print("git fetch origin main", Style.COMMAND)
        console.print("done", Style.OUTPUT)
        console.print("git pull origin main", Style.COMMAND)

        assert len(console.find("git")) == 2
        assert console.count(Style.COMMAND) == 2

    def test_clear(self) -> None:
        console = MockConsole()
        console.info("x")
        console.clear()
        assert console.outputs == []


class TestRichConsole:
    def test_prints_without_markup(self) -> None:
        buffer = StringIO()
        console = RichConsole(Console(file=buffer, force_terminal=False, width=200))

        console.print("[bold]literal[/bold]", Style.COMMAND)

        assert "[bold]literal[/bold]" in buffer.getvalue()

    def test_error_goes_to_output(self) -> None:
        buffer = StringIO()
        console = RichConsole(Console(file=buffer, force_terminal=False, width=200))
        console.error("bad remote")
        assert "bad remote" in buffer.getvalue()

    def test_labelled_messages_keep_brackets(self) -> None:
        buffer = StringIO()
        console = RichConsole(Console(file=buffer, force_terminal=False, width=200))

        console.error("list them under [workspace] in the config")
        console.success("pushed [main]")
        console.warning("see [red]")
        console.info("[status] timestamps")
        console.header("[git]")

        output = buffer.getvalue()
        assert "error: list them under [workspace] in the config" in output
        assert "OK pushed [main]" in output
        assert "warning: see [red]" in output
        assert "info: [status] timestamps" in output
        assert "[git]" in output


class TestStatusListener:
    def test_kind_to_style(self) -> None:
        assert style_for_kind(MessageKind.ERROR) is Style.ERROR
        assert style_for_kind(MessageKind.COMMAND) is Style.COMMAND
        assert style_for_kind(MessageKind.OUTPUT) is Style.OUTPUT
        assert style_for_kind(MessageKind.DEBUG) is Style.DIM
        assert style_for_kind(MessageKind.NEW_VERSION) is Style.BOLD
        assert style_for_kind(MessageKind.GENERAL) is Style.DEFAULT

    def test_entries_reach_console(self) -> None:
        console = MockConsole()
        sink = StatusSink()
        sink.add_entry_listener(ConsoleStatusListener(console))

        sink.post("git push origin main", MessageKind.COMMAND)
        sink.post("rejected\nhint: pull first", MessageKind.ERROR)

        assert console.messages == ["git push origin main", "rejected", "hint: pull first"]
        assert console.count(Style.ERROR) == 2
