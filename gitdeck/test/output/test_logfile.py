"""Tests for gitdeck.output.logfile."""

from __future__ import annotations

from pathlib import Path

from gitdeck.core.result import Err, Ok
from gitdeck.output.logfile import LogFileListener
from gitdeck.output.status import MessageKind, StatusSink


class TestLogFileListener:
    def test_open_creates_parent(self, tmp_path: Path) -> None:
        listener = LogFileListener(tmp_path / "logs" / "status.log")
        result = listener.open()
        assert isinstance(result, Ok)
        assert (tmp_path / "logs" / "status.log").exists()

    def test_writes_untruncated_lines_with_kind(self, tmp_path: Path, fixed_clock) -> None:
        path = tmp_path / "status.log"
        listener = LogFileListener(path, clock=fixed_clock)
        sink = StatusSink(max_line_length=3)
        sink.add_message_listener(listener)

        sink.post("git fetch origin main", MessageKind.COMMAND)
        sink.post("line one\nline two", MessageKind.OUTPUT)

        assert path.read_text(encoding="utf-8").splitlines() == [
            "2024-03-01 15:04:05 [command] git fetch origin main",
            "2024-03-01 15:04:05 [output] line one",
            "2024-03-01 15:04:05 [output] line two",
        ]

    def test_open_failure_is_reported(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")
        listener = LogFileListener(blocker / "status.log")

        result = listener.open()

        assert isinstance(result, Err)
        assert listener.last_error is not None

    def test_write_failure_stops_further_writes(self, tmp_path: Path) -> None:
        listener = LogFileListener(tmp_path / "missing-dir" / "status.log")

        listener("first", MessageKind.GENERAL)
        error = listener.last_error
        listener("second", MessageKind.GENERAL)

        assert error is not None
        assert listener.last_error is error
