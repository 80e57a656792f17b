"""Tests for gitdeck.core.errors module."""

from gitdeck.core.errors import ErrorCode


class TestErrorCode:
    """Exit codes are part of the CLI contract."""

    def test_values_are_stable(self) -> None:
        assert ErrorCode.OK == 0
        assert ErrorCode.USER_ERROR == 1
        assert ErrorCode.ENV_ERROR == 2
        assert ErrorCode.COMMAND_ERROR == 3
        assert ErrorCode.CANCELLED == 4
        assert ErrorCode.IO_ERROR == 5

    def test_str(self) -> None:
        assert str(ErrorCode.COMMAND_ERROR) == "command error"

    def test_success_flags(self) -> None:
        assert ErrorCode.OK.is_success
        assert not ErrorCode.OK.is_error
        assert ErrorCode.CANCELLED.is_error

    def test_usable_as_exit_code(self) -> None:
        assert int(ErrorCode.CANCELLED) == 4
