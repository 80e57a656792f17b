"""Error codes for CLI exit status.

These values are used as process exit codes and should remain stable.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    - 0: Success
    - 1: User error (bad arguments, unknown repository or remote)
    - 2: Environment error (unreadable config, git missing)
    - 3: Command error (a git or shell command failed, batch aborted)
    - 4: Cancelled by the user
    - 5: I/O error (log file or workspace not writable)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    COMMAND_ERROR = 3
    CANCELLED = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK
