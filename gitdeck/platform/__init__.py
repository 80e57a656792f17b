"""Platform abstraction layer."""

from .process import (
    CancelToken,
    ProcessError,
    run,
)

__all__ = [
    "CancelToken",
    "ProcessError",
    "run",
]
