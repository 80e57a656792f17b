"""Typed configuration loading and access.

The config file is TOML, `gitdeck.toml` by default:

    [status]
    timestamps = true
    clock_24h = false
    max_line_length = 250
    log_file = "~/.gitdeck/status.log"

    [busy]
    delay_seconds = 0.3

    [git]
    executable = "git"
    timeout_seconds = 180

    [workspace]
    repos = ["~/src/app", "~/src/lib"]
    current = "~/src/app"
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import (
    StrDict,
    as_str_dict,
    get_bool,
    get_float,
    get_int,
    get_str,
    get_str_list,
    get_table,
)

__all__ = [
    "BusyConfig",
    "Config",
    "ConfigError",
    "GitConfig",
    "StatusConfig",
    "WorkspaceConfig",
    "default_config_path",
    "load_config",
    "load_config_or_default",
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_NAME",
    "MAX_STATUS_LINE_LENGTH",
    "BUSY_DELAY_SECONDS",
    "GIT_TIMEOUT_SECONDS",
]

DEFAULT_CONFIG_NAME = "gitdeck.toml"
CONFIG_ENV_VAR = "GITDECK_CONFIG"

MAX_STATUS_LINE_LENGTH = 250
BUSY_DELAY_SECONDS = 0.3
GIT_TIMEOUT_SECONDS = 3 * 60.0


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class StatusConfig:
    """Status sink options.

    Attributes:
        timestamps: Prefix every status line with the wall-clock time
        clock_24h: Use 24-hour time for the prefix (12-hour otherwise)
        max_line_length: Longest line text kept per entry
        log_file: Persistent log receiving every posted message, if set
    """

    timestamps: bool = False
    clock_24h: bool = True
    max_line_length: int = MAX_STATUS_LINE_LENGTH
    log_file: Path | None = None


@dataclass(frozen=True, slots=True)
class BusyConfig:
    delay_seconds: float = BUSY_DELAY_SECONDS


@dataclass(frozen=True, slots=True)
class GitConfig:
    executable: str = "git"
    timeout_seconds: float = GIT_TIMEOUT_SECONDS


@dataclass(frozen=True, slots=True)
class WorkspaceConfig:
    """Repositories to load when none are given on the command line."""

    repos: tuple[Path, ...] = ()
    current: Path | None = None


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    status: StatusConfig = field(default_factory=StatusConfig)
    busy: BusyConfig = field(default_factory=BusyConfig)
    git: GitConfig = field(default_factory=GitConfig)
    workspace: WorkspaceConfig = field(default_factory=WorkspaceConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object], *, base: Path | None = None) -> Config:
        """Create Config from a parsed TOML mapping.

        Relative paths are resolved against `base` (the config file's directory).
        """
        status: StrDict = get_table(data, "status") or {}
        busy: StrDict = get_table(data, "busy") or {}
        git: StrDict = get_table(data, "git") or {}
        workspace: StrDict = get_table(data, "workspace") or {}

        max_line = get_int(status, "max_line_length")
        if max_line is not None and max_line <= 0:
            raise ValueError("status.max_line_length must be positive")

        delay = get_float(busy, "delay_seconds")
        if delay is not None and delay < 0:
            raise ValueError("busy.delay_seconds must not be negative")

        log_file = get_str(status, "log_file")
        current = get_str(workspace, "current")

        clock_24h = get_bool(status, "clock_24h")

        return cls(
            status=StatusConfig(
                timestamps=get_bool(status, "timestamps") or False,
                clock_24h=True if clock_24h is None else clock_24h,
                max_line_length=max_line or MAX_STATUS_LINE_LENGTH,
                log_file=_resolve(log_file, base) if log_file else None,
            ),
            busy=BusyConfig(
                delay_seconds=BUSY_DELAY_SECONDS if delay is None else delay,
            ),
            git=GitConfig(
                executable=get_str(git, "executable") or "git",
                timeout_seconds=get_float(git, "timeout_seconds") or GIT_TIMEOUT_SECONDS,
            ),
            workspace=WorkspaceConfig(
                repos=tuple(_resolve(p, base) for p in get_str_list(workspace, "repos") or []),
                current=_resolve(current, base) if current else None,
            ),
        )


def _resolve(raw: str, base: Path | None) -> Path:
    path = Path(raw).expanduser()
    if not path.is_absolute() and base is not None:
        path = base / path
    return path


def default_config_path() -> Path:
    """Config path from $GITDECK_CONFIG, else ./gitdeck.toml."""
    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return Path(env).expanduser()
    return Path.cwd() / DEFAULT_CONFIG_NAME


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to the config file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value, base=path.parent))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Config:
    """Load config from file, or return the default config if it can't be read."""
    result = load_config(path)
    if isinstance(result, Ok):
        return result.value
    return Config()
