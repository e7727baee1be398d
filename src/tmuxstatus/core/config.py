"""Runtime settings for tmuxstatus.

There is no configuration file; settings are built-in defaults that a few
environment variables can override.
"""

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping, Optional

from tmuxstatus.core.duration import DEFAULT_DURATION

# Environment variables
TMUX_ENV = "TMUX"
DAEMON_ENV = "TMUXSTATUS_DAEMON"
PID_FILE_ENV = "TMUXSTATUS_PID_FILE"
LOG_FILE_ENV = "TMUXSTATUS_LOG_FILE"
LOG_LEVEL_ENV = "TMUXSTATUS_LOG_LEVEL"
STATUS_OPTION_ENV = "TMUXSTATUS_STATUS_OPTION"

DEFAULT_PID_FILE = Path("/tmp/tmuxstatus.pid")


def _default_log_file() -> Path:
    return Path.home() / ".tmuxstatus" / "logs" / "daemon.log"


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""

    pid_file: Path = DEFAULT_PID_FILE
    log_file: Path = field(default_factory=_default_log_file)
    log_level: str = "INFO"
    status_option: str = "status-right"
    default_duration: str = DEFAULT_DURATION
    tick_interval: float = 1.0
    grace_period: float = 5.0

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from defaults and environment overrides.

        Args:
            environ: Environment mapping (default: ``os.environ``)

        Returns:
            Settings instance
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, Any] = {}

        if env.get(PID_FILE_ENV):
            overrides["pid_file"] = Path(env[PID_FILE_ENV]).expanduser()
        if env.get(LOG_FILE_ENV):
            overrides["log_file"] = Path(env[LOG_FILE_ENV]).expanduser()
        if env.get(LOG_LEVEL_ENV):
            overrides["log_level"] = env[LOG_LEVEL_ENV].upper()
        if env.get(STATUS_OPTION_ENV):
            overrides["status_option"] = env[STATUS_OPTION_ENV]

        return replace(cls(), **overrides)

    @property
    def log_level_value(self) -> int:
        """Numeric logging level, ``INFO`` for unknown names."""
        level = getattr(logging, self.log_level, None)
        if not isinstance(level, int):
            return logging.INFO
        return level


def in_daemon_mode(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Check whether this process is the spawned daemon child."""
    env = os.environ if environ is None else environ
    return bool(env.get(DAEMON_ENV))
