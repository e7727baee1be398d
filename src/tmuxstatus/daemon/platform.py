"""Host checks and background process spawning."""

import logging
import os
import platform
import subprocess
import sys
from typing import Mapping, Optional, Tuple

from tmuxstatus.core.config import DAEMON_ENV, TMUX_ENV

logger = logging.getLogger(__name__)


def is_posix() -> bool:
    """Signals and sessions the daemon relies on exist only on POSIX hosts."""
    return os.name == "posix"


def is_tmux_session(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Check whether we are running inside a tmux session."""
    env = os.environ if environ is None else environ
    return bool(env.get(TMUX_ENV))


def is_daemon_supported(environ: Optional[Mapping[str, str]] = None) -> Tuple[bool, str]:
    """Check if the daemon can run here.

    Returns:
        Tuple of (is_supported, reason)
    """
    if not is_posix():
        return False, f"Unsupported platform: {platform.system()}"

    if not is_tmux_session(environ):
        return False, "Not inside a tmux session"

    return True, "Platform supported"


def spawn_background(duration: str, environ: Optional[Mapping[str, str]] = None) -> int:
    """Start the daemon as a detached child process.

    The child runs ``python -m tmuxstatus start <duration>`` in a new session
    with the daemon flag set, so it enters the event loop directly and
    outlives this process.

    Args:
        duration: Duration string to pass through
        environ: Base environment (default: ``os.environ``)

    Returns:
        PID of the spawned child

    Raises:
        OSError: If the child cannot be started
    """
    env = dict(os.environ if environ is None else environ)
    env[DAEMON_ENV] = "1"

    proc = subprocess.Popen(
        [sys.executable, "-m", "tmuxstatus", "start", duration],
        env=env,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        start_new_session=True,
        close_fds=True,
    )
    logger.debug(f"Spawned background daemon (PID: {proc.pid})")
    return proc.pid
