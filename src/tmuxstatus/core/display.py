"""Status line output: text formats, the tmux status bar and the bell."""

import logging
import subprocess
from pathlib import Path
from typing import Protocol, Union

from tmuxstatus.core.duration import format_clock

logger = logging.getLogger(__name__)

ICON = "🍅"
TTY_PATH = Path("/dev/tty")


class DisplayError(Exception):
    """Status display could not be updated."""

    pass


def running_text(remaining: float) -> str:
    """Status shown while counting down."""
    return f"{ICON} {format_clock(remaining)}"


def paused_text(remaining: float) -> str:
    """Status shown while paused, with the frozen remaining time."""
    return f"{ICON} PAUSED {format_clock(remaining)}"


def finished_text(elapsed: float) -> str:
    """Status shown once the countdown has run out."""
    return f"{ICON} {format_clock(elapsed)} passed"


class StatusDisplay(Protocol):
    """Anything the daemon can publish its status to."""

    def set(self, text: str) -> None: ...

    def clear(self) -> None: ...

    def bell(self) -> None: ...


class TmuxStatusBar:
    """Publish status text through ``tmux set-option -g``."""

    def __init__(
        self,
        option: str = "status-right",
        tmux: str = "tmux",
        tty: Union[str, Path] = TTY_PATH,
        timeout: float = 2.0,
    ):
        """Initialize status bar writer.

        Args:
            option: tmux option to write
            tmux: tmux executable
            tty: Terminal device the bell is written to
            timeout: Timeout for each tmux call in seconds
        """
        self.option = option
        self.tmux = tmux
        self.tty = Path(tty)
        self.timeout = timeout

    def set(self, text: str) -> None:
        """Set the status option to ``text``.

        Raises:
            DisplayError: If tmux is missing, times out or exits nonzero
        """
        command = [self.tmux, "set-option", "-g", self.option, text]
        try:
            subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=True,
            )
        except FileNotFoundError:
            raise DisplayError(f"{self.tmux} executable not found")
        except subprocess.TimeoutExpired:
            raise DisplayError(f"{self.tmux} did not respond within {self.timeout}s")
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            raise DisplayError(f"{self.tmux} exited with {e.returncode}: {stderr}")

    def clear(self) -> None:
        """Reset the status option to an empty string."""
        self.set("")

    def bell(self) -> None:
        """Write the BEL character to the controlling terminal, if any."""
        try:
            with open(self.tty, "w") as tty:
                tty.write("\a")
        except OSError as e:
            logger.debug(f"Could not ring bell on {self.tty}: {e}")
