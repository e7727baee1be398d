"""Countdown state and the PID marker record."""

import logging
import os
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class Phase(Enum):
    """Lifecycle phases of the countdown."""

    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"
    TERMINATED = "terminated"


@dataclass
class Countdown:
    """Countdown timer that can be paused and resumed.

    All instants come from ``clock`` (monotonic seconds by default), so the
    timer is unaffected by wall clock changes and easy to drive in tests.
    ``start_time`` never moves; ``end_time`` is pushed back on resume by
    however long the timer was paused.
    """

    duration: float
    clock: Clock = field(default=time.monotonic, repr=False)
    start_time: float = field(init=False)
    end_time: float = field(init=False)
    remaining: float = field(init=False, default=0.0)
    phase: Phase = field(init=False, default=Phase.RUNNING)

    def __post_init__(self) -> None:
        self.start_time = self.clock()
        self.end_time = self.start_time + self.duration

    @property
    def paused(self) -> bool:
        return self.phase == Phase.PAUSED

    @property
    def done(self) -> bool:
        return self.phase in (Phase.FINISHED, Phase.TERMINATED)

    def time_left(self) -> float:
        """Seconds left; frozen while paused, may go negative once expired."""
        if self.paused:
            return self.remaining
        return self.end_time - self.clock()

    def elapsed(self) -> float:
        """Seconds since the countdown started, pauses included."""
        return self.clock() - self.start_time

    def expired(self) -> bool:
        return not self.paused and self.time_left() <= 0

    def pause(self) -> bool:
        """Freeze the remaining time.

        Returns:
            True if the countdown was running and is now paused
        """
        if self.phase != Phase.RUNNING:
            return False
        self.remaining = self.end_time - self.clock()
        self.phase = Phase.PAUSED
        return True

    def resume(self) -> bool:
        """Continue counting down from the frozen remaining time.

        Returns:
            True if the countdown was paused and is now running
        """
        if self.phase != Phase.PAUSED:
            return False
        self.end_time = self.clock() + self.remaining
        self.phase = Phase.RUNNING
        return True

    def finish(self) -> None:
        self.phase = Phase.FINISHED

    def terminate(self) -> None:
        self.phase = Phase.TERMINATED


class MarkerError(Exception):
    """Marker record could not be written."""

    pass


class MarkerStore(Protocol):
    """Holds the process id of the one live daemon."""

    def write(self, pid: int) -> None: ...

    def read(self) -> Optional[int]: ...

    def remove(self) -> None: ...

    def exists(self) -> bool: ...


class PIDFileManager:
    """Manages the daemon PID file."""

    def __init__(self, pid_file: Path):
        """Initialize PID file manager.

        Args:
            pid_file: Path to PID file
        """
        self.pid_file = Path(pid_file)

    def write(self, pid: int) -> None:
        """Create the PID file holding ``pid``.

        The file is created exclusively, so a second daemon cannot claim a
        marker that already exists.

        Args:
            pid: Process ID to write

        Raises:
            MarkerError: If the file exists or cannot be written
        """
        try:
            self.pid_file.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise MarkerError(f"Cannot create {self.pid_file.parent}: {e}")

        try:
            fd = os.open(self.pid_file, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o644)
            with os.fdopen(fd, "w") as f:
                f.write(str(pid))
        except FileExistsError:
            raise MarkerError(f"PID file {self.pid_file} already exists")
        except OSError as e:
            raise MarkerError(f"Failed to write PID file {self.pid_file}: {e}")
        logger.debug(f"PID {pid} written to {self.pid_file}")

    def read(self) -> Optional[int]:
        """Read PID from file.

        Returns:
            PID or None if file doesn't exist or is invalid
        """
        if not self.pid_file.exists():
            return None

        try:
            with open(self.pid_file, "r") as f:
                pid = int(f.read().strip())
        except (ValueError, OSError) as e:
            logger.error(f"Failed to read PID file: {e}")
            return None

        if pid <= 0:
            logger.error(f"Invalid PID in {self.pid_file}: {pid}")
            return None
        return pid

    def remove(self) -> None:
        """Remove PID file. Missing files are ignored."""
        try:
            self.pid_file.unlink()
            logger.debug(f"PID file {self.pid_file} removed")
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Failed to remove PID file: {e}")

    def exists(self) -> bool:
        return self.pid_file.exists()


class MemoryMarkerStore:
    """In-process marker store, for tests and embedding."""

    def __init__(self, pid: Optional[int] = None):
        self.pid = pid

    def write(self, pid: int) -> None:
        if self.pid is not None:
            raise MarkerError("Marker already exists")
        self.pid = pid

    def read(self) -> Optional[int]:
        return self.pid

    def remove(self) -> None:
        self.pid = None

    def exists(self) -> bool:
        return self.pid is not None
