"""Signal-based control channel between controller invocations and the daemon.

Controller invocations relay ``pause``/``resume``/``stop`` as OS signals to the
PID recorded in the marker file. Inside the daemon, signal handlers only
translate the signal into a :class:`ControlEvent` and enqueue it; the event
loop consumes events one at a time.
"""

import logging
import queue
import signal
from enum import Enum
from typing import Any, Optional

import psutil  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)


class IPCError(Exception):
    """Control message could not be delivered."""

    pass


class ControlEvent(Enum):
    """Events consumed by the daemon event loop."""

    TERMINATE = "terminate"
    PAUSE = "pause"
    RESUME = "resume"
    TICK = "tick"


# Inbound signals handled by the daemon
SIGNAL_EVENTS = {
    signal.SIGINT: ControlEvent.TERMINATE,
    signal.SIGTERM: ControlEvent.TERMINATE,
    signal.SIGUSR1: ControlEvent.PAUSE,
    signal.SIGUSR2: ControlEvent.RESUME,
}

# Signal sent by the controller for each command
COMMAND_SIGNALS = {
    "stop": signal.SIGTERM,
    "pause": signal.SIGUSR1,
    "resume": signal.SIGUSR2,
}


class SignalListener:
    """Turn inbound OS signals into queued control events.

    ``queue.SimpleQueue.put`` is reentrant, so it is safe to call from a
    signal handler that interrupts the loop while it is blocked in ``get``.
    """

    def __init__(self, events: Optional["queue.SimpleQueue[ControlEvent]"] = None):
        """Initialize listener.

        Args:
            events: Queue to deliver events to (default: new queue)
        """
        self.events: "queue.SimpleQueue[ControlEvent]" = (
            events if events is not None else queue.SimpleQueue()
        )
        self._previous: dict[int, Any] = {}

    def install(self) -> None:
        """Install handlers for every signal in :data:`SIGNAL_EVENTS`."""
        if self._previous:
            return
        for signum in SIGNAL_EVENTS:
            self._previous[signum] = signal.signal(signum, self._handle)
        logger.debug("Signal handlers installed")

    def restore(self) -> None:
        """Put back the handlers that were active before :meth:`install`."""
        for signum, handler in self._previous.items():
            signal.signal(signum, handler)
        self._previous.clear()

    def _handle(self, signum: int, frame: Any) -> None:
        """Handle an inbound signal.

        Args:
            signum: Signal number
            frame: Current stack frame
        """
        self.events.put(SIGNAL_EVENTS[signum])

    def get(self, timeout: Optional[float] = None) -> Optional[ControlEvent]:
        """Wait for the next event.

        Args:
            timeout: Seconds to wait, None to block

        Returns:
            Next event, or None if the timeout expired
        """
        try:
            return self.events.get(timeout=timeout)
        except queue.Empty:
            return None

    def __enter__(self) -> "SignalListener":
        self.install()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.restore()


def send_control(pid: int, command: str) -> None:
    """Deliver a control command to the daemon.

    Args:
        pid: Daemon process ID
        command: One of ``stop``, ``pause``, ``resume``

    Raises:
        IPCError: If the command is unknown or the signal cannot be delivered
    """
    signum = COMMAND_SIGNALS.get(command)
    if signum is None:
        raise IPCError(f"Unknown command: {command}")

    try:
        psutil.Process(pid).send_signal(signum)
    except psutil.NoSuchProcess:
        raise IPCError(f"No process with PID {pid}")
    except psutil.AccessDenied:
        raise IPCError(f"Not permitted to signal PID {pid}")

    logger.debug(f"Sent {signal.Signals(signum).name} to PID {pid}")
