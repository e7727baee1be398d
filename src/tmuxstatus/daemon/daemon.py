"""Main daemon implementation."""

import logging
import os
import time
from datetime import timedelta
from typing import Callable, Mapping, Optional, Protocol, Union

from tmuxstatus.core.config import Settings
from tmuxstatus.core.display import (
    DisplayError,
    StatusDisplay,
    TmuxStatusBar,
    finished_text,
    paused_text,
    running_text,
)
from tmuxstatus.daemon.ipc import ControlEvent, SignalListener
from tmuxstatus.daemon.platform import is_daemon_supported
from tmuxstatus.daemon.state import (
    Clock,
    Countdown,
    MarkerError,
    MarkerStore,
    PIDFileManager,
)

logger = logging.getLogger(__name__)


class DaemonError(Exception):
    """Daemon-related error."""

    pass


class EventSource(Protocol):
    def get(self, timeout: Optional[float] = None) -> Optional[ControlEvent]: ...


class TimerDaemon:
    """Countdown daemon that publishes its state to the tmux status line.

    The loop has one consumer and two producers: a fixed-period tick and
    the control events queued by :class:`SignalListener`. Exactly one event
    is handled at a time, so the countdown is never touched concurrently.
    """

    def __init__(
        self,
        duration: Union[timedelta, float],
        settings: Optional[Settings] = None,
        display: Optional[StatusDisplay] = None,
        markers: Optional[MarkerStore] = None,
        clock: Clock = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize daemon.

        Args:
            duration: Countdown length
            settings: Runtime settings (default: from environment)
            display: Status display (default: tmux status bar)
            markers: Marker store (default: PID file from settings)
            clock: Monotonic clock in seconds
            sleep: Blocking sleep used for the post-finish grace period
        """
        if isinstance(duration, timedelta):
            duration = duration.total_seconds()

        self.duration = float(duration)
        self.settings = settings or Settings.from_env()
        self.display = display or TmuxStatusBar(option=self.settings.status_option)
        self.markers = markers or PIDFileManager(self.settings.pid_file)
        self.clock = clock
        self.sleep = sleep
        self.countdown: Optional[Countdown] = None

    def run(
        self,
        events: Optional[EventSource] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> int:
        """Run the daemon until the countdown finishes or it is terminated.

        Args:
            events: Event source (default: a :class:`SignalListener` installed
                for the lifetime of the loop)
            environ: Environment used for the host check

        Returns:
            Process exit code
        """
        supported, reason = is_daemon_supported(environ)
        if not supported:
            logger.debug(f"Not starting daemon: {reason}")
            return 1

        listener: Optional[SignalListener] = None
        if events is None:
            # Handlers go in before the marker exists, so a stop cannot slip past
            listener = SignalListener()
            listener.install()
            events = listener

        try:
            self.start()
        except DaemonError as e:
            logger.critical(str(e))
            if listener is not None:
                listener.restore()
            return 1

        try:
            return self.loop(events)
        finally:
            if listener is not None:
                listener.restore()

    def start(self) -> Countdown:
        """Claim the marker record and start the countdown.

        Raises:
            DaemonError: If the marker record cannot be written
        """
        pid = os.getpid()
        try:
            self.markers.write(pid)
        except MarkerError as e:
            raise DaemonError(f"Failed to write marker record: {e}")

        self.countdown = Countdown(self.duration, clock=self.clock)
        logger.info(f"Daemon started (PID: {pid}, duration: {self.duration:g}s)")
        return self.countdown

    def loop(self, events: EventSource) -> int:
        """Consume ticks and control events until the countdown is done.

        Returns:
            Process exit code
        """
        if self.countdown is None:
            raise DaemonError("Daemon has not been started")

        interval = self.settings.tick_interval
        next_tick = self.clock() + interval

        while not self.countdown.done:
            timeout = max(0.0, next_tick - self.clock())
            event = events.get(timeout=timeout)

            if event is None:
                event = ControlEvent.TICK
                next_tick += interval
                # Re-anchor after a slow tick instead of firing a burst
                if next_tick <= self.clock():
                    next_tick = self.clock() + interval

            self.handle(event)

        return 0

    def handle(self, event: ControlEvent) -> None:
        """Apply a single event to the countdown."""
        countdown = self.countdown
        if countdown is None or countdown.done:
            return

        if event == ControlEvent.TERMINATE:
            logger.info("Received terminate, shutting down...")
            countdown.terminate()
            self.cleanup()
        elif event == ControlEvent.PAUSE:
            if countdown.pause():
                logger.info(f"Paused with {countdown.remaining:.0f}s remaining")
                self._push(paused_text(countdown.remaining))
        elif event == ControlEvent.RESUME:
            if countdown.resume():
                logger.info(f"Resumed with {countdown.remaining:.0f}s remaining")
        elif event == ControlEvent.TICK:
            self._tick(countdown)

    def _tick(self, countdown: Countdown) -> None:
        if countdown.paused:
            self._push(paused_text(countdown.remaining))
            return

        left = countdown.time_left()
        if left > 0:
            self._push(running_text(left))
            return

        elapsed = countdown.elapsed()
        countdown.finish()
        logger.info(f"Countdown finished after {elapsed:.0f}s")
        self._push(finished_text(elapsed))
        self.display.bell()
        # Signals arriving during the grace period stay queued and are dropped
        self.sleep(self.settings.grace_period)
        self.cleanup()

    def _push(self, text: str) -> None:
        try:
            self.display.set(text)
        except DisplayError as e:
            logger.error(f"Error updating tmux {self.settings.status_option}: {e}")

    def cleanup(self) -> None:
        """Clear the status display and remove the marker record."""
        try:
            self.display.clear()
        except DisplayError as e:
            logger.error(f"Error clearing tmux {self.settings.status_option}: {e}")
        self.markers.remove()
        logger.info("Daemon stopped")


def setup_logging(settings: Settings) -> None:
    """Send daemon logs to the log file.

    The daemon's standard streams point at /dev/null, so the file is the
    only place its diagnostics end up.
    """
    log_file = settings.log_file
    log_level = settings.log_level_value

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
    except OSError:
        # No writable log location, keep running without a file log
        return

    file_handler.setLevel(log_level)
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)
