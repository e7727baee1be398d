"""tmuxstatus daemon - background countdown shown in the tmux status line.

The daemon provides:
- A single-consumer event loop ticking once a second
- Pause/resume/terminate control over OS signals
- A PID marker file so controller invocations can find it
"""

from tmuxstatus.daemon.daemon import TimerDaemon
from tmuxstatus.daemon.ipc import ControlEvent, SignalListener
from tmuxstatus.daemon.state import Countdown

__all__ = ["TimerDaemon", "ControlEvent", "SignalListener", "Countdown"]
