"""Pytest configuration and shared fixtures."""

from typing import Optional

import pytest  # type: ignore[import-not-found]

from tmuxstatus.core.config import Settings
from tmuxstatus.core.display import DisplayError
from tmuxstatus.daemon.ipc import ControlEvent


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest."""
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests")


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0):
        self.now = now
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.advance(seconds)


class FakeDisplay:
    """Records everything the daemon publishes."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.history: list[str] = []
        self.bells = 0

    @property
    def current(self) -> Optional[str]:
        return self.history[-1] if self.history else None

    def set(self, text: str) -> None:
        if self.fail:
            raise DisplayError("tmux unavailable")
        self.history.append(text)

    def clear(self) -> None:
        self.set("")

    def bell(self) -> None:
        self.bells += 1


class ScriptedEvents:
    """Event source replaying a script.

    ``None`` entries stand for an elapsed tick: the clock moves forward by
    the requested timeout and no event is returned.
    """

    def __init__(self, clock: FakeClock, script: list[Optional[ControlEvent]]):
        self.clock = clock
        self.script = list(script)

    def get(self, timeout: Optional[float] = None) -> Optional[ControlEvent]:
        if not self.script:
            raise AssertionError("event script exhausted")
        item = self.script.pop(0)
        if item is None:
            self.clock.advance(timeout or 0.0)
        return item


@pytest.fixture
def clock() -> FakeClock:
    """Fake monotonic clock."""
    return FakeClock()


@pytest.fixture
def display() -> FakeDisplay:
    """Fake status display."""
    return FakeDisplay()


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at temporary files."""
    return Settings(
        pid_file=tmp_path / "tmuxstatus.pid",
        log_file=tmp_path / "logs" / "daemon.log",
    )


@pytest.fixture
def make_events(clock):
    """Factory for scripted event sources bound to the fake clock."""

    def factory(script: list[Optional[ControlEvent]]) -> ScriptedEvents:
        return ScriptedEvents(clock, script)

    return factory


@pytest.fixture
def failing_display() -> FakeDisplay:
    """Fake display whose every update fails."""
    return FakeDisplay(fail=True)
