"""Tests for status text and the tmux status bar."""

import subprocess
from unittest.mock import patch

import pytest  # type: ignore[import-not-found]

from tmuxstatus.core.display import (
    DisplayError,
    TmuxStatusBar,
    finished_text,
    paused_text,
    running_text,
)


class TestStatusText:
    """Test status text formats."""

    def test_running(self) -> None:
        assert running_text(25 * 60) == "🍅 25:00"
        assert running_text(61.7) == "🍅 01:01"

    def test_paused(self) -> None:
        assert paused_text(598.4) == "🍅 PAUSED 09:58"

    def test_finished(self) -> None:
        assert finished_text(3.2) == "🍅 00:03 passed"


class TestTmuxStatusBar:
    """Test TmuxStatusBar."""

    def test_set_runs_tmux(self) -> None:
        """Test set invokes tmux set-option globally."""
        bar = TmuxStatusBar()

        with patch("tmuxstatus.core.display.subprocess.run") as run:
            bar.set("🍅 10:00")

        command = run.call_args[0][0]
        assert command == ["tmux", "set-option", "-g", "status-right", "🍅 10:00"]
        assert run.call_args[1]["check"] is True

    def test_custom_option(self) -> None:
        """Test writing a different status option."""
        bar = TmuxStatusBar(option="status-left")

        with patch("tmuxstatus.core.display.subprocess.run") as run:
            bar.set("x")

        assert run.call_args[0][0][3] == "status-left"

    def test_clear_sets_empty_string(self) -> None:
        """Test clear resets the option to an empty string."""
        bar = TmuxStatusBar()

        with patch("tmuxstatus.core.display.subprocess.run") as run:
            bar.clear()

        assert run.call_args[0][0][-1] == ""

    def test_tmux_failure_raises_display_error(self) -> None:
        """Test a nonzero tmux exit becomes DisplayError."""
        bar = TmuxStatusBar()
        error = subprocess.CalledProcessError(1, ["tmux"], stderr="no server running")

        with patch("tmuxstatus.core.display.subprocess.run", side_effect=error):
            with pytest.raises(DisplayError, match="no server running"):
                bar.set("x")

    def test_missing_tmux_raises_display_error(self) -> None:
        """Test a missing tmux executable becomes DisplayError."""
        bar = TmuxStatusBar(tmux="definitely-not-tmux")

        with patch("tmuxstatus.core.display.subprocess.run", side_effect=FileNotFoundError):
            with pytest.raises(DisplayError, match="not found"):
                bar.set("x")

    def test_timeout_raises_display_error(self) -> None:
        """Test a hanging tmux becomes DisplayError."""
        bar = TmuxStatusBar(timeout=0.5)
        error = subprocess.TimeoutExpired(["tmux"], 0.5)

        with patch("tmuxstatus.core.display.subprocess.run", side_effect=error):
            with pytest.raises(DisplayError):
                bar.set("x")

    def test_bell_writes_bel(self, tmp_path) -> None:
        """Test bell writes BEL to the terminal device."""
        tty = tmp_path / "tty"
        bar = TmuxStatusBar(tty=tty)

        bar.bell()

        assert tty.read_text() == "\a"

    def test_bell_without_terminal_is_silent(self, tmp_path) -> None:
        """Test bell does nothing when there is no terminal."""
        bar = TmuxStatusBar(tty=tmp_path / "missing" / "tty")
        bar.bell()  # Should not raise
