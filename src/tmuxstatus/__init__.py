"""tmuxstatus - countdown timer in the tmux status line."""

__version__ = "0.1.0"
