"""Core functionality for the countdown timer."""

from tmuxstatus.core.config import Settings
from tmuxstatus.core.duration import DurationError, parse_duration

__all__ = ["Settings", "DurationError", "parse_duration"]
