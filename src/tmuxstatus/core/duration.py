"""Duration parsing and clock formatting."""

import re
from datetime import timedelta

DEFAULT_DURATION = "45m"

# Unit multipliers in seconds
UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,  # U+00B5 micro sign
    "μs": 1e-6,  # U+03BC greek mu
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


class DurationError(ValueError):
    """Duration string could not be parsed."""

    pass


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as ``45m``, ``1h30m`` or ``2.5s``.

    A duration is a sequence of decimal numbers, each followed by a unit
    (``ns``, ``us``, ``ms``, ``s``, ``m``, ``h``). A bare ``0`` is also
    accepted.

    Args:
        text: Duration string

    Returns:
        Parsed duration

    Raises:
        DurationError: If the string is empty, negative or malformed
    """
    if text is None:
        raise DurationError("Duration is required")

    value = text.strip()
    if not value:
        raise DurationError("Duration is empty")
    if value == "0":
        return timedelta(0)
    if value[0] in "+-":
        if value[0] == "-":
            raise DurationError(f"Duration must not be negative: {text!r}")
        value = value[1:]

    total = 0.0
    pos = 0
    while pos < len(value):
        match = _COMPONENT.match(value, pos)
        if not match:
            raise DurationError(f"Invalid duration: {text!r}")
        number, unit = match.groups()
        total += float(number) * UNITS[unit]
        pos = match.end()

    if pos == 0:
        raise DurationError(f"Invalid duration: {text!r}")

    try:
        return timedelta(seconds=total)
    except OverflowError as e:
        raise DurationError(f"Duration out of range: {text!r}") from e


def format_clock(seconds: float) -> str:
    """Format a number of seconds as ``MM:SS``.

    Fractions are truncated, negative values clamp to zero and minutes are
    not wrapped into hours (two hours is ``120:00``).
    """
    total = max(0, int(seconds))
    minutes, secs = divmod(total, 60)
    return f"{minutes:02d}:{secs:02d}"
