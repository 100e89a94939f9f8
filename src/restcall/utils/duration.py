r"""Parsing of human-written durations such as ``500ms`` or ``1.5s``."""

from __future__ import annotations

__all__ = ["parse_duration"]

import re

_DURATION_PATTERN = re.compile(r"^\s*(\d+(?:\.\d*)?|\.\d+)\s*(ms|s|m|h)?\s*$")
_UNIT_SECONDS = {"s": 1.0, "m": 60.0, "h": 3600.0}


def parse_duration(text: str) -> float:
    """Parse a duration into seconds.

    Accepted units are ``ms``, ``s``, ``m`` and ``h``. A bare number is
    a number of seconds.

    Raises:
        ValueError: If the text is not a valid duration.

    Example:
        ```pycon
        >>> from restcall.utils.duration import parse_duration
        >>> parse_duration("500ms")
        0.5
        >>> parse_duration("1.5s")
        1.5
        >>> parse_duration("2m")
        120.0
        >>> parse_duration("10")
        10.0

        ```
    """
    match = _DURATION_PATTERN.match(text)
    if match is None:
        msg = f"invalid duration {text!r}"
        raise ValueError(msg)
    value, unit = match.groups()
    if unit == "ms":
        return float(value) / 1000
    return float(value) * _UNIT_SECONDS[unit or "s"]
