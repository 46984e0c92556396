"""
Duration Parsing
================

Grammar::

    duration := <non-negative int milliseconds>
              | <digits><unit>
    unit     := "ms" | "s" | "m" | "h" | "d"

Examples: ``"1ms"``, ``"30s"``, ``"15m"``, ``"12h"``, ``"7d"``, ``3600000``.
"""

from __future__ import annotations

import re
from typing import Final, Pattern

from fineauth.core.errors import ConfigurationError

_DURATION_PATTERN: Final[Pattern[str]] = re.compile(r"([0-9]+)(ms|s|m|h|d)")

_UNIT_MS: Final[dict[str, int]] = {
    "ms": 1,
    "s": 1000,
    "m": 60 * 1000,
    "h": 60 * 60 * 1000,
    "d": 24 * 60 * 60 * 1000,
}


def parse_duration(value: int | str) -> int:
    """
    Parse a duration into milliseconds.

    Args:
        value: Millisecond count or a ``<int><unit>`` literal

    Returns:
        Duration in milliseconds

    Raises:
        ConfigurationError: If the value does not match the grammar
    """
    # bool is an int subclass; True must not mean 1ms
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid duration: {value!r}")

    if isinstance(value, int):
        if value < 0:
            raise ConfigurationError(f"Duration cannot be negative: {value}")
        return value

    if not isinstance(value, str):
        raise ConfigurationError(f"Invalid duration type: {type(value).__name__}")

    match = _DURATION_PATTERN.fullmatch(value)
    if not match:
        raise ConfigurationError(f"Invalid duration format: {value!r}")

    amount, unit = match.groups()
    return int(amount) * _UNIT_MS[unit]
