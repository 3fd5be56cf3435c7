"""Duration normalization for timeout-style settings.

Accepts already-numeric seconds, suffixed duration strings (``"4s"``,
``"3m"``, ``"5d"``) or the ``unlimited`` token, and returns seconds.
"""

from __future__ import annotations

import math
import re
from typing import Final

from envconf.errors import DurationError

UNLIMITED: Final = math.inf

_UNLIMITED_TOKENS = frozenset({"unlimited", "inf"})

_UNIT_SECONDS: Final[dict[str, int]] = {
    "y": 365 * 24 * 60 * 60,
    "d": 24 * 60 * 60,
    "h": 60 * 60,
    "m": 60,
    "s": 1,
}

_DURATION_RE = re.compile(r"^(0|[1-9][0-9]*)(y|d|h|m|s)?$")


def is_unlimited(seconds: float) -> bool:
    """Return True if *seconds* is the unlimited sentinel."""
    return seconds == UNLIMITED


def normalize_duration(raw: object, setting_name: str) -> int | float:
    """Convert a raw duration value into seconds.

    Args:
        raw: An int/float number of seconds, a duration string, or ``unlimited``.
        setting_name: Name of the setting being normalized, used in errors.

    Returns:
        Seconds as an int (float for float input), or ``UNLIMITED``.

    Raises:
        DurationError: If the value cannot be interpreted as a duration.
    """
    # bool is an int subclass; True is not a duration
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        if raw >= 0:
            return raw
    elif isinstance(raw, str):
        text = raw.strip()
        if text in _UNLIMITED_TOKENS:
            return UNLIMITED
        match = _DURATION_RE.match(text)
        if match:
            return int(match.group(1)) * _UNIT_SECONDS[match.group(2) or "s"]

    raise DurationError(
        f"Invalid duration format '{raw}' for parameter: {setting_name}",
        hint="Use seconds (300), a suffixed value (5m, 2h, 1d) or 'unlimited'.",
        setting=setting_name,
        value=raw,
    )
