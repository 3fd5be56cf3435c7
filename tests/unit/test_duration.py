"""Duration normalization for timeout settings."""

from __future__ import annotations

import math

import pytest

from envconf.duration import UNLIMITED, is_unlimited, normalize_duration
from envconf.errors import ConfigurationError, DurationError

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("0", 0),
        ("300", 300),
        ("4s", 4),
        ("3m", 180),
        ("2h", 7200),
        ("5d", 432_000),
        ("1y", 31_536_000),
        (" 10m ", 600),
    ],
)
def test_duration_strings_become_seconds(raw: str, expected: int) -> None:
    assert normalize_duration(raw, "environment_timeout") == expected


@pytest.mark.parametrize("raw", [0, 300, 12.5])
def test_numbers_pass_through(raw: float) -> None:
    assert normalize_duration(raw, "environment_timeout") == raw


@pytest.mark.parametrize("raw", ["unlimited", "inf"])
def test_unlimited_tokens(raw: str) -> None:
    seconds = normalize_duration(raw, "environment_timeout")
    assert seconds == UNLIMITED
    assert is_unlimited(seconds)
    assert math.isinf(seconds)


def test_finite_values_are_not_unlimited() -> None:
    assert not is_unlimited(normalize_duration("1y", "environment_timeout"))


@pytest.mark.parametrize("raw", ["", "soon", "-5", "05", "3w", "1.5m", -1, True, None])
def test_invalid_durations_raise(raw: object) -> None:
    with pytest.raises(DurationError, match="Invalid duration format") as exc:
        normalize_duration(raw, "environment_timeout")
    assert exc.value.setting == "environment_timeout"
    assert exc.value.hint is not None
    assert "environment_timeout" in str(exc.value)


def test_duration_error_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        normalize_duration("forever", "environment_timeout")
