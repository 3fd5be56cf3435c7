"""Pytest configuration and fixtures.

Provides environment isolation, small test doubles and helpers for writing
environment directories. Isolation fixtures are autouse.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import suppress
from dataclasses import dataclass
import os
from pathlib import Path

import pytest

from envconf.settings import SettingsRegistry

# =============================================================================
# Test Doubles
# =============================================================================


@dataclass(frozen=True)
class FakeEnvironment:
    """In-memory environment object for the static resolver."""

    name: str = "production"
    manifest: str | None = "/etc/code/manifests/site.pp"
    modulepath: tuple[str, ...] = ("/etc/code/modules", "/usr/share/modules")
    config_version: str | None = "$commit_id"


# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_envconf_env(monkeypatch):
    """Clear ENVCONF_* variables so host configuration never leaks into tests."""
    for key in list(os.environ.keys()):
        if key.startswith("ENVCONF_"):
            monkeypatch.delenv(key, raising=False)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def registry() -> SettingsRegistry:
    """Registry holding the built-in installation defaults."""
    return SettingsRegistry()


@pytest.fixture
def fake_environment() -> FakeEnvironment:
    return FakeEnvironment()


@pytest.fixture
def make_env(tmp_path: Path) -> Callable[..., Path]:
    """Create an environment directory, optionally with an environment.conf.

    Usage: ``make_env("production", "manifest = site.pp\\n")``; pass
    ``conf=None`` for a directory without the file.
    """

    def _make(name: str = "production", conf: str | None = None) -> Path:
        env_dir = tmp_path / "environments" / name
        env_dir.mkdir(parents=True, exist_ok=True)
        if conf is not None:
            (env_dir / "environment.conf").write_text(conf, encoding="utf-8")
        return env_dir

    return _make
