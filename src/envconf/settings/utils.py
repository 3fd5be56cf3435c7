# src/envconf/settings/utils.py

"""Settings utilities and shared constants.

Pure helpers that can be imported from both the loaders and the core
resolver without creating circular dependencies.
"""

from __future__ import annotations

import os
from pathlib import Path

# --- Constants ---

ENV_PREFIX = "ENVCONF_"

CONFIG_FILE_VAR = "ENVCONF_CONFIG_FILE"

# Meta/control variables that steer resolution but aren't settings fields
META_ENV_FIELDS = {"config_file"}

_TRUE_STRINGS = {"1", "true", "yes", "on"}


def coerce_bool(v: str) -> bool:
    """Convert string to boolean using common conventions."""
    return v.strip().lower() in _TRUE_STRINGS


# --- Path Utilities ---


def get_config_file_path(explicit: str | os.PathLike[str] | None = None) -> Path | None:
    """Return the installation settings file, if one is configured.

    An explicit path wins over ``ENVCONF_CONFIG_FILE``; with neither, there
    is no file layer.
    """
    if explicit is not None:
        return Path(explicit)
    if override := os.environ.get(CONFIG_FILE_VAR):
        return Path(override)
    return None


# --- Field Specification Helpers ---


def field_spec_hint(field: str) -> str:
    """Return a compact hint for setting a field via env or the settings file."""
    env_key = f"{ENV_PREFIX}{field.upper()}"
    return f"Set {env_key} or '{field}' in the [main] section of {CONFIG_FILE_VAR}."
