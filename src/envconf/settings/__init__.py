"""Installation-wide settings for environment resolution.

Settings are resolved once into an immutable SettingsRegistry that is passed
explicitly to the environment resolvers.

Key exports:
- resolve_settings: layered resolution (defaults < file < env < overrides)
- SettingsRegistry: read-only registry of installation defaults
- InstallationSettings: Pydantic schema for validation and defaults
"""

# ruff: noqa: I001

from .core import (
    FieldOrigin,
    InstallationSettings,
    Origin,
    SettingsRegistry,
    SourceMap,
    audit_lines,
    audit_text,
    resolve_settings,
    summarize_origins,
    was_field_overridden,
)
from .utils import field_spec_hint, get_config_file_path

__all__ = [  # noqa: RUF022
    # Main public API
    "resolve_settings",
    "SettingsRegistry",
    "InstallationSettings",
    # Provenance
    "Origin",
    "FieldOrigin",
    "SourceMap",
    "was_field_overridden",
    "summarize_origins",
    "audit_lines",
    "audit_text",
    # Utilities
    "field_spec_hint",
    "get_config_file_path",
]
