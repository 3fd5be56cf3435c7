"""envconf: effective configuration for directory environments.

Public API:
    - load_from(): resolve an environment directory's ``environment.conf``
    - static_for(): configuration for an in-memory environment
    - resolve_settings(): installation-wide defaults as a SettingsRegistry
    - normalize_duration(): timeout values to seconds
"""

from __future__ import annotations

import logging

from envconf.duration import UNLIMITED, is_unlimited, normalize_duration
from envconf.environment_conf import (
    CONF_FILE_NAME,
    ENVIRONMENT_CONF_ONLY_SETTINGS,
    VALID_SETTINGS,
    Environment,
    EnvironmentConf,
    EnvironmentSettings,
    StaticEnvironmentConf,
    ValidationResult,
    load_from,
    static_for,
    validate,
)
from envconf.errors import (
    ConfFileError,
    ConfigurationError,
    DurationError,
    EnvConfError,
)
from envconf.parser import ConfParser, Document, PathList, Scalar, Section, Setting
from envconf.settings import SettingsRegistry, resolve_settings

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("envconf")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("envconf").addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Environment resolution
    "load_from",
    "static_for",
    "validate",
    "EnvironmentConf",
    "StaticEnvironmentConf",
    "EnvironmentSettings",
    "Environment",
    "ValidationResult",
    "CONF_FILE_NAME",
    "VALID_SETTINGS",
    "ENVIRONMENT_CONF_ONLY_SETTINGS",
    # Installation settings
    "resolve_settings",
    "SettingsRegistry",
    # Parsing
    "ConfParser",
    "Document",
    "Section",
    "Setting",
    "Scalar",
    "PathList",
    # Durations
    "normalize_duration",
    "is_unlimited",
    "UNLIMITED",
    # Errors
    "EnvConfError",
    "ConfigurationError",
    "ConfFileError",
    "DurationError",
]
