"""Effective configuration for a single directory environment.

An environment directory may hold an optional ``environment.conf`` that
overrides a handful of settings. ``load_from`` reads it and returns an
``EnvironmentConf`` whose accessors apply the precedence

    per-environment value > installation default > built-in fallback

``static_for`` builds the file-less variant used for environments that were
constructed in memory. Both expose the ``EnvironmentSettings`` surface.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import os
from typing import TYPE_CHECKING, Final, Protocol

from envconf.duration import normalize_duration
from envconf.parser import MAIN_SECTION

if TYPE_CHECKING:
    from collections.abc import Sequence

    from envconf.parser import Document, RawValue, Section
    from envconf.settings import SettingsRegistry

log = logging.getLogger(__name__)

CONF_FILE_NAME: Final = "environment.conf"

ENVIRONMENT_CONF_ONLY_SETTINGS: Final = ("modulepath", "manifest", "config_version")
VALID_SETTINGS: Final = (
    *ENVIRONMENT_CONF_ONLY_SETTINGS,
    "environment_timeout",
    "environment_data_provider",
)


# --- Shared accessor surface ---


class EnvironmentSettings(Protocol):
    """Read accessors shared by file-backed and static environment configs."""

    def manifest(self) -> str | None: ...

    def modulepath(self) -> str: ...

    def config_version(self) -> str | None: ...

    def environment_timeout(self) -> int | float: ...

    def environment_data_provider(self) -> str: ...


class Environment(Protocol):
    """An already-resolved environment, as consumed by ``StaticEnvironmentConf``."""

    @property
    def manifest(self) -> str | None: ...

    @property
    def modulepath(self) -> Sequence[str]: ...

    @property
    def config_version(self) -> str | None: ...


# --- Validation (pure) ---


@dataclass(frozen=True)
class ValidationResult:
    """Diagnostics for a parsed ``environment.conf``.

    ``valid`` is informational only; an invalid file still loads.
    """

    valid: bool = True
    warnings: tuple[str, ...] = ()


def validate(conf_file: str, document: Document) -> ValidationResult:
    """Check a parsed ``environment.conf`` against the known vocabulary."""
    warnings: list[str] = []

    ignored_sections = [name for name in document.sections if name != MAIN_SECTION]
    if ignored_sections:
        warnings.append(
            f"Invalid sections in environment.conf at '{conf_file}'. "
            "Environment conf may not have sections. The following sections are "
            f"being ignored: '{','.join(ignored_sections)}'"
        )

    main = document.main
    names = main.names() if main is not None else []
    extraneous = [name for name in names if name not in VALID_SETTINGS]
    if extraneous:
        warnings.append(
            f"Invalid settings in environment.conf at '{conf_file}'. The following "
            f"unknown setting(s) are being ignored: {', '.join(extraneous)}"
        )

    return ValidationResult(valid=not warnings, warnings=tuple(warnings))


# --- Loading ---


def load_from(
    path_to_env: str | os.PathLike[str],
    global_module_path: Sequence[str],
    settings: SettingsRegistry,
) -> EnvironmentConf:
    """Load the ``environment.conf`` of a directory environment.

    The file is optional: when it is missing, every accessor falls back to
    its default. Unknown sections or settings are logged as warnings and
    ignored. A malformed file raises ``ConfFileError``.

    Args:
        path_to_env: Directory of the environment; made absolute.
        global_module_path: Installation module path, appended to the
            environment's own ``modules`` directory by default.
        settings: Installation settings registry (defaults and parser).
    """
    path_to_env = _canonical(path_to_env)
    conf_file = os.path.join(path_to_env, CONF_FILE_NAME)
    section: Section | None = None

    try:
        document = settings.parse_file(conf_file)
    except FileNotFoundError:
        log.debug("No %s in %s; using defaults", CONF_FILE_NAME, path_to_env)
    else:
        for message in validate(conf_file, document).warnings:
            log.warning("%s", message)
        section = document.main

    return EnvironmentConf(
        path_to_env=path_to_env,
        section=section,
        global_module_path=tuple(global_module_path),
        settings=settings,
    )


def static_for(
    environment: Environment,
    environment_timeout: int | float = 0,
    environment_data_provider: str = "none",
) -> StaticEnvironmentConf:
    """Configuration tied directly to an in-memory environment object.

    Values are exactly those of *environment*, without interpolation or
    path expansion.
    """
    return StaticEnvironmentConf(
        environment, environment_timeout, environment_data_provider
    )


# --- Directory-backed resolver ---


def _canonical(path: str | os.PathLike[str]) -> str:
    return os.path.abspath(os.path.expanduser(os.fspath(path)))


@dataclass(frozen=True)
class EnvironmentConf:
    """Settings of one directory environment, resolved on each access."""

    path_to_env: str
    section: Section | None
    global_module_path: tuple[str, ...]
    settings: SettingsRegistry = field(repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "path_to_env", _canonical(self.path_to_env))
        object.__setattr__(self, "global_module_path", tuple(self.global_module_path))

    def raw_setting(self, name: str) -> RawValue | None:
        """Return the raw per-environment value for *name*, if any."""
        if self.section is None:
            return None
        setting = self.section.setting(name)
        return setting.value if setting is not None else None

    def absolutize(self, path: str | None) -> str | None:
        """Make *path* absolute relative to the environment directory.

        ``None`` stays ``None``; ``$``-prefixed values are left for a later
        interpolation pass.
        """
        if path is None:
            return None
        return self._expand(path)

    def _expand(self, path: str) -> str:
        if path.startswith("$"):
            return path
        return os.path.abspath(os.path.join(self.path_to_env, os.path.expanduser(path)))

    def manifest(self) -> str:
        default_manifest = self.settings.default_manifest
        if os.path.isabs(default_manifest):
            fallback = default_manifest
        else:
            fallback = os.path.normpath(
                os.path.join(self.path_to_env, default_manifest)
            )

        raw = self.raw_setting("manifest")
        env_manifest = self.absolutize(raw.text) if raw is not None else None

        if self.settings.disable_per_environment_manifest:
            if env_manifest is not None and env_manifest != fallback:
                log.error(
                    "The 'disable_per_environment_manifest' setting is true, but the "
                    "environment located at %s has a manifest setting in its "
                    "environment.conf of '%s' which does not match the "
                    "default_manifest setting '%s'. If this environment is expecting "
                    "to find modules in '%s', they will not be available!",
                    self.path_to_env,
                    env_manifest,
                    default_manifest,
                    env_manifest,
                )
            return fallback

        return env_manifest if env_manifest is not None else fallback

    def modulepath(self) -> str:
        raw = self.raw_setting("modulepath")
        if raw is not None:
            entries = raw.entries(os.pathsep)
        else:
            entries = [
                os.path.join(self.path_to_env, "modules"),
                *self.global_module_path,
            ]
        return os.pathsep.join(self._expand(p) for p in entries)

    def config_version(self) -> str | None:
        raw = self.raw_setting("config_version")
        return self.absolutize(raw.text) if raw is not None else None

    def environment_timeout(self) -> int | float:
        raw = self.raw_setting("environment_timeout")
        value = raw.text if raw is not None else self.settings.environment_timeout
        return normalize_duration(value, "environment_timeout")

    def environment_data_provider(self) -> str:
        raw = self.raw_setting("environment_data_provider")
        return raw.text if raw is not None else self.settings.environment_data_provider


# --- Static resolver ---


@dataclass(frozen=True)
class StaticEnvironmentConf:
    """Configuration for an environment that is not loaded from a directory.

    The environment object is borrowed, not copied; its values are returned
    as-is.
    """

    environment: Environment
    timeout: int | float = 0
    data_provider: str = "none"

    def manifest(self) -> str | None:
        return self.environment.manifest

    def modulepath(self) -> str:
        return os.pathsep.join(self.environment.modulepath)

    def config_version(self) -> str | None:
        return self.environment.config_version

    def environment_timeout(self) -> int | float:
        return self.timeout

    def environment_data_provider(self) -> str:
        return self.data_provider
