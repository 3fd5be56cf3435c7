# src/envconf/settings/core.py

"""Installation-wide settings: schema, resolution and audit.

This module provides:
- A single source of truth for the installation settings schema
  (InstallationSettings)
- An immutable, read-only registry injected into environment resolution
  (SettingsRegistry)
- Pure layered resolution with provenance tracking (SourceMap)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import cache
import logging
import os
from typing import TYPE_CHECKING, Any, Literal, overload

from pydantic import BaseModel, Field, ValidationError, field_validator

from envconf.duration import normalize_duration
from envconf.errors import ConfigurationError, DurationError
from envconf.parser import ConfParser

from .utils import ENV_PREFIX, field_spec_hint, get_config_file_path

if TYPE_CHECKING:
    from collections.abc import Mapping

    from envconf.parser import Document

log = logging.getLogger(__name__)

# --- Schema (Pydantic wall) ---


class InstallationSettings(BaseModel):
    """Pydantic schema for installation-wide defaults.

    The vocabulary is closed: unknown keys are rejected rather than carried
    along, since nothing downstream would ever read them.
    """

    default_manifest: str = Field(default="./manifests", min_length=1)
    disable_per_environment_manifest: bool = Field(default=False)
    # Stored raw; normalized to seconds by the environment resolver
    environment_timeout: int | float | str = Field(default="0")
    environment_data_provider: str = Field(default="none", min_length=1)
    basemodulepath: tuple[str, ...] = Field(default=())

    model_config = {"extra": "forbid"}

    @field_validator("default_manifest", "environment_data_provider", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        """Trim surrounding whitespace on textual values."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("environment_timeout", mode="after")
    @classmethod
    def check_timeout(cls, v: Any) -> Any:
        """Reject unparsable durations early while keeping the raw value."""
        try:
            normalize_duration(v, "environment_timeout")
        except DurationError as e:
            raise ValueError(str(e)) from e
        return v

    @field_validator("basemodulepath", mode="before")
    @classmethod
    def split_module_path(cls, v: Any) -> Any:
        """Accept a path-separator delimited string as well as a sequence."""
        if isinstance(v, str):
            return tuple(p for p in v.split(os.pathsep) if p)
        return v


@cache
def _default_settings() -> dict[str, Any]:
    return InstallationSettings().model_dump()


# --- Immutable registry ---


@dataclass(frozen=True)
class SettingsRegistry:
    """Read-only installation defaults plus the file-parsing capability.

    Built by ``resolve_settings`` (or directly in tests) and passed
    explicitly to the environment resolvers.
    """

    default_manifest: str = "./manifests"
    disable_per_environment_manifest: bool = False
    environment_timeout: int | float | str = "0"
    environment_data_provider: str = "none"
    basemodulepath: tuple[str, ...] = ()
    parser: ConfParser = field(default_factory=ConfParser, repr=False, compare=False)

    def value(self, name: str) -> Any:
        """Return a setting by name; unknown names raise ``KeyError``."""
        if name not in InstallationSettings.model_fields:
            raise KeyError(name)
        return getattr(self, name)

    def parse_file(self, path: str | os.PathLike[str]) -> Document:
        return self.parser.parse_file(path)


# --- Audit types ---


class Origin(str, Enum):
    """Source origin for settings values."""

    DEFAULT = "default"
    FILE = "file"
    ENV = "env"
    OVERRIDES = "overrides"


@dataclass(frozen=True)
class FieldOrigin:
    """Tracks the origin and context of a settings value."""

    origin: Origin
    env_key: str | None = None  # e.g., "ENVCONF_DEFAULT_MANIFEST"
    file: str | None = None  # e.g., "/etc/envconf/envconf.conf"


SourceMap = dict[str, FieldOrigin]


_DOTENV_LOADED: bool = False


def _load_dotenv_once() -> None:
    """Load a ``.env`` file into ``os.environ`` the first time settings resolve."""
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    from dotenv import load_dotenv

    load_dotenv()
    _DOTENV_LOADED = True


# --- Public resolution API ---


@overload
def resolve_settings(
    overrides: Mapping[str, Any] | None = ...,
    *,
    config_file: str | os.PathLike[str] | None = ...,
    parser: ConfParser | None = ...,
    explain: Literal[True],
) -> tuple[SettingsRegistry, SourceMap]: ...


@overload
def resolve_settings(
    overrides: Mapping[str, Any] | None = ...,
    *,
    config_file: str | os.PathLike[str] | None = ...,
    parser: ConfParser | None = ...,
    explain: Literal[False] = ...,
) -> SettingsRegistry: ...


def resolve_settings(
    overrides: Mapping[str, Any] | None = None,
    *,
    config_file: str | os.PathLike[str] | None = None,
    parser: ConfParser | None = None,
    explain: bool = False,
) -> SettingsRegistry | tuple[SettingsRegistry, SourceMap]:
    """Resolve installation settings from all sources into a SettingsRegistry.

    Precedence: defaults < settings file < environment < overrides.

    Args:
        overrides: Programmatic overrides.
        config_file: Installation settings file; falls back to
            ``ENVCONF_CONFIG_FILE``. A missing file is an empty layer.
        parser: Parser used for the settings file and kept on the registry.
        explain: If True, return ``(registry, source_map)``.

    Raises:
        ConfigurationError: If the merged settings fail validation.
        ConfFileError: If the settings file is malformed.
    """
    _load_dotenv_once()

    from .loaders import load_env, load_file

    parser = parser or ConfParser()
    path = get_config_file_path(config_file)

    merged, sources = _resolve_layers(
        overrides=overrides or {},
        env=load_env(),
        file=load_file(path, parser),
        file_label=str(path) if path is not None else None,
    )

    try:
        settings = InstallationSettings.model_validate(merged)
    except ValidationError as e:
        err = e.errors()[0]
        name = ".".join(str(p) for p in err.get("loc", ())) or "settings"
        msg = err.get("msg") or ""
        # Remove "Value error, " prefix if present (Pydantic standard wrapper)
        if msg.startswith("Value error, "):
            msg = msg[13:]
        known = name in InstallationSettings.model_fields
        raise ConfigurationError(
            f"Invalid installation setting '{name}': {msg}",
            hint=field_spec_hint(name) if known else None,
        ) from e

    registry = SettingsRegistry(**settings.model_dump(), parser=parser)
    log.debug("Resolved installation settings: %s", registry)
    return (registry, sources) if explain else registry


# --- Internal helpers ---


def _resolve_layers(
    *,
    overrides: Mapping[str, Any],
    env: Mapping[str, Any],
    file: Mapping[str, Any],
    file_label: str | None = None,
) -> tuple[dict[str, Any], SourceMap]:
    """Merge layers with last-wins precedence, recording where each value came from."""
    layers = [
        (Origin.FILE, file),
        (Origin.ENV, env),
        (Origin.OVERRIDES, overrides),
    ]

    out: dict[str, Any] = {}
    src: SourceMap = {}

    for k, v in _default_settings().items():
        out[k] = v
        src[k] = FieldOrigin(origin=Origin.DEFAULT)

    for origin, payload in layers:
        for k, v in payload.items():
            out[k] = v
            if origin is Origin.ENV:
                src[k] = FieldOrigin(origin=origin, env_key=f"{ENV_PREFIX}{k.upper()}")
            elif origin is Origin.FILE:
                src[k] = FieldOrigin(origin=origin, file=file_label)
            else:
                src[k] = FieldOrigin(origin=origin)

    return out, src


# --- Audit helpers ---


def _origin_label(field_name: str, where: FieldOrigin) -> str:
    match where.origin:
        case Origin.ENV:
            key = where.env_key or f"{ENV_PREFIX}{field_name.upper()}"
            return f"env:{key}"
        case Origin.FILE:
            return f"file:{where.file or '<settings file>'}"
        case _:
            return str(where.origin.value)


def audit_lines(registry: SettingsRegistry, sources: SourceMap) -> list[str]:
    """Produce one human-readable line per setting: value and origin."""
    lines: list[str] = []
    for name in InstallationSettings.model_fields:
        fo = sources.get(name)
        if fo is None:
            continue
        lines.append(f"{name} = {registry.value(name)!r} ({_origin_label(name, fo)})")
    return lines


def audit_text(registry: SettingsRegistry, sources: SourceMap) -> str:
    """Format the audit as a single string suitable for printing/logging."""
    return "\n".join(audit_lines(registry, sources))


def summarize_origins(sources: SourceMap) -> dict[str, int]:
    """Count how many fields originated from each layer."""
    counts: dict[str, int] = {}
    for fo in sources.values():
        key = fo.origin.value
        counts[key] = counts.get(key, 0) + 1
    return counts


def was_field_overridden(sources: SourceMap, field_name: str) -> bool:
    """Return True if a field's value did not come from defaults."""
    fo = sources.get(field_name)
    return bool(fo and fo.origin is not Origin.DEFAULT)
