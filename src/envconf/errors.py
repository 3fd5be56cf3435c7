"""Exception hierarchy for envconf."""

from __future__ import annotations


class EnvConfError(Exception):
    """Base exception for all envconf errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(EnvConfError):
    """Configuration validation or resolution failed."""


class ConfFileError(ConfigurationError):
    """A configuration file exists but could not be parsed.

    Never swallowed: a present-but-corrupt file must be fixed before the
    environment can load.
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        path: str | None = None,
        line: int | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.path = path
        self.line = line


class DurationError(ConfigurationError):
    """A duration value could not be converted to seconds."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        setting: str | None = None,
        value: object = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.setting = setting
        self.value = value
