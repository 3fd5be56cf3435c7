"""Parser for INI-like ``.conf`` files.

The format is deliberately small::

    # comment
    modulepath = site:modules
    [other]
    key = value

Settings that appear before any ``[section]`` header belong to ``main``.
Values are kept verbatim (after trimming); ``$`` references are never
interpolated here.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
import logging
import os
from pathlib import Path
import re

from envconf.errors import ConfFileError

log = logging.getLogger(__name__)

MAIN_SECTION = "main"

_SECTION_RE = re.compile(r"^\[\s*([^\]]*?)\s*\]$")
_SETTING_RE = re.compile(r"^([^=]*?)\s*=\s*(.*)$")
_COMMENT_PREFIXES = ("#", ";")


# --- Raw values (tagged variant) ---


@dataclass(frozen=True)
class Scalar:
    """A single textual value as written in the file."""

    text: str

    def entries(self, separator: str = os.pathsep) -> list[str]:
        """Split the text into an ordered list on *separator*.

        Trailing empty entries are dropped; empty entries in the middle stay.
        """
        parts = self.text.split(separator)
        while parts and not parts[-1]:
            parts.pop()
        return parts

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class PathList:
    """An already-split, ordered list of entries."""

    items: tuple[str, ...]

    @property
    def text(self) -> str:
        return os.pathsep.join(self.items)

    def entries(self, separator: str = os.pathsep) -> list[str]:
        del separator
        return list(self.items)

    def __str__(self) -> str:
        return self.text


RawValue = Scalar | PathList


def raw_value(value: str | Sequence[str]) -> RawValue:
    """Wrap a plain string or sequence of strings as a raw value."""
    if isinstance(value, str):
        return Scalar(value)
    return PathList(tuple(value))


# --- Document model ---


@dataclass(frozen=True)
class Setting:
    """One ``name = value`` pair."""

    name: str
    value: RawValue
    line: int | None = None


@dataclass(frozen=True)
class Section:
    """A named group of settings, in file order."""

    name: str
    settings: tuple[Setting, ...] = ()

    def setting(self, name: str) -> Setting | None:
        for s in self.settings:
            if s.name == name:
                return s
        return None

    def names(self) -> list[str]:
        return [s.name for s in self.settings]

    @classmethod
    def from_mapping(
        cls, name: str, values: Mapping[str, str | Sequence[str]]
    ) -> Section:
        """Build a section programmatically (strings or lists of strings)."""
        return cls(
            name=name,
            settings=tuple(Setting(k, raw_value(v)) for k, v in values.items()),
        )


@dataclass(frozen=True)
class Document:
    """A parsed file: its sections keyed by name, in file order."""

    sections: Mapping[str, Section] = field(default_factory=dict)
    source: str = "<string>"

    @property
    def main(self) -> Section | None:
        return self.sections.get(MAIN_SECTION)

    @classmethod
    def from_sections(
        cls, sections: Iterable[Section], source: str = "<string>"
    ) -> Document:
        return cls(sections={s.name: s for s in sections}, source=source)


# --- Parser ---


class ConfParser:
    """Parse ``.conf`` text into a `Document`.

    ``parse_file`` raises ``FileNotFoundError`` for a missing file and
    ``ConfFileError`` for malformed content; neither is handled here.
    """

    def __init__(self, *, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    def parse_file(self, path: str | os.PathLike[str]) -> Document:
        p = Path(path)
        text = p.read_text(encoding=self._encoding)
        document = self.parse(text, source=str(p))
        log.debug("Parsed %s (%d section(s))", p, len(document.sections))
        return document

    def parse(self, text: str, *, source: str = "<string>") -> Document:
        sections: dict[str, list[Setting]] = {}
        current = MAIN_SECTION
        seen_headers: set[str] = set()

        for lineno, raw_line in enumerate(text.splitlines(), start=1):
            line = raw_line.strip()
            if not line or line.startswith(_COMMENT_PREFIXES):
                continue

            if m := _SECTION_RE.match(line):
                name = m.group(1)
                if not name:
                    raise self._error("Empty section name", source, lineno)
                if name in seen_headers:
                    raise self._error(f"Duplicate section '{name}'", source, lineno)
                seen_headers.add(name)
                sections.setdefault(name, [])
                current = name
                continue

            if m := _SETTING_RE.match(line):
                key, value = m.group(1), m.group(2).strip()
                if not key:
                    raise self._error("Setting without a name", source, lineno)
                bucket = sections.setdefault(current, [])
                if any(s.name == key for s in bucket):
                    raise self._error(
                        f"Duplicate setting '{key}' in section '{current}'",
                        source,
                        lineno,
                    )
                bucket.append(Setting(key, Scalar(value), lineno))
                continue

            raise self._error(f"Could not parse line '{line}'", source, lineno)

        return Document(
            sections={
                name: Section(name, tuple(settings))
                for name, settings in sections.items()
            },
            source=source,
        )

    @staticmethod
    def _error(message: str, source: str, lineno: int) -> ConfFileError:
        return ConfFileError(
            f"{message} at {source}:{lineno}",
            hint="Expected '[section]' headers, 'name = value' lines or '#' comments.",
            path=source,
            line=lineno,
        )
