"""Parsing of INI-like .conf files."""

from __future__ import annotations

from pathlib import Path

import pytest

from envconf.errors import ConfFileError
from envconf.parser import (
    MAIN_SECTION,
    ConfParser,
    Document,
    PathList,
    Scalar,
    Section,
    raw_value,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def parser() -> ConfParser:
    return ConfParser()


def test_settings_before_any_header_belong_to_main(parser: ConfParser) -> None:
    doc = parser.parse("manifest = site.pp\nmodulepath = a:b\n")

    assert list(doc.sections) == [MAIN_SECTION]
    assert doc.main is not None
    assert doc.main.names() == ["manifest", "modulepath"]
    assert doc.main.setting("manifest").value == Scalar("site.pp")


def test_sections_are_kept_in_file_order(parser: ConfParser) -> None:
    doc = parser.parse("a = 1\n[other]\nb = 2\n[third]\n")

    assert list(doc.sections) == ["main", "other", "third"]
    assert doc.sections["other"].names() == ["b"]
    assert doc.sections["third"].settings == ()


def test_explicit_main_header(parser: ConfParser) -> None:
    doc = parser.parse("[main]\nmanifest = site.pp\n")
    assert doc.main.setting("manifest").value.text == "site.pp"


def test_comments_and_blank_lines_are_ignored(parser: ConfParser) -> None:
    doc = parser.parse("# heading\n\n; another\n   manifest   =   site.pp   \n")
    assert doc.main.setting("manifest").value.text == "site.pp"


def test_empty_text_yields_no_sections(parser: ConfParser) -> None:
    doc = parser.parse("# only a comment\n")
    assert doc.sections == {}
    assert doc.main is None


def test_values_are_not_interpolated(parser: ConfParser) -> None:
    doc = parser.parse(
        "config_version = $vardir/version\nmodulepath = $basemodulepath\n"
    )
    assert doc.main.setting("config_version").value.text == "$vardir/version"
    assert doc.main.setting("modulepath").value.text == "$basemodulepath"


def test_keys_are_case_sensitive(parser: ConfParser) -> None:
    doc = parser.parse("Manifest = site.pp\n")
    assert doc.main.setting("manifest") is None
    assert doc.main.names() == ["Manifest"]


def test_empty_value_is_kept(parser: ConfParser) -> None:
    doc = parser.parse("manifest =\n")
    assert doc.main.setting("manifest").value == Scalar("")


def test_value_may_contain_equals(parser: ConfParser) -> None:
    doc = parser.parse("config_version = /bin/run --mode=fast\n")
    assert doc.main.setting("config_version").value.text == "/bin/run --mode=fast"


def test_setting_records_line_number(parser: ConfParser) -> None:
    doc = parser.parse("\n# c\nmanifest = x\n")
    assert doc.main.setting("manifest").line == 3


@pytest.mark.parametrize(
    ("text", "line", "fragment"),
    [
        ("manifest site.pp\n", 1, "Could not parse line"),
        ("a = 1\n= 2\n", 2, "Setting without a name"),
        ("[]\n", 1, "Empty section name"),
        ("[x]\n[x]\n", 2, "Duplicate section"),
        ("a = 1\na = 2\n", 2, "Duplicate setting 'a'"),
        ("[broken\n", 1, "Could not parse line"),
    ],
)
def test_malformed_text_raises(
    parser: ConfParser, text: str, line: int, fragment: str
) -> None:
    with pytest.raises(ConfFileError, match=fragment) as exc:
        parser.parse(text, source="/envs/prod/environment.conf")
    assert exc.value.line == line
    assert exc.value.path == "/envs/prod/environment.conf"
    assert f"environment.conf:{line}" in str(exc.value)


def test_parse_file_reads_from_disk(parser: ConfParser, tmp_path: Path) -> None:
    conf = tmp_path / "environment.conf"
    conf.write_text("manifest = site.pp\n", encoding="utf-8")

    doc = parser.parse_file(conf)

    assert doc.source == str(conf)
    assert doc.main.setting("manifest").value.text == "site.pp"


def test_parse_file_missing_raises_file_not_found(
    parser: ConfParser, tmp_path: Path
) -> None:
    with pytest.raises(FileNotFoundError):
        parser.parse_file(tmp_path / "environment.conf")


class TestRawValues:
    """Scalar and PathList expose the same surface."""

    def test_scalar_entries_split_on_separator(self) -> None:
        assert Scalar("a:b:c").entries(":") == ["a", "b", "c"]

    def test_scalar_entries_drop_trailing_empties(self) -> None:
        assert Scalar("a::b::").entries(":") == ["a", "", "b"]
        assert Scalar("").entries(":") == []

    def test_path_list_entries_are_kept_verbatim(self) -> None:
        value = PathList(("a:b", "c"))
        assert value.entries(":") == ["a:b", "c"]

    def test_raw_value_wraps_strings_and_sequences(self) -> None:
        assert raw_value("x") == Scalar("x")
        assert raw_value(["x", "y"]) == PathList(("x", "y"))

    def test_section_from_mapping(self) -> None:
        section = Section.from_mapping(
            "main", {"manifest": "site.pp", "modulepath": ["a", "b"]}
        )
        doc = Document.from_sections([section])

        assert doc.main is section
        assert section.setting("modulepath").value == PathList(("a", "b"))
        assert section.setting("missing") is None
