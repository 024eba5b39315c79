from __future__ import annotations

import pytest

from module_troubleshooter.exceptions import InvalidVersion, MalformedVersionRange
from module_troubleshooter.versioning import Version, VersionRange


def test_version_parse_fills_missing_parts() -> None:
    assert Version.parse("1") == Version(1, 0, 0, "")
    assert Version.parse("1.2") == Version(1, 2, 0, "")
    assert Version.parse("1.2.3.SNAPSHOT") == Version(1, 2, 3, "SNAPSHOT")
    assert Version.parse(None) == Version(0, 0, 0, "")
    assert str(Version.parse("2")) == "2.0.0"
    assert str(Version.parse("1.2.3.beta")) == "1.2.3.beta"


def test_version_ordering_numeric_then_qualifier() -> None:
    assert Version.parse("1.10") > Version.parse("1.9")
    assert Version.parse("1.0.0") < Version.parse("1.0.0.a")
    assert Version.parse("1.0.0.a") < Version.parse("1.0.0.b")
    assert Version.parse("2.0") == Version.parse("2.0.0")


@pytest.mark.parametrize("text", ["abc", "1..2", "1.2.3.4.5", "-1", "1.x"])
def test_version_parse_rejects_garbage(text: str) -> None:
    with pytest.raises(InvalidVersion):
        Version.parse(text)


def test_half_open_interval() -> None:
    r = VersionRange.parse("[1.0,2.0)")
    assert r.includes("1.0.0")
    assert r.includes("1.5")
    assert r.includes("1.99.99")
    assert not r.includes("2.0")
    assert not r.includes("0.9")
    assert str(r) == "[1.0.0,2.0.0)"


def test_open_and_closed_bounds() -> None:
    r = VersionRange.parse("(1.0,2.0]")
    assert not r.includes("1.0")
    assert r.includes("1.0.1")
    assert r.includes("2.0")
    assert not r.includes("2.0.1")


def test_bare_version_is_floor_without_ceiling() -> None:
    r = VersionRange.parse("1.2")
    assert r.right is None
    assert r.includes("1.2.0")
    assert r.includes("99.0")
    assert not r.includes("1.1.9")
    assert str(r) == "1.2.0"


def test_quotes_and_whitespace_are_ignored() -> None:
    r = VersionRange.parse('"[ 1.0 , 2.0 )"')
    assert r.includes("1.0") and not r.includes("2.0")


def test_below_and_above() -> None:
    r = VersionRange.parse("[1.0,2.0)")
    assert r.is_below("0.9")
    assert not r.is_below("1.0")
    assert r.is_above("2.0")
    assert not r.is_above("1.9")

    open_left = VersionRange.parse("(1.0,2.0]")
    assert open_left.is_below("1.0")
    assert not open_left.is_above("2.0")


def test_unbounded_sides() -> None:
    r = VersionRange()
    assert r.includes("0.0.0")
    assert r.includes("1000")


def test_empty_range() -> None:
    assert VersionRange.parse("[1.0,1.0)").is_empty
    assert not VersionRange.parse("[1.0,1.0]").is_empty
    assert VersionRange.parse("[1.0,1.0]").includes("1.0")


@pytest.mark.parametrize("text", ["", "  ", "[1.0", "[1.0,2.0", "1.0,2.0", "[a,b)", "[2.0,1.0)", "[1.0,2.0,3.0)", "{1,2}"])
def test_malformed_ranges(text: str) -> None:
    with pytest.raises(MalformedVersionRange):
        VersionRange.parse(text)


def test_missing_range_text_is_malformed() -> None:
    with pytest.raises(MalformedVersionRange):
        VersionRange.parse(None)
