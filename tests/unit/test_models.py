"""Tests for the core data models."""

import dataclasses

import pytest

from version_tracker import versioning
from version_tracker.models import (
    ClassFieldVersion,
    CompareMode,
    CompareOp,
    Evidence,
    LibraryCoordinate,
)


class TestLibraryCoordinate:
    """Test suite for LibraryCoordinate."""

    def test_equality_ignores_version(self) -> None:
        """Test that two versions of one library compare equal."""
        a = LibraryCoordinate("com.alibaba", "fastjson", "1.2.80")
        b = LibraryCoordinate("com.alibaba", "fastjson", "1.2.83")
        assert a == b
        assert hash(a) == hash(b)

    def test_group_takes_part_in_equality(self) -> None:
        """Test that a missing group is a different library."""
        assert LibraryCoordinate(None, "fastjson", "1.0") != LibraryCoordinate(
            "com.alibaba", "fastjson", "1.0"
        )

    def test_key(self) -> None:
        """Test the index key with and without a group."""
        assert LibraryCoordinate("com.alibaba", "fastjson", "1.0").key == "com.alibaba.fastjson"
        assert LibraryCoordinate(None, "spring-web", "5.3.0").key == "spring-web"

    def test_str(self) -> None:
        """Test the colon-separated rendering."""
        assert str(LibraryCoordinate("com.alibaba", "fastjson", "1.0")) == "com.alibaba:fastjson:1.0"
        assert str(LibraryCoordinate(None, "spring-web", "5.3.0")) == "spring-web:5.3.0"

    def test_compare_version(self) -> None:
        """Test that compare_version uses Maven ordering."""
        low = LibraryCoordinate(None, "lib", "1.9")
        high = LibraryCoordinate(None, "lib", "1.10")
        assert low.compare_version(high) < 0
        assert high.compare_version(low) > 0

    def test_ordering(self) -> None:
        """Test that coordinates sort by group, artifact, then version."""
        coordinates = [
            LibraryCoordinate("org", "b", "1.0"),
            LibraryCoordinate("org", "a", "2.0"),
            LibraryCoordinate("org", "a", "1.10"),
            LibraryCoordinate(None, "z", "1.0"),
        ]
        assert [str(c) for c in sorted(coordinates)] == [
            "z:1.0",
            "org:a:1.10",
            "org:a:2.0",
            "org:b:1.0",
        ]

    def test_comparable_version_is_cached(self, mocker) -> None:
        """Test that comparisons reuse the parsed version instead of re-parsing."""
        low = LibraryCoordinate(None, "lib", "1.0")
        high = LibraryCoordinate(None, "lib", "2.0")
        assert low.comparable_version is low.comparable_version
        high.comparable_version

        parse = mocker.spy(versioning, "_parse")
        for _ in range(5):
            assert low.compare_version(high) < 0
        assert [str(c) for c in sorted([high, low])] == ["lib:1.0", "lib:2.0"]

        assert parse.call_count == 0

    def test_immutable(self) -> None:
        """Test that coordinates are frozen."""
        coordinate = LibraryCoordinate(None, "lib", "1.0")
        with pytest.raises(dataclasses.FrozenInstanceError):
            coordinate.version = "2.0"  # type: ignore


class TestEvidence:
    """Test suite for Evidence."""

    def test_equality_includes_version(self) -> None:
        """Test that one location reporting two versions keeps both."""
        a = Evidence("file:///pom.xml", LibraryCoordinate(None, "lib", "1.0"))
        b = Evidence("file:///pom.xml", LibraryCoordinate(None, "lib", "2.0"))
        assert a != b
        assert len({a, b}) == 2

    def test_duplicates_collapse(self) -> None:
        """Test that identical records are one set member."""
        a = Evidence("file:///pom.xml", LibraryCoordinate("g", "lib", "1.0"))
        b = Evidence("file:///pom.xml", LibraryCoordinate("g", "lib", "1.0"))
        assert a == b
        assert len({a, b}) == 1

    def test_str(self) -> None:
        """Test the rendering used in evaluation logs."""
        evidence = Evidence("file:///lib/a-1.0.jar", LibraryCoordinate(None, "a", "1.0"))
        assert str(evidence) == "a:1.0(at file:///lib/a-1.0.jar)"


class TestCompareOp:
    """Test suite for CompareOp."""

    @pytest.mark.parametrize(
        "op,results",
        [
            (CompareOp.LT, (True, False, False)),
            (CompareOp.LE, (True, True, False)),
            (CompareOp.EQ, (False, True, False)),
            (CompareOp.GE, (False, True, True)),
            (CompareOp.GT, (False, False, True)),
        ],
    )
    def test_check(self, op: CompareOp, results: tuple[bool, bool, bool]) -> None:
        """Test each operator against below, equal and above results."""
        assert (op.check(-1), op.check(0), op.check(1)) == results

    def test_parse_code_and_name(self) -> None:
        """Test lookup by operator code and member name."""
        assert CompareOp.parse("<=") is CompareOp.LE
        assert CompareOp.parse("gt") is CompareOp.GT

    def test_parse_unknown(self) -> None:
        """Test that unknown operators are rejected."""
        with pytest.raises(ValueError, match="Unknown comparison operator"):
            CompareOp.parse("=>")


def test_compare_mode_values() -> None:
    """Test the compare mode names used in configuration and logs."""
    assert [m.value for m in CompareMode] == ["MayOrUnknown", "May", "Must"]


def test_class_field_version_str() -> None:
    """Test that the registry entry renders as a location description."""
    entry = ClassFieldVersion("org.apache.poi", "poi-ooxml", "org.apache.poi.Version", "<clinit>", "VERSION_STRING")
    assert "className=org.apache.poi.Version" in str(entry)
    assert "fieldName=VERSION_STRING" in str(entry)
