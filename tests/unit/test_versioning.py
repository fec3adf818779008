"""Tests for Maven-style version ordering."""

import itertools

import pytest

from version_tracker.versioning import MavenVersion, compare_versions

ORDERED_VERSIONS = [
    "0.9",
    "1.0-alpha1",
    "1.0-beta2",
    "1.0-rc1",
    "1.0-SNAPSHOT",
    "1.0",
    "1.0-sp1",
    "1.0-1",
    "1.0.1",
    "1.1",
    "1.1.0-jre",
    "1.2.0",
    "1.10",
    "2.0",
    "10.0",
]


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


class TestCompareVersions:
    """Test suite for compare_versions."""

    @pytest.mark.parametrize(
        "lower,higher",
        list(zip(ORDERED_VERSIONS, ORDERED_VERSIONS[1:])),
    )
    def test_adjacent_versions_are_ordered(self, lower: str, higher: str) -> None:
        """Test that each version sorts below the next one."""
        assert compare_versions(lower, higher) < 0
        assert compare_versions(higher, lower) > 0

    def test_numeric_segments_compare_numerically(self) -> None:
        """Test that 1.10 is newer than 1.9, unlike a string comparison."""
        assert compare_versions("1.10", "1.9") > 0
        assert compare_versions("1.0.20230101120000", "1.0.9") > 0

    @pytest.mark.parametrize(
        "a,b",
        [
            ("1", "1.0"),
            ("1.0", "1.0.0"),
            ("1.0-ga", "1.0"),
            ("2.0.0.Final", "2"),
            ("1.0-RELEASE", "1.0"),
            ("1.0-RC1", "1.0-rc1"),
            ("1.0-cr1", "1.0-rc1"),
            ("1.0-a1", "1.0-alpha1"),
            ("1.0-b2", "1.0-beta2"),
        ],
    )
    def test_equivalent_versions(self, a: str, b: str) -> None:
        """Test that trailing zeros, release qualifiers and aliases are ignored."""
        assert compare_versions(a, b) == 0
        assert MavenVersion(a) == MavenVersion(b)
        assert hash(MavenVersion(a)) == hash(MavenVersion(b))

    def test_unknown_qualifier_sorts_after_service_pack(self) -> None:
        """Test that unknown qualifiers are newer than the release and sp."""
        assert compare_versions("1.0-jre", "1.0") > 0
        assert compare_versions("1.0-jre", "1.0-sp") > 0

    def test_malformed_version_falls_back_to_string_comparison(self) -> None:
        """Test that unresolved placeholders compare without raising."""
        assert compare_versions("${v}", "1.0") == -1
        assert compare_versions("1.0", "${v}") == 1
        assert compare_versions("${v}", "${v}") == 0
        assert not MavenVersion("${v}").well_formed

    def test_trailing_newline_is_malformed(self) -> None:
        """Test that a trailing line break is not parsed as a qualifier."""
        assert not MavenVersion("1.0\n").well_formed
        assert compare_versions("1.0\n", "1.0") != 0
        assert compare_versions("1.0\n", "1.0.1") < 0

    def test_empty_version_does_not_raise(self) -> None:
        """Test that an empty string is tolerated."""
        assert compare_versions("", "1.0") < 0

    def test_strict_total_order(self) -> None:
        """Test that exactly one of <, ==, > holds for every pair."""
        for a, b in itertools.product(ORDERED_VERSIONS, repeat=2):
            forward = _sign(compare_versions(a, b))
            backward = _sign(compare_versions(b, a))
            assert forward == -backward
            assert (forward == 0) == (a == b)

    def test_transitivity(self) -> None:
        """Test that a < b and b < c imply a < c."""
        for a, b, c in itertools.permutations(ORDERED_VERSIONS, 3):
            if compare_versions(a, b) < 0 and compare_versions(b, c) < 0:
                assert compare_versions(a, c) < 0

    def test_sorting_with_maven_version(self) -> None:
        """Test that MavenVersion works as a sort key."""
        shuffled = list(reversed(ORDERED_VERSIONS))
        assert sorted(shuffled, key=MavenVersion) == ORDERED_VERSIONS
