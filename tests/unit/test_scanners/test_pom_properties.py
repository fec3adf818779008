"""Tests for the pom.properties scanner."""

from pathlib import Path

import pytest

from version_tracker.models import LibraryCoordinate
from version_tracker.scanners.pom_properties import PomPropertiesScanner, parse_properties


class TestParseProperties:
    """Test suite for the Java properties parser."""

    def test_separators(self):
        """Test '=', ':' and whitespace separators."""
        text = "a=1\nb : 2\nc 3\nd=\n"
        assert parse_properties(text) == {"a": "1", "b": "2", "c": "3", "d": ""}

    def test_comments_and_blank_lines(self):
        """Test that '#' and '!' comments and blank lines are skipped."""
        text = "# comment\n! other comment\n\n   \nkey=value\n"
        assert parse_properties(text) == {"key": "value"}

    def test_line_continuation(self):
        """Test that a trailing backslash joins the next line."""
        text = "version=1.2.\\\n    80\n"
        assert parse_properties(text) == {"version": "1.2.80"}

    def test_later_keys_win(self):
        """Test that duplicate keys keep the last value."""
        assert parse_properties("v=1\nv=2\n") == {"v": "2"}


class TestPomPropertiesScanner:
    """Test suite for PomPropertiesScanner."""

    @pytest.fixture
    def scanner(self, store) -> PomPropertiesScanner:
        """Create a PomPropertiesScanner writing to a fresh store."""
        return PomPropertiesScanner(store)

    def test_can_handle(self):
        """Test that only files named pom.properties are handled."""
        assert PomPropertiesScanner.can_handle(Path("META-INF/maven/g/a/pom.properties"))
        assert not PomPropertiesScanner.can_handle(Path("application.properties"))
        assert not PomPropertiesScanner.can_handle(Path("POM.properties"))

    def test_source_name(self, scanner):
        """Test that source_name returns the correct value."""
        assert scanner.source_name == "pom.properties"

    def test_scan_fixture(self, scanner, fixtures_dir):
        """Test that the declared coordinate is reported with the file URI."""
        path = fixtures_dir / "pom.properties"
        evidence = scanner.scan(path)

        assert len(evidence) == 1
        coordinate = evidence[0].coordinate
        assert (coordinate.group_id, coordinate.artifact_id, coordinate.version) == (
            "com.alibaba",
            "fastjson",
            "1.2.80",
        )
        assert evidence[0].location == path.absolute().as_uri()

    @pytest.mark.parametrize(
        "content",
        [
            "groupId=g\nartifactId=a\n",
            "groupId=g\nversion=1.0\n",
            "artifactId=a\nversion=1.0\n",
            "",
        ],
    )
    def test_incomplete_file_is_discarded(self, scanner, tmp_path, content):
        """Test that a file missing any coordinate key yields nothing."""
        path = tmp_path / "pom.properties"
        path.write_text(content)
        assert scanner.scan(path) == []

    def test_missing_file_is_discarded(self, scanner, tmp_path):
        """Test that an unreadable file yields nothing instead of raising."""
        assert scanner.scan(tmp_path / "pom.properties") == []

    def test_process_adds_to_store(self, scanner, store, fixtures_dir):
        """Test that process writes the evidence into the store."""
        assert scanner.process(fixtures_dir / "pom.properties") == 1
        target = LibraryCoordinate("com.alibaba", "fastjson", "1.2.83")
        assert len(store.lookup_coordinate(target)) == 1
