"""Tests for the embedded version constant scanner."""

import pytest

from version_tracker.models import ClassFieldVersion
from version_tracker.scanners.class_constants import (
    DEFAULT_CLASS_FIELDS,
    ClassConstantScanner,
    StaticClassTable,
    find_field_constant,
)


@pytest.fixture
def table() -> StaticClassTable:
    """Return a class table holding POI's version class."""
    table = StaticClassTable()
    table.add_class(
        "org.apache.poi.Version",
        initializers={"<clinit>": {"VERSION_STRING": "4.1.0"}},
    )
    return table


class TestFindFieldConstant:
    """Test suite for find_field_constant."""

    def test_initializer_assignment(self, table):
        """Test a value assigned inside the static initializer."""
        assert find_field_constant(table, "org.apache.poi.Version", "<clinit>", "VERSION_STRING") == "4.1.0"

    def test_case_insensitive_field_name(self, table):
        """Test that the field name matches regardless of case."""
        assert find_field_constant(table, "org.apache.poi.Version", "<clinit>", "version_string") == "4.1.0"

    def test_class_constant_wins(self):
        """Test that a class-level constant overrides the initializer."""
        table = StaticClassTable()
        table.add_class(
            "C",
            constants={"VERSION": "2.0"},
            initializers={"<clinit>": {"VERSION": "1.0"}},
        )
        assert find_field_constant(table, "C", "<clinit>", "VERSION") == "2.0"

    def test_missing_method_uses_constants(self):
        """Test that class constants are found without the initializer."""
        table = StaticClassTable()
        table.add_class("C", constants={"VERSION": "2.0"})
        assert find_field_constant(table, "C", "<init>", "VERSION") == "2.0"

    def test_unknown_class(self, table):
        """Test that an unknown class yields None."""
        assert find_field_constant(table, "com.example.Missing", "<clinit>", "VERSION") is None


class TestClassConstantScanner:
    """Test suite for ClassConstantScanner."""

    def test_default_registry(self, store, table):
        """Test that POI's version constant is reported as poi-ooxml."""
        evidence = ClassConstantScanner(store).scan(table)

        assert len(evidence) == 1
        assert str(evidence[0].coordinate) == "org.apache.poi:poi-ooxml:4.1.0"
        assert evidence[0].location == str(DEFAULT_CLASS_FIELDS[0])

    def test_non_string_constant_is_ignored(self, store):
        """Test that only string constants count as versions."""
        table = StaticClassTable()
        table.add_class("org.apache.poi.Version", constants={"VERSION_STRING": 41})
        assert ClassConstantScanner(store).scan(table) == []

    def test_empty_table(self, store):
        """Test that a table without the registered classes yields nothing."""
        assert ClassConstantScanner(store).process(StaticClassTable()) == 0
        assert len(store) == 0

    def test_custom_registry(self, store):
        """Test scanning for a configured constant."""
        table = StaticClassTable()
        table.add_class("com.example.Build", constants={"VERSION": "3.1"})
        fields = [ClassFieldVersion("com.example", "example-core", "com.example.Build", "<clinit>", "VERSION")]

        assert ClassConstantScanner(store, fields).process(table) == 1
        assert {e.coordinate.version for e in store.lookup("com.example", "example-core")} == {"3.1"}
