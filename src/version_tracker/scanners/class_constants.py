"""Scanner reading version strings embedded as constants in compiled classes.

Some libraries expose their own version as a string field, e.g.
``org.apache.poi.Version.VERSION_STRING``. Given the class table of the
analyzed program, the scanner looks each registered field up either as a
class-level constant or as a string assigned inside an initializer.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Optional, Protocol

from version_tracker.models import ClassFieldVersion, Evidence, LibraryCoordinate
from version_tracker.store import EvidenceStore

logger = logging.getLogger(__name__)

STATIC_INITIALIZER = "<clinit>"

DEFAULT_CLASS_FIELDS: tuple[ClassFieldVersion, ...] = (
    ClassFieldVersion(
        group_id="org.apache.poi",
        artifact_id="poi-ooxml",
        class_name="org.apache.poi.Version",
        method_name=STATIC_INITIALIZER,
        field_name="VERSION_STRING",
    ),
)


class ClassTable(Protocol):
    """Read access to the classes of the analyzed program."""

    def constant_fields(self, class_name: str) -> Optional[Mapping[str, object]]:
        """Return field name to compile-time constant, or None for unknown classes."""
        ...

    def initializer_assignments(
        self, class_name: str, method_name: str
    ) -> Optional[Mapping[str, object]]:
        """Return field name to constant assigned in a method, or None if absent."""
        ...


class StaticClassTable:
    """In-memory class table.

    Example::

        table = StaticClassTable()
        table.add_class("org.apache.poi.Version", constants={"VERSION_STRING": "4.1.2"})
    """

    def __init__(self) -> None:
        self._constants: dict[str, dict[str, object]] = {}
        self._methods: dict[tuple[str, str], dict[str, object]] = {}

    def add_class(
        self,
        class_name: str,
        constants: Optional[Mapping[str, object]] = None,
        initializers: Optional[Mapping[str, Mapping[str, object]]] = None,
    ) -> None:
        """Register a class, its constant fields and its initializer assignments.

        Args:
            class_name: Fully qualified class name.
            constants: Field name to constant value.
            initializers: Method name to (field name to assigned constant).
        """
        self._constants[class_name] = dict(constants or {})
        for method_name, assignments in (initializers or {}).items():
            self._methods[(class_name, method_name)] = dict(assignments)

    def constant_fields(self, class_name: str) -> Optional[Mapping[str, object]]:
        return self._constants.get(class_name)

    def initializer_assignments(
        self, class_name: str, method_name: str
    ) -> Optional[Mapping[str, object]]:
        if class_name not in self._constants:
            return None
        return self._methods.get((class_name, method_name))


def find_field_constant(
    table: ClassTable, class_name: str, method_name: str, field_name: str
) -> Optional[object]:
    """Find the constant held by a field, matching the name case-insensitively.

    Class-level constants take precedence over values assigned in the
    initializer method.

    Returns:
        The constant, or None if the class or field is unknown.
    """
    constants = table.constant_fields(class_name)
    if constants is None:
        return None

    merged: dict[str, object] = {}
    assignments = table.initializer_assignments(class_name, method_name)
    if assignments:
        merged.update((name.lower(), value) for name, value in assignments.items())
    merged.update((name.lower(), value) for name, value in constants.items())
    return merged.get(field_name.lower())


class ClassConstantScanner:
    """Scanner for registered version constants.

    Unlike the file-driven scanners it runs once per analysis, before any
    file is scanned.

    Attributes:
        store: Evidence store receiving the scanner's output.
        fields: Registry of constants to look for.
    """

    def __init__(
        self,
        store: EvidenceStore,
        fields: Iterable[ClassFieldVersion] = DEFAULT_CLASS_FIELDS,
    ) -> None:
        self.store = store
        self.fields = tuple(fields)

    @property
    def source_name(self) -> str:
        return "class constants"

    def scan(self, table: ClassTable) -> list[Evidence]:
        """Look every registered field up in a class table.

        Args:
            table: Class table of the analyzed program.

        Returns:
            One evidence record per field holding a string constant.
        """
        evidence = []
        for entry in self.fields:
            value = find_field_constant(
                table, entry.class_name, entry.method_name, entry.field_name
            )
            if not isinstance(value, str):
                continue
            coordinate = LibraryCoordinate(entry.group_id, entry.artifact_id, value)
            evidence.append(Evidence(str(entry), coordinate))
        return evidence

    def process(self, table: ClassTable) -> int:
        """Scan a class table and add the results to the store.

        Returns:
            Number of evidence records produced.
        """
        evidence = self.scan(table)
        for item in evidence:
            self.store.add(item)
        logger.debug("Found %d embedded version constants", len(evidence))
        return len(evidence)
