"""Scanner for Maven pom.xml project descriptors.

Descriptors contribute in two steps. While files are being scanned, each
descriptor's ``<properties>`` are recorded into the shared property table.
Once every descriptor has been seen, declared dependencies are resolved
against that table, so a ``${name}`` version fans out into one evidence
record per value recorded anywhere in the project.
"""

import logging
import threading
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from version_tracker.models import Evidence, LibraryCoordinate
from version_tracker.properties import PropertyResolver
from version_tracker.scanners.base import BaseScanner, location_of
from version_tracker.store import EvidenceStore

logger = logging.getLogger(__name__)

_NS = "{http://maven.apache.org/POM/4.0.0}"

# pom.xml copies bundled inside packaged jars are already covered by pom.properties
_PACKAGED_METADATA = "META-INF/maven/"


@dataclass(frozen=True)
class DeclaredDependency:
    """A dependency as written in a descriptor, before placeholder resolution."""

    group_id: Optional[str]
    artifact_id: str
    version: Optional[str]


@dataclass
class ProjectDescriptor:
    """Flat view of a project descriptor.

    Attributes:
        properties: Declared build properties.
        dependencies: Declared dependencies in document order.
    """

    properties: dict[str, str] = field(default_factory=dict)
    dependencies: list[DeclaredDependency] = field(default_factory=list)


def _text(element: Optional[ET.Element]) -> Optional[str]:
    if element is None or element.text is None:
        return None
    return element.text.strip() or None


def _local_name(tag: str) -> str:
    return tag.split("}", 1)[1] if "}" in tag else tag


def parse_descriptor(path: Path) -> Optional[ProjectDescriptor]:
    """Parse a pom.xml file into its properties and dependencies.

    Both namespaced and plain POM documents are accepted. Only the direct
    ``<project><dependencies>`` entries are collected; managed, profile and
    build plugin dependencies are ignored.

    Args:
        path: Path to the pom.xml file.

    Returns:
        The parsed descriptor, or None if the file is unreadable or not XML.
    """
    try:
        root = ET.parse(path).getroot()
    except (ET.ParseError, OSError) as e:
        logger.debug("Could not parse descriptor %s: %s", path, e)
        return None

    descriptor = ProjectDescriptor()
    for ns in (_NS, ""):
        props_el = root.find(f"{ns}properties")
        if props_el is None:
            continue
        for child in props_el:
            if not isinstance(child.tag, str):
                continue
            descriptor.properties[_local_name(child.tag)] = (child.text or "").strip()

    for ns in (_NS, ""):
        for dep_el in root.findall(f"{ns}dependencies/{ns}dependency"):
            artifact_id = _text(dep_el.find(f"{ns}artifactId"))
            if not artifact_id:
                continue
            descriptor.dependencies.append(
                DeclaredDependency(
                    group_id=_text(dep_el.find(f"{ns}groupId")),
                    artifact_id=artifact_id,
                    version=_text(dep_el.find(f"{ns}version")),
                )
            )

    return descriptor


class PomScanner(BaseScanner):
    """Scanner for Maven ``pom.xml`` descriptors.

    ``scan`` only records properties and returns no evidence; dependencies
    are reported by ``collect_dependencies`` after all descriptors are in.

    Attributes:
        resolver: Shared property table used for placeholder resolution.
    """

    FILENAME = "pom.xml"

    def __init__(self, store: EvidenceStore, resolver: PropertyResolver) -> None:
        """Initialize the scanner.

        Args:
            store: Evidence store shared by all scanners of a run.
            resolver: Property table shared by all descriptors of a run.
        """
        super().__init__(store)
        self.resolver = resolver
        self._lock = threading.Lock()
        self._descriptors: dict[str, ProjectDescriptor] = {}

    @classmethod
    def can_handle(cls, path: Path) -> bool:
        """Check if this scanner can handle the given file.

        Descriptors inside packaged artifact metadata are rejected.

        Args:
            path: Path to check.

        Returns:
            True for a "pom.xml" outside any ``META-INF/maven/`` directory.
        """
        return path.name == cls.FILENAME and _PACKAGED_METADATA not in path.as_posix()

    @property
    def source_name(self) -> str:
        """Return the human-readable name for this scanner's source type.

        Returns:
            "pom.xml"
        """
        return self.FILENAME

    def scan(self, path: Path) -> list[Evidence]:
        """Parse a descriptor, record its properties and keep it for later.

        Args:
            path: Path to the pom.xml file.

        Returns:
            Always an empty list; see ``collect_dependencies``.
        """
        if not self.can_handle(path):
            return []

        descriptor = parse_descriptor(path)
        if descriptor is None:
            return []

        self.resolver.record_properties(descriptor.properties)
        with self._lock:
            self._descriptors[location_of(path)] = descriptor
        return []

    def resolve_dependencies(
        self, location: str, descriptor: ProjectDescriptor
    ) -> list[Evidence]:
        """Turn a descriptor's declared dependencies into evidence.

        Dependencies without a version are skipped. A placeholder version
        yields one record per recorded property value, or none at all.

        Args:
            location: Location string of the descriptor.
            descriptor: Parsed descriptor.

        Returns:
            Evidence records for every resolvable dependency version.
        """
        evidence = []
        for dependency in descriptor.dependencies:
            if not dependency.version:
                continue
            for version in sorted(self.resolver.resolve_placeholder(dependency.version)):
                coordinate = LibraryCoordinate(
                    dependency.group_id, dependency.artifact_id, version
                )
                evidence.append(Evidence(location, coordinate))
        return evidence

    def collect_dependencies(self) -> int:
        """Resolve every retained descriptor and add the results to the store.

        Must only run after all descriptors have been scanned.

        Returns:
            Number of evidence records produced.
        """
        with self._lock:
            descriptors = dict(self._descriptors)

        count = 0
        for location, descriptor in descriptors.items():
            for item in self.resolve_dependencies(location, descriptor):
                self.store.add(item)
                count += 1
        logger.debug(
            "Resolved %d dependency versions from %d descriptors",
            count,
            len(descriptors),
        )
        return count
