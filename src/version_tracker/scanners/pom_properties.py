"""Scanner for pom.properties files.

Packaged Maven artifacts carry a ``META-INF/maven/<group>/<artifact>/pom.properties``
file stating the exact coordinate they were built from. This scanner reads
it as Java properties text.
"""

import logging
from pathlib import Path
from typing import Optional

from version_tracker.models import Evidence, LibraryCoordinate
from version_tracker.scanners.base import BaseScanner, location_of

logger = logging.getLogger(__name__)


def parse_properties(text: str) -> dict[str, str]:
    """Parse Java properties text into a flat mapping.

    Handles ``#`` and ``!`` comments, blank lines, ``=``/``:``/whitespace
    separators and backslash line continuations. Later keys win.

    Args:
        text: Contents of a properties file.

    Returns:
        Mapping of property keys to values.
    """
    entries: dict[str, str] = {}
    logical = ""
    for raw in text.splitlines():
        line = raw.lstrip() if not logical else raw.strip()
        if not logical and (not line or line[0] in "#!"):
            continue
        if line.endswith("\\") and not line.endswith("\\\\"):
            logical += line[:-1]
            continue
        logical += line

        key, value = _split_entry(logical)
        entries[key] = value
        logical = ""

    if logical:
        key, value = _split_entry(logical)
        entries[key] = value
    return entries


def _split_entry(line: str) -> tuple[str, str]:
    for i, char in enumerate(line):
        if char in "=:" or char.isspace():
            key = line[:i]
            rest = line[i:].lstrip()
            if char.isspace() and rest[:1] in ("=", ":"):
                rest = rest[1:].lstrip()
            elif not char.isspace():
                rest = rest[1:].lstrip()
            return key, rest.rstrip()
    return line, ""


class PomPropertiesScanner(BaseScanner):
    """Scanner for Maven ``pom.properties`` files.

    A file only counts when it states all of ``groupId``, ``artifactId`` and
    ``version``; otherwise it is silently discarded.
    """

    FILENAME = "pom.properties"

    @classmethod
    def can_handle(cls, path: Path) -> bool:
        """Check if this scanner can handle the given file.

        Args:
            path: Path to check.

        Returns:
            True if the file is named "pom.properties" (case-sensitive).
        """
        return path.name == cls.FILENAME

    @property
    def source_name(self) -> str:
        """Return the human-readable name for this scanner's source type.

        Returns:
            "pom.properties"
        """
        return self.FILENAME

    def scan(self, path: Path) -> list[Evidence]:
        """Read a pom.properties file and report the coordinate it declares.

        Args:
            path: Path to the pom.properties file.

        Returns:
            A single evidence record, or an empty list if the file is
            unreadable or incomplete.
        """
        coordinate = self._read_coordinate(path)
        if coordinate is None:
            return []
        return [Evidence(location_of(path), coordinate)]

    def _read_coordinate(self, path: Path) -> Optional[LibraryCoordinate]:
        try:
            text = path.read_text(encoding="latin-1")
        except OSError as e:
            logger.debug("Could not read %s: %s", path, e)
            return None

        properties = parse_properties(text)
        group_id = properties.get("groupId")
        artifact_id = properties.get("artifactId")
        version = properties.get("version")
        if not (group_id and artifact_id and version):
            logger.debug("Incomplete coordinate in %s, skipping", path)
            return None
        return LibraryCoordinate(group_id, artifact_id, version)
