"""Scanner inferring library versions from jar file names.

Dependency jars copied into a project (``lib/``, ``WEB-INF/lib/``, ...)
usually keep the ``<artifactId>-<version>.jar`` naming of the repository
they came from.
"""

import logging
import re
from pathlib import Path
from typing import Optional, Union

from version_tracker.models import Evidence, LibraryCoordinate
from version_tracker.scanners.base import BaseScanner, location_of
from version_tracker.store import EvidenceStore

logger = logging.getLogger(__name__)

DEFAULT_JAR_FILE_PATTERN = (
    r"^(?P<artifactId>[a-zA-Z0-9_\-\.]+)-"
    r"(?P<version>[0-9]+(?:\.[0-9]+)*(?:-[a-zA-Z0-9_\-\.]+)?)\.jar$"
)


def compile_jar_pattern(pattern: Union[str, re.Pattern]) -> re.Pattern:
    """Compile a jar filename pattern and check its named groups.

    Args:
        pattern: Regular expression source or compiled pattern.

    Returns:
        The compiled pattern.

    Raises:
        ValueError: If the pattern does not compile or lacks the
            ``artifactId`` or ``version`` named groups.
    """
    if isinstance(pattern, str):
        try:
            pattern = re.compile(pattern)
        except re.error as e:
            raise ValueError(f"Invalid jar file pattern {pattern!r}: {e}") from e

    missing = {"artifactId", "version"} - set(pattern.groupindex)
    if missing:
        raise ValueError(
            f"Jar file pattern must define named groups: {', '.join(sorted(missing))}"
        )
    return pattern


class JarFileScanner(BaseScanner):
    """Scanner matching jar base names against a configurable pattern.

    Matches produce one evidence record without a group identifier; names
    that do not match are dropped.

    Attributes:
        pattern: Compiled filename pattern with ``artifactId`` and ``version`` groups.
    """

    EXTENSION = ".jar"

    def __init__(
        self,
        store: EvidenceStore,
        pattern: Union[str, re.Pattern] = DEFAULT_JAR_FILE_PATTERN,
    ) -> None:
        """Initialize the scanner.

        Args:
            store: Evidence store shared by all scanners of a run.
            pattern: Filename pattern; defaults to ``DEFAULT_JAR_FILE_PATTERN``.

        Raises:
            ValueError: If the pattern is invalid.
        """
        super().__init__(store)
        self.pattern = compile_jar_pattern(pattern)

    @classmethod
    def can_handle(cls, path: Path) -> bool:
        """Check if this scanner can handle the given file.

        Args:
            path: Path to check.

        Returns:
            True if the file has a ".jar" extension.
        """
        return path.suffix == cls.EXTENSION

    @property
    def source_name(self) -> str:
        """Return the human-readable name for this scanner's source type.

        Returns:
            "*.jar"
        """
        return "*.jar"

    def match(self, filename: str) -> Optional[LibraryCoordinate]:
        """Infer a coordinate from a jar file name.

        Args:
            filename: Base name of the jar file.

        Returns:
            The inferred coordinate, or None if the name does not match fully.
        """
        match = self.pattern.fullmatch(filename)
        if match is None:
            return None
        artifact_id = match.group("artifactId")
        version = match.group("version")
        if not artifact_id or not version:
            return None
        return LibraryCoordinate(None, artifact_id, version)

    def scan(self, path: Path) -> list[Evidence]:
        """Report the library named by a jar file.

        Args:
            path: Path to the jar file.

        Returns:
            A single evidence record, or an empty list if the name is unrecognized.
        """
        coordinate = self.match(path.name)
        if coordinate is None:
            logger.debug(
                "%s can't match the lib pattern while collecting jar libs", path.name
            )
            return []
        return [Evidence(location_of(path), coordinate)]
