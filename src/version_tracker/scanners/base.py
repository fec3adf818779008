"""Base interface for version evidence scanners.

Scanners turn one discovered artifact (a file found while walking the
project) into evidence records and add them to the shared store.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from version_tracker.models import Evidence
from version_tracker.store import EvidenceStore


class BaseScanner(ABC):
    """Abstract base class for file-driven evidence scanners.

    Scanners are invoked once per matching artifact, possibly from many
    worker threads at once, and must not keep per-artifact state.

    Attributes:
        store: Evidence store receiving the scanner's output.
    """

    def __init__(self, store: EvidenceStore) -> None:
        """Initialize the scanner.

        Args:
            store: Evidence store shared by all scanners of a run.
        """
        self.store = store

    @abstractmethod
    def scan(self, path: Path) -> list[Evidence]:
        """Extract evidence from a single artifact.

        Malformed artifacts yield an empty list rather than an error.

        Args:
            path: Path to the discovered artifact.

        Returns:
            Evidence records reported by the artifact.
        """
        ...

    @classmethod
    @abstractmethod
    def can_handle(cls, path: Path) -> bool:
        """Check if this scanner can handle the given file.

        Args:
            path: Path to check.

        Returns:
            True if this scanner can process the file, False otherwise.
        """
        ...

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Return a human-readable name for this scanner's source type.

        Returns:
            Name like "pom.xml", "pom.properties", etc.
        """
        ...

    def process(self, path: Path) -> int:
        """Scan an artifact and add its evidence to the store.

        Args:
            path: Path to the discovered artifact.

        Returns:
            Number of evidence records produced.
        """
        evidence = self.scan(path)
        for item in evidence:
            self.store.add(item)
        return len(evidence)


def location_of(path: Path) -> str:
    """Return the location string recorded for a file: its absolute URI."""
    return path.absolute().as_uri()
