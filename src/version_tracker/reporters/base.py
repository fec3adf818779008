"""Base interface for output reporters.

Reporters render the collected evidence into a persisted artifact for
consumers outside the analysis.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from version_tracker.store import EvidenceStore


class BaseReporter(ABC):
    """Abstract base class for output reporters."""

    @abstractmethod
    def render(self, store: EvidenceStore) -> str:
        """Render the store's evidence to formatted output.

        Args:
            store: Fully populated evidence store.

        Returns:
            Rendered output as a string.
        """
        ...

    def write(self, store: EvidenceStore, output_path: Path) -> Path:
        """Render and write output to a file, creating parent directories.

        Args:
            store: Fully populated evidence store.
            output_path: Path to write the output file.

        Returns:
            The written path.

        Raises:
            OSError: If the directory or file cannot be written.
        """
        content = self.render(store)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
        return output_path

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Return the output format name.

        Returns:
            Format name like "json".
        """
        ...
