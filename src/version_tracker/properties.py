"""Build property table and placeholder resolution.

Properties declared in every project descriptor of a run land in one
multi-valued table. A ``${name}`` version resolves to every value ever
recorded for ``name``, whichever descriptor declared it. This is an
over-approximation: unrelated modules sharing a property name contribute
each other's values.
"""

import logging
import re
import threading
from collections.abc import Mapping

logger = logging.getLogger(__name__)


class PropertyResolver:
    """Multi-valued, thread-safe property table.

    Attributes:
        PLACEHOLDER_PATTERN: Matches a property reference like ``${spring.version}``.
    """

    PLACEHOLDER_PATTERN = re.compile(r"\$ *\{(.*?)}")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._properties: dict[str, set[str]] = {}

    def record_properties(self, entries: Mapping[str, str]) -> None:
        """Add the properties of one descriptor to the table.

        Keys and values are trimmed; empty keys are ignored.

        Args:
            entries: Property name to value mapping.
        """
        with self._lock:
            for key, value in entries.items():
                if key is None or value is None:
                    continue
                key = key.strip()
                if not key:
                    continue
                self._properties.setdefault(key, set()).add(value.strip())

    def values(self, name: str) -> frozenset[str]:
        """Return every value recorded for a property."""
        with self._lock:
            return frozenset(self._properties.get(name, ()))

    def resolve_placeholder(self, version_expr: str) -> frozenset[str]:
        """Resolve a version expression into concrete versions.

        Args:
            version_expr: A literal version or a placeholder expression.

        Returns:
            The literal as a singleton, or all recorded values of the
            referenced property. An empty set means no usable version.
        """
        match = self.PLACEHOLDER_PATTERN.search(version_expr)
        if match is None:
            return frozenset({version_expr})

        name = match.group(1).strip()
        resolved = self.values(name)
        if not resolved:
            logger.debug("No recorded value for property '%s'", name)
        return resolved

    def __len__(self) -> int:
        with self._lock:
            return len(self._properties)
