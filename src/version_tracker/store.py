"""Thread-safe index of library version evidence.

Evidence is keyed by artifact name and, when a group is known, also by
"group.artifact", so lookups work with or without group qualification.
"""

import threading
from typing import Iterator, Optional

from version_tracker.models import Evidence, LibraryCoordinate


class EvidenceStore:
    """Append-only, set-semantics store of evidence records.

    Safe to call ``add`` from many producer threads at once. Evidence is
    never removed, so the result of any lookup only depends on what was
    added, not on the order it was added in.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._index: dict[str, set[Evidence]] = {}

    def add(self, evidence: Evidence) -> bool:
        """Index an evidence record under its name and group-qualified keys.

        Args:
            evidence: Evidence to add.

        Returns:
            True if the record was new under its own coordinate key.
        """
        coordinate = evidence.coordinate
        with self._lock:
            bucket = self._index.setdefault(coordinate.artifact_id, set())
            added = evidence not in bucket
            bucket.add(evidence)
            if coordinate.group_id is not None:
                qualified = self._index.setdefault(coordinate.key, set())
                added = evidence not in qualified
                qualified.add(evidence)
        return added

    def lookup(self, group_id: Optional[str], artifact_id: str) -> frozenset[Evidence]:
        """Return the evidence recorded for a library.

        With a group, the group-qualified key is used when present, else the
        plain name key. Unknown libraries yield an empty set.
        """
        with self._lock:
            if group_id is not None:
                bucket = self._index.get(f"{group_id}.{artifact_id}")
                if bucket is not None:
                    return frozenset(bucket)
            return frozenset(self._index.get(artifact_id, ()))

    def lookup_coordinate(self, coordinate: LibraryCoordinate) -> frozenset[Evidence]:
        """Return the evidence recorded for the library of a coordinate."""
        return self.lookup(coordinate.group_id, coordinate.artifact_id)

    def all_evidence(self) -> frozenset[Evidence]:
        """Return every distinct evidence record in the store."""
        with self._lock:
            return frozenset(e for bucket in self._index.values() for e in bucket)

    def grouped(self) -> dict[str, list[Evidence]]:
        """Group every evidence record under its own coordinate key.

        Returns:
            Mapping of coordinate key to a fully materialized, sorted list.
        """
        groups: dict[str, list[Evidence]] = {}
        for evidence in self.all_evidence():
            groups.setdefault(evidence.coordinate.key, []).append(evidence)
        for items in groups.values():
            items.sort(key=lambda e: (e.coordinate.version, e.location))
        return groups

    def __len__(self) -> int:
        return len(self.all_evidence())

    def __iter__(self) -> Iterator[Evidence]:
        return iter(self.all_evidence())
