"""JSON snapshot of all collected version evidence.

The snapshot maps each coordinate key to the evidence recorded for it::

    {
        "com.alibaba.fastjson": [
            {
                "location": "file:///project/pom.xml",
                "libraryDescriptor": {
                    "groupId": "com.alibaba",
                    "artifactId": "fastjson",
                    "version": "1.2.80"
                }
            }
        ]
    }

``groupId`` is omitted for evidence without a group.
"""

import json
from typing import Any

from version_tracker.models import Evidence
from version_tracker.reporters.base import BaseReporter
from version_tracker.store import EvidenceStore

SNAPSHOT_DIRECTORY = "project-env"
SNAPSHOT_FILENAME = "versions.txt"


def evidence_to_dict(evidence: Evidence) -> dict[str, Any]:
    """Convert an evidence record into its snapshot representation."""
    coordinate = evidence.coordinate
    descriptor: dict[str, str] = {}
    if coordinate.group_id is not None:
        descriptor["groupId"] = coordinate.group_id
    descriptor["artifactId"] = coordinate.artifact_id
    descriptor["version"] = coordinate.version
    return {"location": evidence.location, "libraryDescriptor": descriptor}


class SnapshotReporter(BaseReporter):
    """Reporter writing the evidence snapshot as pretty-printed JSON."""

    def render(self, store: EvidenceStore) -> str:
        """Render every evidence record, grouped by coordinate key.

        Args:
            store: Fully populated evidence store.

        Returns:
            JSON document as a string.
        """
        grouped = store.grouped()
        snapshot = {
            key: [evidence_to_dict(e) for e in grouped[key]] for key in sorted(grouped)
        }
        return json.dumps(snapshot, indent=4, ensure_ascii=False)

    @property
    def format_name(self) -> str:
        """Return the output format name.

        Returns:
            The string "json".
        """
        return "json"
