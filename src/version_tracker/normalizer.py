"""Heuristic normalization of evidence for renamed libraries.

Some libraries changed their coordinates between releases, so old
releases are reported under a name that vulnerability conditions do not
query. Each rule copies matching evidence to the canonical coordinate and
leaves the original record in place.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from version_tracker.models import Evidence
from version_tracker.store import EvidenceStore
from version_tracker.versioning import compare_versions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeuristicRule:
    """Copy evidence for ``artifact_id`` below a version to a canonical coordinate.

    Attributes:
        artifact_id: Name of the library as reported by old releases.
        below_version: Only versions strictly lower than this are copied.
        canonical_group_id: Group of the canonical coordinate.
        canonical_artifact_id: Artifact of the canonical coordinate.
    """

    artifact_id: str
    below_version: str
    canonical_group_id: Optional[str]
    canonical_artifact_id: str

    def apply(self, evidence: Evidence) -> Optional[Evidence]:
        """Return the canonical copy of an evidence record, or None if it does not match."""
        if compare_versions(evidence.coordinate.version, self.below_version) >= 0:
            return None
        coordinate = evidence.coordinate.with_identity(
            self.canonical_group_id, self.canonical_artifact_id
        )
        return Evidence(evidence.location, coordinate)


# log4j 1.x is reported as "log4j"; conditions target org.apache.logging.log4j:log4j-core
DEFAULT_RULES: tuple[HeuristicRule, ...] = (
    HeuristicRule(
        artifact_id="log4j",
        below_version="1.3",
        canonical_group_id="org.apache.logging.log4j",
        canonical_artifact_id="log4j-core",
    ),
)


def normalize(store: EvidenceStore, rules: Iterable[HeuristicRule] = DEFAULT_RULES) -> int:
    """Apply heuristic rules to a fully populated store.

    Must run after every producer has finished. Running it again adds
    nothing, since copies collapse into the records already present.

    Args:
        store: Evidence store to normalize.
        rules: Rewrite rules to apply.

    Returns:
        Number of evidence records newly added.
    """
    added = 0
    for rule in rules:
        for evidence in store.lookup(None, rule.artifact_id):
            copy = rule.apply(evidence)
            if copy is not None and store.add(copy):
                logger.debug("Heuristically recorded %s as %s", evidence, copy.coordinate)
                added += 1
    return added
