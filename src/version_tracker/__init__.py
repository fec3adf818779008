"""Version Tracker - Library version evidence for vulnerability checks.

This package collects third-party library version evidence from project
descriptors, packaged metadata, jar file names and compiled constants, and
evaluates named version conditions against it.
"""

__version__ = "0.1.0"

from version_tracker.models import (
    CompareMode,
    CompareOp,
    Evidence,
    LibraryCoordinate,
    VersionCondition,
)
from version_tracker.conditions import ConditionEvaluator, ConditionRegistry
from version_tracker.store import EvidenceStore

__all__ = [
    "__version__",
    "CompareMode",
    "CompareOp",
    "ConditionEvaluator",
    "ConditionRegistry",
    "Evidence",
    "EvidenceStore",
    "LibraryCoordinate",
    "VersionCondition",
]
