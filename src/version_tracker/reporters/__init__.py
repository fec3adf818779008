"""Output reporters for persisting collected evidence.

This module provides reporters for rendering the evidence store to
artifacts consumed outside the analysis.
"""

from version_tracker.reporters.base import BaseReporter
from version_tracker.reporters.snapshot import SnapshotReporter

__all__ = ["BaseReporter", "SnapshotReporter"]
