"""Orchestration of one version analysis run.

A run wires one evidence store and one property table into every
scanner, then proceeds in fixed phases:

1. embedded version constants are read from the class table
2. discovered files are dispatched to the file-driven scanners, each
   artifact in a worker thread
3. all scanner pipelines are joined
4. descriptor dependencies are resolved against the complete property table
5. heuristic normalization runs once
6. the snapshot is written

Conditions can be evaluated through ``evaluator`` once the run is complete.
"""

import asyncio
import logging
import os
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Optional

from version_tracker.conditions import ConditionEvaluator
from version_tracker.config import AnalysisOptions
from version_tracker.normalizer import normalize
from version_tracker.properties import PropertyResolver
from version_tracker.reporters.snapshot import SnapshotReporter
from version_tracker.scanners import (
    BaseScanner,
    ClassConstantScanner,
    ClassTable,
    JarFileScanner,
    PomPropertiesScanner,
    PomScanner,
    StaticClassTable,
)
from version_tracker.store import EvidenceStore

logger = logging.getLogger(__name__)


class ScanPipeline:
    """Asynchronous per-artifact dispatch for one scanner.

    ``dispatch`` starts processing an artifact in a worker thread and
    returns immediately; ``wait`` is the join point for everything
    dispatched so far.

    Attributes:
        scanner: Scanner invoked for every dispatched artifact.
    """

    def __init__(self, scanner: BaseScanner) -> None:
        self.scanner = scanner
        self._tasks: list[asyncio.Task] = []
        self._paths: list[Path] = []

    def dispatch(self, path: Path) -> None:
        """Start processing an artifact. Requires a running event loop."""
        self._paths.append(path)
        self._tasks.append(asyncio.create_task(asyncio.to_thread(self.scanner.process, path)))

    async def wait(self) -> int:
        """Wait for every dispatched artifact to finish.

        An artifact whose processing raised is logged and skipped; the
        other artifacts still count.

        Returns:
            Number of evidence records produced.
        """
        results = await asyncio.gather(*self._tasks, return_exceptions=True)

        produced = 0
        for path, result in zip(self._paths, results):
            if isinstance(result, BaseException):
                logger.error(
                    "Exception scanning %s with %s: %s",
                    path,
                    self.scanner.source_name,
                    result,
                )
            else:
                produced += result
        return produced

    def __len__(self) -> int:
        return len(self._tasks)


def discover_files(root: Path) -> Iterator[Path]:
    """Yield every regular file below a directory, in a stable order.

    Args:
        root: Directory to walk. A file is yielded as-is.
    """
    if root.is_file():
        yield root
        return
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for filename in sorted(filenames):
            yield Path(dirpath) / filename


class VersionAnalysis:
    """One analysis run and the services it owns.

    Attributes:
        options: Static configuration of the run.
        store: Evidence collected by every scanner.
        resolver: Build properties collected from every descriptor.
        evaluator: Condition evaluator over ``store``.
    """

    def __init__(
        self,
        options: Optional[AnalysisOptions] = None,
        class_table: Optional[ClassTable] = None,
    ) -> None:
        """Initialize the run.

        Args:
            options: Static configuration; defaults to ``AnalysisOptions.default()``.
            class_table: Classes of the analyzed program; empty if not given.

        Raises:
            ValueError: If the configured jar pattern is invalid.
        """
        self.options = options or AnalysisOptions.default()
        self.class_table = class_table if class_table is not None else StaticClassTable()
        self.store = EvidenceStore()
        self.resolver = PropertyResolver()
        self.evaluator = ConditionEvaluator(self.store, self.options.conditions)

        self.class_scanner = ClassConstantScanner(self.store, self.options.class_fields)
        self.pom_scanner = PomScanner(self.store, self.resolver)
        self.file_scanners: list[BaseScanner] = [
            PomPropertiesScanner(self.store),
            self.pom_scanner,
            JarFileScanner(self.store, self.options.jar_file_pattern),
        ]

    def snapshot_path(self, output_root: Path) -> Path:
        return output_root / self.options.output_directory / self.options.output_filename

    async def collect(self, files: Iterable[Path]) -> int:
        """Run every scanner over the given files and join them.

        Includes the constant extraction, deferred dependency resolution
        and heuristic normalization, but does not write the snapshot.

        Args:
            files: Discovered files of the project.

        Returns:
            Number of distinct evidence records in the store.
        """
        self.class_scanner.process(self.class_table)

        pipelines = [ScanPipeline(scanner) for scanner in self.file_scanners]
        for path in files:
            for pipeline in pipelines:
                if pipeline.scanner.can_handle(path):
                    pipeline.dispatch(path)

        for pipeline in pipelines:
            produced = await pipeline.wait()
            logger.debug(
                "%s: %d artifacts, %d evidence records",
                pipeline.scanner.source_name,
                len(pipeline),
                produced,
            )

        self.pom_scanner.collect_dependencies()
        added = normalize(self.store, self.options.heuristic_rules)
        if added:
            logger.debug("Heuristic normalization added %d evidence records", added)

        return len(self.store)

    async def run(self, project_root: Path, output_root: Path) -> Path:
        """Analyze a project directory and write the snapshot.

        Args:
            project_root: Directory to scan.
            output_root: Directory receiving ``project-env/versions.txt``.

        Returns:
            Path to the written snapshot.

        Raises:
            OSError: If the snapshot cannot be written.
        """
        total = await self.collect(discover_files(project_root))
        path = SnapshotReporter().write(self.store, self.snapshot_path(output_root))
        logger.info("Collected %d version evidence records, written to %s", total, path)
        return path
