"""Pytest configuration and fixtures."""

from pathlib import Path
from typing import Callable, Optional

import pytest

from version_tracker.models import Evidence, LibraryCoordinate
from version_tracker.properties import PropertyResolver
from version_tracker.store import EvidenceStore

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the directory holding fixture files."""
    return FIXTURES_DIR


@pytest.fixture
def store() -> EvidenceStore:
    """Return an empty evidence store."""
    return EvidenceStore()


@pytest.fixture
def resolver() -> PropertyResolver:
    """Return an empty property table."""
    return PropertyResolver()


@pytest.fixture
def make_evidence() -> Callable[..., Evidence]:
    """Return a factory for evidence records."""

    def _make(
        artifact_id: str,
        version: str,
        group_id: Optional[str] = None,
        location: str = "file:///project/pom.xml",
    ) -> Evidence:
        return Evidence(location, LibraryCoordinate(group_id, artifact_id, version))

    return _make


def _write_pom(
    path: Path,
    dependencies: list[tuple[Optional[str], str, Optional[str]]] = (),
    properties: Optional[dict[str, str]] = None,
) -> Path:
    """Write a minimal namespaced pom.xml and return its path."""
    props = "".join(
        f"<{key}>{value}</{key}>" for key, value in (properties or {}).items()
    )
    deps = ""
    for group_id, artifact_id, version in dependencies:
        deps += "<dependency>"
        if group_id:
            deps += f"<groupId>{group_id}</groupId>"
        deps += f"<artifactId>{artifact_id}</artifactId>"
        if version:
            deps += f"<version>{version}</version>"
        deps += "</dependency>"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        '<project xmlns="http://maven.apache.org/POM/4.0.0">'
        f"<properties>{props}</properties>"
        f"<dependencies>{deps}</dependencies>"
        "</project>",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def write_pom() -> Callable[..., Path]:
    """Return a helper writing a minimal pom.xml."""
    return _write_pom
