"""Core data models for version_tracker.

This module defines the fundamental data structures used throughout the
version tracking system: library coordinates, the evidence records that
report them, and the version conditions evaluated against that evidence.
"""

from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import Callable, Optional

from version_tracker.versioning import MavenVersion


@dataclass(frozen=True)
class LibraryCoordinate:
    """Immutable coordinate of a third-party library release.

    Equality and hashing only consider the group and artifact, so two
    coordinates of the same library at different versions compare equal.
    Ordering sorts by group (absent group first), artifact, then version.

    Attributes:
        group_id: Optional group identifier (e.g., "com.alibaba").
        artifact_id: Artifact name (e.g., "fastjson").
        version: Raw version string (e.g., "1.2.83").
    """

    group_id: Optional[str]
    artifact_id: str
    version: str = field(compare=False)

    @cached_property
    def comparable_version(self) -> MavenVersion:
        """Return the parsed version, computed on first access."""
        return MavenVersion(self.version)

    @property
    def key(self) -> str:
        """Return the index key: "group.artifact" or just "artifact"."""
        if self.group_id is not None:
            return f"{self.group_id}.{self.artifact_id}"
        return self.artifact_id

    def compare_version(self, other: "LibraryCoordinate") -> int:
        """Compare only the versions of two coordinates.

        Args:
            other: Coordinate to compare against.

        Returns:
            Negative, zero or positive as this version is lower, equal or higher.
        """
        return self.comparable_version.compare(other.comparable_version)

    def with_identity(
        self, group_id: Optional[str], artifact_id: str
    ) -> "LibraryCoordinate":
        """Return a copy of this coordinate under another group and artifact."""
        return LibraryCoordinate(group_id, artifact_id, self.version)

    def __lt__(self, other: "LibraryCoordinate") -> bool:
        if not isinstance(other, LibraryCoordinate):
            return NotImplemented
        mine = (self.group_id is not None, self.group_id or "", self.artifact_id)
        theirs = (other.group_id is not None, other.group_id or "", other.artifact_id)
        if mine != theirs:
            return mine < theirs
        return self.compare_version(other) < 0

    def __str__(self) -> str:
        if self.group_id is not None:
            return f"{self.group_id}:{self.artifact_id}:{self.version}"
        return f"{self.artifact_id}:{self.version}"


@dataclass(frozen=True, eq=False)
class Evidence:
    """An observed library coordinate plus the location that reported it.

    Two evidence records are the same when location, group, artifact and
    version all match. The version takes part here (unlike coordinate
    equality) so that one descriptor resolving to several versions keeps
    every one of them.

    Attributes:
        location: Origin of the observation (file URI or a synthetic description).
        coordinate: The reported library coordinate.
    """

    location: str
    coordinate: LibraryCoordinate

    def _identity(self) -> tuple[str, Optional[str], str, str]:
        c = self.coordinate
        return (self.location, c.group_id, c.artifact_id, c.version)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Evidence):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    def __lt__(self, other: "Evidence") -> bool:
        if not isinstance(other, Evidence):
            return NotImplemented
        if self.coordinate != other.coordinate or self.coordinate.compare_version(
            other.coordinate
        ):
            return self.coordinate < other.coordinate
        return (self.coordinate.version, self.location) < (
            other.coordinate.version,
            other.location,
        )

    def __str__(self) -> str:
        return f"{self.coordinate}(at {self.location})"


class CompareMode(Enum):
    """Policy for reducing per-evidence comparisons into one boolean.

    ``Must`` requires every evidence item to satisfy the operator,
    ``May`` requires at least one, and ``MayOrUnknown`` behaves like
    ``May`` but also answers true when there is no evidence at all.
    """

    MayOrUnknown = "MayOrUnknown"
    May = "May"
    Must = "Must"


class CompareOp(Enum):
    """Comparison operator applied to a comparator result."""

    LT = ("<", lambda cmp: cmp < 0)
    LE = ("<=", lambda cmp: cmp <= 0)
    EQ = ("==", lambda cmp: cmp == 0)
    GE = (">=", lambda cmp: cmp >= 0)
    GT = (">", lambda cmp: cmp > 0)

    def __init__(self, code: str, predicate: Callable[[int], bool]) -> None:
        self.code = code
        self._predicate = predicate

    def check(self, cmp: int) -> bool:
        """Return whether a comparator result satisfies this operator."""
        return self._predicate(cmp)

    @classmethod
    def parse(cls, value: str) -> "CompareOp":
        """Look up an operator by its code ("<") or member name ("LT").

        Raises:
            ValueError: If the value names no operator.
        """
        for op in cls:
            if value == op.code or value.upper() == op.name:
                return op
        raise ValueError(f"Unknown comparison operator: {value!r}")


@dataclass(frozen=True)
class VersionCondition:
    """A vulnerability check against one target library coordinate.

    Attributes:
        mode: How per-evidence results are combined.
        op: Operator applied as ``evidence_version <op> target_version``.
        coordinate: Target library and the version to compare against.
    """

    mode: CompareMode
    op: CompareOp
    coordinate: LibraryCoordinate


@dataclass(frozen=True)
class ClassFieldVersion:
    """Location of a version string constant embedded in compiled code.

    Attributes:
        group_id: Group of the library the constant belongs to.
        artifact_id: Artifact of the library the constant belongs to.
        class_name: Fully qualified class declaring the field.
        method_name: Initializer method assigning the field.
        field_name: Name of the field holding the version string.
    """

    group_id: str
    artifact_id: str
    class_name: str
    method_name: str
    field_name: str

    def __str__(self) -> str:
        return (
            f"ClassFieldVersion(groupId={self.group_id}, artifactId={self.artifact_id}, "
            f"className={self.class_name}, methodName={self.method_name}, "
            f"fieldName={self.field_name})"
        )
