"""Analysis configuration.

Options are static: the embedded-constant registry, the version
conditions, the jar filename pattern and the heuristic rules are fixed
before any file is scanned. Defaults can be extended from a TOML file::

    jar_file_pattern = '^(?P<artifactId>.+)-(?P<version>[0-9][^-]*)\\.jar$'

    [conditions.risk-commons-text]
    mode = "Must"
    op = "<"
    group_id = "org.apache.commons"
    artifact_id = "commons-text"
    version = "1.10.0"

    [[class_fields]]
    group_id = "org.apache.poi"
    artifact_id = "poi"
    class_name = "org.apache.poi.Version"
    method_name = "<clinit>"
    field_name = "VERSION_STRING"
"""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from version_tracker.conditions import ConditionRegistry, default_registry
from version_tracker.models import (
    ClassFieldVersion,
    CompareMode,
    CompareOp,
    LibraryCoordinate,
    VersionCondition,
)
from version_tracker.normalizer import DEFAULT_RULES, HeuristicRule
from version_tracker.reporters.snapshot import SNAPSHOT_DIRECTORY, SNAPSHOT_FILENAME
from version_tracker.scanners.class_constants import DEFAULT_CLASS_FIELDS
from version_tracker.scanners.jar import DEFAULT_JAR_FILE_PATTERN, compile_jar_pattern


@dataclass
class AnalysisOptions:
    """Static configuration of one analysis run.

    Attributes:
        class_fields: Embedded version constants to look for.
        conditions: Registered version conditions.
        jar_file_pattern: Jar filename pattern with ``artifactId``/``version`` groups.
        heuristic_rules: Normalization rules applied after scanning.
        output_directory: Directory under the output root holding the snapshot.
        output_filename: Snapshot file name.
    """

    class_fields: list[ClassFieldVersion] = field(
        default_factory=lambda: list(DEFAULT_CLASS_FIELDS)
    )
    conditions: ConditionRegistry = field(default_factory=default_registry)
    jar_file_pattern: str = DEFAULT_JAR_FILE_PATTERN
    heuristic_rules: list[HeuristicRule] = field(
        default_factory=lambda: list(DEFAULT_RULES)
    )
    output_directory: str = SNAPSHOT_DIRECTORY
    output_filename: str = SNAPSHOT_FILENAME

    @classmethod
    def default(cls) -> "AnalysisOptions":
        """Return the built-in options."""
        return cls()

    @classmethod
    def from_toml(cls, path: Path) -> "AnalysisOptions":
        """Load options from a TOML file on top of the defaults.

        Configured conditions are added to the built-in ones unless
        ``replace_conditions = true``; configured class fields are appended.

        Args:
            path: Path to the TOML file.

        Returns:
            The merged options.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file is not valid TOML or an entry is invalid.
        """
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {path}: {e}") from e

        try:
            return cls.from_dict(data)
        except ValueError as e:
            raise ValueError(f"Invalid configuration in {path}: {e}") from e

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AnalysisOptions":
        """Build options from already parsed configuration data.

        Raises:
            ValueError: If an entry is invalid.
        """
        options = cls()

        if "jar_file_pattern" in data:
            pattern = data["jar_file_pattern"]
            if not isinstance(pattern, str):
                raise ValueError("jar_file_pattern must be a string")
            compile_jar_pattern(pattern)
            options.jar_file_pattern = pattern

        if data.get("replace_conditions", False):
            options.conditions = ConditionRegistry()
        for name, entry in data.get("conditions", {}).items():
            options.conditions.register(name, _parse_condition(name, entry))

        for entry in data.get("class_fields", []):
            options.class_fields.append(_parse_class_field(entry))

        for key in ("output_directory", "output_filename"):
            if key in data:
                setattr(options, key, str(data[key]))

        return options


def _require(entry: dict[str, Any], key: str, context: str) -> str:
    value = entry.get(key)
    if not isinstance(value, str) or not value:
        raise ValueError(f"{context}: missing required field '{key}'")
    return value


def _parse_condition(name: str, entry: Any) -> VersionCondition:
    context = f"condition {name!r}"
    if not isinstance(entry, dict):
        raise ValueError(f"{context}: expected a table")

    mode_name = _require(entry, "mode", context)
    try:
        mode = CompareMode(mode_name)
    except ValueError:
        valid = ", ".join(m.value for m in CompareMode)
        raise ValueError(f"{context}: unknown mode {mode_name!r} (expected {valid})") from None

    try:
        op = CompareOp.parse(_require(entry, "op", context))
    except ValueError as e:
        raise ValueError(f"{context}: {e}") from None

    coordinate = LibraryCoordinate(
        entry.get("group_id") or None,
        _require(entry, "artifact_id", context),
        _require(entry, "version", context),
    )
    return VersionCondition(mode, op, coordinate)


def _parse_class_field(entry: Any) -> ClassFieldVersion:
    context = "class_fields entry"
    if not isinstance(entry, dict):
        raise ValueError(f"{context}: expected a table")
    return ClassFieldVersion(
        group_id=_require(entry, "group_id", context),
        artifact_id=_require(entry, "artifact_id", context),
        class_name=_require(entry, "class_name", context),
        method_name=_require(entry, "method_name", context),
        field_name=_require(entry, "field_name", context),
    )
