"""Named version conditions and their evaluation against collected evidence.

A condition answers "is a vulnerable version of library X present?" by
comparing every evidence record for X against a target version and
reducing the per-record results according to the condition's compare mode:

- no evidence: true only in ``MayOrUnknown`` mode
- ``Must``: true when no evidence record fails the comparison
- ``May`` / ``MayOrUnknown``: true when at least one record passes

Each named condition is computed and logged once; later calls return the
cached answer.
"""

import json
import logging
import threading
from collections.abc import Iterator, Mapping
from typing import Any, Optional

from version_tracker.models import (
    CompareMode,
    CompareOp,
    Evidence,
    LibraryCoordinate,
    VersionCondition,
)
from version_tracker.store import EvidenceStore

logger = logging.getLogger(__name__)

RESERVED_DELIMITER = ":"
ACTIVE_VERSION_CONDITION_KEY = "@active:condition:version"


class ConditionRegistry:
    """Table of version conditions keyed by validated name.

    Names are checked on registration: they must be non-empty, unique and
    free of the reserved ``:`` delimiter.
    """

    def __init__(self, conditions: Optional[Mapping[str, VersionCondition]] = None) -> None:
        self._conditions: dict[str, VersionCondition] = {}
        for name, condition in (conditions or {}).items():
            self.register(name, condition)

    def register(self, name: str, condition: VersionCondition) -> None:
        """Register a condition under a name.

        Raises:
            ValueError: If the name is empty, already registered or contains ``:``.
        """
        if not name:
            raise ValueError("Condition name must not be empty")
        if RESERVED_DELIMITER in name:
            raise ValueError(
                f"Condition name {name!r} must not contain {RESERVED_DELIMITER!r}"
            )
        if name in self._conditions:
            raise ValueError(f"Condition {name!r} is already registered")
        self._conditions[name] = condition

    def get(self, name: str) -> Optional[VersionCondition]:
        return self._conditions.get(name)

    def names(self) -> list[str]:
        return list(self._conditions)

    def items(self) -> list[tuple[str, VersionCondition]]:
        return list(self._conditions.items())

    def __contains__(self, name: object) -> bool:
        return name in self._conditions

    def __len__(self) -> int:
        return len(self._conditions)

    def __iter__(self) -> Iterator[str]:
        return iter(self._conditions)


def default_registry() -> ConditionRegistry:
    """Return the built-in vulnerability conditions."""
    return ConditionRegistry(
        {
            "risk-fastjson": VersionCondition(
                CompareMode.Must,
                CompareOp.LT,
                LibraryCoordinate("com.alibaba", "fastjson", "1.2.83"),
            ),
            "risk-jackson": VersionCondition(
                CompareMode.Must,
                CompareOp.LT,
                LibraryCoordinate("com.fasterxml.jackson.core", "jackson-databind", "2.13.4.2"),
            ),
            "risk-log4j-injection": VersionCondition(
                CompareMode.Must,
                CompareOp.LT,
                LibraryCoordinate("org.apache.logging.log4j", "log4j-core", "2.16.0"),
            ),
            "risk-org.apache.poi-ooxml-CVE-2019-12415": VersionCondition(
                CompareMode.May,
                CompareOp.LT,
                LibraryCoordinate("org.apache.poi", "poi-ooxml", "4.1.1"),
            ),
            "risk-org.apache.poi-ooxml-CVE-2014-3529": VersionCondition(
                CompareMode.May,
                CompareOp.LT,
                LibraryCoordinate("org.apache.poi", "poi-ooxml", "3.10.1"),
            ),
            "risk-spring-web-CVE-2016-1000027": VersionCondition(
                CompareMode.Must,
                CompareOp.LT,
                LibraryCoordinate(None, "spring-web", "6.0.0"),
            ),
        }
    )


class ConditionEvaluator:
    """Evaluates registered conditions against an evidence store.

    Safe to call from several threads. Concurrent first evaluations of one
    name may compute twice but only the first to store its result logs it.

    Attributes:
        store: Evidence store queried for each condition.
        registry: Registered conditions.
    """

    def __init__(self, store: EvidenceStore, registry: ConditionRegistry) -> None:
        self.store = store
        self.registry = registry
        self._lock = threading.Lock()
        self._cache: dict[str, bool] = {}

    def evaluate(self, name: str) -> Optional[bool]:
        """Evaluate a registered condition by name.

        Args:
            name: Registered condition name.

        Returns:
            The condition's result, or None if no such condition is
            registered. None means unknown and must not be read as False.
        """
        with self._lock:
            if name in self._cache:
                return self._cache[name]

        condition = self.registry.get(name)
        if condition is None:
            logger.error("Condition name `%s` does not exist", name)
            return None
        return self.evaluate_condition(condition, name=name)

    def evaluate_condition(
        self, condition: VersionCondition, name: Optional[str] = None
    ) -> bool:
        """Evaluate a condition against the current evidence.

        Results are cached and logged only when a name is given.

        Args:
            condition: Condition to evaluate.
            name: Optional name to cache the result under.

        Returns:
            True if the condition holds under its compare mode.
        """
        target = condition.coordinate
        checks: list[tuple[Evidence, bool]] = [
            (evidence, condition.op.check(evidence.coordinate.compare_version(target)))
            for evidence in sorted(self.store.lookup_coordinate(target))
        ]
        result = reduce_checks(condition.mode, [passed for _, passed in checks])

        if name is not None:
            with self._lock:
                first = name not in self._cache
                result = self._cache.setdefault(name, result)
            if first:
                logger.info("%s", _describe(name, condition, checks, result))
        return result

    def is_enabled(self, condition_json: str) -> bool:
        """Evaluate a JSON activation document.

        Every ``"@active:condition:version"`` key, at any depth, must name a
        condition evaluating strictly to True. An empty document is enabled.

        Args:
            condition_json: JSON text, or an empty string.

        Returns:
            True if all referenced conditions hold.

        Raises:
            ValueError: If the document is not valid JSON.
        """
        if not condition_json:
            return True
        try:
            document = json.loads(condition_json)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid condition document: {e}") from e

        for name in _active_conditions(document):
            if self.evaluate(name) is not True:
                return False
        return True

    def results(self) -> dict[str, bool]:
        """Return a copy of every cached condition result."""
        with self._lock:
            return dict(self._cache)


def reduce_checks(mode: CompareMode, checks: list[bool]) -> bool:
    """Reduce per-evidence comparison results according to a compare mode.

    Args:
        mode: Compare mode of the condition.
        checks: One comparison result per evidence record.

    Returns:
        The condition's boolean answer.
    """
    if not checks:
        return mode is CompareMode.MayOrUnknown
    if mode is CompareMode.Must:
        return all(checks)
    return any(checks)


def _active_conditions(node: Any) -> Iterator[str]:
    if isinstance(node, dict):
        for key, value in node.items():
            if key == ACTIVE_VERSION_CONDITION_KEY and not isinstance(value, (dict, list)):
                yield str(value)
            else:
                yield from _active_conditions(value)
    elif isinstance(node, list):
        for item in node:
            yield from _active_conditions(item)


def _describe(
    name: str,
    condition: VersionCondition,
    checks: list[tuple[Evidence, bool]],
    result: bool,
) -> str:
    message = (
        f'Condition evaluate result: cond: "{name}" = {str(result).lower()} '
        f"with {condition.mode.value} compare mode."
    )
    if not checks:
        return message
    details = "\n".join(
        f"\t{evidence} {condition.op.code} {condition.coordinate.version} = {str(passed).lower()}"
        for evidence, passed in checks
    )
    return f"{message}\n{details}"
