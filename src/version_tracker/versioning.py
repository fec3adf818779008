"""Maven-style version ordering.

Versions are split into numeric and qualifier items at ``.``, ``-`` and
digit/letter transitions, following the ordering Maven applies to
artifact versions:

- numeric items compare numerically, any size
- trailing zeros and release qualifiers are ignored (``1 == 1.0 == 1.0.ga``)
- qualifiers order ``alpha < beta < milestone < rc < snapshot < "" < sp``,
  and unknown qualifiers sort after ``sp`` lexically
- a ``-`` opens a nested sub-list, so ``1-1 < 1.1``

Version strings containing characters outside ``[0-9A-Za-z._+-]`` (for
example an unresolved ``${property}``) are treated as malformed and
compared as raw strings.
"""

import re
from functools import total_ordering
from typing import Optional, Union

_WELL_FORMED = re.compile(r"[0-9A-Za-z._+-]+")

_QUALIFIERS = ["alpha", "beta", "milestone", "rc", "snapshot", "", "sp"]
_ALIASES = {"ga": "", "final": "", "release": "", "cr": "rc"}
_SHORTHANDS = {"a": "alpha", "b": "beta", "m": "milestone"}
_RELEASE_INDEX = str(_QUALIFIERS.index(""))


def _comparable_qualifier(qualifier: str) -> str:
    # Known qualifiers map to their index, unknown ones sort after all of them.
    if qualifier in _QUALIFIERS:
        return str(_QUALIFIERS.index(qualifier))
    return f"{len(_QUALIFIERS)}-{qualifier}"


class _IntItem:
    __slots__ = ("value",)

    def __init__(self, value: int) -> None:
        self.value = value

    def is_null(self) -> bool:
        return self.value == 0

    def compare(self, other: Optional["_Item"]) -> int:
        if other is None:
            return 0 if self.value == 0 else 1
        if isinstance(other, _IntItem):
            return (self.value > other.value) - (self.value < other.value)
        return 1


class _StringItem:
    __slots__ = ("value",)

    def __init__(self, value: str, followed_by_digit: bool) -> None:
        if followed_by_digit and len(value) == 1:
            value = _SHORTHANDS.get(value, value)
        self.value = _ALIASES.get(value, value)

    def is_null(self) -> bool:
        return _comparable_qualifier(self.value) == _RELEASE_INDEX

    def compare(self, other: Optional["_Item"]) -> int:
        mine = _comparable_qualifier(self.value)
        if other is None:
            return (mine > _RELEASE_INDEX) - (mine < _RELEASE_INDEX)
        if isinstance(other, _IntItem):
            return -1
        if isinstance(other, _StringItem):
            theirs = _comparable_qualifier(other.value)
            return (mine > theirs) - (mine < theirs)
        return -1


class _ListItem(list):
    def is_null(self) -> bool:
        return len(self) == 0

    def normalize(self) -> None:
        for i in range(len(self) - 1, -1, -1):
            item = self[i]
            if item.is_null():
                del self[i]
            elif not isinstance(item, _ListItem):
                break

    def compare(self, other: Optional["_Item"]) -> int:
        if other is None:
            if not self:
                return 0
            return self[0].compare(None)
        if isinstance(other, _IntItem):
            return -1
        if isinstance(other, _StringItem):
            return 1
        for i in range(max(len(self), len(other))):
            left = self[i] if i < len(self) else None
            right = other[i] if i < len(other) else None
            if left is None:
                result = 0 if right is None else -right.compare(None)
            else:
                result = left.compare(right)
            if result != 0:
                return result
        return 0


_Item = Union[_IntItem, _StringItem, _ListItem]


def _parse_item(is_digit: bool, token: str) -> _Item:
    if is_digit:
        return _IntItem(int(token))
    return _StringItem(token, False)


def _parse(version: str) -> _ListItem:
    version = version.lower()
    items = _ListItem()
    current = items
    stack = [items]
    is_digit = False
    start = 0

    for i, char in enumerate(version):
        if char == ".":
            current.append(_IntItem(0) if i == start else _parse_item(is_digit, version[start:i]))
            start = i + 1
        elif char == "-":
            current.append(_IntItem(0) if i == start else _parse_item(is_digit, version[start:i]))
            start = i + 1
            nested = _ListItem()
            current.append(nested)
            current = nested
            stack.append(nested)
        elif char.isdigit():
            if not is_digit and i > start:
                current.append(_StringItem(version[start:i], True))
                start = i
                nested = _ListItem()
                current.append(nested)
                current = nested
                stack.append(nested)
            is_digit = True
        else:
            if is_digit and i > start:
                current.append(_parse_item(True, version[start:i]))
                start = i
                nested = _ListItem()
                current.append(nested)
                current = nested
                stack.append(nested)
            is_digit = False

    if len(version) > start:
        current.append(_parse_item(is_digit, version[start:]))

    while stack:
        stack.pop().normalize()
    return items


@total_ordering
class MavenVersion:
    """Comparable wrapper around a version string.

    Attributes:
        raw: The version string as given.
        well_formed: False when the string is compared lexically instead.
    """

    __slots__ = ("raw", "well_formed", "_items")

    def __init__(self, raw: str) -> None:
        self.raw = raw
        self.well_formed = bool(_WELL_FORMED.fullmatch(raw))
        self._items = _parse(raw) if self.well_formed else None

    def compare(self, other: "MavenVersion") -> int:
        """Return negative, zero or positive as self is lower, equal or higher."""
        if self._items is None or other._items is None:
            return (self.raw > other.raw) - (self.raw < other.raw)
        return self._items.compare(other._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MavenVersion):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: "MavenVersion") -> bool:
        if not isinstance(other, MavenVersion):
            return NotImplemented
        return self.compare(other) < 0

    def __hash__(self) -> int:
        return hash(self.canonical())

    def canonical(self) -> str:
        """Return a normalized rendering; equal versions share it."""
        if self._items is None:
            return self.raw
        return _render(self._items)

    def __repr__(self) -> str:
        return f"MavenVersion({self.raw!r})"

    def __str__(self) -> str:
        return self.raw


def _render(items: _ListItem) -> str:
    parts = []
    for item in items:
        if isinstance(item, _ListItem):
            parts.append("-" + _render(item))
        else:
            parts.append(("." if parts else "") + str(item.value))
    return "".join(parts)


def compare_versions(a: str, b: str) -> int:
    """Compare two version strings using Maven ordering.

    Never raises: malformed strings fall back to raw string comparison.

    Args:
        a: First version string.
        b: Second version string.

    Returns:
        Negative if a < b, zero if they are equivalent, positive if a > b.
    """
    return MavenVersion(a).compare(MavenVersion(b))
