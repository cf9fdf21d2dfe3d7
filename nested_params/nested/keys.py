"""Incoming collection keys.

Keys of a keyed nested-attributes mapping are parsed exactly once into
:class:`Existing` (the identity of a current child) or :class:`New` (a
synthetic marker for a child still to be built). Nothing downstream looks
at the raw key again.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

NEW_RECORD_PREFIX = "new_"


@dataclass(frozen=True)
class Existing:
    """Key naming an already persisted child, as its string identity."""

    id: str


@dataclass(frozen=True)
class New:
    """Key marking a not yet persisted child; ordered by marker."""

    marker: str


ChildKey = Existing | New


def parse_key(key: Any, prefix: str = NEW_RECORD_PREFIX) -> ChildKey:
    """Classify a raw mapping key.

    Integer keys and strings without *prefix* name existing children.
    """
    if isinstance(key, str):
        if key.startswith(prefix):
            return New(key)
        return Existing(key.strip())
    return Existing(str(key))


def is_blank(value: Any) -> bool:
    """None, whitespace-only strings and empty containers are blank."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (Mapping, list, tuple, set)):
        return len(value) == 0
    return False


def all_blank(attributes: Mapping[str, Any]) -> bool:
    """True if every value in *attributes* is blank (vacuously for empty)."""
    return all(is_blank(value) for value in attributes.values())
