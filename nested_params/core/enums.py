"""Enumerations shared across the package."""

from __future__ import annotations

from enum import Enum


class Cardinality(Enum):
    """How many children a parent holds through one association."""

    ONE = "one"
    MANY = "many"


class SaveState(Enum):
    """States of a single save attempt."""

    IDLE = "idle"
    VALIDATING = "validating"
    INVALID = "invalid"
    PERSISTING = "persisting"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class Removal(Enum):
    """What the owner's save does with a child taken out of an association."""

    DESTROY = "destroy"
    UNLINK = "unlink"
