"""Entity protocol.

The capability set the nested-attributes engine relies on. Records
implement it; the reconciler, the validation aggregator and the autosave
coordinator only talk to this interface.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Entity(Protocol):
    """A persistable record with identity, attributes and validation."""

    errors: Any

    @property
    def id(self) -> Any:
        """Identity, None until first persisted."""
        ...

    @property
    def new_record(self) -> bool:
        """True while the entity has no identity."""
        ...

    @property
    def attributes(self) -> dict[str, Any]:
        """Field name -> value, excluding the identity."""
        ...

    def assign_attributes(self, attributes: Mapping[str, Any]) -> None:
        """Overwrite fields (and nested associations) from *attributes*."""
        ...

    def is_valid(self) -> bool:
        """Run validations, refreshing ``errors``."""
        ...
