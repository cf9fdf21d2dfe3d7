"""Field naming for nested forms.

Form builders render one block of inputs per child. Existing children are
keyed by their identity, new ones by a zero-padded ``new_000001`` style
marker that stays stable for the lifetime of the namer. Markers sort as
strings in render order, so the submitted params feed straight back into
:class:`~nested_params.nested.reconciler.ChildReconciler` and are built in
the order the form showed them.
"""

from __future__ import annotations

from typing import Any

from nested_params.nested.keys import NEW_RECORD_PREFIX


class NestedFieldNamer:
    """Generates ``parent[assoc_attributes][<key>][field]`` style names."""

    def __init__(
        self,
        owner: Any,
        object_name: str | None = None,
        prefix: str = NEW_RECORD_PREFIX,
    ) -> None:
        self.owner = owner
        self.object_name = object_name or type(owner).__name__.lower()
        self.prefix = prefix
        self._counter = 0
        self._markers: list[tuple[Any, str]] = []

    def key_for(self, child: Any) -> str:
        """Identity for existing children, a per-namer counter marker for new ones."""
        if not child.new_record:
            return str(child.id)
        for known, marker in self._markers:
            if known is child:
                return marker
        self._counter += 1
        marker = f"{self.prefix}{self._counter:06d}"
        self._markers.append((child, marker))
        return marker

    def children(self, association: str) -> list[tuple[str, Any]]:
        """Ordered ``(key, child)`` pairs, built children included."""
        spec = self.owner.schema().association(association)
        if spec is None:
            raise KeyError(association)
        target = self.owner.association(spec.name).target
        if not spec.many:
            return [] if target is None else [("", target)]
        return [(self.key_for(child), child) for child in target]

    def field_name(self, association: str, field: str, child: Any = None) -> str:
        spec = self.owner.schema().association(association)
        if spec is None:
            raise KeyError(association)
        base = f"{self.object_name}[{spec.name}_attributes]"
        if spec.many:
            if child is None:
                raise ValueError(f"field_name for '{spec.name}' needs the child record")
            return f"{base}[{self.key_for(child)}][{field}]"
        return f"{base}[{field}]"

    def field_id(self, association: str, field: str, child: Any = None) -> str:
        """DOM id matching field_name: brackets become underscores."""
        name = self.field_name(association, field, child)
        return name.replace("]", "").replace("[", "_")
