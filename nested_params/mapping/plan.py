"""Model schema data classes.

Frozen dataclasses representing compiled, validated model schemas. Read by
the record, the reconciler and the repository at run time.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from nested_params.core.enums import Cardinality


@dataclass(frozen=True)
class AssociationSpec:
    """Configuration of one parent -> child relationship."""

    name: str
    target_class: type
    cardinality: Cardinality
    foreign_key: str
    nested_params: bool = False
    autosave: bool = False
    destroy_missing: bool = False
    reject_empty: bool = False

    @property
    def many(self) -> bool:
        return self.cardinality is Cardinality.MANY

    @property
    def error_namespace(self) -> str | None:
        """Prefix for child errors copied onto the parent; None keeps field names."""
        return self.name if self.many else None


@dataclass(frozen=True)
class ModelSchema:
    """Compiled, validated schema for one model class."""

    target_class: type
    table: str
    key_field: str
    fields: tuple[str, ...]
    associations: dict[str, AssociationSpec] = field(default_factory=dict)

    def association(self, name: str) -> AssociationSpec | None:
        """Look up an association by name or by its ``<name>_attributes`` alias."""
        if name in self.associations:
            return self.associations[name]
        if name.endswith("_attributes"):
            return self.associations.get(name.removesuffix("_attributes"))
        return None

    @property
    def autosave_associations(self) -> list[AssociationSpec]:
        return [spec for spec in self.associations.values() if spec.autosave]
