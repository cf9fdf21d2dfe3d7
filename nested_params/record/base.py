"""Record base class.

A record is an entity with an identity (None until first persisted), a
mapping of declared fields, and the associations described by its
:class:`ModelSchema`. Assigning a mapping or a list of mappings to a
nested-params association runs the child reconciler; everything else goes
through the association's direct setter.

Example:
    class Task(Record):
        validations = [presence_of("name")]

    schema(Task).fields("name", "project_id").build()
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, ClassVar

from nested_params.core.exceptions import SchemaError, UnknownAttributeError
from nested_params.mapping.plan import AssociationSpec, ModelSchema
from nested_params.nested.aggregator import aggregate_child_errors
from nested_params.nested.reconciler import ChildReconciler
from nested_params.record.associations import CollectionAssociation, SingularAssociation
from nested_params.record.errors import Errors
from nested_params.record.validations import Validator

log = logging.getLogger(__name__)

Association = CollectionAssociation | SingularAssociation


class Record:
    """Base class for persisted models."""

    __schema__: ClassVar[ModelSchema]
    validations: ClassVar[Sequence[Validator]] = ()

    def __init__(self, **attributes: Any) -> None:
        schema = self.schema()
        object.__setattr__(self, "_id", None)
        object.__setattr__(self, "_destroyed", False)
        object.__setattr__(self, "_attributes", {name: None for name in schema.fields})
        object.__setattr__(self, "_associations", {})
        object.__setattr__(self, "_repository", None)
        object.__setattr__(self, "errors", Errors())
        if attributes:
            self.assign_attributes(attributes)

    @classmethod
    def schema(cls) -> ModelSchema:
        compiled = getattr(cls, "__schema__", None)
        if compiled is None or compiled.target_class is not cls:
            raise SchemaError(
                f"{cls.__name__} has no schema; call schema({cls.__name__})...build()"
            )
        return compiled

    # --- identity ---

    @property
    def id(self) -> Any:
        return self._id

    @property
    def new_record(self) -> bool:
        return self._id is None

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def _mark_persisted(self, identity: Any) -> None:
        object.__setattr__(self, "_id", identity)

    def _mark_new(self) -> None:
        object.__setattr__(self, "_id", None)

    def _mark_destroyed(self, destroyed: bool = True) -> None:
        object.__setattr__(self, "_destroyed", destroyed)

    # --- fields ---

    @property
    def attributes(self) -> dict[str, Any]:
        return dict(self._attributes)

    def read_attribute(self, name: str) -> Any:
        if name == self.schema().key_field:
            return self._id
        try:
            return self._attributes[name]
        except KeyError:
            raise UnknownAttributeError(type(self).__name__, name) from None

    def write_attribute(self, name: str, value: Any) -> None:
        if name not in self._attributes:
            raise UnknownAttributeError(type(self).__name__, name)
        self._attributes[name] = value

    def assign_attributes(self, attributes: Mapping[str, Any]) -> None:
        """Mass-assign fields and nested associations.

        The identity column is never mass-assigned.
        """
        schema = self.schema()
        reconciler = ChildReconciler()
        for raw_name, value in attributes.items():
            name = str(raw_name)
            if name == schema.key_field:
                log.debug("ignoring mass-assigned %s on %s", name, type(self).__name__)
                continue
            spec = schema.association(name)
            if spec is not None:
                reconciler.assign(self, spec, value)
            else:
                self.write_attribute(name, value)

    # --- associations ---

    def association(self, name: str) -> Association:
        """The association object for *name*, created on first access."""
        cached = self._associations.get(name)
        if cached is not None:
            return cached
        spec = self.schema().association(name)
        if spec is None:
            raise SchemaError(f"{type(self).__name__} has no association '{name}'")
        created: Association
        if spec.many:
            created = CollectionAssociation(self, spec)
        else:
            created = SingularAssociation(self, spec)
        self._associations[spec.name] = created
        return created

    def touched_associations(self) -> list[Association]:
        """Associations accessed since load; untouched ones hold nothing to save."""
        return list(self._associations.values())

    def _reset_associations(self) -> None:
        self._associations.clear()

    def set_association(self, spec: AssociationSpec, value: Any) -> None:
        """Direct setter, bypassing nested-attributes reconciliation."""
        association = self.association(spec.name)
        if spec.many:
            association.replace(value if value is not None else [])  # type: ignore[arg-type]
        else:
            association.replace(value)  # type: ignore[arg-type]

    # --- validation ---

    def validate(self) -> None:
        """Hook for model-specific rules; add messages to ``self.errors``."""

    def is_valid(self) -> bool:
        """Run own rules, then pull in errors from loaded autosave children."""
        self.errors.clear()
        for validator in self.validations:
            validator(self)
        self.validate()
        for association in self.touched_associations():
            spec = association.spec
            if not spec.autosave or not association.loaded:
                continue
            if spec.many:
                children = list(association.target)  # type: ignore[arg-type]
            else:
                child = association.target
                children = [child] if child is not None else []
            aggregate_child_errors(self, children, spec.error_namespace)
        return not self.errors

    # --- save hooks, run inside the save transaction ---

    def before_save(self) -> None:
        """Called before the row is written."""

    def after_save(self) -> None:
        """Called after the row and its autosave children are written."""

    # --- attribute access ---

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails.
        if name.startswith("_"):
            raise AttributeError(name)
        schema = self.schema()
        if name in schema.fields:
            return self._attributes[name]
        spec = schema.associations.get(name)
        if spec is not None:
            association = self.association(name)
            return association if spec.many else association.target
        raise AttributeError(f"{type(self).__name__!s} has no attribute '{name}'")

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
            return
        schema = self.schema()
        if name in schema.fields:
            self.write_attribute(name, value)
            return
        spec = schema.association(name)
        if spec is not None:
            ChildReconciler().assign(self, spec, value)
            return
        object.__setattr__(self, name, value)

    def __repr__(self) -> str:
        fields = ", ".join(f"{name}={value!r}" for name, value in self._attributes.items())
        return f"<{type(self).__name__} id={self._id!r} {fields}>"
