"""Model schema DSL builder.

Provides a fluent builder for declaring a model's table, fields and child
associations. ``build()`` validates the declaration, compiles it into a
frozen :class:`ModelSchema` and binds it to the model class.
"""

from __future__ import annotations

import re

from nested_params.core.enums import Cardinality
from nested_params.core.exceptions import SchemaCompilationError
from nested_params.mapping.plan import AssociationSpec, ModelSchema

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _check_identifier(kind: str, name: str) -> None:
    if not _IDENTIFIER.match(name):
        raise SchemaCompilationError(f"Invalid {kind} name: {name!r}")


def schema(model_class: type, table: str | None = None) -> ModelSchemaBuilder:
    """Entry point for the schema DSL.

    Args:
        model_class: The record class being described.
        table: Table name. Defaults to lowercase class name + "s".

    Returns:
        A builder for chaining declarations.
    """
    if table is None:
        table = model_class.__name__.lower() + "s"
    return ModelSchemaBuilder(model_class, table)


class ModelSchemaBuilder:
    """Fluent builder for model schema definitions."""

    def __init__(self, model_class: type, table: str) -> None:
        self._model_class = model_class
        self._table = table
        self._key_field = "id"
        self._fields: list[str] = []
        self._associations: list[tuple[str, type, Cardinality, str | None, dict[str, bool]]] = []

    def key(self, field_name: str) -> ModelSchemaBuilder:
        """Set the identity column. Defaults to ``id``."""
        self._key_field = field_name
        return self

    def fields(self, *names: str) -> ModelSchemaBuilder:
        """Declare persisted, assignable fields."""
        self._fields.extend(names)
        return self

    def has_many(
        self,
        name: str,
        target_class: type,
        *,
        foreign_key: str | None = None,
        nested_params: bool = False,
        autosave: bool = False,
        destroy_missing: bool = False,
        reject_empty: bool = False,
    ) -> ModelSchemaBuilder:
        """Declare a child collection (one-to-many)."""
        options = {
            "nested_params": nested_params,
            "autosave": autosave,
            "destroy_missing": destroy_missing,
            "reject_empty": reject_empty,
        }
        self._associations.append((name, target_class, Cardinality.MANY, foreign_key, options))
        return self

    def has_one(
        self,
        name: str,
        target_class: type,
        *,
        foreign_key: str | None = None,
        nested_params: bool = False,
        autosave: bool = False,
    ) -> ModelSchemaBuilder:
        """Declare a single child (one-to-one, foreign key on the child)."""
        options = {"nested_params": nested_params, "autosave": autosave}
        self._associations.append((name, target_class, Cardinality.ONE, foreign_key, options))
        return self

    def build(self) -> ModelSchema:
        """Compile and validate the declaration, then bind it to the model class."""
        _check_identifier("table", self._table)
        _check_identifier("key", self._key_field)

        seen: set[str] = set()
        for name in self._fields:
            _check_identifier("field", name)
            if name == self._key_field:
                raise SchemaCompilationError(
                    f"Key field '{name}' must not be declared as a regular field"
                )
            if name in seen:
                raise SchemaCompilationError(f"Duplicate field '{name}'")
            seen.add(name)

        default_fk = self._model_class.__name__.lower() + "_id"
        associations: dict[str, AssociationSpec] = {}
        for name, target_class, cardinality, foreign_key, options in self._associations:
            _check_identifier("association", name)
            if name in seen or name in associations:
                raise SchemaCompilationError(
                    f"Association '{name}' clashes with another field or association"
                )
            foreign_key = foreign_key or default_fk
            _check_identifier("foreign key", foreign_key)

            target_schema = getattr(target_class, "__schema__", None)
            if target_schema is not None and foreign_key not in target_schema.fields:
                raise SchemaCompilationError(
                    f"{target_class.__name__} does not declare foreign key '{foreign_key}'"
                )

            associations[name] = AssociationSpec(
                name=name,
                target_class=target_class,
                cardinality=cardinality,
                foreign_key=foreign_key,
                nested_params=options["nested_params"],
                # Nested params always persist what they assign.
                autosave=options["autosave"] or options["nested_params"],
                destroy_missing=options.get("destroy_missing", False),
                reject_empty=options.get("reject_empty", False),
            )

        compiled = ModelSchema(
            target_class=self._model_class,
            table=self._table,
            key_field=self._key_field,
            fields=tuple(self._fields),
            associations=associations,
        )
        self._model_class.__schema__ = compiled  # type: ignore[attr-defined]
        return compiled
