"""Repository: loading records and saving them transactionally.

``save`` validates the record (including errors aggregated from its autosave
children), then writes the record, its pending child removals and its
autosave children inside one transaction. Any exception raised while
persisting rolls the whole transaction back: ``save`` reports ``False``,
``save_strict`` re-raises it as :class:`RecordNotSaved`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, TypeVar

from nested_params.core.engine import Engine, quote
from nested_params.core.enums import SaveState
from nested_params.core.exceptions import RecordInvalid, RecordNotFound, RecordNotSaved
from nested_params.core.transaction import TransactionManager
from nested_params.mapping.model import RecordMapper
from nested_params.mapping.plan import AssociationSpec, ModelSchema
from nested_params.nested.autosave import AutosaveCoordinator

T = TypeVar("T")

log = logging.getLogger(__name__)


def _select(schema: ModelSchema) -> str:
    columns = ", ".join(quote(name) for name in (schema.key_field, *schema.fields))
    return f"SELECT {columns} FROM {quote(schema.table)}"


class Repository:
    """Loads and persists records through an :class:`Engine`."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self.last_save_state = SaveState.IDLE
        self._autosave = AutosaveCoordinator(self)

    # --- loading ---

    def mapper(self, model: type[T]) -> RecordMapper[T]:
        return RecordMapper(model, repository=self)

    def find(self, model: type[T], record_id: Any) -> T:
        schema = model.schema()  # type: ignore[attr-defined]
        row = self.engine.fetch_one(
            f"{_select(schema)} WHERE {quote(schema.key_field)} = :id", {"id": record_id}
        )
        if row is None:
            raise RecordNotFound(model.__name__, record_id)
        return self.mapper(model).map_one(row)

    def all(self, model: type[T]) -> list[T]:
        schema = model.schema()  # type: ignore[attr-defined]
        rows = self.engine.fetch_all(f"{_select(schema)} ORDER BY {quote(schema.key_field)}")
        return self.mapper(model).map_many(rows)

    def count(self, model: type) -> int:
        schema = model.schema()  # type: ignore[attr-defined]
        return int(self.engine.fetch_scalar(f"SELECT COUNT(*) FROM {quote(schema.table)}"))

    def load_association(self, owner: Any, spec: AssociationSpec) -> list[Any]:
        """Stored children of *owner* through *spec*, in identity order."""
        schema = spec.target_class.schema()
        rows = self.engine.fetch_all(
            f"{_select(schema)} WHERE {quote(spec.foreign_key)} = :owner_id "
            f"ORDER BY {quote(schema.key_field)}",
            {"owner_id": owner.id},
        )
        return self.mapper(spec.target_class).map_many(rows)

    def reload(self, record: T) -> T:
        """Refresh fields from storage and drop cached associations."""
        fresh = self.find(type(record), record.id)  # type: ignore[attr-defined]
        for name, value in fresh.attributes.items():  # type: ignore[attr-defined]
            record.write_attribute(name, value)  # type: ignore[attr-defined]
        record._reset_associations()  # type: ignore[attr-defined]
        record.errors.clear()  # type: ignore[attr-defined]
        record._repository = self  # type: ignore[attr-defined]
        return record

    # --- building ---

    def build(self, model: type[T], params: Mapping[str, Any] | None = None) -> T:
        record = model()
        record._repository = self  # type: ignore[attr-defined]
        if params:
            record.assign_attributes(params)  # type: ignore[attr-defined]
        return record

    def create(self, model: type[T], params: Mapping[str, Any] | None = None) -> T:
        """Build and save; check ``new_record`` or ``errors`` for the outcome."""
        record = self.build(model, params)
        self.save(record)
        return record

    def create_strict(self, model: type[T], params: Mapping[str, Any] | None = None) -> T:
        record = self.build(model, params)
        self.save_strict(record)
        return record

    def update_attributes(self, record: Any, params: Mapping[str, Any]) -> bool:
        self._bind(record)
        record.assign_attributes(params)
        return self.save(record)

    # --- saving ---

    def valid(self, record: Any) -> bool:
        self._bind(record)
        self.last_save_state = SaveState.VALIDATING
        if record.is_valid():
            return True
        self.last_save_state = SaveState.INVALID
        return False

    def save(self, record: Any, run_validations: bool = True) -> bool:
        """Validate and persist *record* with its children atomically.

        Returns:
            True once committed. False when invalid (nothing written) or
            when the transaction was rolled back.
        """
        if run_validations and not self.valid(record):
            return False
        try:
            self._persist_in_transaction(record)
        except Exception as e:
            log.warning("save of %s rolled back: %s", type(record).__name__, e)
            return False
        return True

    def save_strict(self, record: Any, run_validations: bool = True) -> None:
        """Like save, but raise instead of returning False.

        Raises:
            RecordInvalid: Validation failed; nothing was written.
            RecordNotSaved: The transaction was rolled back; the original
                exception is chained as ``__cause__``.
        """
        if run_validations and not self.valid(record):
            raise RecordInvalid(record)
        try:
            self._persist_in_transaction(record)
        except Exception as e:
            log.warning("save of %s rolled back: %s", type(record).__name__, e)
            raise RecordNotSaved(record, str(e)) from e

    def _persist_in_transaction(self, record: Any) -> None:
        self._bind(record)
        self.last_save_state = SaveState.PERSISTING
        try:
            with self.engine.transaction() as tx:
                try:
                    self.persist(record, tx)
                except Exception:
                    # The enclosing transaction must not commit half a save.
                    if tx.joined:
                        tx.rollback()
                    raise
        except Exception:
            self.last_save_state = SaveState.ROLLED_BACK
            raise
        self.last_save_state = SaveState.COMMITTED

    def persist(self, record: Any, tx: TransactionManager) -> None:
        """Write *record* and its autosave children, skipping validation."""
        self._bind(record)
        schema = record.schema()
        record.before_save()
        if record.new_record:
            identity = self.engine.insert(schema.table, record.attributes)
            record._mark_persisted(identity)
            tx.on_rollback(record._mark_new)
        else:
            self.engine.update(schema.table, schema.key_field, record.id, record.attributes)
        self._autosave.save_associations(record, tx)
        record.after_save()

    # --- destroying ---

    def destroy(self, record: Any) -> None:
        with self.engine.transaction() as tx:
            self.delete_row(record, tx)

    def delete_row(self, record: Any, tx: TransactionManager) -> None:
        if record.new_record:
            return
        schema = record.schema()
        self.engine.delete(schema.table, schema.key_field, record.id)
        record._mark_destroyed()
        tx.on_rollback(lambda: record._mark_destroyed(False))

    def _bind(self, record: Any) -> None:
        if record._repository is None:
            record._repository = self
