"""Row-to-record mapper."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from nested_params.core.exceptions import ColumnMismatchError

T = TypeVar("T")


class RecordMapper(Generic[T]):
    """Maps row dicts onto persisted instances of a record class.

    Columns the schema does not declare are ignored; a declared field missing
    from the row raises :class:`ColumnMismatchError`.

    Args:
        target_class: Record class with a compiled schema.
        repository: Repository the loaded records lazily load children through.
    """

    def __init__(self, target_class: type[T], repository: Any = None) -> None:
        self._target_class = target_class
        self._schema = target_class.schema()  # type: ignore[attr-defined]
        self._repository = repository

    def map_one(self, row: dict[str, Any]) -> T:
        """Map a single row to a persisted target_class instance."""
        columns = (self._schema.key_field, *self._schema.fields)
        missing = [name for name in columns if name not in row]
        if missing:
            raise ColumnMismatchError(self._target_class.__name__, missing)

        record = self._target_class()
        for name in self._schema.fields:
            record.write_attribute(name, row[name])  # type: ignore[attr-defined]
        record._mark_persisted(row[self._schema.key_field])  # type: ignore[attr-defined]
        record._repository = self._repository  # type: ignore[attr-defined]
        return record

    def map_many(self, rows: list[dict[str, Any]]) -> list[T]:
        """Map all rows via map_one."""
        return [self.map_one(row) for row in rows]
