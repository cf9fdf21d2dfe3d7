"""nested-params exception hierarchy.

All exceptions are nested-params specific. Raw driver exceptions are never
exposed to callers; they are chained as ``__cause__``.
"""

from __future__ import annotations

from typing import Any


class NestedParamsError(Exception):
    """Base exception for all nested-params errors."""


# --- Schema ---


class SchemaError(NestedParamsError):
    """Base for model schema errors."""


class SchemaCompilationError(SchemaError):
    """Raised when a model schema fails validation during build()."""


class UnknownAttributeError(SchemaError):
    """Raised when assigning a field the model does not declare."""

    def __init__(self, model_name: str, attribute: str) -> None:
        self.model_name = model_name
        self.attribute = attribute
        super().__init__(f"Unknown attribute '{attribute}' for {model_name}")


# --- Reconciliation ---


class ReconciliationError(NestedParamsError):
    """Base for errors raised while reconciling nested attributes."""


class UnknownChildError(ReconciliationError):
    """Raised when an incoming key names no current child of the association."""

    def __init__(self, association: str, key: str) -> None:
        self.association = association
        self.key = key
        super().__init__(f"No child with id '{key}' in association '{association}'")


# --- Validation ---


class RecordInvalid(NestedParamsError):
    """Raised by strict saves when the record (or one of its children) is invalid."""

    def __init__(self, record: Any) -> None:
        self.record = record
        messages = ", ".join(record.errors.full_messages())
        super().__init__(f"Validation failed for {type(record).__name__}: {messages}")


# --- Persistence ---


class PersistenceError(NestedParamsError):
    """Base for persistence errors."""


class RecordNotSaved(PersistenceError):
    """Raised by strict saves when the save transaction was rolled back."""

    def __init__(self, record: Any, detail: str) -> None:
        self.record = record
        super().__init__(f"Failed to save {type(record).__name__}: {detail}")


class RecordNotFound(PersistenceError):
    """Raised when a record cannot be found by its identity."""

    def __init__(self, model_name: str, record_id: Any) -> None:
        self.model_name = model_name
        self.record_id = record_id
        super().__init__(f"Couldn't find {model_name} with id={record_id}")


class ExecutionError(PersistenceError):
    """Raised when the driver rejects a statement."""

    def __init__(self, sql: str, detail: str) -> None:
        self.sql = sql
        super().__init__(f"Execution failed for '{sql}': {detail}")


# --- Mapping ---


class MappingError(NestedParamsError):
    """Base for mapping errors."""


class ColumnMismatchError(MappingError):
    """Raised when required fields cannot be mapped from row columns."""

    def __init__(self, target_class: str, missing_fields: list[str]) -> None:
        self.target_class = target_class
        self.missing_fields = missing_fields
        super().__init__(f"Cannot map to {target_class}: missing fields {missing_fields}")


# --- Transaction ---


class TransactionError(NestedParamsError):
    """Base for transaction errors."""


class TransactionStateError(TransactionError):
    """Raised on invalid transaction state transitions."""

    def __init__(self, current_state: str, attempted_action: str) -> None:
        self.current_state = current_state
        self.attempted_action = attempted_action
        super().__init__(f"Cannot {attempted_action} transaction in state '{current_state}'")


# --- Adapter ---


class AdapterError(NestedParamsError):
    """Base for adapter errors."""


class ConnectionError(AdapterError):  # noqa: A001
    """Raised on connection failures."""


class PoolError(AdapterError):
    """Raised on connection pool failures."""
