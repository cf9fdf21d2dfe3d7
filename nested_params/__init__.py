"""nested-params - nested attributes and transactional autosave for records."""

from __future__ import annotations

from nested_params.core.connection import ConnectionConfig, ConnectionManager
from nested_params.core.engine import Engine
from nested_params.core.enums import Cardinality, Removal, SaveState
from nested_params.core.exceptions import (
    AdapterError,
    ColumnMismatchError,
    ConnectionError,  # noqa: A004
    ExecutionError,
    MappingError,
    NestedParamsError,
    PersistenceError,
    PoolError,
    ReconciliationError,
    RecordInvalid,
    RecordNotFound,
    RecordNotSaved,
    SchemaCompilationError,
    SchemaError,
    TransactionError,
    TransactionStateError,
    UnknownAttributeError,
    UnknownChildError,
)
from nested_params.core.transaction import TransactionManager
from nested_params.mapping.builder import schema
from nested_params.nested.form import NestedFieldNamer
from nested_params.nested.reconciler import ChildReconciler, plan_reconciliation
from nested_params.record.base import Record
from nested_params.record.validations import length_of, presence_of
from nested_params.repository.base import Repository

__all__ = [
    # Connection
    "ConnectionConfig",
    "ConnectionManager",
    # Engine
    "Engine",
    # Transaction
    "TransactionManager",
    # Models
    "Record",
    "schema",
    "presence_of",
    "length_of",
    # Nested attributes
    "ChildReconciler",
    "plan_reconciliation",
    "NestedFieldNamer",
    # Repository
    "Repository",
    # Enums
    "Cardinality",
    "Removal",
    "SaveState",
    # Exceptions
    "NestedParamsError",
    "SchemaError",
    "SchemaCompilationError",
    "UnknownAttributeError",
    "ReconciliationError",
    "UnknownChildError",
    "RecordInvalid",
    "PersistenceError",
    "RecordNotSaved",
    "RecordNotFound",
    "ExecutionError",
    "MappingError",
    "ColumnMismatchError",
    "TransactionError",
    "TransactionStateError",
    "AdapterError",
    "ConnectionError",
    "PoolError",
]
